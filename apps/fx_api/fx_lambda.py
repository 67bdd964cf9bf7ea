"""AWS Lambda entrypoint for the FX close API.

Invoked through API Gateway (REST or HTTP API) or a Lambda Function URL.
Fetches WSJ closes with the cookie from the WSJ_COOKIE environment variable.
"""

import base64
import binascii
import json
import logging

from fx_config import LOG_LEVEL, WSJ_COOKIE
from fx_fetchers.wsj import WSJQuoteFetcher
from fx_handler import NO_STORE, handle_fx_request
from fx_request import RequestValidationError

logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)

_fetcher = WSJQuoteFetcher(cookie=WSJ_COOKIE)


def request_method(event: dict) -> str:
    """HTTP method from a v1 (REST API) or v2 (HTTP API / Function URL) event."""
    if "httpMethod" in event:
        return event["httpMethod"] or ""
    return event.get("requestContext", {}).get("http", {}).get("method", "")


def request_body(event: dict) -> str | bytes | None:
    """Raw request body; base64 payloads are decoded to bytes.

    Raises RequestValidationError for a body that is not valid base64.
    """
    body = event.get("body")
    if body is None or not event.get("isBase64Encoded"):
        return body
    try:
        return base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise RequestValidationError("body must be valid base64") from exc


def proxy_response(status: int, headers: dict[str, str], payload: dict) -> dict:
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json", **headers},
        "body": json.dumps(payload, default=str),
    }


def handler(event: dict, context: object) -> dict:
    """Lambda handler: resolve the request and return a proxy response."""
    method = request_method(event)
    try:
        # Only POST reads a body; other methods get their 405 first
        body = request_body(event) if method.upper() == "POST" else None
    except RequestValidationError as exc:
        logger.info("Rejected %s request: %s", method, exc)
        return proxy_response(exc.status_code, dict(NO_STORE), {"error": str(exc)})

    status, headers, payload = handle_fx_request(
        method,
        event.get("queryStringParameters") or {},
        body,
        _fetcher,
    )
    return proxy_response(status, headers, payload)
