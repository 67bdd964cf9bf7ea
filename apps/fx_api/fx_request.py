"""Parse an incoming FX close request (GET query string or POST JSON body)."""

import json
import logging
import re
from datetime import date
from typing import Any, Mapping, TypedDict

from fx_config import COVERAGE_PRESETS, DEFAULT_COVERAGE

logger = logging.getLogger(__name__)

ISO_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class FxRequestError(Exception):
    """Request-level failure; the whole request is rejected."""

    status_code: int = 400


class RequestValidationError(FxRequestError):
    status_code = 400


class MethodNotAllowed(FxRequestError):
    status_code = 405


# ---------------------------------------------------------------------------
# Type definitions
# ---------------------------------------------------------------------------

class FxRequest(TypedDict):
    date: str
    coverage: str
    symbols: list[str]


# ---------------------------------------------------------------------------
# Pure functions
# ---------------------------------------------------------------------------

def clean_symbols(raw: list[Any]) -> list[str]:
    """Trim and upper-case symbols, dropping empty entries. Duplicates are kept."""
    cleaned = (str(v).strip().upper() for v in raw)
    return [s for s in cleaned if s]


def parse_symbol_list(raw: str | None) -> list[str]:
    """Split a comma-separated symbol list from a query string."""
    if not raw:
        return []
    return clean_symbols(raw.split(","))


def coverage_symbols(coverage: str) -> list[str]:
    """Symbols for a coverage preset; unknown names fall back to the default preset."""
    preset = COVERAGE_PRESETS.get(coverage)
    if preset is None:
        logger.info("Unknown coverage %r, using %r", coverage, DEFAULT_COVERAGE)
        preset = COVERAGE_PRESETS[DEFAULT_COVERAGE]
    return list(preset)


def validate_date(raw: Any) -> str:
    """Require a literal YYYY-MM-DD calendar date."""
    if not isinstance(raw, str) or not ISO_DATE_RE.fullmatch(raw):
        raise RequestValidationError("date must be YYYY-MM-DD")
    try:
        date.fromisoformat(raw)
    except ValueError as exc:
        raise RequestValidationError("date is not a valid calendar date") from exc
    return raw


def decode_json_body(body: str | bytes | Mapping[str, Any] | None) -> Mapping[str, Any]:
    """Decode a POST body into a JSON object. An empty body is an empty object."""
    if body is None:
        return {}
    if isinstance(body, Mapping):
        return body
    try:
        if isinstance(body, bytes):
            body = body.decode("utf-8")
        if not body.strip():
            return {}
        data = json.loads(body)
    except (ValueError, RecursionError) as exc:
        # UnicodeDecodeError and JSONDecodeError are both ValueErrors
        raise RequestValidationError("body must be valid JSON") from exc
    if not isinstance(data, dict):
        raise RequestValidationError("body must be a JSON object")
    return data


def parse_fx_request(
    method: str,
    query: Mapping[str, str] | None,
    body: str | bytes | Mapping[str, Any] | None,
    require_symbols: bool = False,
) -> FxRequest:
    """Build an FxRequest from a GET query string or a POST JSON body.

    Without explicit symbols the coverage preset is used, unless
    *require_symbols* is set, in which case the request is rejected.

    Raises:
        MethodNotAllowed: for anything but GET and POST.
        RequestValidationError: for a missing or malformed date, a malformed
            body, or missing symbols in strict mode.
    """
    method = (method or "").upper()
    if method == "GET":
        params = query or {}
        raw_date = params.get("date")
        coverage = str(params.get("coverage") or DEFAULT_COVERAGE).lower()
        symbols = parse_symbol_list(params.get("symbols"))
    elif method == "POST":
        data = decode_json_body(body)
        raw_date = data.get("date")
        coverage = str(data.get("coverage") or DEFAULT_COVERAGE).lower()
        raw_symbols = data.get("symbols")
        symbols = clean_symbols(raw_symbols) if isinstance(raw_symbols, list) else []
    else:
        raise MethodNotAllowed("Use GET or POST")

    request_date = validate_date(raw_date)

    if not symbols:
        if require_symbols:
            raise RequestValidationError("symbols[] required")
        symbols = coverage_symbols(coverage)

    return FxRequest(date=request_date, coverage=coverage, symbols=symbols)
