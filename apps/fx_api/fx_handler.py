"""Method-dispatched FX close handler shared by the Lambda and local entrypoints.

parse request -> resolve trading day -> bounded fan-out -> aggregate.
"""

import logging
from typing import Any, Mapping

from fx_batch import QuoteFetcher, build_response, fetch_batch
from fx_config import FX_CACHE_CONTROL, FX_MAX_CONCURRENCY, FX_REQUIRE_SYMBOLS
from fx_request import FxRequestError, parse_fx_request
from trading_day import resolve_trading_day

logger = logging.getLogger(__name__)

NO_STORE: dict[str, str] = {"Cache-Control": "no-store"}


def handle_fx_request(
    method: str,
    query: Mapping[str, str] | None,
    body: str | bytes | Mapping[str, Any] | None,
    fetcher: QuoteFetcher,
    *,
    max_workers: int = FX_MAX_CONCURRENCY,
    require_symbols: bool = FX_REQUIRE_SYMBOLS,
    cache_control: str = FX_CACHE_CONTROL,
) -> tuple[int, dict[str, str], dict[str, Any]]:
    """Handle one request. Returns (status_code, headers, JSON payload).

    Callers get 200 with a mixed batch unless the request itself is
    malformed; each item carries its own status.
    """
    try:
        request = parse_fx_request(method, query, body, require_symbols=require_symbols)
        resolved = resolve_trading_day(request["date"])
        logger.info(
            "Fetching %d symbols for %s (requested %s)",
            len(request["symbols"]), resolved["iso"], request["date"],
        )
        results = fetch_batch(fetcher, request["symbols"], resolved, max_workers=max_workers)
        payload = build_response(resolved, results)
    except FxRequestError as exc:
        logger.info("Rejected %s request: %s", method, exc)
        return exc.status_code, dict(NO_STORE), {"error": str(exc)}
    except Exception as exc:
        logger.exception("FX request failed")
        return 500, dict(NO_STORE), {"error": str(exc)}

    logger.info(
        "FX batch for %s: %d ok, %d failed",
        payload["resolvedDate"], payload["ok"], payload["fail"],
    )
    return 200, {"Cache-Control": cache_control}, dict(payload)
