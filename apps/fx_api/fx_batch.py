"""Fan out WSJ fetches over a bounded worker pool and aggregate the results."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Protocol, TypedDict

from fx_config import FX_MAX_CONCURRENCY
from fx_fetchers.wsj import SymbolResult, error_result
from trading_day import ResolvedDate

logger = logging.getLogger(__name__)


class QuoteFetcher(Protocol):
    def fetch(self, symbol: str, resolved: ResolvedDate) -> SymbolResult: ...


class FxResponse(TypedDict):
    resolvedDate: str
    total: int
    ok: int
    fail: int
    items: list[SymbolResult]


def fetch_batch(
    fetcher: QuoteFetcher,
    symbols: list[str],
    resolved: ResolvedDate,
    max_workers: int = FX_MAX_CONCURRENCY,
) -> list[SymbolResult]:
    """Fetch every symbol with at most *max_workers* requests in flight.

    Returns one result per symbol, in completion order. A failing symbol
    never aborts the batch.
    """
    results: list[SymbolResult] = []
    if not symbols:
        return results

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {executor.submit(fetcher.fetch, s, resolved): s for s in symbols}
        for future in as_completed(futures):
            symbol = futures[future]
            try:
                results.append(future.result())
            except Exception as exc:
                logger.error("Fetching %s failed: %s", symbol, exc, exc_info=True)
                results.append(error_result(str(symbol).strip().upper(), str(exc)))
    return results


def build_response(resolved: ResolvedDate, results: list[SymbolResult]) -> FxResponse:
    """Aggregate per-symbol results; items are sorted by symbol."""
    ok = sum(1 for r in results if r["status"] == "ok")
    return FxResponse(
        resolvedDate=resolved["iso"],
        total=len(results),
        ok=ok,
        fail=len(results) - ok,
        items=sorted(results, key=lambda r: r["symbol"]),
    )
