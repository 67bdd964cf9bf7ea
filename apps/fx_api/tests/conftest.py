"""
Shared test fixtures: fake WSJ responses and an instrumented fetcher.
"""

import os

# Set environment variables BEFORE any app imports so config picks them up
os.environ.setdefault("WSJ_COOKIE", "test-cookie")
os.environ.setdefault("FX_MAX_CONCURRENCY", "6")

import threading  # noqa: E402
import time  # noqa: E402
from unittest.mock import MagicMock  # noqa: E402

import pytest  # noqa: E402

from fx_fetchers.wsj import SymbolResult, error_result  # noqa: E402
from trading_day import ResolvedDate  # noqa: E402

SAMPLE_CSV = (
    "Date, Open, High, Low, Close\n"
    "06/10/24, 1.0760, 1.0775, 1.0730, 1.0767\n"
    "06/07/24, 1.0890, 1.0900, 1.0710, 1.0801\n"
    "06/06/24, 1.0870, 1.0902, 1.0860, 1.0895\n"
)


def make_response(status_code: int = 200, text: str = SAMPLE_CSV) -> MagicMock:
    """Stand-in for requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.text = text
    return response


class FakeFetcher:
    """Returns a canned ok result per symbol and counts concurrent calls."""

    def __init__(self, delays: dict[str, float] | None = None, fail: set[str] | None = None):
        self.delays = delays or {}
        self.fail = fail or set()
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def fetch(self, symbol: str, resolved: ResolvedDate) -> SymbolResult:
        with self._lock:
            self.calls.append(symbol)
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            time.sleep(self.delays.get(symbol, 0.01))
            if symbol in self.fail:
                return error_result(symbol, "HTTP 403", f"https://example.test/{symbol}")
            return SymbolResult(
                symbol=symbol,
                status="ok",
                close="1.0801",
                date=resolved["iso"],
                source_url=f"https://example.test/{symbol}",
            )
        finally:
            with self._lock:
                self.in_flight -= 1


@pytest.fixture
def resolved() -> ResolvedDate:
    return ResolvedDate(iso="2024-06-07", mdy="06/07/2024")


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()
