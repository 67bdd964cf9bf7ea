"""Fetch historical daily FX closes from the WSJ CSV download endpoint.

Downloads the historical-prices CSV for one XXXUSD pair around the resolved
trading day and extracts the close for that exact day.

WSJ quotes XXXUSD as USD per 1 unit of XXX. Only these direct pairs are
supported; USDXXX symbols are rejected rather than inverted.
The close is returned as the literal CSV string to keep WSJ precision.
"""

import logging
import re
from typing import NotRequired, TypedDict
from urllib.parse import urlencode

import requests

from fx_config import WSJ_NUM_ROWS, WSJ_QUOTES_BASE_URL, WSJ_TIMEOUT_SECONDS, WSJ_USER_AGENT
from trading_day import ResolvedDate

logger = logging.getLogger(__name__)

QUOTE_CURRENCY: str = "USD"

SYMBOL_RE = re.compile(r"[A-Z]{6}")

NUMBER_RE = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


# ---------------------------------------------------------------------------
# Type definitions
# ---------------------------------------------------------------------------

class CsvMatch(TypedDict):
    date: str
    close: str


class SymbolResult(TypedDict):
    symbol: str
    status: str
    close: NotRequired[str]
    date: NotRequired[str]
    error: NotRequired[str]
    source_url: NotRequired[str]


def ok_result(symbol: str, match: CsvMatch, source_url: str) -> SymbolResult:
    return SymbolResult(
        symbol=symbol,
        status="ok",
        close=match["close"],
        date=match["date"],
        source_url=source_url,
    )


def error_result(symbol: str, error: str, source_url: str | None = None) -> SymbolResult:
    result = SymbolResult(symbol=symbol, status="error", error=error)
    if source_url is not None:
        result["source_url"] = source_url
    return result


# ---------------------------------------------------------------------------
# Pure functions: WSJ CSV parsing
# ---------------------------------------------------------------------------

def parse_wsj_date(raw: str) -> str | None:
    """Parse WSJ date format 'MM/DD/YY' or 'MM/DD/YYYY' -> 'YYYY-MM-DD'.

    Two-digit years above 50 are 19xx, the rest 20xx.
    Returns None for anything that is not three numeric parts.
    """
    parts = raw.strip().split("/")
    if len(parts) != 3 or not all(p.isascii() and p.isdigit() for p in parts):
        return None
    month, day, year = parts
    if len(year) == 2:
        year = ("19" if int(year) > 50 else "20") + year
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


def is_numeric(raw: str) -> bool:
    """Plain decimal or exponent notation; no underscores, NaN or Infinity."""
    return NUMBER_RE.fullmatch(raw) is not None


def parse_wsj_csv(csv_text: str, iso_wanted: str) -> CsvMatch | None:
    """Find the row for *iso_wanted* in a WSJ historical-prices CSV.

    Typical header: Date, Open, High, Low, Close[, Volume]. Columns are
    located by name (case-insensitive), so their order may vary. Fields are
    plain comma-separated values without quoting.

    The first row whose date equals *iso_wanted* decides the outcome: its
    close is returned if it is a number, otherwise None. None is also
    returned when no row matches or the header lacks Date/Close.
    """
    if not csv_text or "\n" not in csv_text:
        return None
    lines = csv_text.strip().splitlines()

    header = [h.strip().lower() for h in lines[0].split(",")]
    if "date" not in header or "close" not in header:
        return None
    i_date = header.index("date")
    i_close = header.index("close")
    min_cols = max(i_date, i_close) + 1

    for line in lines[1:]:
        cols = [c.strip() for c in line.split(",")]
        if len(cols) < min_cols:
            continue
        row_date = parse_wsj_date(cols[i_date])
        if row_date != iso_wanted:
            continue
        close = cols[i_close]
        if not close or not is_numeric(close):
            return None
        return CsvMatch(date=row_date, close=close)
    return None


def validate_symbol(symbol: str) -> str | None:
    """Return an error message for unsupported symbols, None if accepted."""
    if not SYMBOL_RE.fullmatch(symbol):
        return "invalid symbol"
    if not symbol.endswith(QUOTE_CURRENCY):
        return "not XXXUSD (reciprocals disabled)"
    return None


# ---------------------------------------------------------------------------
# WSJ API
# ---------------------------------------------------------------------------

def historical_prices_page(symbol: str) -> str:
    """Human-facing historical prices page, sent as Referer."""
    return f"{WSJ_QUOTES_BASE_URL}/{symbol}/historical-prices"


def build_download_url(symbol: str, mdy: str, num_rows: int = WSJ_NUM_ROWS) -> str:
    params = {"startDate": mdy, "endDate": mdy, "num_rows": num_rows}
    return f"{historical_prices_page(symbol)}/download?{urlencode(params)}"


class WSJQuoteFetcher:
    """Fetches one symbol's close for a resolved trading day.

    The cookie is injected at construction; entrypoints pass
    ``fx_config.WSJ_COOKIE``.
    """

    def __init__(
        self,
        cookie: str = "",
        timeout: float = WSJ_TIMEOUT_SECONDS,
        num_rows: int = WSJ_NUM_ROWS,
    ) -> None:
        self.cookie = cookie
        self.timeout = timeout
        self.num_rows = num_rows
        if not cookie:
            logger.warning("WSJ cookie is not set; upstream requests will be anonymous")

    def build_headers(self, symbol: str) -> dict[str, str]:
        return {
            "User-Agent": WSJ_USER_AGENT,
            "Accept": "text/csv, */*;q=0.1",
            "Referer": historical_prices_page(symbol),
            "Cookie": self.cookie,
        }

    def download_csv(self, symbol: str, url: str) -> requests.Response:
        logger.info(
            "Fetching WSJ historical prices",
            extra={"url": url, "symbol": symbol},
        )
        return requests.get(url, headers=self.build_headers(symbol), timeout=self.timeout)

    def fetch(self, symbol: str, resolved: ResolvedDate) -> SymbolResult:
        """Fetch and parse the close of *symbol* on the resolved trading day.

        Never raises for upstream problems; failures come back as error results.
        """
        symbol = str(symbol or "").strip().upper()

        invalid = validate_symbol(symbol)
        if invalid is not None:
            return error_result(symbol, invalid)

        url = build_download_url(symbol, resolved["mdy"], self.num_rows)

        try:
            response = self.download_csv(symbol, url)
        except requests.RequestException as exc:
            logger.warning("WSJ request failed for %s: %s", symbol, exc)
            return error_result(symbol, str(exc), url)

        if not 200 <= response.status_code < 300:
            logger.warning("WSJ returned HTTP %d for %s", response.status_code, symbol)
            return error_result(symbol, f"HTTP {response.status_code}", url)

        match = parse_wsj_csv(response.text, resolved["iso"])
        if match is None:
            logger.warning("WSJ CSV has no usable row for %s on %s", symbol, resolved["iso"])
            return error_result(symbol, "row not found", url)

        return ok_result(symbol, match, url)
