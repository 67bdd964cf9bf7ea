"""Configuration for the FX close API.

Runtime settings come from environment variables; the WSJ endpoint,
request headers and symbol coverage lists are defined here.
"""

import os

# Cookie string sent with every WSJ request. Empty means anonymous fetches,
# which WSJ usually rejects (surfaces as per-symbol HTTP errors).
WSJ_COOKIE: str = os.environ.get("WSJ_COOKIE", "")

# Per-request timeout for upstream downloads, in seconds.
WSJ_TIMEOUT_SECONDS: float = float(os.environ.get("WSJ_TIMEOUT_SECONDS", "30"))

# Maximum number of WSJ downloads in flight for one request.
FX_MAX_CONCURRENCY: int = int(os.environ.get("FX_MAX_CONCURRENCY", "6"))

# When true, an empty symbol list is rejected instead of falling back to a
# coverage preset.
FX_REQUIRE_SYMBOLS: bool = os.environ.get("FX_REQUIRE_SYMBOLS", "false").lower() in ("1", "true", "yes")

# Cache policy for successful responses. Closes for a past date do not change
# once published, so a short shared cache is allowed.
FX_CACHE_CONTROL: str = os.environ.get(
    "FX_CACHE_CONTROL", "s-maxage=120, stale-while-revalidate=300"
)

LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()

# ---------------------------------------------------------------------------
# WSJ (Wall Street Journal market data)
# ---------------------------------------------------------------------------

WSJ_QUOTES_BASE_URL: str = "https://www.wsj.com/market-data/quotes/FX"

# Number of rows requested from the historical-prices download.
WSJ_NUM_ROWS: int = 50

WSJ_USER_AGENT: str = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

# ---------------------------------------------------------------------------
# Symbol coverage
# ---------------------------------------------------------------------------

# Direct XXXUSD pairs only. WSJ quotes these as USD per unit of XXX.
DEFAULT_SYMBOLS: list[str] = [
    "EURUSD", "GBPUSD", "AUDUSD", "NZDUSD", "JPYUSD", "CADUSD", "CHFUSD", "SEKUSD", "NOKUSD", "DKKUSD",
    "MXNUSD", "BRLUSD", "CNYUSD", "KRWUSD", "INRUSD", "ZARUSD", "TRYUSD", "PLNUSD", "HUFUSD", "CZKUSD",
    "ILSUSD", "AEDUSD", "SARUSD", "CLPUSD", "COPUSD", "PENUSD", "ARSUSD", "THBUSD", "PHPUSD", "MYRUSD",
    "IDRUSD", "TWDUSD", "SGDUSD", "HKDUSD", "RONUSD", "BGNUSD", "QARUSD", "MADUSD", "AOAUSD", "VNDUSD",
    "GHSUSD", "NGNUSD",
]

COVERAGE_PRESETS: dict[str, list[str]] = {
    "majors": [
        "EURUSD", "GBPUSD", "JPYUSD", "AUDUSD", "NZDUSD",
        "CADUSD", "CHFUSD", "CNYUSD", "SEKUSD", "NOKUSD",
    ],
    "extended": DEFAULT_SYMBOLS[:30],
    "full": DEFAULT_SYMBOLS,
}

DEFAULT_COVERAGE: str = "full"
