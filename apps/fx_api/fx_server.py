"""Local development server for the FX close API.

Serves the same handler as the Lambda entrypoint. WSJ_COOKIE and the other
settings can be put in a .env file.

Usage:
    python fx_server.py
    uvicorn fx_server:app --reload --port 8000
"""

import logging

from dotenv import load_dotenv

load_dotenv()

import uvicorn  # noqa: E402
from fastapi import Depends, FastAPI, Request  # noqa: E402
from fastapi.concurrency import run_in_threadpool  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402

from fx_batch import QuoteFetcher  # noqa: E402
from fx_config import LOG_LEVEL, WSJ_COOKIE  # noqa: E402
from fx_fetchers.wsj import WSJQuoteFetcher  # noqa: E402
from fx_handler import handle_fx_request  # noqa: E402

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s: %(message)s")
logger = logging.getLogger(__name__)

_fetcher = WSJQuoteFetcher(cookie=WSJ_COOKIE)


def get_fetcher() -> QuoteFetcher:
    """FastAPI dependency: the configured WSJ fetcher."""
    return _fetcher


app = FastAPI(title="FX Close API")


@app.api_route("/fx", methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
async def fx(request: Request, fetcher: QuoteFetcher = Depends(get_fetcher)) -> JSONResponse:
    body = await request.body() if request.method == "POST" else None
    # The handler blocks on its worker pool; keep it off the event loop.
    status, headers, payload = await run_in_threadpool(
        handle_fx_request,
        request.method,
        dict(request.query_params),
        body,
        fetcher,
    )
    return JSONResponse(payload, status_code=status, headers=headers)


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    logger.info("Starting FX close API on port 8000")
    uvicorn.run(app, host="0.0.0.0", port=8000)
