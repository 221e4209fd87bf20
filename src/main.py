from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.adapters.api.controllers.realtime import router as realtime_router
from src.adapters.api.controllers.trips import router as trips_router
from src.domain.exceptions import NetworkModelError, QueryError

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title="Transit Trajectory")
app.include_router(trips_router)
app.include_router(realtime_router)


def _reveal_errors() -> bool:
    raw = (os.getenv("TRAJECTORY_REVEAL_ERRORS") or "").strip().lower()
    return raw in {"1", "true", "yes", "on"}


@app.exception_handler(QueryError)
async def query_error_handler(request: Request, exc: QueryError) -> JSONResponse:
    """Queries about codes the loaded network does not know are 404s."""

    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Everything else is a JSON 500.

    A dataset that fails to load or build keeps its message (missing file,
    unresolved code, malformed sequence); other errors stay opaque unless
    TRAJECTORY_REVEAL_ERRORS is set.
    """

    logger.exception("Unhandled exception", extra={"path": str(request.url.path)})

    if _reveal_errors() or isinstance(exc, (FileNotFoundError, NetworkModelError)):
        detail = str(exc) or exc.__class__.__name__
    else:
        detail = "Internal Server Error"

    return JSONResponse(status_code=500, content={"detail": detail})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
