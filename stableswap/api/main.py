"""FastAPI application serving pool state and quotes."""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from stableswap.api.endpoints import router
from stableswap.errors import ErrorKind, StableSwapError
from stableswap.models.views import ErrorView

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("STABLESWAP_HOST", "0.0.0.0")
PORT = int(os.environ.get("STABLESWAP_PORT", "8000"))
DEBUG = os.environ.get("STABLESWAP_DEBUG", "false").lower() in ("true", "1", "yes")

# Validation and capacity errors are the caller's to fix; the rest are ours
STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.CAPACITY: 400,
    ErrorKind.CONSISTENCY: 409,
    ErrorKind.NUMERICAL: 500,
}

app = FastAPI(
    title="StableSwap pool",
    description="Quotes and state of a rebalance-aware StableSwap pool",
    version="0.1.0",
)


@app.exception_handler(StableSwapError)
async def stable_swap_error_handler(request: Request, exc: StableSwapError) -> JSONResponse:
    """Map pool errors to JSON bodies carrying the stable error code."""
    status = STATUS_BY_KIND[exc.kind]
    logger.warning(
        "request_failed",
        path=request.url.path,
        error=exc.code,
        kind=exc.kind.value,
        status=status,
    )
    body = ErrorView(error=exc.code, kind=exc.kind.value, detail=exc.message)
    return JSONResponse(status_code=status, content=body.model_dump())


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Run the pool API server.

    Configuration via environment variables:
    - STABLESWAP_HOST: Host to bind to (default: 0.0.0.0)
    - STABLESWAP_PORT: Port to bind to (default: 8000)
    - STABLESWAP_DEBUG: Enable debug/reload mode (default: false)
    """
    uvicorn.run(
        "stableswap.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
