"""FastAPI application for the SAMM quote service.

Note: Rate limiting is not implemented at the application level. It belongs
at the infrastructure layer (reverse proxy / load balancer).
"""

import os

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from samm import __version__
from samm.api.endpoints import get_deployment, router
from samm.config import Deployment
from samm.errors import (
    ExceedsCThreshold,
    ExcessiveInputAmount,
    InsufficientLiquidity,
    InvalidSwapAmount,
    InvalidTokenPair,
    NoRouteFound,
    NoShardsAvailable,
    SAMMError,
    SourceUnavailable,
)

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("SAMM_HOST", "0.0.0.0")
PORT = int(os.environ.get("SAMM_PORT", "8000"))
DEBUG = os.environ.get("SAMM_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (1 MB)
MAX_REQUEST_SIZE = 1024 * 1024

# HTTP status per error class; subclasses fall back along the MRO
ERROR_STATUS: dict[type[SAMMError], int] = {
    InvalidSwapAmount: 400,
    InvalidTokenPair: 404,
    NoRouteFound: 404,
    ExceedsCThreshold: 422,
    InsufficientLiquidity: 422,
    NoShardsAvailable: 422,
    ExcessiveInputAmount: 409,
    SourceUnavailable: 503,
}
DEFAULT_ERROR_STATUS = 400


def error_status(err: SAMMError) -> int:
    """HTTP status code for a SAMM error."""
    for cls in type(err).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return DEFAULT_ERROR_STATUS


app = FastAPI(
    title="SAMM Router",
    description="Output-specified quotes and shard routing for SAMM pools",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length:
        try:
            declared_size = int(content_length)
        except ValueError:
            return JSONResponse(status_code=400, content={"detail": "Invalid Content-Length"})
        if declared_size > MAX_REQUEST_SIZE:
            return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(SAMMError)
async def samm_error_handler(request: Request, exc: SAMMError) -> JSONResponse:
    """Turn routing failures into ``{"error": <class>, "detail": <message>}``."""
    return JSONResponse(
        status_code=error_status(exc),
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


app.include_router(router)


@app.get("/health")
async def health(deployment: Deployment = Depends(get_deployment)) -> dict[str, object]:
    """Health check endpoint."""
    return {
        "status": "ok",
        "network": deployment.network,
        "chainId": deployment.chain_id,
        "pairs": {name: len(shards) for name, shards in deployment.shards_by_pair().items()},
        "totalShards": len(deployment.shards),
        "version": __version__,
    }


def run() -> None:
    """Run the API server.

    Configuration via environment variables:
    - SAMM_HOST: Host to bind to (default: 0.0.0.0)
    - SAMM_PORT: Port to bind to (default: 8000)
    - SAMM_DEBUG: Enable debug/reload mode (default: false)
    - SAMM_DEPLOYMENT_FILE: Deployment JSON (default: built-in testnet deployment)
    """
    uvicorn.run(
        "samm.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
