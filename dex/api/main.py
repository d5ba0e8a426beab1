"""FastAPI application serving one constant-product pool.

Note: the pool lives in process memory. Restarting the server starts
from an empty pool with fresh demo assets.
"""

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from dex import __version__
from dex.api.deployment import deploy
from dex.api.endpoints import faucet_router, router
from dex.config import ServerConfig
from dex.errors import DexError, EmptyPool, ReentrantCall
from dex.logging_setup import configure_logging
from dex.models.api import ErrorResponse

logger = structlog.get_logger()

# Configuration from DEX_* environment variables with sensible defaults
CONFIG = ServerConfig.from_env()

# HTTP status for error kinds that are not plain bad input
ERROR_STATUS: dict[type[DexError], int] = {
    EmptyPool: 409,
    ReentrantCall: 423,
}


def error_status(err: DexError) -> int:
    for error_type, status in ERROR_STATUS.items():
        if isinstance(err, error_type):
            return status
    return 400


def create_app(config: ServerConfig = CONFIG) -> FastAPI:
    """Build the app with a freshly deployed pool on app.state."""
    app = FastAPI(
        title="DEX constant-product pool",
        description="A two-asset x*y=k liquidity pool with LP claims",
        version=__version__,
    )
    app.state.deployment = deploy(config.pool)

    @app.exception_handler(DexError)
    async def dex_error_handler(request: Request, err: DexError) -> JSONResponse:
        """Report a rejected pool operation. Nothing was changed."""
        status = error_status(err)
        logger.warning(
            "operation_rejected",
            path=request.url.path,
            error=err.code,
            detail=str(err),
            status=status,
        )
        body = ErrorResponse(error=err.code, detail=str(err))
        return JSONResponse(status_code=status, content=body.model_dump())

    app.include_router(router)
    app.include_router(faucet_router)

    @app.get("/health")
    async def health() -> dict[str, object]:
        """Health check endpoint."""
        return {"status": "ok", "policy": config.pool.liquidity_policy.value}

    return app


app = create_app()


def run() -> None:
    """Run the pool API server.

    Configuration via environment variables:
    - DEX_HOST: Host to bind to (default: 0.0.0.0)
    - DEX_PORT: Port to bind to (default: 8000)
    - DEX_DEBUG: Enable debug/reload mode (default: false)
    - DEX_LOG_LEVEL: Log level (default: INFO)
    - DEX_LIQUIDITY_POLICY: proportional_min or strict_ratio
    """
    configure_logging(CONFIG.log_level)
    uvicorn.run(
        "dex.api.main:app",
        host=CONFIG.host,
        port=CONFIG.port,
        reload=CONFIG.debug,
    )


if __name__ == "__main__":
    run()
