"""
Spec Gateway - Main Application
Serves per-service OpenAPI specs and proxies requests to their backends
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from spec_gateway.routes import health, proxy, specs
from spec_gateway.services.forwarding_client import ForwardingClient
from spec_gateway.services.spec_store import FileSpecStore, SpecStore, SpecStoreError
from spec_gateway.utils.config import GatewayConfig, get_gateway_config
from spec_gateway.utils.logger import setup_logging

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events"""
    config: GatewayConfig = app.state.config
    logger.info("Starting Spec Gateway", version=config.service_version)
    config.log_config()

    if getattr(app.state, "spec_store", None) is None:
        try:
            app.state.spec_store = FileSpecStore(config.specs_dir)
        except SpecStoreError as e:
            logger.error("Spec store init failed", error=str(e))
            raise

    created_client = None
    if getattr(app.state, "forwarding_client", None) is None:
        created_client = ForwardingClient(app.state.spec_store)
        app.state.forwarding_client = created_client

    yield

    if created_client is not None:
        await created_client.close()
        app.state.forwarding_client = None
        logger.info("Forwarding client closed")

    logger.info("Spec Gateway shutdown complete")


def create_app(
    config: Optional[GatewayConfig] = None,
    spec_store: Optional[SpecStore] = None,
    forwarding_client: Optional[ForwardingClient] = None
) -> FastAPI:
    """
    Create and configure the gateway application

    The spec store and forwarding client may be injected; whatever is missing
    is built from ``config`` when the application starts.
    """
    config = config or get_gateway_config()
    setup_logging(config.log_level, config.log_format, config.log_config_path)

    app = FastAPI(
        title="Spec Gateway",
        description="Serves service OpenAPI specs and proxies requests to their backends",
        version=config.service_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.config = config
    app.state.spec_store = spec_store
    app.state.forwarding_client = forwarding_client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.get_cors_origins(),
        allow_methods=config.get_cors_methods(),
        allow_headers=config.get_cors_headers(),
        max_age=config.cors_max_age,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every request with its duration"""
        start = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start) * 1000, 2)
        )
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning("Invalid request body", path=request.url.path, errors=exc.errors())
        return JSONResponse(
            status_code=400,
            content={"detail": "invalid request body"}
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler"""
        logger.error(
            "Unhandled exception",
            error=str(exc),
            method=request.method,
            path=request.url.path,
            exc_info=True
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred"
            }
        )

    # Register routes
    app.include_router(health.router, tags=["Health"])
    app.include_router(specs.router, prefix="/api/specs", tags=["Specs"])
    app.include_router(proxy.router, prefix="/api/proxy", tags=["Proxy"])

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "service": config.service_name,
            "version": config.service_version,
            "status": "running",
            "docs": "/docs"
        }

    return app


app = create_app()


def main():
    """Run the gateway with uvicorn"""
    import uvicorn

    config = get_gateway_config()
    uvicorn.run(
        "spec_gateway.main:app",
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        timeout_graceful_shutdown=config.shutdown_timeout
    )


if __name__ == "__main__":
    main()
