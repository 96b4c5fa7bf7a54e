"""
FastAPI application entry point.

Initializes FastAPI app, registers routers, adds middleware, and configures lifespan.

Dependencies: fastapi, assistant_hub.api, assistant_hub.observability, assistant_hub.configs
System role: Application initialization and configuration
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from assistant_hub.api import api_router
from assistant_hub.api.deps.dependencies import ServiceContainer
from assistant_hub.api.error_handlers import register_exception_handlers
from assistant_hub.boundary.db.create_tables import create_all_tables
from assistant_hub.configs import get_settings
from assistant_hub.observability.logger import configure_logging
from assistant_hub.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

logger = logging.getLogger(__name__)


def create_app(container: ServiceContainer | None = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        container: Prebuilt service container. When omitted, startup creates
            the tables and builds the production container from settings.

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan context manager.

        Handles startup and shutdown events.
        Builds the shared service container (gateway, locks, stager).
        """
        # Startup
        configure_logging(settings.log_level)
        logger.info("Application startup: logging configured")

        services = container
        if services is None:
            await create_all_tables()
            services = ServiceContainer.from_settings(settings)
        app.state.container = services
        logger.info("Application startup complete: service container ready")

        yield

        # Shutdown
        await services.close()
        logger.info("Application shutdown")

    app = FastAPI(
        title="Assistant Hub API",
        description="Multi-assistant knowledge base chat with cited answers",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add observability middleware (added first = last to execute)
    if settings.observability.log_requests:
        app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CorrelationMiddleware,
        header_name=settings.observability.correlation_header,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Register API routes
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "assistant_hub.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
