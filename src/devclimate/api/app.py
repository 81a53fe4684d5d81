"""FastAPI application factory.

Creates and configures the FastAPI application with all routes and middleware.

## Usage

```python
from devclimate.api import create_app

app = create_app()

# Run with uvicorn
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=5000)
```

## Configuration

The app is configured via environment variables. See `devclimate.config`
for available settings. Tests pass their own `settings`, `database`,
`weather_client` and `authenticator` instead.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from devclimate.api.errors import register_exception_handlers
from devclimate.auth.dependencies import build_authenticator
from devclimate.auth.identity import Authenticator
from devclimate.config import Settings, get_settings
from devclimate.database.connection import Database
from devclimate.weather.client import OpenWeatherClient

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
    weather_client: OpenWeatherClient | None = None,
    authenticator: Authenticator | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use (default: loaded from the environment)
        database: Database to use (default: built from settings)
        weather_client: Upstream client (default: built from settings)
        authenticator: Request authenticator (default: per AUTH_STRATEGY)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager.

        Handles startup and shutdown tasks:
        - Connect to the database (fatal if unreachable)
        - Open the upstream weather client
        - Release both on shutdown
        """
        logger.info(f"Starting {settings.app_name} v{settings.app_version}")

        app.state.settings = settings
        app.state.database = database or Database.from_settings(settings)
        app.state.weather_client = weather_client or OpenWeatherClient(
            api_key=settings.openweather_api_key,
            base_url=settings.openweather_base_url,
            timeout=settings.openweather_timeout_seconds,
        )
        app.state.authenticator = authenticator or build_authenticator(settings)

        await app.state.database.connect(create_tables=settings.database_create_tables)
        logger.info(f"Authentication strategy: {app.state.authenticator.name}")

        yield

        # Shutdown
        logger.info("Shutting down")
        await app.state.authenticator.close()
        await app.state.weather_client.close()
        await app.state.database.close()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Weather lookups with per-user search history",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials="*" not in settings.allowed_origins,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    from devclimate.api.routes import auth, weather

    if not settings.uses_hosted_identity:
        app.include_router(auth.credentials_router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(weather.router, prefix="/api/weather", tags=["Weather"])

    @app.get("/api/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "OK", "message": "DevClimate API is running"}

    @app.get("/", include_in_schema=False, response_class=PlainTextResponse)
    async def root():
        return "DevClimate server is running"

    return app
