"""FastAPI dependencies for services.

The database and the weather client live on `app.state` (created in the
application lifespan); these dependencies hand them to route handlers.
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from devclimate.config import Settings
from devclimate.services import CredentialStore, SearchHistory, WeatherSearchService
from devclimate.weather import OpenWeatherClient


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Database session for one request."""
    async with request.app.state.database.session() as session:
        yield session


def get_weather_client(request: Request) -> OpenWeatherClient:
    return request.app.state.weather_client


def get_credential_store(
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> CredentialStore:
    return CredentialStore(db, bcrypt_rounds=settings.bcrypt_rounds)


def get_search_history(
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> SearchHistory:
    return SearchHistory(
        db,
        default_limit=settings.history_default_limit,
        max_limit=settings.history_max_limit,
    )


def get_weather_service(
    client: OpenWeatherClient = Depends(get_weather_client),
    history: SearchHistory = Depends(get_search_history),
) -> WeatherSearchService:
    return WeatherSearchService(client, history)
