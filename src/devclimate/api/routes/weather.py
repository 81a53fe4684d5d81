"""Weather lookup and search history routes.

## Endpoints

- GET /api/weather/current/{city} - Look up current weather and record it
- GET /api/weather?page=&limit= - The caller's searches, newest first
- DELETE /api/weather/{search_id} - Delete one of the caller's searches

All endpoints require authentication; every query is scoped to the caller.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from devclimate.api.dependencies import get_search_history, get_weather_service
from devclimate.api.schemas import (
    MessageResponse,
    SearchListResponse,
    WeatherSearchResponse,
)
from devclimate.auth.dependencies import get_current_identity
from devclimate.auth.identity import UserIdentity
from devclimate.errors import InvalidInput
from devclimate.services.history import SearchHistory
from devclimate.services.weather import WeatherSearchService

router = APIRouter()


@router.get("/current/{city}", response_model=WeatherSearchResponse)
async def get_current_weather(
    city: str,
    identity: UserIdentity = Depends(get_current_identity),
    service: WeatherSearchService = Depends(get_weather_service),
) -> WeatherSearchResponse:
    """Get current weather for a city and add it to the caller's history."""
    search = await service.lookup_and_record(city, identity.user_id)
    return WeatherSearchResponse.model_validate(search)


@router.get("/current", include_in_schema=False)
@router.get("/current/", include_in_schema=False)
async def get_current_weather_without_city(
    identity: UserIdentity = Depends(get_current_identity),
) -> None:
    raise InvalidInput("City name is required")


@router.get("", response_model=SearchListResponse)
async def list_searches(
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    identity: UserIdentity = Depends(get_current_identity),
    history: SearchHistory = Depends(get_search_history),
) -> SearchListResponse:
    """List the caller's weather searches, newest first.

    `page` defaults to 1 and `limit` to 5; values that are not positive
    integers fall back to the defaults.
    """
    result = await history.list_searches(identity.user_id, page=page, limit=limit)
    return SearchListResponse(
        searches=[WeatherSearchResponse.model_validate(s) for s in result.searches],
        current_page=result.current_page,
        total_pages=result.total_pages,
        total_searches=result.total_searches,
    )


@router.delete("/{search_id}", response_model=MessageResponse)
async def delete_search(
    search_id: str,
    identity: UserIdentity = Depends(get_current_identity),
    history: SearchHistory = Depends(get_search_history),
) -> MessageResponse:
    """Delete one of the caller's weather searches."""
    await history.delete_search(search_id, identity.user_id)
    return MessageResponse(message="Weather search deleted successfully")
