"""Weather lookups that are recorded in the caller's history."""

from __future__ import annotations

import logging

from devclimate.database.models import WeatherSearch
from devclimate.errors import InvalidInput
from devclimate.services.history import SearchHistory
from devclimate.weather.client import OpenWeatherClient

logger = logging.getLogger(__name__)


class WeatherSearchService:
    """Looks up current weather and records the result for the caller."""

    def __init__(self, client: OpenWeatherClient, history: SearchHistory):
        self.client = client
        self.history = history

    async def lookup_and_record(self, city: str | None, user_id: str) -> WeatherSearch:
        """Fetch current weather for `city` and store it for `user_id`.

        Nothing is stored when the lookup fails.

        Raises:
            InvalidInput: If the city is empty
            CityNotFound: If the provider does not know the city
            UpstreamError: If the provider request fails
        """
        city = (city or "").strip()
        if not city:
            raise InvalidInput("City name is required")

        conditions = await self.client.get_current(city)
        search = await self.history.record(user_id, conditions)

        logger.info(f"Recorded weather search {search.id} ({search.city}) for user {user_id}")
        return search
