"""OpenWeatherMap client.

## API Documentation Summary
Source: https://openweathermap.org/current

## Endpoint
- Base URL: https://api.openweathermap.org/data/2.5
- Current weather by city: GET /weather?q={city}&appid={key}&units=metric

## Authentication
- API key passed as the `appid` query parameter

## Response Format
```json
{
  "name": "London",
  "sys": {"country": "GB"},
  "main": {"temp": 14.6, "feels_like": 13.9, "humidity": 72, "pressure": 1012},
  "weather": [{"description": "light rain", "icon": "10d"}],
  "wind": {"speed": 4.1}
}
```

## Variable Translation (metric -> CurrentConditions)
| OpenWeatherMap Field | Canonical Field | Notes |
|----------------------|-----------------|-------|
| name | city | Provider-resolved city name |
| sys.country | country | ISO 3166 country code |
| main.temp | temperature | Rounded to whole °C |
| main.feels_like | feels_like | Rounded to whole °C |
| main.humidity | humidity | Percent, verbatim |
| main.pressure | pressure | hPa, verbatim |
| wind.speed | wind_speed | m/s × 3.6, rounded to whole km/h |
| weather[0].description | description | Verbatim |
| weather[0].icon | icon | Verbatim |

## Errors
- 404: unknown city -> `CityNotFound`
- Any other non-2xx, transport failure or unreadable body -> `UpstreamError`

Every lookup hits the API live: no retries, no response caching.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from devclimate.errors import CityNotFound, UpstreamError
from devclimate.weather.models import CurrentConditions, OpenWeatherResponse

logger = logging.getLogger(__name__)


class OpenWeatherClient:
    """OpenWeatherMap current-weather client.

    Example:
        ```python
        async with OpenWeatherClient(api_key="your-api-key") as client:
            conditions = await client.get_current("London")
        ```
    """

    name = "openweathermap"
    base_url = "https://api.openweathermap.org/data/2.5"

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        timeout: float = 10.0,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            api_key: OpenWeatherMap API key
            base_url: Override the API base URL
            timeout: Request timeout in seconds
            user_agent: User-Agent string for requests
            transport: Optional httpx transport (used by tests)
        """
        self.api_key = api_key
        if base_url:
            self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent or "devclimate/0.1.0"
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> OpenWeatherClient:
        """Enter async context manager."""
        self._get_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.close()

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": "application/json",
                },
            )
        return self._client

    async def get_current(self, city: str) -> CurrentConditions:
        """Get current weather for a city.

        Args:
            city: City query, e.g. "London" or "London,GB"

        Returns:
            Current conditions in canonical form

        Raises:
            CityNotFound: If the provider does not know the city
            UpstreamError: If the request fails for any other reason
        """
        params = {"q": city, "appid": self.api_key, "units": "metric"}

        try:
            response = await self._get_client().get(f"{self.base_url}/weather", params=params)
        except httpx.HTTPError as e:
            logger.error(f"Weather API request failed: {e}")
            raise UpstreamError() from e

        if response.status_code == 404:
            raise CityNotFound()

        if not response.is_success:
            logger.error(f"Weather API request failed: {response.status_code}")
            raise UpstreamError(status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Failed to parse weather response: {e}")
            raise UpstreamError() from e

        return self._translate_response(data)

    def _translate_response(self, response_data: dict[str, Any]) -> CurrentConditions:
        """Translate an OpenWeatherMap response to canonical form.

        See module docstring for the field mapping.
        """
        try:
            parsed = OpenWeatherResponse.model_validate(response_data)
        except ValidationError as e:
            logger.error(f"Unexpected weather response shape: {e}")
            raise UpstreamError() from e

        return CurrentConditions.from_openweather(parsed)
