"""Business logic behind the API routes."""

from devclimate.services.history import SearchHistory, SearchPage
from devclimate.services.users import CredentialStore
from devclimate.services.weather import WeatherSearchService

__all__ = [
    "CredentialStore",
    "SearchHistory",
    "SearchPage",
    "WeatherSearchService",
]
