"""Per-user weather search history.

A user only ever sees or deletes their own searches: every query below is
filtered on the owning `user_id`.
"""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from devclimate.database.models import WeatherSearch
from devclimate.errors import InvalidInput, NotFoundOrUnauthorized
from devclimate.weather.models import CurrentConditions

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 5
MAX_LIMIT = 50


def parse_positive_int(value: str | int | None, default: int) -> int:
    """Parse a query value, falling back to `default` if absent or invalid."""
    if value is None:
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


@dataclass
class SearchPage:
    """One page of a user's search history."""

    searches: list[WeatherSearch]
    current_page: int
    total_pages: int
    total_searches: int


class SearchHistory:
    """Reads and writes the `weather_searches` table."""

    def __init__(
        self,
        session: AsyncSession,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT,
    ):
        self.session = session
        self.default_limit = default_limit
        self.max_limit = max_limit

    async def record(
        self,
        user_id: str,
        conditions: CurrentConditions,
        timestamp: datetime | None = None,
    ) -> WeatherSearch:
        """Store a lookup for a user and return the saved row."""
        search = WeatherSearch(
            user_id=user_id,
            city=conditions.city,
            country=conditions.country,
            temperature=conditions.temperature,
            feels_like=conditions.feels_like,
            description=conditions.description,
            humidity=conditions.humidity,
            wind_speed=conditions.wind_speed,
            pressure=conditions.pressure,
            icon=conditions.icon,
            timestamp=timestamp or datetime.now(timezone.utc),
        )
        self.session.add(search)
        await self.session.commit()

        return search

    async def list_searches(
        self,
        user_id: str,
        page: str | int | None = None,
        limit: str | int | None = None,
    ) -> SearchPage:
        """Get one page of a user's searches, newest first.

        Invalid or missing `page`/`limit` fall back to the defaults; `limit`
        is capped at `max_limit`.
        """
        page = parse_positive_int(page, DEFAULT_PAGE)
        limit = min(parse_positive_int(limit, self.default_limit), self.max_limit)
        skip = (page - 1) * limit

        count_result = await self.session.execute(
            select(func.count()).select_from(WeatherSearch).where(WeatherSearch.user_id == user_id)
        )
        total = count_result.scalar_one()

        # Past the end; also keeps huge pages from reaching OFFSET
        if skip >= total:
            searches = []
        else:
            result = await self.session.execute(
                select(WeatherSearch)
                .where(WeatherSearch.user_id == user_id)
                .order_by(WeatherSearch.timestamp.desc(), WeatherSearch.id.desc())
                .offset(skip)
                .limit(limit)
            )
            searches = list(result.scalars().all())

        return SearchPage(
            searches=searches,
            current_page=page,
            total_pages=math.ceil(total / limit),
            total_searches=total,
        )

    async def delete_search(self, search_id: str, user_id: str) -> None:
        """Delete one of the user's searches.

        Raises:
            InvalidInput: If `search_id` is not a valid id
            NotFoundOrUnauthorized: If no search with that id belongs to
                the user
        """
        try:
            key = uuid.UUID(str(search_id))
        except ValueError:
            raise InvalidInput("Invalid search ID") from None

        result = await self.session.execute(
            delete(WeatherSearch).where(
                WeatherSearch.id == key,
                WeatherSearch.user_id == user_id,
            )
        )
        await self.session.commit()

        if result.rowcount == 0:
            raise NotFoundOrUnauthorized()

        logger.info(f"Deleted weather search {key} for user {user_id}")
