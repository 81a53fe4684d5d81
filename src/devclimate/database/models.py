"""Database models for the DevClimate service.

## Schema Overview

```
users
└── weather_searches (1:N, by user_id)
```

`weather_searches.user_id` is a plain string rather than a foreign key: with
a hosted identity provider the owning id is an opaque provider identifier
that has no row in `users`.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all database models."""


class User(Base):
    """User account model.

    Created on registration, never updated or deleted. Username and email
    uniqueness is enforced by the database as well as by the registration
    check.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<User {self.username}>"


class WeatherSearch(Base):
    """One recorded weather lookup.

    Rows are immutable: they are created on a successful lookup and only
    ever deleted by their owner.
    """

    __tablename__ = "weather_searches"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)

    # Resolved location
    city: Mapped[str] = mapped_column(String(255), nullable=False)
    country: Mapped[str | None] = mapped_column(String(8))

    # Conditions (metric)
    temperature: Mapped[int] = mapped_column(Integer, nullable=False)  # °C
    feels_like: Mapped[int] = mapped_column(Integer, nullable=False)  # °C
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    humidity: Mapped[int] = mapped_column(Integer, nullable=False)  # %
    wind_speed: Mapped[int] = mapped_column(Integer, nullable=False)  # km/h
    pressure: Mapped[int] = mapped_column(Integer, nullable=False)  # hPa
    icon: Mapped[str | None] = mapped_column(String(16))

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    __table_args__ = (
        Index("ix_weather_searches_user_timestamp", "user_id", "timestamp"),
    )

    def __repr__(self) -> str:
        return f"<WeatherSearch {self.city} user_id={self.user_id}>"
