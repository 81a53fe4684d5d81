"""Request and response bodies.

JSON keys on the wire are camelCase (`windSpeed`, `totalPages`); Python
attributes stay snake_case.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    message: str


# Auth


class RegisterRequest(BaseModel):
    """Registration request body."""

    username: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)


class LoginRequest(BaseModel):
    """Login request body."""

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserSummary(CamelModel):
    id: uuid.UUID
    username: str
    email: str


class AuthResponse(CamelModel):
    """Returned by register and login."""

    message: str
    token: str
    user: UserSummary


class UserProfile(CamelModel):
    """A user without the password hash."""

    id: uuid.UUID
    username: str
    email: str
    created_at: datetime


class ProfileResponse(CamelModel):
    user: UserProfile


# Weather


class WeatherSearchResponse(CamelModel):
    """A recorded weather lookup."""

    id: uuid.UUID
    user_id: str
    city: str
    country: str | None
    temperature: int
    description: str
    humidity: int
    wind_speed: int  # km/h
    pressure: int
    feels_like: int
    icon: str | None
    timestamp: datetime


class SearchListResponse(CamelModel):
    searches: list[WeatherSearchResponse]
    current_page: int
    total_pages: int
    total_searches: int
