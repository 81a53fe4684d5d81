"""FastAPI application and routes.

This module provides the REST API for the DevClimate service.

## API Structure

- /api/health - Liveness check
- /api/auth - Registration, login and profile
- /api/weather - Weather lookups and search history

## Authentication

Everything except health, register and login requires authentication:
a bearer token issued by this service, or a hosted identity provider's
session token, depending on AUTH_STRATEGY.

## Errors

All error responses have the body `{"error": "<message>"}`.
"""

from devclimate.api.app import create_app

__all__ = ["create_app"]
