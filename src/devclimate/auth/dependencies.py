"""FastAPI dependencies for authentication.

These dependencies can be used in route handlers to require authentication
and get the caller's identity.

## Usage

```python
from fastapi import Depends
from devclimate.auth import UserIdentity, get_current_identity

@router.get("/weather")
async def list_searches(identity: UserIdentity = Depends(get_current_identity)):
    return {"user_id": identity.user_id}
```
"""

from __future__ import annotations

import logging

from fastapi import Depends, Request

from devclimate.auth.hosted import HostedIdentityAuthenticator
from devclimate.auth.identity import Authenticator, BearerTokenAuthenticator, UserIdentity
from devclimate.config import Settings

logger = logging.getLogger(__name__)


def build_authenticator(settings: Settings) -> Authenticator:
    """Create the authenticator for the configured strategy."""
    if settings.uses_hosted_identity:
        return HostedIdentityAuthenticator(
            jwks_url=settings.hosted_jwks_url,
            issuer=settings.hosted_issuer,
            audience=settings.hosted_audience,
            session_cookie=settings.hosted_session_cookie,
            min_refetch_interval=settings.hosted_jwks_min_refetch_seconds,
        )

    return BearerTokenAuthenticator(settings.secret_key)


def get_authenticator(request: Request) -> Authenticator:
    """Get the authenticator the application was started with."""
    return request.app.state.authenticator


async def get_current_identity(
    request: Request,
    authenticator: Authenticator = Depends(get_authenticator),
) -> UserIdentity:
    """Authenticate the request and attach the identity to it.

    Raises MissingCredential (401) or InvalidCredential (403).
    """
    identity = await authenticator.resolve_identity(request)
    request.state.identity = identity
    return identity
