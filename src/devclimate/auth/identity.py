"""Request authentication.

Every protected route depends on an `Authenticator`, which turns an incoming
request into a `UserIdentity` or raises. Two implementations exist, one per
deployment variant:

- `BearerTokenAuthenticator`: verifies tokens issued by this service
- `HostedIdentityAuthenticator` (`devclimate.auth.hosted`): verifies tokens
  issued by a hosted identity provider

Route handlers only ever see the `UserIdentity`; they cannot tell which
authenticator produced it.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from fastapi import Request

from devclimate.auth.tokens import verify_token
from devclimate.errors import MissingCredential

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserIdentity:
    """The authenticated caller."""

    user_id: str
    username: str | None = None
    email: str | None = None


def extract_bearer_token(request: Request) -> str | None:
    """Get the token from an `Authorization: Bearer <token>` header."""
    header = request.headers.get("Authorization")
    if not header:
        return None

    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return None

    return token.strip() or None


class Authenticator(ABC):
    """Resolves the identity behind a request.

    Implementations raise `MissingCredential` when the request carries no
    credential and an `InvalidCredential` subclass when it cannot be verified.
    """

    name: str

    @abstractmethod
    async def resolve_identity(self, request: Request) -> UserIdentity:
        """Authenticate the request.

        Args:
            request: Incoming request

        Returns:
            Identity of the caller

        Raises:
            MissingCredential: If no credential is present
            InvalidCredential: If the credential is invalid or expired
        """
        pass

    async def close(self) -> None:
        """Release any resources held by the authenticator."""


class BearerTokenAuthenticator(Authenticator):
    """Authenticates requests carrying a token issued by this service."""

    name = "token"

    def __init__(self, secret_key: str):
        self.secret_key = secret_key

    async def resolve_identity(self, request: Request) -> UserIdentity:
        token = extract_bearer_token(request)
        if token is None:
            raise MissingCredential()

        claims = verify_token(token, self.secret_key)

        return UserIdentity(
            user_id=claims.user_id,
            username=claims.username,
            email=claims.email,
        )
