"""Hosted identity provider authentication.

Used when `AUTH_STRATEGY=hosted`. Sign-up, sign-in and session management
happen at the provider; this service only verifies the session tokens the
provider issues and takes the subject claim as the caller's user id.

## Verification

1. Take the token from `Authorization: Bearer <token>`, or from the
   provider's session cookie (`HOSTED_SESSION_COOKIE`, default `__session`)
2. Fetch the provider's signing keys from `HOSTED_JWKS_URL` (kept in memory
   after the first successful fetch; an unknown key id triggers a refetch
   at most once per `HOSTED_JWKS_MIN_REFETCH_SECONDS`)
3. Verify the RS256 signature and expiry, plus `iss`/`aud` when configured
4. `sub` becomes `UserIdentity.user_id`

## Configuration

- HOSTED_JWKS_URL: e.g. https://example.clerk.accounts.dev/.well-known/jwks.json
- HOSTED_ISSUER: Expected `iss` claim (optional)
- HOSTED_AUDIENCE: Expected `aud` claim (optional)
- HOSTED_JWKS_MIN_REFETCH_SECONDS: Minimum time between key refetches (default: 60)
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx
from fastapi import Request
from jose import ExpiredSignatureError, JWTError, jwt

from devclimate.auth.identity import Authenticator, UserIdentity, extract_bearer_token
from devclimate.errors import ExpiredToken, InvalidToken, MissingCredential, UpstreamError

logger = logging.getLogger(__name__)

ALGORITHMS = ["RS256"]


class HostedIdentityAuthenticator(Authenticator):
    """Verifies session tokens issued by a hosted identity provider.

    Example:
        ```python
        authenticator = HostedIdentityAuthenticator(
            jwks_url="https://example.clerk.accounts.dev/.well-known/jwks.json",
        )
        identity = await authenticator.resolve_identity(request)
        ```
    """

    name = "hosted"

    def __init__(
        self,
        jwks_url: str,
        issuer: str | None = None,
        audience: str | None = None,
        session_cookie: str = "__session",
        timeout: float = 10.0,
        min_refetch_interval: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the authenticator.

        Args:
            jwks_url: Provider's JWKS endpoint
            issuer: Expected issuer claim, if any
            audience: Expected audience claim, if any
            session_cookie: Cookie the provider stores its session token in
            timeout: Request timeout in seconds for the JWKS fetch
            min_refetch_interval: Seconds to wait before refetching keys for
                an unknown key id
            transport: Optional httpx transport (used by tests)
        """
        self.jwks_url = jwks_url
        self.issuer = issuer
        self.audience = audience
        self.session_cookie = session_cookie
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self.min_refetch_interval = min_refetch_interval
        self._jwks: dict[str, Any] | None = None
        self._fetched_at: float | None = None

    async def close(self) -> None:
        await self._client.aclose()

    def _extract_token(self, request: Request) -> str | None:
        return extract_bearer_token(request) or request.cookies.get(self.session_cookie) or None

    async def _fetch_jwks(self) -> dict[str, Any]:
        self._fetched_at = time.monotonic()
        try:
            response = await self._client.get(self.jwks_url)
        except httpx.HTTPError as e:
            logger.error(f"JWKS request failed: {e}")
            raise UpstreamError("Identity provider unavailable") from e

        if response.status_code != 200:
            logger.error(f"JWKS request failed: {response.status_code}")
            raise UpstreamError(
                "Identity provider unavailable", status_code=response.status_code
            )

        try:
            jwks = response.json()
        except ValueError as e:
            raise UpstreamError("Identity provider returned invalid keys") from e

        if not isinstance(jwks, dict) or not isinstance(jwks.get("keys"), list):
            raise UpstreamError("Identity provider returned invalid keys")

        self._jwks = jwks
        return jwks

    def _may_refetch(self) -> bool:
        if self._fetched_at is None:
            return True
        return time.monotonic() - self._fetched_at >= self.min_refetch_interval

    async def _get_jwks(self, kid: str | None) -> dict[str, Any]:
        """Get the signing keys, refetching if the key id is unknown."""
        jwks = self._jwks
        if jwks is None:
            return await self._fetch_jwks()

        known = {key.get("kid") for key in jwks["keys"]}
        if kid is not None and kid not in known and self._may_refetch():
            # Provider may have rotated its keys
            return await self._fetch_jwks()

        return jwks

    async def resolve_identity(self, request: Request) -> UserIdentity:
        token = self._extract_token(request)
        if token is None:
            raise MissingCredential()

        try:
            header = jwt.get_unverified_header(token)
        except JWTError as e:
            logger.debug(f"Malformed provider token: {e}")
            raise InvalidToken() from e

        jwks = await self._get_jwks(header.get("kid"))

        try:
            claims = jwt.decode(
                token,
                jwks,
                algorithms=ALGORITHMS,
                audience=self.audience,
                issuer=self.issuer,
                options={"verify_aud": self.audience is not None},
            )
        except ExpiredSignatureError as e:
            logger.debug(f"Provider token expired: {e}")
            raise ExpiredToken() from e
        except JWTError as e:
            logger.debug(f"Provider token verification failed: {e}")
            raise InvalidToken() from e

        subject = claims.get("sub")
        if not subject:
            raise InvalidToken()

        return UserIdentity(
            user_id=str(subject),
            username=claims.get("username"),
            email=claims.get("email"),
        )
