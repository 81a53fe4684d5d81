"""Access tokens using signed JWTs.

Tokens are issued at registration and login and sent back by clients in the
`Authorization: Bearer <token>` header. They are stateless: there is no
server-side revocation list, a token is valid until it expires.

## Security

- Tokens are signed (HS256) with the application secret key
- Tokens expire after a configurable period (default: 7 days)
- Tampered, malformed or expired tokens are rejected

## Token Structure

```json
{
  "sub": "user-uuid",
  "username": "alice",
  "email": "a@x.com",
  "iat": 1234567890,
  "exp": 1235172690,
  "type": "access"
}
```
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from devclimate.errors import ExpiredToken, InvalidToken

logger = logging.getLogger(__name__)

# JWT configuration
ALGORITHM = "HS256"
TOKEN_TYPE = "access"
DEFAULT_TOKEN_TTL = timedelta(days=7)


@dataclass(frozen=True)
class TokenClaims:
    """Identity claims embedded in an access token."""

    user_id: str
    username: str
    email: str
    issued_at: datetime | None = None
    expires_at: datetime | None = None

    @property
    def is_expired(self) -> bool:
        """Check if the token has expired."""
        if self.expires_at is None:
            return False
        return datetime.now(timezone.utc) >= self.expires_at


def issue_token(
    claims: TokenClaims,
    secret_key: str,
    ttl: timedelta = DEFAULT_TOKEN_TTL,
) -> str:
    """Create a signed access token.

    Args:
        claims: Identity to embed (issue/expiry times are ignored)
        secret_key: Signing secret
        ttl: Lifetime of the token

    Returns:
        Signed JWT token string
    """
    now = datetime.now(timezone.utc)
    expires_at = now + ttl

    payload = {
        "sub": claims.user_id,
        "username": claims.username,
        "email": claims.email,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
        "type": TOKEN_TYPE,
    }

    return jwt.encode(payload, secret_key, algorithm=ALGORITHM)


def verify_token(token: str, secret_key: str) -> TokenClaims:
    """Verify and decode an access token.

    Args:
        token: The JWT token string (callers check it is present first)
        secret_key: Signing secret

    Returns:
        The decoded claims

    Raises:
        ExpiredToken: If the token is past its expiry
        InvalidToken: If the signature, structure or type is wrong
    """
    try:
        payload = jwt.decode(token, secret_key, algorithms=[ALGORITHM])
    except ExpiredSignatureError as e:
        logger.debug(f"Access token expired: {e}")
        raise ExpiredToken() from e
    except JWTError as e:
        logger.debug(f"Access token verification failed: {e}")
        raise InvalidToken() from e

    if payload.get("type") != TOKEN_TYPE:
        logger.debug("Invalid token type")
        raise InvalidToken()

    try:
        claims = TokenClaims(
            user_id=str(payload["sub"]),
            username=payload["username"],
            email=payload["email"],
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.debug(f"Invalid token payload: {e}")
        raise InvalidToken() from e

    # Check expiration (jose should handle this, but double-check)
    if claims.is_expired:
        raise ExpiredToken()

    return claims
