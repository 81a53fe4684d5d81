"""Authentication module for the DevClimate service.

Provides password hashing, self-issued access tokens and request
authentication.

## Strategies

- token (default): users register and log in here and receive a signed JWT,
  sent back as `Authorization: Bearer <token>`
- hosted: a hosted identity provider handles sign-in; its session tokens are
  verified against the provider's JWKS

Either way, protected routes receive a `UserIdentity` from
`get_current_identity`.
"""

from devclimate.auth.dependencies import (
    build_authenticator,
    get_authenticator,
    get_current_identity,
)
from devclimate.auth.hosted import HostedIdentityAuthenticator
from devclimate.auth.identity import (
    Authenticator,
    BearerTokenAuthenticator,
    UserIdentity,
)
from devclimate.auth.passwords import hash_password, verify_password
from devclimate.auth.tokens import TokenClaims, issue_token, verify_token

__all__ = [
    "Authenticator",
    "BearerTokenAuthenticator",
    "HostedIdentityAuthenticator",
    "UserIdentity",
    "build_authenticator",
    "get_authenticator",
    "get_current_identity",
    "hash_password",
    "verify_password",
    "TokenClaims",
    "issue_token",
    "verify_token",
]
