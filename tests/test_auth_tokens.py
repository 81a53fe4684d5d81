"""Tests for password hashing and access tokens."""

from datetime import timedelta

import pytest
from jose import jwt

from devclimate.auth.passwords import hash_password, verify_password
from devclimate.auth.tokens import (
    ALGORITHM,
    TokenClaims,
    issue_token,
    verify_token,
)
from devclimate.errors import ExpiredToken, InvalidCredential, InvalidToken

SECRET = "test-secret-key-at-least-32-characters-long"
OTHER_SECRET = "another-secret-key-at-least-32-characters"


@pytest.fixture
def claims() -> TokenClaims:
    return TokenClaims(
        user_id="6f1c2a9e-3b7d-4c1e-9a55-0d2f8e7b6a41",
        username="alice",
        email="a@x.com",
    )


class TestPasswords:
    """Tests for bcrypt password hashing."""

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("secret1", rounds=4)
        assert hashed != "secret1"
        assert hashed.startswith("$2")

    def test_hashes_are_salted(self):
        assert hash_password("secret1", rounds=4) != hash_password("secret1", rounds=4)

    def test_verify_correct_password(self):
        hashed = hash_password("secret1", rounds=4)
        assert verify_password("secret1", hashed) is True

    def test_verify_wrong_password(self):
        hashed = hash_password("secret1", rounds=4)
        assert verify_password("wrong", hashed) is False

    def test_malformed_hash_is_a_mismatch(self):
        assert verify_password("secret1", "not-a-bcrypt-hash") is False


class TestTokens:
    """Tests for issuing and verifying access tokens."""

    def test_round_trip(self, claims: TokenClaims):
        token = issue_token(claims, SECRET)
        decoded = verify_token(token, SECRET)

        assert decoded.user_id == claims.user_id
        assert decoded.username == "alice"
        assert decoded.email == "a@x.com"

    def test_default_expiry_is_seven_days(self, claims: TokenClaims):
        decoded = verify_token(issue_token(claims, SECRET), SECRET)
        assert decoded.expires_at - decoded.issued_at == timedelta(days=7)

    def test_custom_ttl(self, claims: TokenClaims):
        decoded = verify_token(issue_token(claims, SECRET, ttl=timedelta(hours=1)), SECRET)
        assert decoded.expires_at - decoded.issued_at == timedelta(hours=1)

    def test_expired_token(self, claims: TokenClaims):
        token = issue_token(claims, SECRET, ttl=timedelta(seconds=-30))
        with pytest.raises(ExpiredToken):
            verify_token(token, SECRET)

    def test_wrong_secret(self, claims: TokenClaims):
        token = issue_token(claims, OTHER_SECRET)
        with pytest.raises(InvalidToken):
            verify_token(token, SECRET)

    def test_tampered_payload(self, claims: TokenClaims):
        token = issue_token(claims, SECRET)
        header, _, signature = token.split(".")
        forged = jwt.encode(
            {"sub": "someone-else", "username": "mallory", "email": "m@x.com",
             "iat": 0, "exp": 4102444800, "type": "access"},
            OTHER_SECRET,
            algorithm=ALGORITHM,
        )
        forged_payload = forged.split(".")[1]

        with pytest.raises(InvalidToken):
            verify_token(f"{header}.{forged_payload}.{signature}", SECRET)

    def test_garbage_token(self):
        with pytest.raises(InvalidToken):
            verify_token("not-a-token", SECRET)

    def test_wrong_token_type(self):
        token = jwt.encode(
            {"sub": "u1", "username": "alice", "email": "a@x.com",
             "iat": 0, "exp": 4102444800, "type": "refresh"},
            SECRET,
            algorithm=ALGORITHM,
        )
        with pytest.raises(InvalidToken):
            verify_token(token, SECRET)

    def test_missing_claims(self):
        token = jwt.encode(
            {"sub": "u1", "iat": 0, "exp": 4102444800, "type": "access"},
            SECRET,
            algorithm=ALGORITHM,
        )
        with pytest.raises(InvalidToken):
            verify_token(token, SECRET)

    def test_verification_failures_are_forbidden(self):
        """Both failure kinds surface as 403 InvalidCredential."""
        assert issubclass(ExpiredToken, InvalidCredential)
        assert issubclass(InvalidToken, InvalidCredential)
        assert ExpiredToken.status_code == 403
        assert InvalidToken.status_code == 403
