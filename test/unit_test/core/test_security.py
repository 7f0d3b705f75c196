"""Unit tests for password hashing and token helpers."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from prs_online.core.security import (
    REFRESH_TOKEN_ALPHABET,
    TokenClaims,
    create_access_token,
    decode_access_token,
    generate_refresh_token,
    hash_password,
    verify_password,
)

SECRET = "unit-test-secret"


@pytest.fixture
def claims() -> TokenClaims:
    return TokenClaims(user_id=7, username="jdoe", role=2, email="jdoe@example.com")


class TestPasswordHashing:
    def test_hash_is_not_plain_text(self):
        hashed = hash_password("hunter22", rounds=4)
        assert hashed != "hunter22"
        assert hashed.startswith("$2")

    def test_verify_accepts_correct_password(self):
        hashed = hash_password("hunter22", rounds=4)
        assert verify_password("hunter22", hashed) is True

    def test_verify_rejects_wrong_password(self):
        hashed = hash_password("hunter22", rounds=4)
        assert verify_password("hunter23", hashed) is False

    def test_hashes_are_salted(self):
        assert hash_password("same", rounds=4) != hash_password("same", rounds=4)

    def test_verify_with_malformed_hash_returns_false(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False

    def test_verify_rejects_password_over_72_bytes(self):
        hashed = hash_password("p" * 72, rounds=4)
        assert verify_password("p" * 73, hashed) is False


class TestRefreshToken:
    def test_default_length(self):
        assert len(generate_refresh_token()) == 255

    def test_custom_length_and_alphabet(self):
        token = generate_refresh_token(64)
        assert len(token) == 64
        assert set(token) <= set(REFRESH_TOKEN_ALPHABET)

    def test_tokens_are_unique(self):
        assert generate_refresh_token() != generate_refresh_token()


class TestAccessToken:
    def test_payload_carries_identity(self, claims):
        token = create_access_token(claims, SECRET)
        payload = jwt.decode(token, SECRET, algorithms=["HS256"])

        assert payload["userId"] == 7
        assert payload["userName"] == "jdoe"
        assert payload["role"] == 2
        assert payload["email"] == "jdoe@example.com"
        assert payload["exp"] - payload["iat"] == 300

    def test_round_trip(self, claims):
        token = create_access_token(claims, SECRET)
        assert decode_access_token(token, SECRET) == claims

    def test_wrong_secret_is_rejected(self, claims):
        token = create_access_token(claims, SECRET)
        assert decode_access_token(token, "other-secret") is None

    def test_expired_token_is_rejected(self, claims):
        issued = datetime.now(timezone.utc) - timedelta(minutes=10)
        token = create_access_token(claims, SECRET, expires_in=300, now=issued)
        assert decode_access_token(token, SECRET) is None

    def test_token_without_identity_is_rejected(self):
        token = jwt.encode({"sub": "x"}, SECRET, algorithm="HS256")
        assert decode_access_token(token, SECRET) is None

    def test_garbage_is_rejected(self):
        assert decode_access_token("not.a.jwt", SECRET) is None
