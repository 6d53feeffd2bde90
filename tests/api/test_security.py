"""
Unit tests for password hashing and token handling.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from api.security import InvalidToken, PasswordHasher, TokenManager


class TestPasswordHasher:
    """Test cases for PasswordHasher."""

    @pytest.fixture
    def hasher(self):
        return PasswordHasher()

    def test_hash_is_not_plaintext(self, hasher):
        digest = hasher.hash("correct horse")
        assert digest != "correct horse"
        assert hasher.verify("correct horse", digest)

    def test_hash_is_salted(self, hasher):
        """Test that hashing the same password twice gives different digests."""
        assert hasher.hash("correct horse") != hasher.hash("correct horse")

    def test_wrong_password(self, hasher):
        digest = hasher.hash("correct horse")
        assert not hasher.verify("battery staple", digest)

    @pytest.mark.parametrize("digest", ["", "not-a-hash", "$pbkdf2-sha256$broken", None])
    def test_malformed_digest_fails_verification(self, hasher, digest):
        assert hasher.verify("correct horse", digest) is False


class TestTokenManager:
    """Test cases for TokenManager."""

    @pytest.fixture
    def tokens(self):
        return TokenManager(secret_key="unit-test-secret")

    def test_issue_and_verify(self, tokens):
        token = tokens.issue("65f1c0a2e4b0a1b2c3d4e5f6")
        assert tokens.verify(token) == "65f1c0a2e4b0a1b2c3d4e5f6"

    def test_expiry_is_three_days(self, tokens):
        before = datetime.now(timezone.utc)
        token = tokens.issue("65f1c0a2e4b0a1b2c3d4e5f6")
        payload = jwt.decode(token, "unit-test-secret", algorithms=["HS256"])

        expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        assert timedelta(days=3) - timedelta(seconds=5) <= expires_at - before <= timedelta(days=3, seconds=5)

    def test_expired_token(self, tokens):
        past = datetime.now(timezone.utc) - timedelta(days=1)
        token = jwt.encode({"_id": "abc", "exp": past}, "unit-test-secret", algorithm="HS256")

        with pytest.raises(InvalidToken):
            tokens.verify(token)

    def test_wrong_key(self, tokens):
        token = TokenManager(secret_key="rotated-secret").issue("abc")

        with pytest.raises(InvalidToken):
            tokens.verify(token)

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
    def test_malformed_token(self, tokens, token):
        with pytest.raises(InvalidToken):
            tokens.verify(token)

    def test_token_without_expiry(self, tokens):
        token = jwt.encode({"_id": "abc"}, "unit-test-secret", algorithm="HS256")

        with pytest.raises(InvalidToken):
            tokens.verify(token)

    def test_token_without_user(self, tokens):
        future = datetime.now(timezone.utc) + timedelta(days=1)
        token = jwt.encode({"exp": future}, "unit-test-secret", algorithm="HS256")

        with pytest.raises(InvalidToken):
            tokens.verify(token)
