"""
Password hashing and JWT issuing/verification.
"""

from datetime import datetime, timedelta, timezone

import jwt
import structlog
from passlib.context import CryptContext

logger = structlog.get_logger(__name__)


class InvalidToken(Exception):
    """Token is malformed, badly signed or expired."""


class PasswordHasher:
    """Salted one-way password hashing."""

    # pbkdf2_sha256 needs no native bcrypt backend
    def __init__(self, schemes=("pbkdf2_sha256",)):
        self.context = CryptContext(schemes=list(schemes), deprecated="auto")

    def hash(self, password: str) -> str:
        return self.context.hash(password)

    def verify(self, password: str, hashed_password: str) -> bool:
        """
        Check a plaintext password against a stored hash.

        A malformed or unrecognised hash counts as a mismatch.
        """
        try:
            return self.context.verify(password, hashed_password)
        except (ValueError, TypeError) as e:
            logger.warning("Password hash could not be verified", error=str(e))
            return False


class TokenManager:
    """
    Issues and verifies signed identity tokens.

    The payload carries the user identifier under ``_id`` and an absolute
    ``exp`` claim.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_days: int = 3):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_in = timedelta(days=expire_days)

    def issue(self, user_id: str) -> str:
        issued_at = datetime.now(timezone.utc)
        payload = {"_id": user_id, "iat": issued_at, "exp": issued_at + self.expires_in}
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """
        Verify a token and return the user identifier it carries.

        Raises:
            InvalidToken: On bad encoding, bad signature, expiry or a missing identifier
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["exp"]},
            )
        except jwt.PyJWTError as e:
            raise InvalidToken(str(e)) from e

        user_id = payload.get("_id")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidToken("Token does not identify a user")
        return user_id
