"""
Authentication for the FastAPI API: signup, login and the bearer-token gate.
"""

from dataclasses import dataclass
from typing import Optional

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pymongo.errors import DuplicateKeyError, PyMongoError

from api.exceptions import AuthError, DuplicateError, StoreError, Unauthorized, ValidationError
from api.models import AuthResponse, LoginRequest, SignupRequest
from api.security import InvalidToken, PasswordHasher, TokenManager
from catalog.database import MongoDBManager
from catalog.models import UserDocument, as_datetime
from utilities.logger import AuthEventLogger

logger = structlog.get_logger(__name__)

# Security scheme; missing credentials are reported by the gate itself
security = HTTPBearer(auto_error=False)

INVALID_CREDENTIALS = "Invalid credentials"


@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller, produced by the gate and passed to handlers."""
    user_id: str


class AuthService:
    """Signup and login over the users collection."""

    def __init__(self, db_manager: MongoDBManager, hasher: PasswordHasher, tokens: TokenManager):
        self.db_manager = db_manager
        self.hasher = hasher
        self.tokens = tokens
        self.events = AuthEventLogger("auth")

    async def signup(self, payload: SignupRequest) -> AuthResponse:
        """
        Register a new user and issue a token for them.

        Raises:
            ValidationError: If any field is missing or blank
            DuplicateError: If the email is already registered
            StoreError: If the database call fails
        """
        missing = payload.missing_fields()
        if missing:
            self.events.log_signup_failure(payload.email, reason="missing_fields", fields=missing)
            raise ValidationError("Please add all fields")

        try:
            if await self.db_manager.get_user_by_email(payload.email):
                self.events.log_signup_failure(payload.email, reason="duplicate")
                raise DuplicateError("User already exists")

            user = UserDocument(
                name=payload.name,
                email=payload.email,
                password=self.hasher.hash(payload.password),
                phone_number=payload.phone_number,
                gender=payload.gender,
                date_of_birth=as_datetime(payload.date_of_birth),
                membership_status=payload.membership_status,
            )
            user_id = await self.db_manager.create_user(user)

        except DuplicateKeyError:
            # Lost a race with a concurrent signup for the same email
            self.events.log_signup_failure(payload.email, reason="duplicate")
            raise DuplicateError("User already exists")
        except PyMongoError as e:
            logger.error("Failed to create user", error=str(e))
            raise StoreError("Failed to create user") from e

        self.events.log_signup_success(payload.email, user_id)
        return AuthResponse(email=payload.email, token=self.tokens.issue(user_id))

    async def login(self, payload: LoginRequest) -> AuthResponse:
        """
        Check credentials and issue a token.

        An unknown email and a wrong password fail with the same error.
        """
        if not payload.email or not payload.password:
            self.events.log_login_failure(payload.email)
            raise AuthError(INVALID_CREDENTIALS)

        try:
            user = await self.db_manager.get_user_by_email(payload.email)
        except PyMongoError as e:
            logger.error("Failed to look up user", error=str(e))
            raise StoreError("Failed to log in") from e

        if not user or not self.hasher.verify(payload.password, user.get("password")):
            self.events.log_login_failure(payload.email)
            raise AuthError(INVALID_CREDENTIALS)

        user_id = str(user["_id"])
        self.events.log_login_success(payload.email, user_id)
        return AuthResponse(email=user["email"], token=self.tokens.issue(user_id))


def get_auth_service(request: Request) -> AuthService:
    state = request.app.state
    return AuthService(state.db_manager, state.password_hasher, state.token_manager)


async def require_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthContext:
    """
    Gate for protected routes.

    Verifies the bearer token and checks that the user it names still exists.

    Returns:
        AuthContext for the caller

    Raises:
        Unauthorized: If the token is absent, invalid or names no user
        StoreError: If the user lookup fails
    """
    events = AuthEventLogger("auth_gate").bind_context(path=request.url.path)

    if credentials is None or not credentials.credentials:
        events.log_access_denied("missing_token")
        raise Unauthorized("Authorization token required")

    token_manager: TokenManager = request.app.state.token_manager
    db_manager: MongoDBManager = request.app.state.db_manager

    try:
        user_id = token_manager.verify(credentials.credentials)
    except InvalidToken as e:
        events.log_access_denied("invalid_token", error=str(e))
        raise Unauthorized("Request is not authorized")

    try:
        exists = await db_manager.user_exists(user_id)
    except PyMongoError as e:
        logger.error("Failed to resolve token user", user_id=user_id, error=str(e))
        raise StoreError("Failed to verify user") from e

    if not exists:
        events.log_access_denied("unknown_user", user_id=user_id)
        raise Unauthorized("Request is not authorized")

    return AuthContext(user_id=user_id)
