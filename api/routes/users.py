"""
User signup and login endpoints.
"""

from fastapi import APIRouter, Depends, status

from api.auth import AuthService, get_auth_service
from api.models import AuthResponse, LoginRequest, SignupRequest

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(payload: SignupRequest, auth_service: AuthService = Depends(get_auth_service)):
    """
    Register a new user.

    All of name, email, password, phone_number, gender, date_of_birth and
    membership_status are required.
    """
    return await auth_service.signup(payload)


@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    """Exchange email and password for a bearer token."""
    return await auth_service.login(payload)
