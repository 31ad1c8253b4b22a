"""Registration and login."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from socialapi.api.dependencies import get_user_service
from socialapi.api.schemas import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from socialapi.services import UserService

router = APIRouter(tags=["auth"])


@router.post("/register", status_code=201, response_model=AuthResponse)
async def register(req: RegisterRequest, users: UserService = Depends(get_user_service)):
    """Create an account and log it in."""
    user = await users.register(req.name, req.username, req.email, req.password)
    return AuthResponse(token=users.issue_token(user.id), user=UserResponse.of(user))


@router.post("/login", response_model=AuthResponse)
async def login(req: LoginRequest, users: UserService = Depends(get_user_service)):
    """Exchange email + password for an access token."""
    user = await users.authenticate(req.email, req.password)
    return AuthResponse(token=users.issue_token(user.id), user=UserResponse.of(user))
