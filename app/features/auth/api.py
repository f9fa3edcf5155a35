"""Auth API endpoints"""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_auth_service
from app.features.auth.schemas import (
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    MeResponse,
    RegisterRequest,
    RegisterResponse,
)
from app.features.auth.service import AuthService
from app.middleware.auth import get_bearer_token, get_current_user
from app.models.user import AuthUser

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse)
async def register(
    request: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
):
    """
    Create an account.

    Pass ``invite_token`` (the ``invite`` query parameter of an invitation
    link) to join the invited workflow in the same step.
    """
    return await service.register(
        request.email,
        request.password,
        request.name,
        invite_token=request.invite_token,
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    return await service.login(request.email, request.password)


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    token: str = Depends(get_bearer_token),
    service: AuthService = Depends(get_auth_service),
):
    await service.logout(token)
    return {"success": True}


@router.get("/me", response_model=MeResponse)
async def me(
    user: AuthUser = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    """Authenticated user with their mirrored profile"""
    return await service.me(user)
