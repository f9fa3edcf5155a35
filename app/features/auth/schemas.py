"""Request and response schemas for the Auth API"""

from typing import Optional

from pydantic import BaseModel, EmailStr

from app.features.workflows.schemas import RedeemInviteResponse
from app.models.user import AuthUser, UserProfile


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    name: str
    invite_token: Optional[str] = None


class RegisterResponse(BaseModel):
    user: AuthUser
    profile: UserProfile
    invite: Optional[RedeemInviteResponse] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    user: AuthUser
    access_token: str
    token_type: str = "bearer"


class MeResponse(BaseModel):
    user: AuthUser
    profile: Optional[UserProfile] = None


class LogoutResponse(BaseModel):
    success: bool
