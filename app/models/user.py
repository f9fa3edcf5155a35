"""User domain models"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class AuthUser(BaseModel):
    """Identity handle returned by the identity provider"""
    id: str  # UUID as string
    email: Optional[str] = None
    display_name: Optional[str] = None


class UserProfileBase(BaseModel):
    """Base user profile fields"""
    name: str
    email: str
    role: str = "member"


class UserProfileCreate(UserProfileBase):
    """User profile creation model (mirrors the identity user)"""
    id: str  # UUID as string
    created_at: datetime


class UserProfileUpdate(BaseModel):
    """User profile update model"""
    name: Optional[str] = None


class UserProfile(UserProfileBase):
    """Complete user profile model from database"""
    id: str  # UUID as string
    created_at: datetime

    class Config:
        from_attributes = True
