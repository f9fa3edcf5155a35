"""User profile repository"""
from typing import Optional

from supabase import Client  # type: ignore

from app.models.user import UserProfile, UserProfileCreate, UserProfileUpdate

from .base import BaseRepository


class UserRepository(BaseRepository[UserProfile, UserProfileCreate, UserProfileUpdate]):
    """Repository for user profiles mirrored from the identity provider"""

    def __init__(self, client: Client):
        super().__init__(client, "users", UserProfile)

    async def find_by_email(self, email: str) -> Optional[UserProfile]:
        """Find a profile by e-mail address (stored lower-case)"""
        return await self.find_one_by_filters({"email": email.strip().lower()})
