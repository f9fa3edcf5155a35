"""Domain models shared across features"""
from .user import AuthUser, UserProfile, UserProfileCreate, UserProfileUpdate

__all__ = [
    'AuthUser',
    'UserProfile', 'UserProfileCreate', 'UserProfileUpdate',
]
