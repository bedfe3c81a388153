"""
Inventory Auth API - User Schemas
User management models
"""

from typing import List
from pydantic import BaseModel

from inventory_auth.schemas.auth import UserProfile


class UserCreate(BaseModel):
    """Create user (admin only). Emptiness is checked by the service."""
    username: str = ""
    email: str = ""
    password: str = ""
    role: str = ""
    display_name: str = ""


class UserListResponse(BaseModel):
    data: List[UserProfile]
    total: int


class UsernameAvailability(BaseModel):
    username: str
    available: bool
