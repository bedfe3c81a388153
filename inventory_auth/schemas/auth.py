"""
Inventory Auth API - Auth Schemas
Authentication and user profile models
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr

from inventory_auth.schemas.common import UserRole


class LoginRequest(BaseModel):
    """Login with username (handle) and password."""
    username: str
    password: str


class UserProfile(BaseModel):
    """Profile record stored in the users table."""
    id: str
    username: str
    email: str
    role: UserRole = UserRole.STAFF
    display_name: Optional[str] = None
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None


class LoginResponse(BaseModel):
    """Successful login response."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserProfile


class UpdateProfileRequest(BaseModel):
    """
    Profile form submission.

    Password fields are left blank to keep the current password.
    Email is a plain string so the form rules can report a missing value
    with their own message.
    """
    display_name: str = ""
    email: str = ""
    current_password: str = ""
    new_password: str = ""
    confirm_password: str = ""


class BootstrapRequest(BaseModel):
    """First administrator setup."""
    username: str
    email: EmailStr
    password: str
    display_name: str


class SessionStatus(BaseModel):
    """Login-page guard: where to go if a session already exists."""
    authenticated: bool
    redirect_to: Optional[str] = None
    user: Optional[UserProfile] = None
