"""
Inventory Auth API - Auth Routes
Authentication and self-service profile endpoints
"""

from fastapi import APIRouter, Depends
from typing import Optional

from inventory_auth.core.auth import get_current_user, get_optional_user, CurrentUser
from inventory_auth.core.config import settings
from inventory_auth.services.auth_service import auth_service
from inventory_auth.services.profile_service import profile_service
from inventory_auth.schemas import (
    LoginRequest,
    LoginResponse,
    UserProfile,
    UpdateProfileRequest,
    BootstrapRequest,
    SessionStatus,
    BaseResponse
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest):
    """
    Authenticate with username and password.

    Returns the session tokens and the user's profile.
    """
    return await auth_service.login_with_username(request.username, request.password)


@router.post("/logout", response_model=BaseResponse)
async def logout(user: CurrentUser = Depends(get_current_user)):
    """Sign out current user."""
    if not await auth_service.logout(user.access_token):
        return BaseResponse(success=False, message="Logout failed")
    return BaseResponse(message="Logged out successfully")


@router.get("/session", response_model=SessionStatus)
async def session_status(user: Optional[CurrentUser] = Depends(get_optional_user)):
    """
    Login-page guard.

    If a valid session already exists, tells the page where to go instead.
    """
    if user is None:
        return SessionStatus(authenticated=False)
    return SessionStatus(
        authenticated=True,
        redirect_to=settings.DASHBOARD_URL,
        user=user.profile()
    )


@router.get("/me", response_model=UserProfile)
async def get_current_profile(user: CurrentUser = Depends(get_current_user)):
    """Get current user's profile."""
    return user.profile()


@router.put("/me", response_model=UserProfile)
async def update_profile(
    request: UpdateProfileRequest,
    user: CurrentUser = Depends(get_current_user)
):
    """
    Update display name, email and/or password.

    Changing email or password requires the current password.
    """
    return await profile_service.update_profile(user, request)


@router.post("/bootstrap", response_model=UserProfile, status_code=201)
async def bootstrap_admin(request: BootstrapRequest):
    """Create the first administrator. Refused once any user exists."""
    return await auth_service.initialize_first_admin(
        request.username,
        request.email,
        request.password,
        request.display_name
    )
