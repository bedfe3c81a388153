"""
Inventory Auth API - Users Routes
Admin user management
"""

from fastapi import APIRouter, Depends, Query

from inventory_auth.core.auth import get_current_user, require_admin, CurrentUser
from inventory_auth.services.auth_service import auth_service
from inventory_auth.services.users_service import users_service
from inventory_auth.schemas import (
    UserCreate,
    UserProfile,
    UserListResponse,
    UsernameAvailability,
    BaseResponse
)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=UserListResponse)
async def list_users(user: CurrentUser = Depends(require_admin)):
    """List every user profile (Admin only)."""
    users = await users_service.list_users(user)
    return UserListResponse(data=users, total=len(users))


@router.post("", response_model=UserProfile, status_code=201)
async def create_user(
    request: UserCreate,
    user: CurrentUser = Depends(require_admin)
):
    """
    Create a new user (Admin only).

    Creates:
    - Supabase Auth user
    - Profile record
    """
    return await users_service.create_user(
        user,
        request.username,
        request.email,
        request.password,
        request.role,
        request.display_name
    )


@router.get("/username-available", response_model=UsernameAvailability)
async def username_available(
    username: str = Query(..., min_length=1),
    user: CurrentUser = Depends(get_current_user)
):
    taken = await auth_service.is_username_taken(username)
    return UsernameAvailability(username=username.lower(), available=not taken)


@router.delete("/{user_id}", response_model=BaseResponse)
async def delete_user(
    user_id: str,
    user: CurrentUser = Depends(require_admin)
):
    """
    Delete a user's profile (Admin only).

    The Supabase Auth account is not removed.
    """
    await users_service.delete_user_data(user, user_id)
    return BaseResponse(message="User deleted")
