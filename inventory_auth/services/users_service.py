"""
Inventory Auth API - Users Service
Admin-only user management
"""

import anyio
from datetime import datetime, timezone
from typing import Dict, Any, List
import logging

from inventory_auth.core.auth import CurrentUser
from inventory_auth.core.config import settings
from inventory_auth.core.supabase import supabase, SupabaseClient
from inventory_auth.core.exceptions import (
    BackendError,
    DuplicateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
    provider_error_message,
    CREATE_USER_ERROR_MESSAGES,
)
from inventory_auth.schemas.common import UserRole

logger = logging.getLogger(__name__)


class UsersService:
    """Service for managing users."""

    def __init__(self, backend: SupabaseClient):
        self.backend = backend

    @staticmethod
    def _ensure_admin(user: CurrentUser, action: str) -> None:
        if not user or not user.is_admin:
            raise PermissionDeniedError(f"Only admins can {action}")

    async def create_user(
        self,
        admin: CurrentUser,
        username: str,
        email: str,
        password: str,
        role: str,
        display_name: str
    ) -> Dict[str, Any]:
        """
        Create an auth identity and its profile record.

        The identity is created through the admin API, so the calling
        admin's session is left alone. If the profile write fails the
        identity is removed again.

        Returns:
            The stored profile
        """
        if not username or not email or not password or not role or not display_name:
            raise ValidationError("All fields are required")

        if role not in {r.value for r in UserRole}:
            raise ValidationError(f"Invalid role: {role}", field="role")

        self._ensure_admin(admin, "create new users")

        taken = await anyio.to_thread.run_sync(
            lambda: self.backend.lookup_by_handle(username.lower())
        )
        if taken:
            raise DuplicateError("Username", detail="Username is already taken")

        try:
            uid = await anyio.to_thread.run_sync(
                lambda: self.backend.create_identity(email, password, {"display_name": display_name})
            )
        except Exception as e:
            logger.error(f"Create user error: {e}")
            raise ValidationError(provider_error_message(e, CREATE_USER_ERROR_MESSAGES, str(e)))

        profile = {
            "username": username.lower(),
            "email": email.lower(),
            "role": role,
            "display_name": display_name,
            "created_at": datetime.now(timezone.utc),
            "created_by": admin.id
        }

        try:
            await anyio.to_thread.run_sync(
                lambda: self.backend.set_document(settings.USERS_TABLE, uid, profile)
            )
        except Exception as e:
            logger.error(f"Profile write failed for new user {uid}: {e}")
            try:
                await anyio.to_thread.run_sync(lambda: self.backend.delete_identity(uid))
            except Exception as cleanup_error:
                logger.error(f"Could not remove orphaned identity {uid}: {cleanup_error}")
            raise BackendError("set_document", "Failed to store user profile")

        logger.info(f"User {uid} ({profile['username']}) created by {admin.id}")
        return {"id": uid, **profile}

    async def list_users(self, admin: CurrentUser) -> List[Dict[str, Any]]:
        self._ensure_admin(admin, "view all users")
        return await anyio.to_thread.run_sync(
            lambda: self.backend.list_documents(settings.USERS_TABLE)
        )

    async def delete_user_data(self, admin: CurrentUser, user_id: str) -> bool:
        """
        Remove a user's profile record.

        The auth identity stays in Supabase; only the profile is deleted,
        which is enough to lock the user out of the session gate.
        """
        self._ensure_admin(admin, "delete users")

        if user_id == admin.id:
            raise ValidationError("You cannot delete your own account")

        existing = await anyio.to_thread.run_sync(
            lambda: self.backend.get_document(settings.USERS_TABLE, user_id)
        )
        if not existing:
            raise NotFoundError("User", user_id)

        await anyio.to_thread.run_sync(
            lambda: self.backend.delete_document(settings.USERS_TABLE, user_id)
        )
        logger.info(f"Profile {user_id} deleted by {admin.id}")
        return True


users_service = UsersService(supabase)
