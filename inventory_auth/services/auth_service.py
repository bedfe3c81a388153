"""
Inventory Auth API - Auth Service
Authentication operations using Supabase Auth
"""

import anyio
from datetime import datetime, timezone
from typing import Dict, Any
import logging

from inventory_auth.core.config import settings
from inventory_auth.core.supabase import supabase, SupabaseClient
from inventory_auth.core.exceptions import (
    AuthenticationError,
    BackendError,
    RateLimitedError,
    ValidationError,
    is_rate_limited,
    provider_error_message,
    CREATE_USER_ERROR_MESSAGES,
)
from inventory_auth.schemas.common import UserRole

logger = logging.getLogger(__name__)

INVALID_LOGIN = "Invalid username or password"


class AuthService:
    """Service for authentication operations."""

    def __init__(self, backend: SupabaseClient):
        self.backend = backend

    async def login_with_username(self, username: str, password: str) -> Dict[str, Any]:
        """
        Resolve the handle to its email, then sign in with email + password.

        Unknown handles and wrong passwords produce the same message.
        """
        if not username or not password:
            raise AuthenticationError(INVALID_LOGIN)

        try:
            profile = await anyio.to_thread.run_sync(
                lambda: self.backend.lookup_by_handle(username.lower())
            )
            if not profile:
                raise AuthenticationError(INVALID_LOGIN)

            response = await anyio.to_thread.run_sync(
                lambda: self.backend.authenticate(profile["email"], password)
            )

            if not getattr(response, "user", None) or not getattr(response, "session", None):
                raise AuthenticationError(INVALID_LOGIN)

            logger.info(f"User authenticated successfully: {response.user.id}")

            return {
                "access_token": response.session.access_token,
                "refresh_token": response.session.refresh_token,
                "token_type": "bearer",
                "expires_in": response.session.expires_in,
                "user": {**profile, "id": str(response.user.id)}
            }

        except AuthenticationError:
            raise
        except Exception as e:
            logger.error(f"Login error: {e}")
            if is_rate_limited(e):
                raise RateLimitedError()
            raise AuthenticationError(INVALID_LOGIN)

    async def logout(self, access_token: str) -> bool:
        """Sign out user."""
        try:
            await anyio.to_thread.run_sync(lambda: self.backend.sign_out(access_token))
            return True
        except Exception as e:
            logger.error(f"Logout error: {e}")
            return False

    async def is_username_taken(self, username: str) -> bool:
        profile = await anyio.to_thread.run_sync(
            lambda: self.backend.lookup_by_handle(username.lower())
        )
        return profile is not None

    async def initialize_first_admin(
        self,
        username: str,
        email: str,
        password: str,
        display_name: str
    ) -> Dict[str, Any]:
        """
        Create the initial administrator.

        Only allowed while the users table is empty.
        """
        existing = await anyio.to_thread.run_sync(
            lambda: self.backend.list_documents(settings.USERS_TABLE, limit=1)
        )
        if existing:
            raise ValidationError("Users already exist. Cannot initialize first admin.")

        try:
            uid = await anyio.to_thread.run_sync(
                lambda: self.backend.create_identity(email, password, {"display_name": display_name})
            )
        except Exception as e:
            logger.error(f"Initialize admin error: {e}")
            raise ValidationError(provider_error_message(e, CREATE_USER_ERROR_MESSAGES, str(e)))

        profile = {
            "username": username.lower(),
            "email": email.lower(),
            "role": UserRole.ADMIN.value,
            "display_name": display_name,
            "created_at": datetime.now(timezone.utc),
            "created_by": "system"
        }

        try:
            await anyio.to_thread.run_sync(
                lambda: self.backend.set_document(settings.USERS_TABLE, uid, profile)
            )
        except Exception as e:
            logger.error(f"Initialize admin profile write failed: {e}")
            raise BackendError("set_document", "Failed to store admin profile")

        logger.info(f"First admin created: {uid}")
        return {"id": uid, **profile}


auth_service = AuthService(supabase)
