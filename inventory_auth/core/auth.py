"""
Inventory Auth API - Session Gate
Resolves the bearer token to a profile record and guards protected routes
"""

import anyio
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
import logging

from inventory_auth.core.config import settings
from inventory_auth.core.exceptions import AuthenticationError, PermissionDeniedError
from inventory_auth.core.supabase import supabase, SupabaseClient
from inventory_auth.schemas.auth import UserProfile
from inventory_auth.schemas.common import UserRole

logger = logging.getLogger(__name__)

# Security scheme
security = HTTPBearer(auto_error=False)


class CurrentUser(UserProfile):
    """Profile of the signed-in user plus the raw session token."""
    access_token: str

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def profile(self) -> UserProfile:
        return UserProfile(**self.model_dump(exclude={"access_token"}))


class SessionGate:
    """
    Resolves a session token to a CurrentUser.

    One identity-provider round trip, then one profile lookup. Any failure
    along the way is reported as unauthenticated.
    """

    def __init__(self, backend: SupabaseClient):
        self.backend = backend

    async def resolve(self, credentials: Optional[HTTPAuthorizationCredentials]) -> CurrentUser:
        if not credentials:
            raise AuthenticationError("Missing authentication token", redirect_to=settings.LOGIN_URL)

        token = credentials.credentials

        try:
            claims = jwt.get_unverified_claims(token)
        except JWTError as e:
            logger.warning(f"Rejected malformed token: {e}")
            raise AuthenticationError("Invalid token format", redirect_to=settings.LOGIN_URL)

        try:
            user_response = await anyio.to_thread.run_sync(lambda: self.backend.get_user(token))

            if not user_response or not getattr(user_response, "user", None):
                raise AuthenticationError("Invalid or expired token", redirect_to=settings.LOGIN_URL)

            uid = str(user_response.user.id)

            profile = await anyio.to_thread.run_sync(
                lambda: self.backend.get_document(settings.USERS_TABLE, uid)
            )

            if not profile:
                logger.warning(f"No profile record for authenticated user {uid}")
                raise AuthenticationError("User profile not found", redirect_to=settings.LOGIN_URL)

            return CurrentUser(**{**profile, "id": uid, "access_token": token})

        except AuthenticationError:
            raise
        except Exception as e:
            logger.warning(f"Session rejected for subject {claims.get('sub')}: {e}")
            raise AuthenticationError("Authentication failed", redirect_to=settings.LOGIN_URL)

    async def probe(self, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[CurrentUser]:
        """Like resolve, but returns None instead of raising."""
        try:
            return await self.resolve(credentials)
        except AuthenticationError:
            return None


session_gate = SessionGate(supabase)


# ==================== FastAPI Dependencies ====================

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> CurrentUser:
    """
    Dependency to get current authenticated user.

    Usage:
        @router.get("/items")
        async def list_items(user: CurrentUser = Depends(get_current_user)):
            ...
    """
    return await session_gate.resolve(credentials)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[CurrentUser]:
    """Dependency for public endpoints that behave differently when signed in."""
    return await session_gate.probe(credentials)


async def require_admin(
    user: CurrentUser = Depends(get_current_user)
) -> CurrentUser:
    """Dependency that requires the admin role."""
    if not user.is_admin:
        raise PermissionDeniedError("Admin access required", redirect_to=settings.DASHBOARD_URL)
    return user
