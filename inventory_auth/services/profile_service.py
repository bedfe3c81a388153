"""
Inventory Auth API - Profile Service
Self-service profile editing
"""

import anyio
from dataclasses import dataclass
from typing import Optional, Dict, Any
import logging

from inventory_auth.core.auth import CurrentUser
from inventory_auth.core.config import settings
from inventory_auth.core.supabase import supabase, SupabaseClient
from inventory_auth.core.exceptions import (
    NotFoundError,
    ValidationError,
    provider_error_message,
    PROFILE_ERROR_MESSAGES,
)
from inventory_auth.schemas.auth import UpdateProfileRequest

logger = logging.getLogger(__name__)


@dataclass
class ProfileChanges:
    display_name: str
    email: str
    email_changed: bool
    new_password: Optional[str]
    current_password: str

    @property
    def needs_reauthentication(self) -> bool:
        return self.email_changed or self.new_password is not None


def validate_profile_form(form: UpdateProfileRequest, current_email: str) -> ProfileChanges:
    """
    Apply the profile form rules. Pure: no backend access.

    Raises:
        ValidationError: on the first rule that fails
    """
    display_name = form.display_name.strip()
    email = form.email.strip()

    if not display_name:
        raise ValidationError("Display name is required", field="display_name")

    if not email:
        raise ValidationError("Email is required", field="email")

    email_changed = email.lower() != (current_email or "").lower()
    password_changed = len(form.new_password) > 0

    if (email_changed or password_changed) and not form.current_password:
        raise ValidationError(
            "Current password is required to change email or password",
            field="current_password"
        )

    if password_changed and form.new_password != form.confirm_password:
        raise ValidationError("New passwords do not match", field="confirm_password")

    if password_changed and len(form.new_password) < settings.MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"New password must be at least {settings.MIN_PASSWORD_LENGTH} characters",
            field="new_password"
        )

    return ProfileChanges(
        display_name=display_name,
        email=email,
        email_changed=email_changed,
        new_password=form.new_password if password_changed else None,
        current_password=form.current_password
    )


class ProfileService:
    """Service for the signed-in user's own profile."""

    def __init__(self, backend: SupabaseClient):
        self.backend = backend

    async def update_profile(self, user: CurrentUser, form: UpdateProfileRequest) -> Dict[str, Any]:
        """
        Save the profile form.

        Re-authenticates with the stored email and current password only
        when the email or password changes. Username is never touched.
        If the profile record cannot be written after the login credentials
        changed, the credentials are put back.

        Returns:
            The updated profile
        """
        changes = validate_profile_form(form, user.email)
        identity_changed = False

        try:
            if changes.needs_reauthentication:
                await anyio.to_thread.run_sync(
                    lambda: self.backend.authenticate(user.email, changes.current_password)
                )

                await anyio.to_thread.run_sync(
                    lambda: self.backend.update_identity(
                        user.id,
                        email=changes.email if changes.email_changed else None,
                        password=changes.new_password
                    )
                )
                identity_changed = True

            fields = {
                "display_name": changes.display_name,
                "email": changes.email.lower()
            }
            updated = await anyio.to_thread.run_sync(
                lambda: self.backend.update_document(settings.USERS_TABLE, user.id, fields)
            )

        except Exception as e:
            logger.error(f"Profile update error: {e}")
            if identity_changed:
                await self._restore_identity(user, changes)
            raise ValidationError(
                provider_error_message(e, PROFILE_ERROR_MESSAGES, "Failed to update profile")
            )

        if updated is None:
            if identity_changed:
                await self._restore_identity(user, changes)
            raise NotFoundError("User profile", user.id)

        logger.info(f"Profile updated for {user.id}")
        profile = user.profile().model_dump()
        profile.update(updated)
        return profile

    async def _restore_identity(self, user: CurrentUser, changes: ProfileChanges) -> None:
        """Undo an email/password change whose profile write did not land."""
        try:
            await anyio.to_thread.run_sync(
                lambda: self.backend.update_identity(
                    user.id,
                    email=user.email if changes.email_changed else None,
                    password=changes.current_password if changes.new_password is not None else None
                )
            )
        except Exception as e:
            logger.error(f"Could not restore credentials for {user.id}: {e}")


profile_service = ProfileService(supabase)
