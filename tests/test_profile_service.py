from __future__ import annotations

import pytest

from inventory_auth.core.auth import CurrentUser
from inventory_auth.core.exceptions import NotFoundError, ValidationError
from inventory_auth.schemas.auth import UpdateProfileRequest
from inventory_auth.services.profile_service import profile_service, validate_profile_form


@pytest.fixture
def clerk(backend, staff_token) -> CurrentUser:
    profile = backend.tables["users"]["staff-1"]
    return CurrentUser(**profile, access_token=staff_token)


def _form(**overrides) -> UpdateProfileRequest:
    data = {"display_name": "Clerk", "email": "clerk@example.com"}
    data.update(overrides)
    return UpdateProfileRequest(**data)


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"display_name": "   "}, "Display name is required"),
        ({"email": ""}, "Email is required"),
        ({"email": "new@example.com"}, "Current password is required to change email or password"),
        ({"new_password": "secret99"}, "Current password is required to change email or password"),
        (
            {"current_password": "staffpass", "new_password": "secret99", "confirm_password": "secret98"},
            "New passwords do not match",
        ),
        (
            {"current_password": "staffpass", "new_password": "abc", "confirm_password": "abc"},
            "New password must be at least 6 characters",
        ),
    ],
)
def test_form_rules(overrides, message) -> None:
    with pytest.raises(ValidationError) as exc:
        validate_profile_form(_form(**overrides), "clerk@example.com")
    assert exc.value.detail == message


def test_email_comparison_ignores_case() -> None:
    changes = validate_profile_form(_form(email="CLERK@Example.com"), "clerk@example.com")
    assert changes.email_changed is False
    assert changes.needs_reauthentication is False


@pytest.mark.asyncio
async def test_mismatched_confirmation_makes_no_backend_call(backend, clerk) -> None:
    backend.reset_calls()
    form = _form(current_password="staffpass", new_password="secret99", confirm_password="nope")

    with pytest.raises(ValidationError):
        await profile_service.update_profile(clerk, form)

    assert backend.calls == []


@pytest.mark.asyncio
async def test_display_name_only_skips_reauthentication(backend, clerk) -> None:
    backend.reset_calls()

    result = await profile_service.update_profile(clerk, _form(display_name="Counter Clerk"))

    assert backend.called("authenticate") == []
    assert backend.called("update_identity") == []
    assert backend.tables["users"]["staff-1"]["display_name"] == "Counter Clerk"
    assert backend.tables["users"]["staff-1"]["username"] == "clerk"
    assert result["display_name"] == "Counter Clerk"


@pytest.mark.asyncio
async def test_email_change_reauthenticates_with_stored_email(backend, clerk) -> None:
    backend.reset_calls()

    result = await profile_service.update_profile(
        clerk, _form(email="Clerk.New@Example.com", current_password="staffpass")
    )

    assert backend.called("authenticate") == [("authenticate", "clerk@example.com")]
    assert backend.called("update_identity") == [
        ("update_identity", "staff-1", "Clerk.New@Example.com", None)
    ]
    assert backend.tables["users"]["staff-1"]["email"] == "clerk.new@example.com"
    assert result["email"] == "clerk.new@example.com"


@pytest.mark.asyncio
async def test_password_change(backend, clerk) -> None:
    await profile_service.update_profile(
        clerk,
        _form(current_password="staffpass", new_password="brandnew", confirm_password="brandnew"),
    )

    assert backend.passwords["clerk@example.com"] == "brandnew"


@pytest.mark.asyncio
async def test_wrong_current_password(backend, clerk) -> None:
    form = _form(current_password="wrong", new_password="brandnew", confirm_password="brandnew")

    with pytest.raises(ValidationError) as exc:
        await profile_service.update_profile(clerk, form)

    assert exc.value.detail == "Current password is incorrect"
    assert backend.called("update_identity") == []
    assert backend.passwords["clerk@example.com"] == "staffpass"


@pytest.mark.asyncio
async def test_email_already_in_use(backend, clerk, admin_token) -> None:
    form = _form(email="boss@example.com", current_password="staffpass")

    with pytest.raises(ValidationError) as exc:
        await profile_service.update_profile(clerk, form)

    assert exc.value.detail == "Email is already in use by another account"
    assert backend.tables["users"]["staff-1"]["email"] == "clerk@example.com"


@pytest.mark.asyncio
async def test_profile_save_never_recreates_deleted_profile(backend, clerk) -> None:
    del backend.tables["users"]["staff-1"]

    with pytest.raises(NotFoundError):
        await profile_service.update_profile(clerk, _form(display_name="Ghost"))

    assert "staff-1" not in backend.tables["users"]
    assert backend.called("set_document") == []


@pytest.mark.asyncio
async def test_profile_save_uses_partial_update(backend, clerk) -> None:
    backend.reset_calls()

    await profile_service.update_profile(clerk, _form(display_name="Counter Clerk"))

    assert backend.called("update_document") == [
        ("update_document", "users", "staff-1", {"display_name": "Counter Clerk", "email": "clerk@example.com"})
    ]
    assert backend.called("set_document") == []


@pytest.mark.asyncio
async def test_failed_profile_write_restores_login_credentials(backend, clerk) -> None:
    backend.fail_collections.add("users")
    form = _form(
        email="clerk.new@example.com",
        current_password="staffpass",
        new_password="brandnew",
        confirm_password="brandnew",
    )

    with pytest.raises(ValidationError):
        await profile_service.update_profile(clerk, form)

    assert backend.identities.get("clerk@example.com") == "staff-1"
    assert "clerk.new@example.com" not in backend.identities
    assert backend.passwords["clerk@example.com"] == "staffpass"
    assert backend.tables["users"]["staff-1"]["email"] == "clerk@example.com"


@pytest.mark.asyncio
async def test_unknown_provider_error(backend, clerk) -> None:
    backend.fail_collections.add("users")

    with pytest.raises(ValidationError) as exc:
        await profile_service.update_profile(clerk, _form(display_name="X"))

    assert exc.value.detail == "Failed to update profile"
