"""
Pytest config.

Settings are read from the environment at import time, so the Supabase
variables are pinned before anything under `inventory_auth` is imported.
Every service singleton gets its backend swapped for an in-memory fake that
records the calls made against it.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")

import pytest
from jose import jwt

from inventory_auth.core.auth import session_gate
from inventory_auth.services.auth_service import auth_service
from inventory_auth.services.notifications_service import notifications_service
from inventory_auth.services.profile_service import profile_service
from inventory_auth.services.users_service import users_service


class FakeAuthError(Exception):
    """Mimics supabase's AuthApiError: carries a GoTrue error code."""

    def __init__(self, message: str, code: str, status: int = 400):
        super().__init__(message)
        self.code = code
        self.status = status


def make_token(uid: str) -> str:
    return jwt.encode({"sub": uid}, "test-secret", algorithm="HS256")


def _as_datetime(value: Any) -> Any:
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return value


class FakeBackend:
    """In-memory stand-in for SupabaseClient."""

    AuthError = FakeAuthError

    def __init__(self) -> None:
        self.tables: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.passwords: Dict[str, str] = {}
        self.identities: Dict[str, str] = {}  # email -> uid
        self.tokens: Dict[str, str] = {}  # token -> uid
        self.calls: List[tuple] = []
        self.fail_collections: set[str] = set()
        self.auth_error: Optional[Exception] = None
        self._next_uid = 1

    # -- helpers for tests --

    def add_user(self, uid: str, username: str, email: str, password: str, role: str = "staff",
                 display_name: str = "User") -> str:
        self.passwords[email] = password
        self.identities[email] = uid
        self.tables.setdefault("users", {})[uid] = {
            "id": uid,
            "username": username,
            "email": email,
            "role": role,
            "display_name": display_name,
            "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
            "created_by": "system",
        }
        token = make_token(uid)
        self.tokens[token] = uid
        return token

    def add_items(self, collection: str, *created_at: datetime) -> None:
        table = self.tables.setdefault(collection, {})
        for ts in created_at:
            item_id = f"{collection}-{len(table) + 1}"
            table[item_id] = {"id": item_id, "created_at": ts}

    def reset_calls(self) -> None:
        self.calls.clear()

    def called(self, name: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == name]

    # -- identity --

    def authenticate(self, email: str, password: str):
        self.calls.append(("authenticate", email))
        if self.auth_error:
            raise self.auth_error
        if self.passwords.get(email) != password:
            raise FakeAuthError("Invalid login credentials", code="invalid_credentials")
        uid = self.identities[email]
        token = make_token(uid)
        self.tokens[token] = uid
        return SimpleNamespace(
            user=SimpleNamespace(id=uid, email=email),
            session=SimpleNamespace(access_token=token, refresh_token="refresh", expires_in=3600),
        )

    def get_user(self, access_token: str):
        self.calls.append(("get_user", access_token))
        uid = self.tokens.get(access_token)
        if uid is None:
            raise FakeAuthError("invalid JWT", code="bad_jwt", status=403)
        return SimpleNamespace(user=SimpleNamespace(id=uid))

    def sign_out(self, access_token: str) -> None:
        self.calls.append(("sign_out", access_token))
        self.tokens.pop(access_token, None)

    def create_identity(self, email: str, password: str, metadata=None) -> str:
        self.calls.append(("create_identity", email))
        if email in self.identities:
            raise FakeAuthError("already registered", code="email_exists", status=422)
        if len(password) < 6:
            raise FakeAuthError("weak", code="weak_password", status=422)
        uid = f"uid-{self._next_uid}"
        self._next_uid += 1
        self.identities[email] = uid
        self.passwords[email] = password
        return uid

    def update_identity(self, uid: str, email=None, password=None) -> None:
        self.calls.append(("update_identity", uid, email, password))
        old_email = next(e for e, u in self.identities.items() if u == uid)
        if password is not None:
            self.passwords[old_email] = password
        if email is not None:
            if email in self.identities:
                raise FakeAuthError("already registered", code="email_exists", status=422)
            self.identities[email] = self.identities.pop(old_email)
            self.passwords[email] = self.passwords.pop(old_email)

    def delete_identity(self, uid: str) -> None:
        self.calls.append(("delete_identity", uid))
        for email, u in list(self.identities.items()):
            if u == uid:
                del self.identities[email]

    # -- documents --

    def get_document(self, collection: str, doc_id: str):
        self.calls.append(("get_document", collection, doc_id))
        doc = self.tables.get(collection, {}).get(doc_id)
        return dict(doc) if doc else None

    def set_document(self, collection: str, doc_id: str, fields: Dict[str, Any], merge: bool = False) -> None:
        self.calls.append(("set_document", collection, doc_id, dict(fields), merge))
        if collection in self.fail_collections:
            raise RuntimeError(f"write to {collection} failed")
        table = self.tables.setdefault(collection, {})
        if doc_id in table:
            if not merge:
                raise RuntimeError(f"duplicate key {doc_id} in {collection}")
            table[doc_id].update(fields)
        else:
            table[doc_id] = {"id": doc_id, **fields}

    def update_document(self, collection: str, doc_id: str, fields: Dict[str, Any]):
        self.calls.append(("update_document", collection, doc_id, dict(fields)))
        if collection in self.fail_collections:
            raise RuntimeError(f"write to {collection} failed")
        row = self.tables.get(collection, {}).get(doc_id)
        if row is None:
            return None
        row.update(fields)
        return dict(row)

    def delete_document(self, collection: str, doc_id: str) -> None:
        self.calls.append(("delete_document", collection, doc_id))
        self.tables.get(collection, {}).pop(doc_id, None)

    def list_documents(self, collection: str, limit=None):
        self.calls.append(("list_documents", collection))
        rows = [dict(r) for r in self.tables.get(collection, {}).values()]
        return rows[:limit] if limit is not None else rows

    def query_where(self, collection: str, field: str, op: str, value: Any, columns: str = "*"):
        self.calls.append(("query_where", collection, field, op, value))
        if collection in self.fail_collections:
            raise RuntimeError(f"query on {collection} failed")
        rows = self.tables.get(collection, {}).values()
        if op == ">":
            threshold = _as_datetime(value)
            return [dict(r) for r in rows if r.get(field) is not None and _as_datetime(r[field]) > threshold]
        if op == "==":
            return [dict(r) for r in rows if r.get(field) == value]
        raise ValueError(op)

    def count_where(self, collection: str, field: str, op: str, value: Any) -> int:
        self.calls.append(("count_where", collection, field, op, value))
        if collection in self.fail_collections:
            raise RuntimeError(f"count on {collection} failed")
        threshold = _as_datetime(value)
        rows = self.tables.get(collection, {}).values()
        return sum(1 for r in rows if r.get(field) is not None and _as_datetime(r[field]) > threshold)

    def lookup_by_handle(self, handle: str):
        self.calls.append(("lookup_by_handle", handle))
        for row in self.tables.get("users", {}).values():
            if row["username"] == handle.lower():
                return dict(row)
        return None


@pytest.fixture
def backend(monkeypatch: pytest.MonkeyPatch) -> FakeBackend:
    fake = FakeBackend()
    for target in (session_gate, auth_service, users_service, profile_service, notifications_service):
        monkeypatch.setattr(target, "backend", fake)
    return fake


@pytest.fixture
def admin_token(backend: FakeBackend) -> str:
    return backend.add_user("admin-1", "boss", "boss@example.com", "adminpass", role="admin",
                            display_name="Boss")


@pytest.fixture
def staff_token(backend: FakeBackend) -> str:
    return backend.add_user("staff-1", "clerk", "clerk@example.com", "staffpass", role="staff",
                            display_name="Clerk")
