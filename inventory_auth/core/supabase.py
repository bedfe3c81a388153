from datetime import datetime
from typing import Optional, Dict, Any, List
from supabase import create_client, Client, ClientOptions
from functools import lru_cache
import logging

from inventory_auth.core.config import settings

logger = logging.getLogger(__name__)

_OPERATORS = {
    ">": "gt",
    ">=": "gte",
    "<": "lt",
    "<=": "lte",
    "==": "eq",
}


def _serialize(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class SupabaseClient:
    """
    Thin wrapper over supabase-py exposing the identity and document
    operations the rest of the app needs. Every method is synchronous;
    services call them through anyio.to_thread.run_sync.
    """

    def __init__(self):
        self._anon_client: Optional[Client] = None
        self._service_client: Optional[Client] = None

    @property
    def anon(self) -> Client:
        if self._anon_client is None:
            self._anon_client = create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
        return self._anon_client

    @property
    def service(self) -> Client:
        if self._service_client is None:
            self._service_client = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
        return self._service_client

    # ==================== Identity ====================

    def authenticate(self, email: str, password: str):
        """
        Sign in with email + password and return the AuthResponse.

        A throwaway client is used so the session never lands on the
        shared anon client.
        """
        client = create_client(
            settings.SUPABASE_URL,
            settings.SUPABASE_ANON_KEY,
            options=ClientOptions(persist_session=False, auto_refresh_token=False)
        )
        return client.auth.sign_in_with_password({"email": email, "password": password})

    def get_user(self, access_token: str):
        """Resolve an access token to the identity provider's user."""
        return self.anon.auth.get_user(access_token)

    def sign_out(self, access_token: str) -> None:
        try:
            self.service.auth.admin.sign_out(access_token)
        except Exception as e:
            logger.error(f"Sign out error: {e}")
            raise

    def create_identity(self, email: str, password: str, metadata: Dict[str, Any] | None = None) -> str:
        """Create an auth user through the admin API and return its uid."""
        response = self.service.auth.admin.create_user({
            "email": email,
            "password": password,
            "email_confirm": True,
            "user_metadata": metadata or {}
        })
        if not response or not getattr(response, "user", None):
            raise RuntimeError("Identity provider returned no user")
        return str(response.user.id)

    def update_identity(self, uid: str, email: Optional[str] = None, password: Optional[str] = None) -> None:
        attributes: Dict[str, Any] = {}
        if email is not None:
            attributes["email"] = email
            attributes["email_confirm"] = True
        if password is not None:
            attributes["password"] = password
        if not attributes:
            return
        self.service.auth.admin.update_user_by_id(uid, attributes)

    def delete_identity(self, uid: str) -> None:
        self.service.auth.admin.delete_user(uid)

    # ==================== Documents ====================

    def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        res = self.service.table(collection).select("*").eq("id", doc_id).limit(1).execute()
        rows = getattr(res, "data", None) or []
        return rows[0] if rows else None

    def set_document(
        self,
        collection: str,
        doc_id: str,
        fields: Dict[str, Any],
        merge: bool = False
    ) -> None:
        """
        Write a document keyed by id.

        With merge=True the row is created if missing, and otherwise only
        the given columns are written (PostgREST merge-duplicates upsert).
        Without merge the row is inserted and must not exist yet.
        """
        payload = {k: _serialize(v) for k, v in fields.items()}
        payload["id"] = doc_id
        table = self.service.table(collection)
        if merge:
            table.upsert(payload, on_conflict="id").execute()
            return
        table.insert(payload).execute()

    def update_document(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Change columns of an existing row. Never creates one.

        Returns the updated row, or None if no row has this id.
        """
        payload = {k: _serialize(v) for k, v in fields.items()}
        res = self.service.table(collection).update(payload).eq("id", doc_id).execute()
        rows = getattr(res, "data", None) or []
        return rows[0] if rows else None

    def delete_document(self, collection: str, doc_id: str) -> None:
        self.service.table(collection).delete().eq("id", doc_id).execute()

    def list_documents(self, collection: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        query = self.service.table(collection).select("*")
        if limit is not None:
            query = query.limit(limit)
        res = query.execute()
        return getattr(res, "data", None) or []

    def query_where(
        self,
        collection: str,
        field: str,
        op: str,
        value: Any,
        columns: str = "*"
    ) -> List[Dict[str, Any]]:
        """
        Return every row of `collection` where `field <op> value`.

        Pages through the result ordered by id, since a single PostgREST
        response stops at max-rows.
        """
        method = self._operator(op)
        page_size = settings.QUERY_PAGE_SIZE
        rows: List[Dict[str, Any]] = []
        offset = 0
        while True:
            query = self.service.table(collection).select(columns)
            query = getattr(query, method)(field, _serialize(value))
            res = query.order("id").range(offset, offset + page_size - 1).execute()
            page = getattr(res, "data", None) or []
            rows.extend(page)
            if len(page) < page_size:
                return rows
            offset += page_size

    def count_where(self, collection: str, field: str, op: str, value: Any) -> int:
        """Exact number of rows where `field <op> value`, without fetching them."""
        method = self._operator(op)
        query = self.service.table(collection).select("id", count="exact", head=True)
        res = getattr(query, method)(field, _serialize(value)).execute()
        return getattr(res, "count", None) or 0

    @staticmethod
    def _operator(op: str) -> str:
        method = _OPERATORS.get(op)
        if method is None:
            raise ValueError(f"Unsupported operator: {op}")
        return method

    def lookup_by_handle(self, handle: str) -> Optional[Dict[str, Any]]:
        rows = self.query_where(settings.USERS_TABLE, "username", "==", handle.lower())
        return rows[0] if rows else None


@lru_cache()
def get_supabase() -> SupabaseClient:
    return SupabaseClient()

supabase = get_supabase()
