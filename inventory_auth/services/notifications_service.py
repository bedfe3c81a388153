"""
Inventory Auth API - Notifications Service
Unseen-item counts per tracked collection

Each user has one view-state record (PAGE_VIEWS_TABLE, keyed by uid) holding a
last-viewed timestamp per tracked collection. An item is unseen when its
creation timestamp is strictly after that watermark. A collection the user has
never opened counts as zero, not as every item in it.
"""

import anyio
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List, Set
import logging

from inventory_auth.core.config import settings
from inventory_auth.core.exceptions import ValidationError
from inventory_auth.core.supabase import supabase, SupabaseClient
from inventory_auth.schemas.notifications import NotificationCount

logger = logging.getLogger(__name__)


def badge_label(count: int, cap: int = None) -> Optional[str]:
    """Sidebar badge text: hidden at zero, capped as "99+"."""
    cap = settings.BADGE_CAP if cap is None else cap
    if count <= 0:
        return None
    if count > cap:
        return f"{cap}+"
    return str(count)


class NotificationsService:
    """Service for unseen-item notification counts."""

    def __init__(self, backend: SupabaseClient, clock=None):
        self.backend = backend
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def _check_collection(self, collection: str) -> None:
        if collection not in settings.TRACKED_COLLECTIONS:
            raise ValidationError(f"'{collection}' is not a tracked collection", field="collection")

    async def get_last_views(self, user_id: str) -> Dict[str, Any]:
        """The user's view-state record, or {} if it was never created."""
        record = await anyio.to_thread.run_sync(
            lambda: self.backend.get_document(settings.PAGE_VIEWS_TABLE, user_id)
        )
        if not record:
            return {}
        return {k: v for k, v in record.items() if k != "id"}

    async def _new_items(self, collection: str, last_viewed: Any) -> List[Dict[str, Any]]:
        return await anyio.to_thread.run_sync(
            lambda: self.backend.query_where(
                collection,
                settings.CREATED_AT_FIELD,
                ">",
                last_viewed,
                columns="id"
            )
        )

    async def count(self, collection: str, last_viewed: Any) -> int:
        """Number of items in `collection` created strictly after `last_viewed`."""
        if not last_viewed:
            return 0
        return await anyio.to_thread.run_sync(
            lambda: self.backend.count_where(
                collection,
                settings.CREATED_AT_FIELD,
                ">",
                last_viewed
            )
        )

    async def _safe_count(self, collection: str, last_viewed: Any) -> int:
        try:
            return await self.count(collection, last_viewed)
        except Exception as e:
            logger.error(f"Error getting count for {collection}: {e}")
            return 0

    async def load_counts(self, user_id: str) -> List[NotificationCount]:
        """
        Count unseen items for every tracked collection.

        The per-collection queries run concurrently; one failing degrades
        to zero for that collection only.
        """
        try:
            last_views = await self.get_last_views(user_id)
        except Exception as e:
            logger.error(f"Error loading page views for {user_id}: {e}")
            last_views = {}

        counts: Dict[str, int] = {}

        async def _run(collection: str) -> None:
            counts[collection] = await self._safe_count(collection, last_views.get(collection))

        async with anyio.create_task_group() as tg:
            for collection in settings.TRACKED_COLLECTIONS:
                tg.start_soon(_run, collection)

        return [
            NotificationCount(collection=c, count=counts[c], badge=badge_label(counts[c]))
            for c in settings.TRACKED_COLLECTIONS
        ]

    async def mark_viewed(self, user_id: str, collection: str) -> NotificationCount:
        """
        Set the collection's watermark to now, leaving the other
        collections' timestamps untouched. Returns the (now zero) count.
        """
        self._check_collection(collection)
        now = self.clock()
        await anyio.to_thread.run_sync(
            lambda: self.backend.set_document(
                settings.PAGE_VIEWS_TABLE,
                user_id,
                {collection: now},
                merge=True
            )
        )
        logger.debug(f"Marked {collection} viewed for {user_id} at {now.isoformat()}")
        return NotificationCount(collection=collection, count=0, badge=None)

    async def new_item_ids(self, user_id: str, collection: str) -> Set[str]:
        """Ids of items created since the user last opened `collection`."""
        self._check_collection(collection)
        try:
            last_views = await self.get_last_views(user_id)
            last_viewed = last_views.get(collection)
            if not last_viewed:
                return set()
            items = await self._new_items(collection, last_viewed)
            return {str(item["id"]) for item in items}
        except Exception as e:
            logger.error(f"Error getting new item IDs for {collection}: {e}")
            return set()

    async def visit_page(self, user_id: str, page: Optional[str] = None) -> List[NotificationCount]:
        """
        Load every count, then mark `page` viewed if it is tracked.

        A failed mark-viewed is logged and leaves the loaded counts as they are.
        """
        counts = await self.load_counts(user_id)
        if not page or page not in settings.TRACKED_COLLECTIONS:
            return counts

        try:
            marked = await self.mark_viewed(user_id, page)
        except Exception as e:
            logger.error(f"Error marking page as viewed: {e}")
            return counts

        return [marked if c.collection == page else c for c in counts]


notifications_service = NotificationsService(supabase)
