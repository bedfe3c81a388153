"""
Inventory Auth API - Notification Schemas
Unseen-item counts per tracked collection
"""

from typing import Optional, List
from pydantic import BaseModel

from inventory_auth.schemas.auth import UserProfile


class NotificationCount(BaseModel):
    """Unseen items in one collection."""
    collection: str
    count: int
    badge: Optional[str] = None


class NotificationCountsResponse(BaseModel):
    data: List[NotificationCount]


class NewItemIdsResponse(BaseModel):
    collection: str
    ids: List[str]


class PageVisitResponse(BaseModel):
    """Everything a protected page needs on load."""
    page: Optional[str] = None
    user: UserProfile
    counts: List[NotificationCount]
