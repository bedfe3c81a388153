"""
Inventory Auth API - Notifications Routes
Unseen-item counts and page visits
"""

from fastapi import APIRouter, Depends

from inventory_auth.core.auth import get_current_user, CurrentUser
from inventory_auth.services.notifications_service import notifications_service
from inventory_auth.schemas import (
    NotificationCount,
    NotificationCountsResponse,
    NewItemIdsResponse,
    PageVisitResponse
)

router = APIRouter(prefix="/notifications", tags=["Notifications"])
pages_router = APIRouter(prefix="/pages", tags=["Pages"])


# ==================== Notifications ====================

@router.get("/counts", response_model=NotificationCountsResponse)
async def get_counts(user: CurrentUser = Depends(get_current_user)):
    """Unseen-item count for every tracked collection."""
    counts = await notifications_service.load_counts(user.id)
    return NotificationCountsResponse(data=counts)


@router.post("/{collection}/viewed", response_model=NotificationCount)
async def mark_viewed(
    collection: str,
    user: CurrentUser = Depends(get_current_user)
):
    """Reset the collection's count to zero for the current user."""
    return await notifications_service.mark_viewed(user.id, collection)


@router.get("/{collection}/new-ids", response_model=NewItemIdsResponse)
async def get_new_item_ids(
    collection: str,
    user: CurrentUser = Depends(get_current_user)
):
    """Ids of items added since the last visit, for highlighting."""
    ids = await notifications_service.new_item_ids(user.id, collection)
    return NewItemIdsResponse(collection=collection, ids=sorted(ids))


# ==================== Pages ====================

@pages_router.post("/{page}/visit", response_model=PageVisitResponse)
async def visit_page(
    page: str,
    user: CurrentUser = Depends(get_current_user)
):
    """
    Called when a protected page loads.

    Returns the user's profile and all counts, marking `page` as viewed
    when it is a tracked collection.
    """
    counts = await notifications_service.visit_page(user.id, page)
    return PageVisitResponse(page=page, user=user.profile(), counts=counts)
