"""
API endpoints for Engagement (employment history) records and their trash tier.

- DELETE /engagements/{id}: move to trash (owner or admin)
- POST /engagements/{id}/restore: move back from trash (owner or admin)
- DELETE /engagements/trash/{id}: permanent delete, trash only (owner or admin)
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status

from app.core.deps import get_actor, get_store
from app.crud.store import RecordStore
from app.schemas.common import MessageResponse, PageMeta
from app.schemas.engagement import (
    EngagementCreate,
    EngagementUpdate,
    EngagementResponse,
    EngagementPage,
    TrashEntryResponse,
)
from app.services import lifecycle
from app.services.authorization import Actor
from app.services.query import ENGAGEMENT_QUERY, PageRequest

router = APIRouter(prefix="/engagements", tags=["Engagements"])
logger = logging.getLogger(__name__)


@router.get("", response_model=EngagementPage)
def list_engagements(
    search: Optional[str] = Query(None, description="Case-insensitive substring across employer, position, industry, location"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    order: Optional[str] = Query(None, description="asc or desc"),
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    actor: Actor = Depends(get_actor),
    store: RecordStore = Depends(get_store)
):
    request = PageRequest.normalize(ENGAGEMENT_QUERY, search=search, sort_by=sort_by, order=order, page=page, limit=limit)
    items, total = lifecycle.list_engagements(store, actor, request)
    return EngagementPage(
        data=[EngagementResponse.model_validate(e) for e in items],
        meta=PageMeta(**request.meta(total))
    )


@router.get("/long-tenure", response_model=List[EngagementResponse])
def list_long_tenure(
    min_days: int = Query(365, ge=0, description="Minimum duration in days"),
    actor: Actor = Depends(get_actor),
    store: RecordStore = Depends(get_store)
):
    """Engagements lasting at least a year (or `min_days`). Ongoing ones count up to today."""
    return lifecycle.list_long_tenure(store, actor, min_days=min_days)


@router.get("/trash", response_model=List[TrashEntryResponse])
def list_trash(
    actor: Actor = Depends(get_actor),
    store: RecordStore = Depends(get_store)
):
    """Admins see every trash entry; alumni only their own."""
    return lifecycle.list_trash(store, actor)


@router.get("/person/{person_id}", response_model=List[EngagementResponse])
def list_person_engagements(
    person_id: int,
    actor: Actor = Depends(get_actor),
    store: RecordStore = Depends(get_store)
):
    return lifecycle.list_person_engagements(store, actor, person_id)


@router.get("/{engagement_id}", response_model=EngagementResponse)
def get_engagement(
    engagement_id: int,
    actor: Actor = Depends(get_actor),
    store: RecordStore = Depends(get_store)
):
    return lifecycle.get_engagement(store, engagement_id)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=EngagementResponse)
def create_engagement(
    request: EngagementCreate,
    actor: Actor = Depends(get_actor),
    store: RecordStore = Depends(get_store)
):
    """Create an Engagement for an existing Person (admin only)."""
    return lifecycle.create_engagement(store, actor, request)


@router.put("/{engagement_id}", response_model=EngagementResponse)
def update_engagement(
    engagement_id: int,
    request: EngagementUpdate,
    actor: Actor = Depends(get_actor),
    store: RecordStore = Depends(get_store)
):
    return lifecycle.update_engagement(store, actor, engagement_id, request)


@router.delete("/{engagement_id}", response_model=TrashEntryResponse)
def soft_delete_engagement(
    engagement_id: int,
    actor: Actor = Depends(get_actor),
    store: RecordStore = Depends(get_store)
):
    """Move an Engagement into the trash. Returns the trash entry."""
    return lifecycle.soft_delete_engagement(store, engagement_id, actor)


@router.post("/{engagement_id}/restore", response_model=EngagementResponse)
def restore_engagement(
    engagement_id: int,
    actor: Actor = Depends(get_actor),
    store: RecordStore = Depends(get_store)
):
    return lifecycle.restore_engagement(store, engagement_id, actor)


@router.delete("/trash/{engagement_id}", response_model=MessageResponse)
def hard_delete_engagement(
    engagement_id: int,
    actor: Actor = Depends(get_actor),
    store: RecordStore = Depends(get_store)
):
    """
    Permanently delete a trashed Engagement.

    Active Engagements are rejected with 409; move them to trash first.
    """
    lifecycle.hard_delete_engagement(store, engagement_id, actor)
    return MessageResponse(message=f"Engagement {engagement_id} permanently deleted")
