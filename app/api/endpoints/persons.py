"""
API endpoints for alumni Person records.

Every route requires a bearer token. Lifecycle rules (ownership, soft
delete, account deactivation) live in app.services.lifecycle; the routes
only parse the request and serialize the result. Domain errors propagate
to the RegistryError handler in main.py.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from app.core.deps import get_actor, get_store
from app.crud.store import RecordStore
from app.schemas.common import MessageResponse, PageMeta
from app.schemas.person import (
    PersonCreate,
    PersonUpdate,
    PersonResponse,
    PersonPage,
    PersonCountResponse,
)
from app.services import lifecycle
from app.services.authorization import Actor
from app.services.query import PERSON_QUERY, PageRequest

router = APIRouter(prefix="/persons", tags=["Persons"])
logger = logging.getLogger(__name__)


@router.get("", response_model=PersonPage)
def list_persons(
    search: Optional[str] = Query(None, description="Case-insensitive substring across name, program, email, ..."),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    order: Optional[str] = Query(None, description="asc or desc"),
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    deleted_only: bool = Query(False, description="List only soft-deleted persons (admin)"),
    actor: Actor = Depends(get_actor),
    store: RecordStore = Depends(get_store)
):
    """
    Paged list of Persons.

    Unknown sort fields fall back to `name`; page and limit are clamped
    (limit at most 100).
    """
    request = PageRequest.normalize(PERSON_QUERY, search=search, sort_by=sort_by, order=order, page=page, limit=limit)
    items, total = lifecycle.list_persons(store, actor, request, deleted_only=deleted_only)
    return PersonPage(
        data=[PersonResponse.model_validate(p) for p in items],
        meta=PageMeta(**request.meta(total))
    )


@router.get("/without-engagements", response_model=PersonCountResponse)
def list_persons_without_engagements(
    actor: Actor = Depends(get_actor),
    store: RecordStore = Depends(get_store)
):
    """Active Persons that have no active Engagement on record."""
    persons = lifecycle.list_persons_without_engagements(store, actor)
    return PersonCountResponse(
        count=len(persons),
        data=[PersonResponse.model_validate(p) for p in persons]
    )


@router.get("/{person_id}", response_model=PersonResponse)
def get_person(
    person_id: int,
    actor: Actor = Depends(get_actor),
    store: RecordStore = Depends(get_store)
):
    return lifecycle.get_person(store, person_id)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=PersonResponse)
def create_person(
    request: PersonCreate,
    actor: Actor = Depends(get_actor),
    store: RecordStore = Depends(get_store)
):
    """Create a Person (admin only). `account_id` optionally links a login Account."""
    return lifecycle.create_person(store, actor, request)


@router.put("/{person_id}", response_model=PersonResponse)
def update_person(
    person_id: int,
    request: PersonUpdate,
    actor: Actor = Depends(get_actor),
    store: RecordStore = Depends(get_store)
):
    """Full edit of a Person (admin only)."""
    return lifecycle.update_person(store, actor, person_id, request)


@router.delete("/{person_id}", response_model=MessageResponse)
def soft_delete_person(
    person_id: int,
    actor: Actor = Depends(get_actor),
    store: RecordStore = Depends(get_store)
):
    """
    Soft-delete a Person and deactivate its Account.

    Admins may delete any Person; alumni only their own.
    """
    lifecycle.soft_delete_person(store, person_id, actor)
    return MessageResponse(message=f"Person {person_id} deleted and linked account deactivated")


@router.post("/{person_id}/restore", response_model=PersonResponse)
def restore_person(
    person_id: int,
    actor: Actor = Depends(get_actor),
    store: RecordStore = Depends(get_store)
):
    """Restore a soft-deleted Person and reactivate its Account."""
    lifecycle.restore_person(store, person_id, actor)
    return lifecycle.get_person(store, person_id)
