"""
Lifecycle orchestrator for Person and Engagement records.

Every mutating operation follows the same shape inside one store transaction:

    1. load (and row-lock) the target        -> NotFoundError if absent
    2. run the authorization policy          -> ForbiddenError on deny
    3. check the state machine               -> InvalidStateError
    4. apply every write of the transition   -> rolled back together on failure

Engagement tiers:

    Active --soft delete--> Trashed --restore--> Active
                            Trashed --hard delete--> Gone

There is no direct Active -> Gone transition: hard delete only accepts
records that are already in the trash.

Person soft delete deactivates the linked Account in the same transaction,
and restore reactivates it.
"""

import logging
from typing import Any, List, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError

from app.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    RecordValidationError,
)
from app.crud.store import RecordStore
from app.models.engagement import Engagement, EngagementTrash
from app.models.person import Person
from app.schemas.engagement import EngagementCreate, EngagementUpdate
from app.schemas.person import PersonCreate, PersonUpdate
from app.services.authorization import Actor, Operation, require
from app.services.query import PageRequest

logger = logging.getLogger(__name__)


def _require_id(value: Any, name: str) -> int:
    """Revalidate an identifier coming from outside the core."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise RecordValidationError(f"{name} must be a positive integer")
    return value


def _validated(schema: Type[BaseModel], data: Any) -> dict:
    """Re-run schema validation on incoming data and return plain fields."""
    payload = data.model_dump() if isinstance(data, BaseModel) else data
    try:
        return schema.model_validate(payload).model_dump()
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        detail = f"{location}: {first['msg']}" if location else first["msg"]
        raise RecordValidationError(f"Invalid input - {detail}") from e


# ========================== PERSONS ==========================

def _check_account_link(store: RecordStore, account_id: Optional[int], person_id: Optional[int] = None) -> None:
    """An Account exists and is referenced by at most one Person."""
    if account_id is None:
        return
    if store.get_account(account_id) is None:
        raise NotFoundError(f"Account {account_id} not found")
    linked = store.get_person_by_account(account_id)
    if linked is not None and linked.id != person_id:
        raise ConflictError(f"Account {account_id} is already linked to person {linked.id}")


def create_person(store: RecordStore, actor: Actor, data: Any) -> Person:
    """Create a Person (admin only)."""
    require(actor, Operation.CREATE, resource="person")
    fields = _validated(PersonCreate, data)

    with store.transaction():
        if store.get_person_by_institution_id(fields["institution_id"]) is not None:
            raise ConflictError(f"Person with institution_id {fields['institution_id']} already exists")
        _check_account_link(store, fields.get("account_id"))
        person = store.add_person(fields)

    logger.info(f"Account {actor.account_id} created person {person.id}")
    return person


def get_person(store: RecordStore, person_id: Any) -> Person:
    person_id = _require_id(person_id, "person_id")
    with store.reading():
        person = store.get_person(person_id)
    if person is None:
        raise NotFoundError(f"Person {person_id} not found")
    return person


def update_person(store: RecordStore, actor: Actor, person_id: Any, data: Any) -> Person:
    """Full edit of a Person (admin only). Soft-deleted Persons cannot be edited."""
    require(actor, Operation.UPDATE, resource="person")
    person_id = _require_id(person_id, "person_id")
    fields = _validated(PersonUpdate, data)

    with store.transaction():
        person = store.get_person(person_id, lock=True)
        if person is None:
            raise NotFoundError(f"Person {person_id} not found")

        duplicate = store.get_person_by_institution_id(fields["institution_id"])
        if duplicate is not None and duplicate.id != person.id:
            raise ConflictError(f"Person with institution_id {fields['institution_id']} already exists")
        _check_account_link(store, fields.get("account_id"), person_id=person.id)

        person = store.update_person(person, fields)

    logger.info(f"Account {actor.account_id} updated person {person_id}")
    return person


def soft_delete_person(store: RecordStore, person_id: Any, actor: Actor) -> None:
    """
    Soft-delete a Person and deactivate its Account atomically.

    Raises:
        NotFoundError: Person does not exist
        ForbiddenError: actor is neither admin nor the Person's owner
        InvalidStateError: Person already deleted, or has no linked Account
        StoreError: a write failed; nothing was applied
    """
    person_id = _require_id(person_id, "person_id")

    with store.transaction():
        person = store.get_person(person_id, include_deleted=True, lock=True)
        if person is None:
            raise NotFoundError(f"Person {person_id} not found")

        require(actor, Operation.SOFT_DELETE, target_owner_id=person.id, resource="person")

        if person.is_deleted:
            raise InvalidStateError(f"Person {person_id} is already deleted")
        if person.account_id is None:
            raise InvalidStateError(f"Person {person_id} has no linked account to deactivate")

        account = store.get_account(person.account_id, lock=True)
        if account is None:
            raise InvalidStateError(f"Linked account {person.account_id} of person {person_id} is missing")

        store.set_person_deleted(person, True)
        store.set_account_active(account, False)

    logger.info(f"Person {person_id} soft deleted by account {actor.account_id}; account {account.id} deactivated")


def restore_person(store: RecordStore, person_id: Any, actor: Actor) -> None:
    """Clear a Person's deleted flag and reactivate its Account atomically."""
    person_id = _require_id(person_id, "person_id")

    with store.transaction():
        person = store.get_person(person_id, include_deleted=True, lock=True)
        if person is None or not person.is_deleted:
            raise NotFoundError(f"Deleted person {person_id} not found")

        require(actor, Operation.RESTORE, target_owner_id=person.id, resource="person")

        account = None
        if person.account_id is not None:
            account = store.get_account(person.account_id, lock=True)

        store.set_person_deleted(person, False)
        if account is not None:
            store.set_account_active(account, True)

    logger.info(f"Person {person_id} restored by account {actor.account_id}")


def list_persons(
    store: RecordStore,
    actor: Actor,
    request: PageRequest,
    deleted_only: bool = False,
) -> Tuple[List[Person], int]:
    """Paged Persons. Soft-deleted Persons are only listed, on request, to admins."""
    require(actor, Operation.READ, resource="person")
    if deleted_only and not actor.is_admin:
        raise ForbiddenError("Only administrators can list deleted persons")
    with store.reading():
        return store.page_persons(request, deleted_only=deleted_only)


def list_persons_without_engagements(store: RecordStore, actor: Actor) -> List[Person]:
    require(actor, Operation.READ, resource="person")
    with store.reading():
        return store.persons_without_engagements()


# ========================== ENGAGEMENTS ==========================

def create_engagement(store: RecordStore, actor: Actor, data: Any) -> Engagement:
    """Create an Engagement owned by an existing, non-deleted Person (admin only)."""
    require(actor, Operation.CREATE, resource="engagement")
    fields = _validated(EngagementCreate, data)

    with store.transaction():
        if store.get_person(fields["person_id"]) is None:
            raise NotFoundError(f"Person {fields['person_id']} not found")
        engagement = store.add_engagement(fields)

    logger.info(f"Account {actor.account_id} created engagement {engagement.id} for person {engagement.person_id}")
    return engagement


def get_engagement(store: RecordStore, engagement_id: Any) -> Engagement:
    engagement_id = _require_id(engagement_id, "engagement_id")
    with store.reading():
        engagement = store.get_engagement(engagement_id)
    if engagement is None:
        raise NotFoundError(f"Engagement {engagement_id} not found")
    return engagement


def update_engagement(store: RecordStore, actor: Actor, engagement_id: Any, data: Any) -> Engagement:
    """Edit an active Engagement (admin only). The owning Person cannot change."""
    require(actor, Operation.UPDATE, resource="engagement")
    engagement_id = _require_id(engagement_id, "engagement_id")
    fields = _validated(EngagementUpdate, data)

    with store.transaction():
        engagement = store.get_engagement(engagement_id, lock=True)
        if engagement is None:
            raise NotFoundError(f"Engagement {engagement_id} not found")
        engagement = store.update_engagement(engagement, fields)

    logger.info(f"Account {actor.account_id} updated engagement {engagement_id}")
    return engagement


def soft_delete_engagement(store: RecordStore, engagement_id: Any, actor: Actor) -> EngagementTrash:
    """
    Move an active Engagement into the trash tier.

    Raises:
        NotFoundError: no active Engagement with this id
        ForbiddenError: actor is neither admin nor the owner
        ConflictError: a concurrent transition moved the record first
    """
    engagement_id = _require_id(engagement_id, "engagement_id")

    with store.transaction():
        engagement = store.get_engagement(engagement_id, lock=True)
        if engagement is None:
            trashed = store.get_trash_entry(engagement_id)
            if trashed is not None:
                require(actor, Operation.SOFT_DELETE, target_owner_id=trashed.person_id, resource="engagement")
            raise NotFoundError(f"Engagement {engagement_id} not found")

        require(actor, Operation.SOFT_DELETE, target_owner_id=engagement.person_id, resource="engagement")
        entry = store.move_to_trash(engagement, deleted_by_account_id=actor.account_id)

    logger.info(f"Engagement {engagement_id} moved to trash by account {actor.account_id}")
    return entry


def restore_engagement(store: RecordStore, engagement_id: Any, actor: Actor) -> Engagement:
    """
    Move a trashed Engagement back into the active table.

    All fields except updated_at come back exactly as they were before deletion.
    """
    engagement_id = _require_id(engagement_id, "engagement_id")

    with store.transaction():
        entry = store.get_trash_entry(engagement_id, lock=True)
        if entry is None:
            active = store.get_engagement(engagement_id)
            if active is not None:
                require(actor, Operation.RESTORE, target_owner_id=active.person_id, resource="engagement")
            raise NotFoundError(f"Engagement {engagement_id} not found in trash")

        require(actor, Operation.RESTORE, target_owner_id=entry.person_id, resource="engagement")
        engagement = store.restore_from_trash(entry)

    logger.info(f"Engagement {engagement_id} restored from trash by account {actor.account_id}")
    return engagement


def hard_delete_engagement(store: RecordStore, engagement_id: Any, actor: Actor) -> None:
    """
    Permanently remove a trashed Engagement. Irreversible.

    Raises:
        NotFoundError: the id is in neither tier
        ForbiddenError: actor is neither admin nor the owner
        InvalidStateError: the Engagement is still active (trash it first)
    """
    engagement_id = _require_id(engagement_id, "engagement_id")

    with store.transaction():
        entry = store.get_trash_entry(engagement_id, lock=True)
        if entry is None:
            active = store.get_engagement(engagement_id)
            if active is None:
                raise NotFoundError(f"Engagement {engagement_id} not found")
            require(actor, Operation.HARD_DELETE, target_owner_id=active.person_id, resource="engagement")
            raise InvalidStateError(f"Engagement {engagement_id} must be moved to trash before permanent deletion")

        require(actor, Operation.HARD_DELETE, target_owner_id=entry.person_id, resource="engagement")
        store.purge_trash_entry(entry)

    logger.warning(f"Engagement {engagement_id} permanently deleted by account {actor.account_id}")


def list_trash(store: RecordStore, actor: Actor) -> List[EngagementTrash]:
    """
    Trash entries visible to the actor.

    Admins see every entry; other actors only entries of their own Person.
    """
    require(actor, Operation.READ, resource="trash")
    if actor.person_id is None and not actor.is_admin:
        return []
    with store.reading():
        if actor.is_admin:
            return store.list_trash()
        return store.list_trash(person_id=actor.person_id)


def list_engagements(store: RecordStore, actor: Actor, request: PageRequest) -> Tuple[List[Engagement], int]:
    require(actor, Operation.READ, resource="engagement")
    with store.reading():
        return store.page_engagements(request)


def list_person_engagements(store: RecordStore, actor: Actor, person_id: Any) -> List[Engagement]:
    """Active Engagements of one Person (admin only)."""
    if not actor.is_admin:
        raise ForbiddenError("Only administrators can list engagements by person")
    person_id = _require_id(person_id, "person_id")
    with store.reading():
        if store.get_person(person_id, include_deleted=True) is None:
            raise NotFoundError(f"Person {person_id} not found")
        return store.engagements_of_person(person_id)


def list_long_tenure(store: RecordStore, actor: Actor, min_days: int = 365) -> List[Engagement]:
    """Active Engagements that lasted at least `min_days` (ongoing ones measured to today)."""
    require(actor, Operation.READ, resource="engagement")
    if isinstance(min_days, bool) or not isinstance(min_days, int) or min_days < 0:
        raise RecordValidationError("min_days must be a non-negative integer")
    with store.reading():
        return store.long_tenure_engagements(min_days)
