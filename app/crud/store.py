"""
Record store abstraction used by the lifecycle orchestrator.

RecordStore is the single contract the orchestrator depends on; lifecycle
and authorization logic never touch a backend directly. SqlAlchemyRecordStore
is the relational implementation. A document-store adapter would subclass
RecordStore and implement the same methods.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    ConflictError,
    RegistryError,
    StoreError,
    StoreTimeoutError,
)
from app.crud import account as account_crud
from app.crud import engagement as engagement_crud
from app.crud import person as person_crud
from app.models.account import Account
from app.models.engagement import Engagement, EngagementTrash
from app.models.person import Person
from app.services.query import ENGAGEMENT_QUERY, PERSON_QUERY, PageRequest, run_query

logger = logging.getLogger(__name__)

TIMEOUT_MARKERS = (
    "statement timeout",
    "lock timeout",
    "canceling statement",
    "database is locked",
    "timeout expired",
)


def is_timeout(error: OperationalError) -> bool:
    """True if a driver error means the store call ran out of time."""
    message = str(getattr(error, "orig", error)).lower()
    return any(marker in message for marker in TIMEOUT_MARKERS)


class RecordStore:
    """Abstract base class for record store backends"""

    def transaction(self):
        """Context manager for an all-or-nothing unit of work. Raises typed RegistryErrors on failure."""
        raise NotImplementedError

    def reading(self):
        """Context manager for reads. Commits nothing; failures surface as typed RegistryErrors."""
        raise NotImplementedError

    # Accounts
    def get_account(self, account_id: int, lock: bool = False) -> Optional[Account]:
        raise NotImplementedError

    def set_account_active(self, account: Account, active: bool) -> Account:
        raise NotImplementedError

    # Persons
    def get_person(self, person_id: int, include_deleted: bool = False, lock: bool = False) -> Optional[Person]:
        raise NotImplementedError

    def get_person_by_account(self, account_id: int) -> Optional[Person]:
        raise NotImplementedError

    def get_person_by_institution_id(self, institution_id: str) -> Optional[Person]:
        raise NotImplementedError

    def add_person(self, data: dict) -> Person:
        raise NotImplementedError

    def update_person(self, person: Person, data: dict) -> Person:
        raise NotImplementedError

    def set_person_deleted(self, person: Person, deleted: bool) -> Person:
        raise NotImplementedError

    def page_persons(self, request: PageRequest, deleted_only: bool = False) -> Tuple[List[Person], int]:
        raise NotImplementedError

    def persons_without_engagements(self) -> List[Person]:
        raise NotImplementedError

    # Engagements
    def get_engagement(self, engagement_id: int, lock: bool = False) -> Optional[Engagement]:
        raise NotImplementedError

    def add_engagement(self, data: dict) -> Engagement:
        raise NotImplementedError

    def update_engagement(self, engagement: Engagement, data: dict) -> Engagement:
        raise NotImplementedError

    def page_engagements(self, request: PageRequest) -> Tuple[List[Engagement], int]:
        raise NotImplementedError

    def engagements_of_person(self, person_id: int) -> List[Engagement]:
        raise NotImplementedError

    def long_tenure_engagements(self, min_days: int) -> List[Engagement]:
        raise NotImplementedError

    # Trash tier
    def get_trash_entry(self, engagement_id: int, lock: bool = False) -> Optional[EngagementTrash]:
        raise NotImplementedError

    def list_trash(self, person_id: Optional[int] = None) -> List[EngagementTrash]:
        raise NotImplementedError

    def move_to_trash(self, engagement: Engagement, deleted_by_account_id: Optional[int]) -> EngagementTrash:
        raise NotImplementedError

    def restore_from_trash(self, entry: EngagementTrash) -> Engagement:
        raise NotImplementedError

    def purge_trash_entry(self, entry: EngagementTrash) -> None:
        raise NotImplementedError


class SqlAlchemyRecordStore(RecordStore):
    """Relational record store backed by a SQLAlchemy session"""

    def __init__(self, db: Session):
        self.db = db

    def _store_failure(self, e: Exception) -> RegistryError:
        """Roll back and translate a backend failure into a typed error."""
        self.db.rollback()
        if isinstance(e, IntegrityError):
            logger.warning(f"Transaction rolled back on integrity error: {e.orig}")
            return ConflictError("Record was modified concurrently or violates a uniqueness rule")
        if isinstance(e, OperationalError):
            if is_timeout(e):
                logger.error(f"Store call timed out: {e.orig}")
                return StoreTimeoutError("Store operation timed out")
            logger.error(f"Store operational error: {e}")
            return StoreError("Store operation failed")
        if isinstance(e, SQLAlchemyError):
            logger.error(f"Store error, transaction rolled back: {e}")
            return StoreError("Store operation failed")
        logger.error(f"Unexpected store failure, rolled back: {e}")
        return StoreError(f"Store operation failed: {e}")

    @contextmanager
    def transaction(self) -> Iterator[None]:
        try:
            yield
            self.db.commit()
        except RegistryError:
            self.db.rollback()
            raise
        except Exception as e:
            raise self._store_failure(e) from e

    @contextmanager
    def reading(self) -> Iterator[None]:
        try:
            yield
        except RegistryError:
            raise
        except Exception as e:
            raise self._store_failure(e) from e

    # Accounts
    def get_account(self, account_id, lock=False):
        return account_crud.get_by_id(self.db, account_id, lock=lock)

    def set_account_active(self, account, active):
        return account_crud.set_active(self.db, account, active)

    # Persons
    def get_person(self, person_id, include_deleted=False, lock=False):
        return person_crud.get_by_id(self.db, person_id, include_deleted=include_deleted, lock=lock)

    def get_person_by_account(self, account_id):
        return person_crud.get_by_account_id(self.db, account_id)

    def get_person_by_institution_id(self, institution_id):
        return person_crud.get_by_institution_id(self.db, institution_id)

    def add_person(self, data):
        return person_crud.create(self.db, data)

    def update_person(self, person, data):
        return person_crud.update(self.db, person, data)

    def set_person_deleted(self, person, deleted):
        return person_crud.mark_deleted(self.db, person, deleted)

    def page_persons(self, request, deleted_only=False):
        base = self.db.query(Person).filter(Person.is_deleted == deleted_only)
        return run_query(self.db, PERSON_QUERY, request, query=base)

    def persons_without_engagements(self):
        return person_crud.list_without_engagements(self.db)

    # Engagements
    def get_engagement(self, engagement_id, lock=False):
        return engagement_crud.get_by_id(self.db, engagement_id, lock=lock)

    def add_engagement(self, data):
        return engagement_crud.create(self.db, data)

    def update_engagement(self, engagement, data):
        return engagement_crud.update(self.db, engagement, data)

    def page_engagements(self, request):
        return run_query(self.db, ENGAGEMENT_QUERY, request)

    def engagements_of_person(self, person_id):
        return engagement_crud.get_by_person(self.db, person_id)

    def long_tenure_engagements(self, min_days):
        return engagement_crud.list_long_tenure(self.db, min_days=min_days)

    # Trash tier
    def get_trash_entry(self, engagement_id, lock=False):
        return engagement_crud.get_trash_entry(self.db, engagement_id, lock=lock)

    def list_trash(self, person_id=None):
        return engagement_crud.list_trash(self.db, person_id=person_id)

    def move_to_trash(self, engagement, deleted_by_account_id):
        return engagement_crud.move_to_trash(self.db, engagement, deleted_by_account_id)

    def restore_from_trash(self, entry):
        return engagement_crud.restore_from_trash(self.db, entry)

    def purge_trash_entry(self, entry):
        engagement_crud.purge_trash_entry(self.db, entry)
