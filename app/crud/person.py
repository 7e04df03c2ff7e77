"""
CRUD operations for Person model.

Implements the Repository pattern for alumni records. Functions flush but
never commit; the caller (RecordStore.transaction) owns the transaction.
"""

from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy.orm import Session
from app.models.person import Person


def create(db: Session, data: dict) -> Person:
    """
    Create a new Person.

    Args:
        db: Database session
        data: Validated Person fields (see PersonCreate)

    Returns:
        Created Person instance with id
    """
    person = Person(**data, is_deleted=False)
    db.add(person)
    db.flush()
    return person


def get_by_id(
    db: Session,
    person_id: int,
    include_deleted: bool = False,
    lock: bool = False,
) -> Optional[Person]:
    """
    Retrieve a Person by ID.

    Args:
        db: Database session
        person_id: Person ID to retrieve
        include_deleted: Also return soft-deleted Persons
        lock: Take a row lock (SELECT ... FOR UPDATE) for a state transition

    Returns:
        Person instance if found, None otherwise
    """
    query = db.query(Person).filter(Person.id == person_id)
    if not include_deleted:
        query = query.filter(Person.is_deleted == False)
    if lock:
        query = query.with_for_update()
    return query.first()


def get_by_account_id(db: Session, account_id: int) -> Optional[Person]:
    return db.query(Person).filter(Person.account_id == account_id).first()


def get_by_institution_id(db: Session, institution_id: str) -> Optional[Person]:
    return db.query(Person).filter(Person.institution_id == institution_id).first()


def update(db: Session, person: Person, data: dict) -> Person:
    """Apply a full edit to a Person."""
    for field, value in data.items():
        setattr(person, field, value)
    person.updated_at = datetime.now(timezone.utc)
    db.flush()
    return person


def mark_deleted(db: Session, person: Person, deleted: bool) -> Person:
    """Set or clear the soft-delete flag."""
    person.is_deleted = deleted
    person.deleted_at = datetime.now(timezone.utc) if deleted else None
    person.updated_at = datetime.now(timezone.utc)
    db.flush()
    return person


def list_without_engagements(db: Session) -> List[Person]:
    """
    Active Persons with no active Engagement.

    Trashed engagements do not count: they live in a separate table.
    """
    return db.query(Person).filter(
        Person.is_deleted == False,
        ~Person.engagements.any()
    ).order_by(Person.name.asc(), Person.id.asc()).all()
