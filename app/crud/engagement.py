"""
CRUD operations for Engagement and its trash tier.

move_to_trash() and restore_from_trash() each perform both halves of a
tier move (insert on one side, delete on the other) in one flush. They must
run inside a single transaction so a failure rolls both halves back.
"""

from datetime import date, datetime, timedelta, timezone
from typing import List, Optional
from sqlalchemy.orm import Session
from app.models.engagement import Engagement, EngagementTrash, ENGAGEMENT_FIELDS


def create(db: Session, data: dict) -> Engagement:
    """
    Create a new active Engagement.

    Args:
        db: Database session
        data: Validated Engagement fields including person_id

    Returns:
        Created Engagement instance with id
    """
    engagement = Engagement(**data, is_deleted=False)
    db.add(engagement)
    db.flush()
    return engagement


def get_by_id(db: Session, engagement_id: int, lock: bool = False) -> Optional[Engagement]:
    """Retrieve an active Engagement by ID, optionally row-locked."""
    query = db.query(Engagement).filter(Engagement.id == engagement_id)
    if lock:
        query = query.with_for_update()
    return query.first()


def get_by_person(db: Session, person_id: int) -> List[Engagement]:
    return db.query(Engagement).filter(
        Engagement.person_id == person_id
    ).order_by(Engagement.start_date.asc(), Engagement.id.asc()).all()


def update(db: Session, engagement: Engagement, data: dict) -> Engagement:
    """Apply an edit. person_id is never part of `data`."""
    for field, value in data.items():
        setattr(engagement, field, value)
    engagement.updated_at = datetime.now(timezone.utc)
    db.flush()
    return engagement


def list_long_tenure(db: Session, min_days: int = 365, today: Optional[date] = None) -> List[Engagement]:
    """
    Active Engagements that lasted (or have lasted so far) at least `min_days`.

    Ongoing engagements are measured up to `today`.
    """
    today = today or date.today()
    cutoff = today - timedelta(days=min_days)

    rows = db.query(Engagement).filter(
        Engagement.start_date <= cutoff
    ).order_by(Engagement.start_date.asc(), Engagement.id.asc()).all()

    return [e for e in rows if ((e.end_date or today) - e.start_date).days >= min_days]


def get_trash_entry(db: Session, engagement_id: int, lock: bool = False) -> Optional[EngagementTrash]:
    query = db.query(EngagementTrash).filter(EngagementTrash.id == engagement_id)
    if lock:
        query = query.with_for_update()
    return query.first()


def list_trash(db: Session, person_id: Optional[int] = None) -> List[EngagementTrash]:
    """List trash entries, optionally only those owned by one Person."""
    query = db.query(EngagementTrash)
    if person_id is not None:
        query = query.filter(EngagementTrash.person_id == person_id)
    return query.order_by(EngagementTrash.deleted_at.desc(), EngagementTrash.id.asc()).all()


def move_to_trash(db: Session, engagement: Engagement, deleted_by_account_id: Optional[int]) -> EngagementTrash:
    """
    Copy an Engagement into the trash table and remove it from the active table.

    The trash row reuses the engagement id, so a second concurrent move of
    the same record fails on the primary key instead of duplicating it.
    """
    entry = EngagementTrash(
        **{field: getattr(engagement, field) for field in ENGAGEMENT_FIELDS},
        updated_at=engagement.updated_at,
        deleted_at=datetime.now(timezone.utc),
        deleted_by_account_id=deleted_by_account_id,
    )
    db.add(entry)
    db.delete(engagement)
    db.flush()
    return entry


def restore_from_trash(db: Session, entry: EngagementTrash) -> Engagement:
    """Move a trash entry back into the active table, keeping its id and fields."""
    engagement = Engagement(
        **{field: getattr(entry, field) for field in ENGAGEMENT_FIELDS},
        is_deleted=False,
        updated_at=datetime.now(timezone.utc),
    )
    db.delete(entry)
    db.flush()
    db.add(engagement)
    db.flush()
    return engagement


def purge_trash_entry(db: Session, entry: EngagementTrash) -> None:
    """Physically remove a trash entry. Irreversible."""
    db.delete(entry)
    db.flush()
