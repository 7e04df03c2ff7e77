"""
Engagement (employment history) models.

An Engagement lives in exactly one of two tables at a time:

    engagements  --(soft delete)-->  engagement_trash  --(hard delete)-->  gone
         ^                                  |
         +-----------(restore)--------------+

Both tables share the same columns (EngagementColumns) and the same primary
key, so a record keeps its id across moves and can never be present in both.
"""

from sqlalchemy import Column, Integer, String, Boolean, Date, Text, ForeignKey, DateTime, func
from sqlalchemy.orm import declared_attr, relationship
from app.core.database import Base


# Fields copied verbatim between the active table and the trash table
ENGAGEMENT_FIELDS = (
    "id",
    "person_id",
    "employer",
    "position",
    "industry",
    "location",
    "salary_range",
    "start_date",
    "end_date",
    "status",
    "description",
    "created_at",
)


class EngagementColumns:
    """Columns shared by active and trashed engagements."""

    id = Column(Integer, primary_key=True, index=True)

    @declared_attr
    def person_id(cls):
        # Ownership is fixed at creation; never updated afterwards
        return Column(Integer, ForeignKey("persons.id"), nullable=False, index=True)

    employer = Column(String, nullable=False)
    position = Column(String, nullable=False)
    industry = Column(String, nullable=False)
    location = Column(String, nullable=False)
    salary_range = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    status = Column(String, nullable=False)
    description = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class Engagement(EngagementColumns, Base):
    """An active employment record owned by one Person."""
    __tablename__ = "engagements"
    # Ids of trashed rows must never be handed out again
    __table_args__ = {"sqlite_autoincrement": True}

    # Always False here (deleted rows live in engagement_trash, whose responses report True)
    is_deleted = Column(Boolean, default=False, nullable=False)

    person = relationship("Person", back_populates="engagements")

    def __repr__(self):
        return f"<Engagement(id={self.id}, person_id={self.person_id}, employer='{self.employer}')>"


class EngagementTrash(EngagementColumns, Base):
    """A soft-deleted Engagement, displaced from the active table."""
    __tablename__ = "engagement_trash"

    deleted_at = Column(DateTime(timezone=True), nullable=False)
    deleted_by_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)

    person = relationship("Person")

    def __repr__(self):
        return f"<EngagementTrash(id={self.id}, person_id={self.person_id}, deleted_at={self.deleted_at})>"
