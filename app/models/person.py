"""
Person database model.

An alumni record: who graduated from which program and when, plus contact
details. Persons are soft-deleted only; the row is never physically removed.
"""

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class Person(Base):
    """
    A managed alumni record.

    The optional link to an Account is unique: exactly 0 or 1 Person
    references a given Account. While is_deleted is set, the linked
    Account must be inactive.
    """
    __tablename__ = "persons"

    id = Column(Integer, primary_key=True, index=True)

    # Optional link to the login identity of this alumnus
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True, unique=True, index=True)

    # Identity
    institution_id = Column(String, unique=True, nullable=False, index=True)  # Student number
    name = Column(String, nullable=False, index=True)
    program = Column(String, nullable=False)
    cohort_year = Column(Integer, nullable=True)
    graduation_year = Column(Integer, nullable=False)

    # Contact
    email = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)

    # Soft delete
    is_deleted = Column(Boolean, default=False, nullable=False, index=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    account = relationship("Account", back_populates="person")
    engagements = relationship("Engagement", back_populates="person")

    def __repr__(self):
        return f"<Person(id={self.id}, institution_id='{self.institution_id}', deleted={self.is_deleted})>"
