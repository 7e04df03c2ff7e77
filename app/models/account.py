"""
Account model for authentication.

Each Account is a login identity with a closed role. An Account may be
linked to at most one Person (the alumni record it belongs to); the link
lives on Person.account_id.
"""

import enum
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class AccountRole(str, enum.Enum):
    """
    Closed set of roles understood by the authorization policy.

    - ADMIN: manages every record
    - ALUMNI: may delete/restore only the records it owns
    """
    ADMIN = "admin"
    ALUMNI = "alumni"


class Account(Base):
    """
    Authentication identity (username/email + bcrypt hash + role).

    Deactivated accounts cannot log in. Deactivation is a side effect of
    soft-deleting the linked Person, never a standalone operation.
    """
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)

    # Authentication credentials
    username = Column(String, unique=True, nullable=False, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)

    role = Column(Enum(AccountRole), default=AccountRole.ALUMNI, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    person = relationship("Person", back_populates="account", uselist=False)
    files = relationship("UploadedFile", back_populates="account", cascade="all, delete-orphan")

    @property
    def person_id(self):
        """ID of the linked Person, or None when the account is unlinked."""
        return self.person.id if self.person is not None else None

    @property
    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMIN

    def __repr__(self):
        return f"<Account(id={self.id}, username='{self.username}', role={self.role.value})>"
