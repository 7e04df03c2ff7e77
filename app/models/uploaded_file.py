"""
Metadata for files uploaded by or for an Account (profile photos, certificates).

The bytes live in the storage backend (local disk or S3); this row records
where, and who owns them.
"""

import enum
from sqlalchemy import Column, Integer, String, ForeignKey, Enum, DateTime, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class FileCategory(str, enum.Enum):
    PHOTO = "photo"
    CERTIFICATE = "certificate"


class UploadedFile(Base):
    __tablename__ = "uploaded_files"

    id = Column(Integer, primary_key=True, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)

    category = Column(Enum(FileCategory), nullable=False)
    file_name = Column(String, nullable=False)  # Stored (UUID-based) name
    original_name = Column(String, nullable=False)
    file_path = Column(String, nullable=False)  # S3 URI or local path
    file_size = Column(Integer, nullable=False)
    content_type = Column(String, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    account = relationship("Account", back_populates="files")

    def __repr__(self):
        return f"<UploadedFile(id={self.id}, account_id={self.account_id}, category={self.category.value})>"
