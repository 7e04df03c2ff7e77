"""
CRUD operations for uploaded file metadata.
"""

from typing import List, Optional
from sqlalchemy.orm import Session
from app.models.uploaded_file import UploadedFile


def create(db: Session, **fields) -> UploadedFile:
    uploaded = UploadedFile(**fields)
    db.add(uploaded)
    db.commit()
    db.refresh(uploaded)
    return uploaded


def get_by_id(db: Session, file_id: int) -> Optional[UploadedFile]:
    return db.query(UploadedFile).filter(UploadedFile.id == file_id).first()


def get_multi(db: Session, account_id: Optional[int] = None) -> List[UploadedFile]:
    """All files, or only those owned by one account."""
    query = db.query(UploadedFile)
    if account_id is not None:
        query = query.filter(UploadedFile.account_id == account_id)
    return query.order_by(UploadedFile.created_at.desc(), UploadedFile.id.desc()).all()


def delete(db: Session, uploaded: UploadedFile) -> None:
    db.delete(uploaded)
    db.commit()
