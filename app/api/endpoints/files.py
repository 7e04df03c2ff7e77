"""
API endpoints for alumni photo and certificate uploads.

Alumni upload for their own account only; administrators must name the
target account with the `account_id` form field. Files are stored under
a UUID-based name through the storage backend (local or S3).
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, UploadFile, File, Form, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.deps import get_actor, get_file_storage
from app.core.exceptions import ForbiddenError, NotFoundError, RecordValidationError, StoreError
from app.core.storage import StorageBackend, StorageError, unique_name
from app.crud import account as account_crud
from app.crud import uploaded_file as file_crud
from app.models.uploaded_file import FileCategory, UploadedFile
from app.schemas.common import MessageResponse
from app.schemas.uploaded_file import UploadedFileResponse
from app.services.authorization import Actor, Operation, require

router = APIRouter(prefix="/files", tags=["Files"])
logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {
    FileCategory.PHOTO: {"image/jpeg", "image/jpg", "image/png"},
    FileCategory.CERTIFICATE: {"application/pdf"},
}


def _max_bytes(category: FileCategory) -> int:
    if category == FileCategory.PHOTO:
        return settings.PHOTO_MAX_SIZE_MB * 1024 * 1024
    return settings.CERTIFICATE_MAX_SIZE_MB * 1024 * 1024


def _resolve_owner(db: Session, actor: Actor, account_id: Optional[int]) -> int:
    """
    Account the upload belongs to.

    Alumni may only target themselves; admins must say whose file it is.
    """
    if not actor.is_admin:
        if account_id is not None and account_id != actor.account_id:
            raise ForbiddenError("Alumni can only upload files for their own account")
        return actor.account_id

    if account_id is None:
        raise RecordValidationError("account_id is required when an administrator uploads a file")
    if account_crud.get_by_id(db, account_id) is None:
        raise NotFoundError(f"Account {account_id} not found")
    return account_id


def _get_visible_file(db: Session, actor: Actor, file_id: int) -> UploadedFile:
    uploaded = file_crud.get_by_id(db, file_id)
    if uploaded is None:
        raise NotFoundError(f"File {file_id} not found")
    if not actor.is_admin and uploaded.account_id != actor.account_id:
        raise ForbiddenError("Not allowed to access this file")
    return uploaded


async def _save_upload(
    category: FileCategory,
    file: UploadFile,
    account_id: Optional[int],
    actor: Actor,
    db: Session,
    storage: StorageBackend,
) -> UploadedFile:
    """
    Validate, store and record one uploaded file.

    Flow:
    1. Resolve the owning account
    2. Validate content type and size
    3. Save under a UUID-based name (prevents path traversal and collisions)
    4. Insert the metadata row; if that fails the stored file is removed
    """
    owner_id = _resolve_owner(db, actor, account_id)

    content_type = (file.content_type or "").lower()
    if content_type not in ALLOWED_CONTENT_TYPES[category]:
        allowed = ", ".join(sorted(ALLOWED_CONTENT_TYPES[category]))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported file type {file.content_type}. Allowed: {allowed}"
        )

    content = await file.read()
    limit = _max_bytes(category)
    if len(content) > limit:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File too large ({len(content)} bytes). Maximum is {limit} bytes"
        )
    await file.seek(0)

    stored_name = unique_name(file.filename or category.value)
    try:
        file_path = storage.upload_file(file.file, stored_name, content_type)
    except (StorageError, OSError) as e:
        logger.error(f"Failed to save {category.value} upload: {e}")
        raise HTTPException(status_code=500, detail="Failed to save file")

    try:
        uploaded = file_crud.create(
            db,
            account_id=owner_id,
            category=category,
            file_name=stored_name,
            original_name=file.filename or stored_name,
            file_path=file_path,
            file_size=len(content),
            content_type=content_type,
        )
    except SQLAlchemyError as e:
        db.rollback()
        storage.delete_file(file_path)
        logger.error(f"Failed to record {category.value} upload, stored file removed: {e}")
        raise StoreError("Failed to save file metadata") from e

    logger.info(f"Account {actor.account_id} uploaded {category.value} {uploaded.id} for account {owner_id}")
    return uploaded


@router.post("/photo", status_code=status.HTTP_201_CREATED, response_model=UploadedFileResponse)
async def upload_photo(
    file: UploadFile = File(...),
    account_id: Optional[int] = Form(None),
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_file_storage)
):
    """Upload a profile photo (JPEG or PNG, at most PHOTO_MAX_SIZE_MB)."""
    return await _save_upload(FileCategory.PHOTO, file, account_id, actor, db, storage)


@router.post("/certificate", status_code=status.HTTP_201_CREATED, response_model=UploadedFileResponse)
async def upload_certificate(
    file: UploadFile = File(...),
    account_id: Optional[int] = Form(None),
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_file_storage)
):
    """Upload a certificate (PDF, at most CERTIFICATE_MAX_SIZE_MB)."""
    return await _save_upload(FileCategory.CERTIFICATE, file, account_id, actor, db, storage)


@router.get("", response_model=List[UploadedFileResponse])
def list_files(
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db)
):
    """Admins see every file; alumni only their own."""
    if actor.is_admin:
        return file_crud.get_multi(db)
    return file_crud.get_multi(db, account_id=actor.account_id)


@router.get("/{file_id}", response_model=UploadedFileResponse)
def get_file(
    file_id: int,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db)
):
    return _get_visible_file(db, actor, file_id)


@router.get("/{file_id}/download")
def download_file(
    file_id: int,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_file_storage)
):
    """Stream the stored file back under its original name (owner or admin)."""
    uploaded = _get_visible_file(db, actor, file_id)
    try:
        file_data = storage.download_file(uploaded.file_path)
    except StorageError as e:
        logger.error(f"Failed to read file {file_id} from storage: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve file from storage")

    return StreamingResponse(
        file_data,
        media_type=uploaded.content_type,
        headers={"Content-Disposition": f'attachment; filename="{uploaded.original_name}"'}
    )


@router.delete("/{file_id}", response_model=MessageResponse)
def delete_file(
    file_id: int,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_file_storage)
):
    """Delete a file from storage together with its metadata (owner or admin)."""
    uploaded = file_crud.get_by_id(db, file_id)
    if uploaded is None:
        raise NotFoundError(f"File {file_id} not found")
    require(actor, Operation.HARD_DELETE, target_owner_id=uploaded.account_id,
            actor_owner_id=actor.account_id, resource="file")

    file_path = uploaded.file_path
    try:
        file_crud.delete(db, uploaded)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to delete metadata of file {file_id}, stored object kept: {e}")
        raise StoreError("Failed to delete file metadata") from e

    if not storage.delete_file(file_path):
        logger.warning(f"Stored object for file {file_id} not removed (missing or backend error): {file_path}")

    logger.info(f"File {file_id} deleted by account {actor.account_id}")
    return MessageResponse(message=f"File {file_id} deleted")
