"""
Pydantic schemas for uploaded file metadata.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel
from app.models.uploaded_file import FileCategory


class UploadedFileResponse(BaseModel):
    id: int
    account_id: int
    category: FileCategory
    file_name: str
    original_name: str
    file_size: int
    content_type: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
