"""
Database models package.
"""

from app.models.account import Account, AccountRole
from app.models.person import Person
from app.models.engagement import Engagement, EngagementTrash, ENGAGEMENT_FIELDS
from app.models.uploaded_file import UploadedFile, FileCategory

__all__ = [
    "Account",
    "AccountRole",
    "Person",
    "Engagement",
    "EngagementTrash",
    "ENGAGEMENT_FIELDS",
    "UploadedFile",
    "FileCategory",
]
