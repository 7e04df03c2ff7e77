"""
Pydantic schemas for Engagement (employment history) requests/responses.
"""

from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator
from app.schemas.common import PageMeta


class EngagementFields(BaseModel):
    """Editable employment fields. end_date must not precede start_date."""
    employer: str = Field(..., min_length=1, max_length=200)
    position: str = Field(..., min_length=1, max_length=200)
    industry: str = Field(..., min_length=1, max_length=200)
    location: str = Field(..., min_length=1, max_length=200)
    salary_range: str = Field(..., min_length=1, max_length=100)
    start_date: date
    end_date: Optional[date] = None
    status: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date cannot be earlier than start_date")
        return self


class EngagementCreate(EngagementFields):
    """Request schema for creating an Engagement. The owner is fixed here."""
    person_id: int = Field(..., gt=0)


class EngagementUpdate(EngagementFields):
    """Request schema for editing an Engagement. Ownership cannot change."""


class EngagementResponse(BaseModel):
    id: int
    person_id: int
    employer: str
    position: str
    industry: str
    location: str
    salary_range: str
    start_date: date
    end_date: Optional[date]
    status: str
    description: str
    is_deleted: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TrashEntryResponse(BaseModel):
    """A soft-deleted Engagement as stored in the trash tier."""
    id: int
    person_id: int
    employer: str
    position: str
    industry: str
    location: str
    salary_range: str
    start_date: date
    end_date: Optional[date]
    status: str
    description: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: datetime
    deleted_by_account_id: Optional[int] = None
    is_deleted: bool = True

    class Config:
        from_attributes = True


class EngagementPage(BaseModel):
    """One page of Engagements plus pagination metadata."""
    data: List[EngagementResponse]
    meta: PageMeta
