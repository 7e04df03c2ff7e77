"""
Pydantic schemas for Person API requests/responses.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, EmailStr, model_validator
from app.schemas.common import PageMeta


class PersonBase(BaseModel):
    """Fields an administrator supplies when creating or editing a Person."""
    institution_id: str = Field(..., min_length=1, max_length=50, description="Student number")
    name: str = Field(..., min_length=1, max_length=200)
    program: str = Field(..., min_length=1, max_length=200)
    cohort_year: Optional[int] = Field(None, ge=1900, le=2200, description="Year of enrollment")
    graduation_year: int = Field(..., ge=1900, le=2200)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    account_id: Optional[int] = Field(None, gt=0, description="Account to link (at most one Person per Account)")

    @model_validator(mode="after")
    def check_years(self):
        if self.cohort_year is not None and self.graduation_year < self.cohort_year:
            raise ValueError("graduation_year cannot be earlier than cohort_year")
        return self


class PersonCreate(PersonBase):
    """Request schema for creating a Person."""


class PersonUpdate(PersonBase):
    """Request schema for a full edit of a Person."""


class PersonResponse(BaseModel):
    id: int
    institution_id: str
    name: str
    program: str
    cohort_year: Optional[int]
    graduation_year: int
    email: str
    phone: Optional[str]
    address: Optional[str]
    account_id: Optional[int]
    is_deleted: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PersonPage(BaseModel):
    """One page of Persons plus pagination metadata."""
    data: List[PersonResponse]
    meta: PageMeta


class PersonCountResponse(BaseModel):
    count: int
    data: List[PersonResponse]
