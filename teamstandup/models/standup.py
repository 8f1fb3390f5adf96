"""Standup data models for teamstandup."""

import datetime as dt
from enum import Enum
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator

from teamstandup.models.constants import (
    DEFAULT_BLOCKERS,
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    STANDUP_DATE_WINDOW_DAYS,
    STANDUP_TEXT_MAX_LENGTH,
)
from teamstandup.models.markdown_check import is_valid_markdown


class StandupStatus(str, Enum):
    """Standup lifecycle status."""
    DRAFT = "draft"
    SUBMITTED = "submitted"


def utc_today() -> dt.date:
    """Current calendar day in UTC (the day key for standups)."""
    return dt.datetime.utcnow().date()


def _check_markdown(value: Optional[str], field_name: str) -> Optional[str]:
    if value is None:
        return None
    if not is_valid_markdown(value):
        raise ValueError(f"{field_name} contains invalid markdown syntax")
    return value


class StandupOwner(BaseModel):
    """Minimal owner summary joined onto standups in list views."""

    id: str
    name: str
    email: str
    profile_image: Optional[str] = None


class Standup(BaseModel):
    """Canonical Standup model."""

    id: str = Field(..., description="Unique standup identifier (UUID v4)")
    user_id: str = Field(..., description="User ID who owns this standup")
    date: dt.date = Field(..., description="Calendar day (UTC) this standup is for")
    yesterday: str = Field(..., description="What was done yesterday")
    today: str = Field(..., description="What is planned today")
    blockers: Optional[str] = Field(DEFAULT_BLOCKERS, description="Anything blocking progress")
    status: StandupStatus = Field(StandupStatus.DRAFT, description="Draft or submitted")
    created_at: dt.datetime = Field(..., description="Standup creation timestamp")
    updated_at: dt.datetime = Field(..., description="Standup last update timestamp")
    user: Optional[StandupOwner] = Field(None, description="Owner summary (list views only)")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class StandupCreate(BaseModel):
    """Fields accepted when creating a standup."""

    yesterday: str = Field(..., min_length=1, max_length=STANDUP_TEXT_MAX_LENGTH)
    today: str = Field(..., min_length=1, max_length=STANDUP_TEXT_MAX_LENGTH)
    blockers: Optional[str] = Field(None, min_length=1, max_length=STANDUP_TEXT_MAX_LENGTH)
    status: Optional[StandupStatus] = None
    date: Optional[dt.date] = Field(None, description="Defaults to today (UTC)")

    @field_validator("yesterday", "today", "blockers")
    @classmethod
    def _validate_markdown(cls, v, info):
        return _check_markdown(v, info.field_name.capitalize())

    @field_validator("date")
    @classmethod
    def _validate_date_window(cls, v):
        if v is None:
            return None
        today = utc_today()
        if v > today or v < today - dt.timedelta(days=STANDUP_DATE_WINDOW_DAYS):
            raise ValueError(
                f"Date must be within the last {STANDUP_DATE_WINDOW_DAYS} days and not in the future"
            )
        return v


class StandupUpdate(BaseModel):
    """Partial update of a standup; omitted fields are left untouched."""

    yesterday: Optional[str] = Field(None, min_length=1, max_length=STANDUP_TEXT_MAX_LENGTH)
    today: Optional[str] = Field(None, min_length=1, max_length=STANDUP_TEXT_MAX_LENGTH)
    blockers: Optional[str] = Field(None, min_length=1, max_length=STANDUP_TEXT_MAX_LENGTH)
    status: Optional[StandupStatus] = None

    @field_validator("yesterday", "today", "blockers")
    @classmethod
    def _validate_markdown(cls, v, info):
        return _check_markdown(v, info.field_name.capitalize())

    def changes(self) -> dict:
        """Only the fields the caller actually supplied (None values dropped)."""
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


SortField = Literal["date", "createdAt", "updatedAt"]
SortOrder = Literal["asc", "desc"]


class StandupQuery(BaseModel):
    """Filters for listing standups (team view / history view)."""

    user_id: Optional[str] = None
    date: Optional[dt.date] = None
    date_from: Optional[dt.date] = None
    date_to: Optional[dt.date] = None
    status: Optional[StandupStatus] = None
    page: int = Field(DEFAULT_PAGE, ge=1)
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    sort: SortField = "date"
    order: SortOrder = "desc"

    def has_scope(self) -> bool:
        """True if the caller narrowed by user or by any date filter."""
        return any(v is not None for v in (self.user_id, self.date, self.date_from, self.date_to))


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_more: bool


class StandupPage(BaseModel):
    data: List[Standup]
    pagination: Pagination
