"""Response DTOs for the HTTP API.

Wire keys are camelCase; every successful body is ``{status, message, data}``.
"""

import datetime as dt
from typing import Any, List, Optional
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for wire models: camelCase on the wire, snake_case in Python."""

    class Config:
        """Pydantic configuration."""
        alias_generator = to_camel
        populate_by_name = True


class UserResponse(ApiModel):
    id: str
    email: str
    name: str
    timezone: str
    profile_image: Optional[str] = None
    status: str
    created_at: dt.datetime
    updated_at: dt.datetime


class StandupOwnerResponse(ApiModel):
    id: str
    name: str
    email: str
    profile_image: Optional[str] = None


class StandupResponse(ApiModel):
    id: str
    user_id: str
    date: dt.date
    yesterday: str
    today: str
    blockers: Optional[str] = None
    status: str
    created_at: dt.datetime
    updated_at: dt.datetime
    user: Optional[StandupOwnerResponse] = None


class PaginationResponse(ApiModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_more: bool


class StandupPageResponse(ApiModel):
    data: List[StandupResponse]
    pagination: PaginationResponse


class Envelope(ApiModel):
    status: int
    message: str


class UserEnvelope(Envelope):
    data: UserResponse


class UserListEnvelope(Envelope):
    data: List[UserResponse]


class StandupEnvelope(Envelope):
    data: StandupResponse


class StandupPageEnvelope(Envelope):
    data: StandupPageResponse


class ErrorInfo(ApiModel):
    code: str
    details: Optional[Any] = None


class ErrorResponse(ApiModel):
    """Body of every error response."""
    status: int
    message: str
    error: Optional[ErrorInfo] = None
