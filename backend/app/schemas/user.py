from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from app.schemas.common import ORMModel


class UserRead(ORMModel):
    """Public view of a user; also the snapshot stored in the user cache."""

    id: UUID
    provider: str
    provider_id: str
    email: str
    first_name: str | None
    last_name: str | None
    avatar: str | None
    created_at: datetime
    updated_at: datetime


class UserCreate(BaseModel):
    email: EmailStr
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)
    avatar: str | None = Field(default=None, max_length=1024)
    provider: str = Field(..., min_length=1, max_length=50)
    provider_id: str = Field(..., min_length=1, max_length=255)


class UserUpdate(BaseModel):
    email: EmailStr | None = None
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)
    avatar: str | None = Field(default=None, max_length=1024)
