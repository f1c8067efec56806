from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ClerkEventType(str, Enum):
    USER_CREATED = "user.created"
    USER_UPDATED = "user.updated"
    USER_DELETED = "user.deleted"


class ClerkEmailVerification(BaseModel):
    status: str | None = None
    strategy: str | None = None


class ClerkEmailAddress(BaseModel):
    id: str
    email_address: str
    verification: ClerkEmailVerification | None = None
    linked_to: list[dict[str, Any]] = Field(default_factory=list)


class ClerkUserData(BaseModel):
    """The Clerk user object carried by user.created and user.updated."""

    model_config = ConfigDict(extra="ignore")

    id: str
    object: str | None = None
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    image_url: str | None = None
    profile_image_url: str | None = None
    has_image: bool = False
    primary_email_address_id: str | None = None
    email_addresses: list[ClerkEmailAddress] = Field(default_factory=list)
    banned: bool = False
    locked: bool = False
    created_at: int | None = None
    updated_at: int | None = None
    last_active_at: int | None = None

    @property
    def primary_email(self) -> ClerkEmailAddress | None:
        if not self.primary_email_address_id:
            return None
        for address in self.email_addresses:
            if address.id == self.primary_email_address_id:
                return address
        return None


class ClerkDeletedData(BaseModel):
    """The deleted-object stub carried by user.deleted."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    object: str | None = None
    deleted: bool = True


class ClerkWebhookEvent(BaseModel):
    # `type` stays a plain string so that event types we do not handle still
    # parse and can be reported as unhandled.
    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str = Field(..., min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)
    object: str | None = None
    instance_id: str | None = None
    timestamp: int | None = None

    @property
    def known_type(self) -> ClerkEventType | None:
        try:
            return ClerkEventType(self.type)
        except ValueError:
            return None
