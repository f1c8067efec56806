from __future__ import annotations

import logging
import time
from typing import Protocol

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import Conflict, InvalidEvent
from app.schemas.clerk_webhook import ClerkDeletedData, ClerkEventType, ClerkUserData, ClerkWebhookEvent
from app.schemas.user import UserCreate
from app.services.cache_service import CacheService
from app.services.user_service import (
    create_user,
    delete_user,
    get_user_by_email,
    get_user_by_provider_id,
    invalidate_user_cache,
)

logger = logging.getLogger(__name__)


class ClerkWebhookStrategy(Protocol):
    def get_type(self) -> ClerkEventType:
        ...

    def handle(self, db: Session, cache: CacheService, event: ClerkWebhookEvent) -> None:
        ...


def _parse_user_data(event: ClerkWebhookEvent) -> ClerkUserData:
    try:
        return ClerkUserData.model_validate(event.data)
    except ValidationError as exc:
        raise InvalidEvent(f"Malformed user payload for {event.type}") from exc


class UserCreatedStrategy:
    def __init__(self, provider: str = "clerk") -> None:
        self.provider = provider

    def get_type(self) -> ClerkEventType:
        return ClerkEventType.USER_CREATED

    def handle(self, db: Session, cache: CacheService, event: ClerkWebhookEvent) -> None:
        data = _parse_user_data(event)

        primary_email = data.primary_email
        if primary_email is None:
            logger.warning("No primary email found for user %s", data.id, extra={"provider_id": data.id})
            return

        email = primary_email.email_address
        if get_user_by_email(db, email):
            raise Conflict(f"User with email {email} already exists")

        try:
            payload = UserCreate(
                email=email,
                first_name=data.first_name,
                last_name=data.last_name,
                avatar=data.image_url,
                provider=self.provider,
                provider_id=data.id,
            )
        except ValidationError as exc:
            raise InvalidEvent(f"Invalid user fields for {data.id}") from exc

        try:
            user = create_user(db, payload)
        except IntegrityError as exc:
            db.rollback()
            raise Conflict(f"User {data.id} already exists") from exc

        # Drops a negative entry cached by a request that beat the webhook.
        invalidate_user_cache(cache, data.id)

        logger.info(
            "User created successfully with email: %s",
            email,
            extra={"provider_id": data.id, "user_id": str(user.id)},
        )


class UserUpdatedStrategy:
    """Profile changes are owned by Clerk; locally we only drop the cached snapshot."""

    def get_type(self) -> ClerkEventType:
        return ClerkEventType.USER_UPDATED

    def handle(self, db: Session, cache: CacheService, event: ClerkWebhookEvent) -> None:
        provider_id = event.data.get("id")
        if not provider_id:
            logger.warning("No user ID found in event data")
            return
        invalidate_user_cache(cache, str(provider_id))
        logger.info("Cached user invalidated after update", extra={"provider_id": provider_id})


class UserDeletedStrategy:
    def get_type(self) -> ClerkEventType:
        return ClerkEventType.USER_DELETED

    def handle(self, db: Session, cache: CacheService, event: ClerkWebhookEvent) -> None:
        try:
            data = ClerkDeletedData.model_validate(event.data)
        except ValidationError as exc:
            raise InvalidEvent("Malformed user.deleted payload") from exc

        if not data.id:
            logger.warning("No user ID found in event data")
            return

        start = time.perf_counter()
        logger.info("Processing user deletion for Clerk ID: %s", data.id, extra={"provider_id": data.id})

        user = get_user_by_provider_id(db, data.id)
        if user is None:
            logger.warning("User with provider_id %s not found", data.id, extra={"provider_id": data.id})
            return

        user_id = user.id
        delete_user(db, user)
        # Not atomic with the delete above; a failure here leaves the entry until its TTL.
        invalidate_user_cache(cache, data.id)

        duration_ms = int((time.perf_counter() - start) * 1000)
        logger.info(
            "User %s (Clerk: %s) deleted successfully in %sms",
            user_id,
            data.id,
            duration_ms,
            extra={"provider_id": data.id, "user_id": str(user_id), "duration_ms": duration_ms},
        )


def default_strategies(provider: str = "clerk") -> list[ClerkWebhookStrategy]:
    return [UserCreatedStrategy(provider=provider), UserUpdatedStrategy(), UserDeletedStrategy()]
