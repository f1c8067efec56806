from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_cache, get_current_user, get_dispatcher, get_verified_clerk_event
from app.db.session import get_db
from app.schemas.clerk_webhook import ClerkWebhookEvent
from app.schemas.common import Message
from app.schemas.user import UserRead
from app.services.cache_service import CacheService
from app.services.webhook_service import ClerkWebhookDispatcher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/clerk", response_model=Message)
def handle_clerk_webhook(
    event: ClerkWebhookEvent = Depends(get_verified_clerk_event),
    db: Session = Depends(get_db),
    cache: CacheService = Depends(get_cache),
    dispatcher: ClerkWebhookDispatcher = Depends(get_dispatcher),
) -> Message:
    logger.info("Clerk webhook received", extra={"event_type": event.type})
    handled = dispatcher.dispatch(db, cache, event)
    return Message(message="Webhook processed" if handled else "Webhook ignored")


@router.get("/me", response_model=UserRead)
def read_current_user(user: UserRead = Depends(get_current_user)) -> UserRead:
    return user
