from __future__ import annotations

from typing import Any

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.exceptions import Unauthenticated
from app.db.session import get_db
from app.schemas.clerk_webhook import ClerkWebhookEvent
from app.schemas.user import UserRead
from app.services.cache_service import CacheService, get_cache_service
from app.services.identity_service import get_token_validator, resolve_provider_id
from app.services.user_service import find_user_by_provider_id
from app.services.webhook_service import ClerkWebhookDispatcher, get_webhook_dispatcher, verify_clerk_webhook

bearer_scheme = HTTPBearer(auto_error=False)


def get_cache() -> CacheService:
    return get_cache_service()


def get_dispatcher() -> ClerkWebhookDispatcher:
    return get_webhook_dispatcher()


def get_current_claims(credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme)) -> dict[str, Any]:
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("No authorization header provided")
    return get_token_validator().validate(credentials.credentials)


def get_current_provider_id(claims: dict[str, Any] = Depends(get_current_claims)) -> str:
    return resolve_provider_id(claims)


def get_current_user(
    provider_id: str = Depends(get_current_provider_id),
    db: Session = Depends(get_db),
    cache: CacheService = Depends(get_cache),
) -> UserRead:
    user = find_user_by_provider_id(db, cache, provider_id)
    if user is None:
        raise Unauthenticated("User not found")
    return user


async def get_verified_clerk_event(request: Request) -> ClerkWebhookEvent:
    body = await request.body()
    return verify_clerk_webhook(request.headers, body, get_settings().clerk_webhook_secret)
