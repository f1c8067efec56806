from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core import cache_keys
from app.core.exceptions import Conflict
from app.core.metrics import user_cache_lookups_total
from app.models.user import User
from app.schemas.user import UserCreate, UserRead, UserUpdate
from app.services.cache_service import CACHE_MISS, CacheService

logger = logging.getLogger(__name__)


def create_user(db: Session, payload: UserCreate) -> User:
    user = User(
        email=str(payload.email),
        first_name=payload.first_name,
        last_name=payload.last_name,
        avatar=payload.avatar,
        provider=payload.provider,
        provider_id=payload.provider_id,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_user(db: Session, user_id: UUID) -> User | None:
    return db.scalar(select(User).where(User.id == user_id))


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(User.email == email))


def get_user_by_provider_id(db: Session, provider_id: str) -> User | None:
    return db.scalar(select(User).where(User.provider_id == provider_id))


def update_user(db: Session, user: User, payload: UserUpdate) -> User:
    changes = payload.model_dump(exclude_unset=True)
    if "email" in changes and changes["email"] is not None:
        changes["email"] = str(changes["email"])
        existing = get_user_by_email(db, changes["email"])
        if existing and existing.id != user.id:
            raise Conflict(f"User with email {changes['email']} already exists")
    for field, value in changes.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user: User) -> None:
    db.delete(user)
    db.commit()


def find_user_by_provider_id(db: Session, cache: CacheService, provider_id: str) -> UserRead | None:
    """Read-through lookup used on every authenticated request.

    A cached ``None`` is a confirmed absence and is returned without touching
    the database. Misses are cached with the negative TTL.
    """
    key = cache_keys.user_by_provider_id(provider_id)
    cached = cache.get(key)
    if cached is not CACHE_MISS:
        if cached is None:
            user_cache_lookups_total.labels(result="negative_hit").inc()
            return None
        user_cache_lookups_total.labels(result="hit").inc()
        return UserRead.model_validate(cached)

    user_cache_lookups_total.labels(result="miss").inc()
    user = get_user_by_provider_id(db, provider_id)
    if user is None:
        cache.set(key, None, ttl=cache.negative_ttl)
        return None

    snapshot = UserRead.model_validate(user)
    cache.set(key, snapshot.model_dump(mode="json"), ttl=cache.default_ttl)
    return snapshot


def invalidate_user_cache(cache: CacheService, provider_id: str) -> None:
    cache.delete(cache_keys.user_by_provider_id(provider_id))
    logger.debug("User cache invalidated", extra={"provider_id": provider_id})
