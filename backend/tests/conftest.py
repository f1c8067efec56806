from __future__ import annotations

import json
from collections.abc import Callable, Iterator
from datetime import datetime, timezone
from typing import Any

import pytest
from fastapi import Depends, FastAPI
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from svix.webhooks import Webhook

import app.models  # noqa: F401
from app.api.deps import bearer_scheme, get_cache, get_current_claims
from app.api.errors import register_exception_handlers
from app.api.v1.api import api_router
from app.core.config import Settings, get_settings
from app.db.base import Base
from app.db.session import get_db
from app.services.cache_service import CacheService

WEBHOOK_SECRET = "whsec_MfKQ9r8GKYqrTwjUPD8ILPZIo2LaLaSw"


class FakeClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRedis:
    """The slice of the redis client API used by CacheService, with expiry."""

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.store: dict[str, tuple[str, float | None]] = {}

    def get(self, key: str) -> str | None:
        entry = self.store.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self.clock() >= expires_at:
            del self.store[key]
            return None
        return value

    def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self.store[key] = (value, self.clock() + ex if ex else None)
        return True

    def delete(self, *keys: str) -> int:
        return sum(1 for key in keys if self.store.pop(key, None) is not None)

    def ttl(self, key: str) -> int:
        entry = self.store.get(key)
        if entry is None:
            return -2
        _, expires_at = entry
        return -1 if expires_at is None else int(expires_at - self.clock())


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_redis(clock: FakeClock) -> FakeRedis:
    return FakeRedis(clock)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        redis_namespace="test",
        cache_default_ttl_seconds=300,
        cache_negative_ttl_seconds=60,
        clerk_webhook_secret=WEBHOOK_SECRET,
    )


@pytest.fixture
def cache(fake_redis: FakeRedis, settings: Settings) -> CacheService:
    return CacheService(client=fake_redis, settings=settings)


@pytest.fixture
def session_factory() -> Iterator[sessionmaker]:
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, class_=Session, autocommit=False, autoflush=False, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def db(session_factory: sessionmaker) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory: sessionmaker, cache: CacheService, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    """API client whose bearer token is taken verbatim as the Clerk subject."""
    monkeypatch.setattr(get_settings(), "clerk_webhook_secret", WEBHOOK_SECRET)

    api = FastAPI()
    register_exception_handlers(api)
    api.include_router(api_router, prefix="/api/v1")

    def override_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    def override_claims(credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme)) -> dict[str, Any]:
        if credentials is None:
            return get_current_claims(None)
        return {"sub": credentials.credentials}

    api.dependency_overrides[get_db] = override_db
    api.dependency_overrides[get_cache] = lambda: cache
    api.dependency_overrides[get_current_claims] = override_claims
    return TestClient(api)


@pytest.fixture
def sign_webhook() -> Callable[..., dict[str, str]]:
    def _sign(body: str, secret: str = WEBHOOK_SECRET, msg_id: str = "msg_2a3b4c") -> dict[str, str]:
        timestamp = datetime.now(timezone.utc)
        signature = Webhook(secret).sign(msg_id, timestamp, body)
        return {
            "svix-id": msg_id,
            "svix-timestamp": str(int(timestamp.timestamp())),
            "svix-signature": signature,
            "content-type": "application/json",
        }

    return _sign


@pytest.fixture
def clerk_user_event() -> Callable[..., dict[str, Any]]:
    def _event(
        event_type: str = "user.created",
        user_id: str = "user_29w83sxmDNGwOuEthce5gg56FcC",
        email: str = "a@x.com",
        primary: bool = True,
        **overrides: Any,
    ) -> dict[str, Any]:
        data = {
            "id": user_id,
            "object": "user",
            "first_name": "Ada",
            "last_name": "Lovelace",
            "image_url": "https://img.clerk.com/ada.png",
            "has_image": True,
            "primary_email_address_id": "idn_primary" if primary else "idn_missing",
            "email_addresses": [
                {"id": "idn_secondary", "email_address": "other@x.com", "verification": None, "linked_to": []},
                {
                    "id": "idn_primary",
                    "email_address": email,
                    "verification": {"status": "verified", "strategy": "ticket"},
                    "linked_to": [],
                },
            ],
            "banned": False,
            "locked": False,
            "created_at": 1654012591514,
            "updated_at": 1654012591835,
        }
        data.update(overrides)
        return {
            "type": event_type,
            "object": "event",
            "instance_id": "ins_123",
            "timestamp": 1654012591835,
            "data": data,
        }

    return _event


@pytest.fixture
def to_body() -> Callable[[dict[str, Any]], str]:
    return lambda payload: json.dumps(payload, separators=(",", ":"))


@pytest.fixture
def webhook_secret() -> str:
    return WEBHOOK_SECRET
