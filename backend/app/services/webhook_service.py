from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from functools import lru_cache
from types import MappingProxyType

from pydantic import ValidationError
from sqlalchemy.orm import Session
from svix.webhooks import Webhook, WebhookVerificationError

from app.core.config import get_settings
from app.core.exceptions import InvalidEvent, ServiceUnavailable, Unauthenticated
from app.core.metrics import webhook_events_total
from app.schemas.clerk_webhook import ClerkEventType, ClerkWebhookEvent
from app.services.cache_service import CacheService
from app.services.webhook_strategies import ClerkWebhookStrategy, default_strategies

logger = logging.getLogger(__name__)

SVIX_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")


def verify_clerk_webhook(headers: Mapping[str, str], body: bytes, secret: str) -> ClerkWebhookEvent:
    """Check the svix signature of a raw webhook body and parse the event."""
    svix_headers = {name: headers.get(name) for name in SVIX_HEADERS}
    if not all(svix_headers.values()):
        logger.error("Missing svix headers")
        raise Unauthenticated("Missing svix headers")

    if not secret:
        logger.error("CLERK_WEBHOOK_SECRET is not configured")
        raise ServiceUnavailable("Webhook secret is not configured.")

    # svix 2.x returns None from verify(); the body is parsed here once it is trusted.
    try:
        Webhook(secret).verify(body, svix_headers)
    except (WebhookVerificationError, ValueError) as exc:
        logger.error("Error verifying webhook: %s", exc)
        raise Unauthenticated("Invalid webhook signature") from exc

    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise InvalidEvent("Webhook payload is not valid JSON") from exc
    if not isinstance(payload, dict):
        raise InvalidEvent("Webhook payload must be a JSON object")
    try:
        return ClerkWebhookEvent.model_validate(payload)
    except ValidationError as exc:
        raise InvalidEvent("Webhook payload is missing its event type") from exc


class StrategyRegistry:
    """Read-only event type to strategy mapping, fixed at construction."""

    def __init__(self, strategies: Iterable[ClerkWebhookStrategy]) -> None:
        mapping: dict[ClerkEventType, ClerkWebhookStrategy] = {}
        for strategy in strategies:
            event_type = strategy.get_type()
            if event_type in mapping:
                raise ValueError(f"Duplicate webhook strategy for {event_type.value}")
            mapping[event_type] = strategy
        self._strategies = MappingProxyType(mapping)

    @property
    def event_types(self) -> frozenset[ClerkEventType]:
        return frozenset(self._strategies)

    def resolve(self, event_type: str | ClerkEventType) -> ClerkWebhookStrategy | None:
        try:
            key = ClerkEventType(event_type)
        except ValueError:
            return None
        return self._strategies.get(key)


class ClerkWebhookDispatcher:
    def __init__(self, registry: StrategyRegistry) -> None:
        self.registry = registry

    def dispatch(self, db: Session, cache: CacheService, event: ClerkWebhookEvent | None) -> bool:
        """Run the strategy for ``event``. Returns False when no strategy matched."""
        if event is None or not event.type:
            raise InvalidEvent("Can't process webhook without an event type")

        known_type = event.known_type
        strategy = self.registry.resolve(known_type) if known_type is not None else None
        if strategy is None:
            logger.warning("No strategy found for event type: %s", event.type, extra={"event_type": event.type})
            webhook_events_total.labels(event_type=event.type, outcome="unhandled").inc()
            return False

        try:
            strategy.handle(db, cache, event)
        except Exception:
            webhook_events_total.labels(event_type=event.type, outcome="failed").inc()
            raise
        webhook_events_total.labels(event_type=event.type, outcome="handled").inc()
        return True


@lru_cache(maxsize=1)
def get_webhook_dispatcher() -> ClerkWebhookDispatcher:
    settings = get_settings()
    registry = StrategyRegistry(default_strategies(provider=settings.clerk_provider_name))
    return ClerkWebhookDispatcher(registry)
