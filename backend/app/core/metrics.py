from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

webhook_events_total = Counter(
    "cv_builder_webhook_events_total",
    "Identity provider webhook events by type and outcome",
    ["event_type", "outcome"],
)
user_cache_lookups_total = Counter(
    "cv_builder_user_cache_lookups_total",
    "User lookups by provider id, by cache result",
    ["result"],
)


def render_metrics() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST
