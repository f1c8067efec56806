from __future__ import annotations

import logging

from sqlalchemy.engine import Engine

import app.models  # noqa: F401  registers the mapped tables on Base.metadata
from app.db.base import Base
from app.db.session import engine as default_engine

logger = logging.getLogger(__name__)


def bootstrap_database(engine: Engine | None = None) -> None:
    target = engine or default_engine
    Base.metadata.create_all(bind=target)
    logger.info("Database schema ensured on %s", target.url.render_as_string(hide_password=True))
