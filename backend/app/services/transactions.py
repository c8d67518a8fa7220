"""Shared write-path guard for service units of work."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.services.errors import TransientIO

logger = logging.getLogger(__name__)


@contextmanager
def write_guard(db: Session, operation: str) -> Iterator[None]:
    """Roll back on any failure and surface connectivity errors as ``TransientIO``."""

    try:
        yield
    except OperationalError as exc:
        db.rollback()
        logger.exception("db.write_failed operation=%s", operation)
        raise TransientIO(f"{operation} failed: database unavailable") from exc
    except Exception:
        db.rollback()
        raise
