"""Background jobs for submission maintenance."""

from __future__ import annotations

import logging
from time import perf_counter

from app.db.session import SessionLocal
from app.services.submissions import reconcile_pending_submissions

logger = logging.getLogger(__name__)


def run_submission_reconciliation_job() -> list[int]:
    """Approve pending submissions already promoted into the directory."""

    total_started = perf_counter()
    db = SessionLocal()
    try:
        reconciled = reconcile_pending_submissions(db)
        logger.info(
            "reconcile.timing reconciled_count=%d total_ms=%.2f",
            len(reconciled),
            (perf_counter() - total_started) * 1000.0,
        )
        return reconciled
    except Exception:
        logger.exception(
            "reconcile.failed elapsed_ms=%.2f",
            (perf_counter() - total_started) * 1000.0,
        )
        raise
    finally:
        db.close()
