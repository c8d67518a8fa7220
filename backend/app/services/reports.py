"""Store status reports and the display-only closure tally."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.identity import ActingUser
from app.models.closure_report import REPORT_CLOSED, ClosureReport
from app.models.store import Store
from app.schemas.report import ClosureTier, ReportRead, ReportSummary
from app.services.errors import DuplicateReport, RecordNotFound
from app.services.transactions import write_guard

logger = logging.getLogger(__name__)


def report_store_status(db: Session, user: ActingUser, store_id: int, status: str) -> ClosureReport:
    """Record the acting user's single status report for a store."""

    with write_guard(db, "report_store_status"):
        if db.get(Store, store_id) is None:
            raise RecordNotFound(f"Store {store_id} not found")
        if _has_reported(db, user.user_id, store_id):
            raise DuplicateReport(f"User {user.user_id} already reported store {store_id}")

        report = ClosureReport(store_id=store_id, user_id=user.user_id, status=status)
        db.add(report)
        try:
            db.flush()
        except IntegrityError as exc:
            raise DuplicateReport(f"User {user.user_id} already reported store {store_id}") from exc
        db.commit()

    db.refresh(report)
    logger.info("report.created store_id=%d user_id=%s status=%s", store_id, user.user_id, status)
    return report


def _has_reported(db: Session, user_id: str, store_id: int) -> bool:
    return (
        db.scalar(
            select(ClosureReport.id).where(
                ClosureReport.store_id == store_id,
                ClosureReport.user_id == user_id,
            )
        )
        is not None
    )


def classify_closure(closed_count: int, *, suspected_threshold: int | None = None) -> ClosureTier:
    """Map a closed-report count onto its display tier."""

    threshold = suspected_threshold if suspected_threshold is not None else get_settings().suspected_closed_threshold
    if closed_count >= threshold:
        return "suspected_closed"
    if closed_count > 0:
        return "reported"
    return "none"


def get_report_summary(db: Session, store_id: int, *, user_id: str | None = None) -> ReportSummary:
    """Tally the most recent reports of one store."""

    if db.get(Store, store_id) is None:
        raise RecordNotFound(f"Store {store_id} not found")

    settings = get_settings()
    stmt = (
        select(ClosureReport)
        .where(ClosureReport.store_id == store_id)
        .order_by(ClosureReport.created_at.desc(), ClosureReport.id.desc())
        .limit(settings.closure_report_window)
    )
    recent = list(db.scalars(stmt).all())
    closed_count = sum(1 for report in recent if report.status == REPORT_CLOSED)

    reported_by_me = False
    if user_id:
        reported_by_me = _has_reported(db, user_id, store_id)

    return ReportSummary(
        store_id=store_id,
        recent=[ReportRead.model_validate(report) for report in recent],
        closed_count=closed_count,
        tier=classify_closure(closed_count, suspected_threshold=settings.suspected_closed_threshold),
        reported_by_me=reported_by_me,
    )
