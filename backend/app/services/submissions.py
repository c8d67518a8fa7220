"""Store submission lifecycle services."""

from __future__ import annotations

import logging

from sqlalchemy import and_, delete, or_, select, update
from sqlalchemy.orm import Session

from app.config import get_settings
from app.identity import ActingUser
from app.models.store import Store
from app.models.store_confirmation import StoreConfirmation
from app.models.store_submission import (
    SUBMISSION_APPROVED,
    SUBMISSION_PENDING,
    SUBMISSION_REJECTED,
    StoreSubmission,
)
from app.schemas.submission import PendingSubmissionItem, SubmissionCreate, SubmissionRead
from app.services.errors import RecordNotFound, SubmissionNotPending
from app.services.quorum import get_confirmation_counts, promote_submission
from app.services.transactions import write_guard

logger = logging.getLogger(__name__)


def create_submission(db: Session, user: ActingUser, payload: SubmissionCreate) -> StoreSubmission:
    """Persist a new pending submission proposed by the acting user."""

    submission = StoreSubmission(
        user_id=user.user_id,
        name=payload.name,
        address=payload.address,
        category=payload.category,
        note=payload.note,
        lat=payload.lat,
        lng=payload.lng,
        status=SUBMISSION_PENDING,
    )
    with write_guard(db, "create_submission"):
        db.add(submission)
        db.commit()
    db.refresh(submission)
    logger.info("submission.created submission_id=%d user_id=%s", submission.id, user.user_id)
    return submission


def list_pending_submissions(db: Session, user: ActingUser | None = None) -> list[PendingSubmissionItem]:
    """Return pending submissions newest first with confirmation progress."""

    stmt = (
        select(StoreSubmission)
        .where(StoreSubmission.status == SUBMISSION_PENDING)
        .order_by(StoreSubmission.created_at.desc(), StoreSubmission.id.desc())
    )
    submissions = list(db.scalars(stmt).all())
    user_id = user.user_id if user is not None else None
    counts, confirmed = get_confirmation_counts(db, [row.id for row in submissions], user_id)
    threshold = get_settings().confirm_threshold
    return [
        PendingSubmissionItem(
            **SubmissionRead.model_validate(row).model_dump(),
            confirm_count=counts.get(row.id, 0),
            threshold=threshold,
            confirmed_by_me=row.id in confirmed,
            is_mine=user_id is not None and row.user_id == user_id,
        )
        for row in submissions
    ]


def list_submissions(db: Session, status: str | None = None) -> list[StoreSubmission]:
    """Admin listing of submissions in every state."""

    stmt = select(StoreSubmission).order_by(StoreSubmission.created_at.desc(), StoreSubmission.id.desc())
    if status:
        stmt = stmt.where(StoreSubmission.status == status)
    return list(db.scalars(stmt).all())


def approve_submission(db: Session, submission_id: int) -> Store:
    """Administrative override that promotes a pending submission immediately."""

    with write_guard(db, "approve_submission"):
        store = promote_submission(db, submission_id, commit=False)
        db.commit()
    db.refresh(store)
    logger.info("submission.approved submission_id=%d store_id=%d", submission_id, store.id)
    return store


def reject_submission(db: Session, submission_id: int) -> StoreSubmission:
    """Mark a pending submission rejected and drop its confirmations."""

    with write_guard(db, "reject_submission"):
        submission = db.get(StoreSubmission, submission_id)
        if submission is None:
            raise SubmissionNotPending(f"Submission {submission_id} not found")
        result = db.execute(
            update(StoreSubmission)
            .where(
                StoreSubmission.id == submission_id,
                StoreSubmission.status == SUBMISSION_PENDING,
            )
            .values(status=SUBMISSION_REJECTED)
        )
        if result.rowcount != 1:
            raise SubmissionNotPending(f"Submission {submission_id} is not pending")
        db.execute(delete(StoreConfirmation).where(StoreConfirmation.submission_id == submission_id))
        db.commit()

    db.refresh(submission)
    logger.info("submission.rejected submission_id=%d", submission_id)
    return submission


def delete_submission(db: Session, submission_id: int) -> None:
    """Remove a submission and its confirmation ledger rows."""

    with write_guard(db, "delete_submission"):
        submission = db.get(StoreSubmission, submission_id)
        if submission is None:
            raise RecordNotFound(f"Submission {submission_id} not found")
        db.execute(delete(StoreConfirmation).where(StoreConfirmation.submission_id == submission_id))
        db.execute(
            update(Store)
            .where(Store.source_submission_id == submission_id)
            .values(source_submission_id=None)
        )
        db.delete(submission)
        db.commit()
    logger.info("submission.deleted submission_id=%d", submission_id)


def reconcile_pending_submissions(db: Session) -> list[int]:
    """Approve pending submissions that already have a directory store.

    A store counts as the submission's promotion when it references the
    submission directly or carries the same name and address.
    """

    linked = (
        select(Store.id)
        .where(
            or_(
                Store.source_submission_id == StoreSubmission.id,
                and_(Store.name == StoreSubmission.name, Store.address == StoreSubmission.address),
            )
        )
        .exists()
    )
    stmt = (
        select(StoreSubmission.id)
        .where(StoreSubmission.status == SUBMISSION_PENDING, linked)
        .order_by(StoreSubmission.id.asc())
    )
    with write_guard(db, "reconcile_pending_submissions"):
        submission_ids = list(db.scalars(stmt).all())
        if submission_ids:
            db.execute(
                update(StoreSubmission)
                .where(
                    StoreSubmission.id.in_(submission_ids),
                    StoreSubmission.status == SUBMISSION_PENDING,
                )
                .values(status=SUBMISSION_APPROVED)
                .execution_options(synchronize_session=False)
            )
        db.commit()

    for submission_id in submission_ids:
        logger.warning("reconcile.submission_approved submission_id=%d", submission_id)
    return submission_ids
