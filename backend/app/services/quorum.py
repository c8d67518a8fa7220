"""Community confirmation quorum for pending store submissions.

A submission is promoted into the canonical store directory once the number
of distinct confirming users reaches ``Settings.confirm_threshold``. The whole
check, insert, recount and promote sequence runs in one transaction:

* the submission row is locked (``SELECT ... FOR UPDATE`` where the backend
  supports it) and must still be pending;
* the ``(submission_id, user_id)`` unique constraint makes a second vote from
  the same user fail even when two requests race past the existence check;
* promotion flips the status with a compare-and-set update and only inserts a
  store when that update changed exactly one row, while the unique
  ``stores.source_submission_id`` column rejects any second store row.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.identity import ActingUser
from app.models.store import UNGEOCODED_COORDINATE, Store
from app.models.store_confirmation import StoreConfirmation
from app.models.store_submission import SUBMISSION_APPROVED, SUBMISSION_PENDING, StoreSubmission
from app.schemas.submission import ConfirmationResult
from app.services.errors import DuplicateVote, SelfVote, SubmissionNotPending
from app.services.transactions import write_guard

logger = logging.getLogger(__name__)


def confirm_submission(
    db: Session,
    user: ActingUser,
    submission_id: int,
    *,
    threshold: int | None = None,
) -> ConfirmationResult:
    """Record one confirmation and promote the submission once quorum is reached."""

    required = threshold if threshold is not None else get_settings().confirm_threshold
    with write_guard(db, "confirm_submission"):
        submission = _lock_pending_submission(db, submission_id)
        if submission.user_id == user.user_id:
            raise SelfVote(f"User {user.user_id} proposed submission {submission_id}")
        if _has_confirmed(db, user.user_id, submission_id):
            raise DuplicateVote(f"User {user.user_id} already confirmed submission {submission_id}")

        db.add(StoreConfirmation(submission_id=submission_id, user_id=user.user_id))
        try:
            db.flush()
        except IntegrityError as exc:
            raise DuplicateVote(
                f"User {user.user_id} already confirmed submission {submission_id}"
            ) from exc

        count = count_confirmations(db, submission_id)
        store: Store | None = None
        if count >= required:
            store = promote_submission(db, submission_id, commit=False)
        db.commit()

    logger.info(
        "quorum.confirmed submission_id=%d user_id=%s confirm_count=%d threshold=%d approved=%s",
        submission_id,
        user.user_id,
        count,
        required,
        store is not None,
    )
    return ConfirmationResult(
        submission_id=submission_id,
        confirmed=True,
        approved=store is not None,
        confirm_count=count,
        threshold=required,
        store_id=store.id if store is not None else None,
    )


def unconfirm_submission(db: Session, user: ActingUser, submission_id: int) -> ConfirmationResult:
    """Withdraw a confirmation; removing a vote that does not exist is a no-op."""

    required = get_settings().confirm_threshold
    with write_guard(db, "unconfirm_submission"):
        _lock_pending_submission(db, submission_id)
        db.execute(
            delete(StoreConfirmation).where(
                StoreConfirmation.submission_id == submission_id,
                StoreConfirmation.user_id == user.user_id,
            )
        )
        count = count_confirmations(db, submission_id)
        db.commit()

    logger.info(
        "quorum.unconfirmed submission_id=%d user_id=%s confirm_count=%d",
        submission_id,
        user.user_id,
        count,
    )
    return ConfirmationResult(
        submission_id=submission_id,
        confirmed=False,
        approved=False,
        confirm_count=count,
        threshold=required,
    )


def toggle_confirmation(db: Session, user: ActingUser, submission_id: int) -> ConfirmationResult:
    """Flip the acting user's confirmation for one submission."""

    if _has_confirmed(db, user.user_id, submission_id):
        return unconfirm_submission(db, user, submission_id)
    return confirm_submission(db, user, submission_id)


def promote_submission(db: Session, submission_id: int, *, commit: bool = True) -> Store:
    """Copy a pending submission into the store directory and mark it approved.

    Raises ``SubmissionNotPending`` when another caller already promoted,
    rejected or deleted the submission.
    """

    submission = db.get(StoreSubmission, submission_id)
    if submission is None:
        raise SubmissionNotPending(f"Submission {submission_id} not found")

    result = db.execute(
        update(StoreSubmission)
        .where(
            StoreSubmission.id == submission_id,
            StoreSubmission.status == SUBMISSION_PENDING,
        )
        .values(status=SUBMISSION_APPROVED)
    )
    if result.rowcount != 1:
        raise SubmissionNotPending(f"Submission {submission_id} is no longer pending")

    store = Store(
        name=submission.name,
        address=submission.address,
        category=submission.category,
        lat=submission.lat or UNGEOCODED_COORDINATE,
        lng=submission.lng or UNGEOCODED_COORDINATE,
        source_submission_id=submission.id,
    )
    db.add(store)
    try:
        db.flush()
    except IntegrityError as exc:
        raise SubmissionNotPending(f"Submission {submission_id} was already promoted") from exc

    if commit:
        db.commit()
        db.refresh(store)

    logger.info("quorum.promoted submission_id=%d store_id=%d", submission_id, store.id)
    return store


def count_confirmations(db: Session, submission_id: int) -> int:
    """Count ledger rows for one submission."""

    stmt = select(func.count(StoreConfirmation.id)).where(StoreConfirmation.submission_id == submission_id)
    return int(db.scalar(stmt) or 0)


def get_confirmation_counts(
    db: Session,
    submission_ids: Iterable[int],
    user_id: str | None = None,
) -> tuple[dict[int, int], set[int]]:
    """Return confirmation counts per submission and the ids the user confirmed."""

    ids = sorted(set(submission_ids))
    if not ids:
        return {}, set()

    counts: dict[int, int] = defaultdict(int)
    rows = db.execute(
        select(StoreConfirmation.submission_id, func.count(StoreConfirmation.id))
        .where(StoreConfirmation.submission_id.in_(ids))
        .group_by(StoreConfirmation.submission_id)
    ).all()
    for submission_id, count in rows:
        counts[int(submission_id)] = int(count)

    confirmed: set[int] = set()
    if user_id:
        confirmed = set(
            db.scalars(
                select(StoreConfirmation.submission_id).where(
                    StoreConfirmation.user_id == user_id,
                    StoreConfirmation.submission_id.in_(ids),
                )
            ).all()
        )
    return dict(counts), confirmed


def _lock_pending_submission(db: Session, submission_id: int) -> StoreSubmission:
    submission = db.scalar(
        select(StoreSubmission).where(StoreSubmission.id == submission_id).with_for_update()
    )
    if submission is None:
        raise SubmissionNotPending(f"Submission {submission_id} not found")
    if submission.status != SUBMISSION_PENDING:
        raise SubmissionNotPending(f"Submission {submission_id} is {submission.status}")
    return submission


def _has_confirmed(db: Session, user_id: str, submission_id: int) -> bool:
    stmt = select(StoreConfirmation.id).where(
        StoreConfirmation.submission_id == submission_id,
        StoreConfirmation.user_id == user_id,
    )
    return db.scalar(stmt) is not None
