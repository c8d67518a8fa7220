"""Review and review-like services."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.identity import ActingUser
from app.models.review import Review
from app.models.review_like import ReviewLike
from app.models.store import Store
from app.schemas.review import RecentReviewItem, ReviewCreate, ReviewLikesRead, ReviewLikeState, ReviewRead
from app.services.errors import DuplicateVote, PermissionDenied, RecordNotFound
from app.services.transactions import write_guard

logger = logging.getLogger(__name__)


def create_review(db: Session, user: ActingUser, store_id: int, payload: ReviewCreate) -> Review:
    """Persist a review written by the acting user."""

    with write_guard(db, "create_review"):
        if db.get(Store, store_id) is None:
            raise RecordNotFound(f"Store {store_id} not found")
        review = Review(
            store_id=store_id,
            user_id=user.user_id,
            content=payload.content.strip(),
            rating=payload.rating,
            is_available=payload.is_available,
            voucher_type=payload.voucher_type,
            min_amount=payload.min_amount or 0,
            image_url=payload.image_url,
        )
        db.add(review)
        db.commit()
    db.refresh(review)
    logger.info("review.created review_id=%d store_id=%d user_id=%s", review.id, store_id, user.user_id)
    return review


def list_reviews_for_store(db: Session, store_id: int) -> list[Review]:
    stmt = (
        select(Review)
        .where(Review.store_id == store_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    return list(db.scalars(stmt).all())


def list_reviews_by_user(db: Session, user: ActingUser) -> list[RecentReviewItem]:
    """Return the acting user's reviews with store names, newest first."""

    stmt = (
        select(Review, Store.name, Store.address)
        .join(Store, Store.id == Review.store_id)
        .where(Review.user_id == user.user_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    return [_with_store(review, name, address) for review, name, address in db.execute(stmt).all()]


def list_recent_reviews(db: Session, *, limit: int) -> list[RecentReviewItem]:
    stmt = (
        select(Review, Store.name, Store.address)
        .join(Store, Store.id == Review.store_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .limit(limit)
    )
    return [_with_store(review, name, address) for review, name, address in db.execute(stmt).all()]


def delete_review(db: Session, user: ActingUser, review_id: int) -> None:
    """Delete a review; only its author or an admin may do so."""

    with write_guard(db, "delete_review"):
        review = db.get(Review, review_id)
        if review is None:
            raise RecordNotFound(f"Review {review_id} not found")
        if review.user_id != user.user_id and not user.is_admin:
            raise PermissionDenied(f"User {user.user_id} cannot delete review {review_id}")
        db.execute(delete(ReviewLike).where(ReviewLike.review_id == review_id))
        db.delete(review)
        db.commit()
    logger.info("review.deleted review_id=%d user_id=%s", review_id, user.user_id)


def like_review(db: Session, user: ActingUser, review_id: int) -> ReviewLikeState:
    """Add the acting user's like to a review."""

    with write_guard(db, "like_review"):
        if db.get(Review, review_id) is None:
            raise RecordNotFound(f"Review {review_id} not found")
        db.add(ReviewLike(review_id=review_id, user_id=user.user_id))
        try:
            db.flush()
        except IntegrityError as exc:
            raise DuplicateVote(f"User {user.user_id} already liked review {review_id}") from exc
        db.commit()
    return ReviewLikeState(review_id=review_id, liked=True, like_count=_count_likes(db, review_id))


def unlike_review(db: Session, user: ActingUser, review_id: int) -> ReviewLikeState:
    """Remove the acting user's like; missing likes are ignored."""

    with write_guard(db, "unlike_review"):
        db.execute(delete(ReviewLike).where(ReviewLike.review_id == review_id, ReviewLike.user_id == user.user_id))
        db.commit()
    return ReviewLikeState(review_id=review_id, liked=False, like_count=_count_likes(db, review_id))


def get_review_likes(db: Session, review_ids: Iterable[int], user_id: str | None = None) -> ReviewLikesRead:
    """Return like counts for the given reviews and which of them the user liked."""

    ids = sorted(set(review_ids))
    if not ids:
        return ReviewLikesRead(like_counts={}, liked_review_ids=[])

    rows = db.execute(
        select(ReviewLike.review_id, func.count(ReviewLike.id))
        .where(ReviewLike.review_id.in_(ids))
        .group_by(ReviewLike.review_id)
    ).all()
    like_counts = {int(review_id): int(count) for review_id, count in rows}

    liked: list[int] = []
    if user_id:
        liked = sorted(
            db.scalars(
                select(ReviewLike.review_id).where(ReviewLike.user_id == user_id, ReviewLike.review_id.in_(ids))
            ).all()
        )
    return ReviewLikesRead(like_counts=like_counts, liked_review_ids=liked)


def _count_likes(db: Session, review_id: int) -> int:
    return int(db.scalar(select(func.count(ReviewLike.id)).where(ReviewLike.review_id == review_id)) or 0)


def _with_store(review: Review, store_name: str, store_address: str) -> RecentReviewItem:
    return RecentReviewItem(
        **ReviewRead.model_validate(review).model_dump(),
        store_name=store_name,
        store_address=store_address,
    )
