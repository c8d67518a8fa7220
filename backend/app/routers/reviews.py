"""Review and review-like routes."""

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.orm import Session

from app.db.dependencies import get_db
from app.identity import ActingUser, optional_user, require_user
from app.routers.errors import to_http_exception
from app.schemas.common import ApiResponse, DeleteResult
from app.schemas.review import RecentReviewItem, ReviewCreate, ReviewLikesRead, ReviewLikeState, ReviewRead
from app.services.errors import StoreDirectoryError
from app.services.reviews import (
    create_review,
    delete_review,
    get_review_likes,
    like_review,
    list_reviews_by_user,
    list_reviews_for_store,
    unlike_review,
)

router = APIRouter()


@router.get("/stores/{store_id}/reviews", response_model=ApiResponse[list[ReviewRead]])
def get_store_reviews(
    store_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
) -> ApiResponse[list[ReviewRead]]:
    """List reviews for a store, newest first."""

    return ApiResponse(data=[ReviewRead.model_validate(review) for review in list_reviews_for_store(db, store_id)])


@router.post("/stores/{store_id}/reviews", response_model=ApiResponse[ReviewRead], status_code=201)
def post_store_review(
    payload: ReviewCreate,
    store_id: int = Path(..., ge=1),
    user: ActingUser = Depends(require_user),
    db: Session = Depends(get_db),
) -> ApiResponse[ReviewRead]:
    """Write a review for a store."""

    try:
        review = create_review(db, user, store_id, payload)
    except StoreDirectoryError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse(data=ReviewRead.model_validate(review))


@router.delete("/reviews/{review_id}", response_model=ApiResponse[DeleteResult])
def remove_review(
    review_id: int = Path(..., ge=1),
    user: ActingUser = Depends(require_user),
    db: Session = Depends(get_db),
) -> ApiResponse[DeleteResult]:
    """Delete one of the acting user's reviews."""

    try:
        delete_review(db, user, review_id)
    except StoreDirectoryError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse(data=DeleteResult(id=review_id, deleted=True))


@router.get("/reviews/likes", response_model=ApiResponse[ReviewLikesRead])
def get_likes(
    ids: str = Query(..., min_length=1),
    user: ActingUser | None = Depends(optional_user),
    db: Session = Depends(get_db),
) -> ApiResponse[ReviewLikesRead]:
    """Return like counts for a comma-separated list of review ids."""

    try:
        review_ids = [int(segment) for segment in ids.split(",") if segment.strip()]
    except ValueError as exc:
        raise HTTPException(status_code=422, detail="ids must be comma-separated integers") from exc
    return ApiResponse(data=get_review_likes(db, review_ids, user.user_id if user is not None else None))


@router.post("/reviews/{review_id}/like", response_model=ApiResponse[ReviewLikeState])
def post_like(
    review_id: int = Path(..., ge=1),
    user: ActingUser = Depends(require_user),
    db: Session = Depends(get_db),
) -> ApiResponse[ReviewLikeState]:
    try:
        state = like_review(db, user, review_id)
    except StoreDirectoryError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse(data=state)


@router.delete("/reviews/{review_id}/like", response_model=ApiResponse[ReviewLikeState])
def delete_like(
    review_id: int = Path(..., ge=1),
    user: ActingUser = Depends(require_user),
    db: Session = Depends(get_db),
) -> ApiResponse[ReviewLikeState]:
    try:
        state = unlike_review(db, user, review_id)
    except StoreDirectoryError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse(data=state)


@router.get("/me/reviews", response_model=ApiResponse[list[RecentReviewItem]])
def get_my_reviews(
    user: ActingUser = Depends(require_user),
    db: Session = Depends(get_db),
) -> ApiResponse[list[RecentReviewItem]]:
    """List the acting user's reviews."""

    return ApiResponse(data=list_reviews_by_user(db, user))
