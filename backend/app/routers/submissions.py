"""Store submission and confirmation routes."""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from app.db.dependencies import get_db
from app.identity import ActingUser, optional_user, require_user
from app.routers.errors import to_http_exception
from app.schemas.common import ApiResponse
from app.schemas.submission import ConfirmationResult, PendingSubmissionItem, SubmissionCreate, SubmissionRead
from app.services.errors import StoreDirectoryError
from app.services.quorum import confirm_submission, toggle_confirmation, unconfirm_submission
from app.services.submissions import create_submission, list_pending_submissions

router = APIRouter(prefix="/submissions")


@router.get("", response_model=ApiResponse[list[PendingSubmissionItem]])
def get_pending_submissions(
    user: ActingUser | None = Depends(optional_user),
    db: Session = Depends(get_db),
) -> ApiResponse[list[PendingSubmissionItem]]:
    """List pending submissions with confirmation progress."""

    return ApiResponse(data=list_pending_submissions(db, user))


@router.post("", response_model=ApiResponse[SubmissionRead], status_code=201)
def post_submission(
    payload: SubmissionCreate,
    user: ActingUser = Depends(require_user),
    db: Session = Depends(get_db),
) -> ApiResponse[SubmissionRead]:
    """Propose a new store for the directory."""

    try:
        submission = create_submission(db, user, payload)
    except StoreDirectoryError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse(data=SubmissionRead.model_validate(submission))


@router.post("/{submission_id}/confirm", response_model=ApiResponse[ConfirmationResult])
def post_confirmation(
    submission_id: int = Path(..., ge=1),
    user: ActingUser = Depends(require_user),
    db: Session = Depends(get_db),
) -> ApiResponse[ConfirmationResult]:
    """Confirm a pending submission; may promote it into the directory."""

    try:
        result = confirm_submission(db, user, submission_id)
    except StoreDirectoryError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse(data=result)


@router.delete("/{submission_id}/confirm", response_model=ApiResponse[ConfirmationResult])
def delete_confirmation(
    submission_id: int = Path(..., ge=1),
    user: ActingUser = Depends(require_user),
    db: Session = Depends(get_db),
) -> ApiResponse[ConfirmationResult]:
    """Withdraw the acting user's confirmation."""

    try:
        result = unconfirm_submission(db, user, submission_id)
    except StoreDirectoryError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse(data=result)


@router.post("/{submission_id}/confirm/toggle", response_model=ApiResponse[ConfirmationResult])
def post_confirmation_toggle(
    submission_id: int = Path(..., ge=1),
    user: ActingUser = Depends(require_user),
    db: Session = Depends(get_db),
) -> ApiResponse[ConfirmationResult]:
    try:
        result = toggle_confirmation(db, user, submission_id)
    except StoreDirectoryError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse(data=result)
