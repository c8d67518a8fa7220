"""Administrative submission moderation routes."""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from app.db.dependencies import get_db
from app.identity import ActingUser, require_admin
from app.routers.errors import to_http_exception
from app.schemas.common import ApiResponse, DeleteResult
from app.schemas.store import StoreRead
from app.schemas.submission import ReconcileResult, SubmissionRead, SubmissionStatus
from app.services.errors import StoreDirectoryError
from app.services.submissions import (
    approve_submission,
    delete_submission,
    list_submissions,
    reconcile_pending_submissions,
    reject_submission,
)

router = APIRouter(prefix="/admin/submissions")


@router.get("", response_model=ApiResponse[list[SubmissionRead]])
def get_submissions(
    status: SubmissionStatus | None = Query(default=None),
    _: ActingUser = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ApiResponse[list[SubmissionRead]]:
    """List submissions in every state, newest first."""

    return ApiResponse(data=[SubmissionRead.model_validate(row) for row in list_submissions(db, status)])


@router.post("/reconcile", response_model=ApiResponse[ReconcileResult])
def post_reconcile(
    _: ActingUser = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ApiResponse[ReconcileResult]:
    """Approve pending submissions that already have a directory store."""

    try:
        reconciled = reconcile_pending_submissions(db)
    except StoreDirectoryError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse(data=ReconcileResult(reconciled_submission_ids=reconciled))


@router.post("/{submission_id}/approve", response_model=ApiResponse[StoreRead])
def post_approve(
    submission_id: int = Path(..., ge=1),
    _: ActingUser = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ApiResponse[StoreRead]:
    """Promote a pending submission without waiting for quorum."""

    try:
        store = approve_submission(db, submission_id)
    except StoreDirectoryError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse(data=StoreRead.model_validate(store))


@router.post("/{submission_id}/reject", response_model=ApiResponse[SubmissionRead])
def post_reject(
    submission_id: int = Path(..., ge=1),
    _: ActingUser = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ApiResponse[SubmissionRead]:
    try:
        submission = reject_submission(db, submission_id)
    except StoreDirectoryError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse(data=SubmissionRead.model_validate(submission))


@router.delete("/{submission_id}", response_model=ApiResponse[DeleteResult])
def remove_submission(
    submission_id: int = Path(..., ge=1),
    _: ActingUser = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ApiResponse[DeleteResult]:
    """Delete a submission and its confirmations."""

    try:
        delete_submission(db, submission_id)
    except StoreDirectoryError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse(data=DeleteResult(id=submission_id, deleted=True))
