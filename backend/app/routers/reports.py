"""Store status report routes."""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from app.db.dependencies import get_db
from app.identity import ActingUser, optional_user, require_user
from app.routers.errors import to_http_exception
from app.schemas.common import ApiResponse
from app.schemas.report import ReportCreate, ReportSummary
from app.services.errors import StoreDirectoryError
from app.services.reports import get_report_summary, report_store_status

router = APIRouter(prefix="/stores/{store_id}")


@router.get("/reports", response_model=ApiResponse[ReportSummary])
def get_reports(
    store_id: int = Path(..., ge=1),
    user: ActingUser | None = Depends(optional_user),
    db: Session = Depends(get_db),
) -> ApiResponse[ReportSummary]:
    """Return the recent report tally for a store."""

    try:
        summary = get_report_summary(db, store_id, user_id=user.user_id if user is not None else None)
    except StoreDirectoryError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse(data=summary)


@router.post("/reports", response_model=ApiResponse[ReportSummary], status_code=201)
def post_report(
    payload: ReportCreate,
    store_id: int = Path(..., ge=1),
    user: ActingUser = Depends(require_user),
    db: Session = Depends(get_db),
) -> ApiResponse[ReportSummary]:
    """Report whether a store is open, closed or no longer takes vouchers."""

    try:
        report_store_status(db, user, store_id, payload.status)
    except StoreDirectoryError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse(data=get_report_summary(db, store_id, user_id=user.user_id))
