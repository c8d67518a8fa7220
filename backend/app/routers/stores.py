"""Store directory routes."""

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.orm import Session

from app.db.dependencies import get_db
from app.identity import ActingUser, optional_user
from app.routers.errors import to_http_exception
from app.schemas.common import ApiResponse
from app.schemas.store import DirectoryOverview, StoreDetail, StoreListResponse, StoreRead, StoreSort
from app.services.errors import StoreDirectoryError
from app.services.stores import get_directory_overview, get_store_detail, list_stores, list_stores_in_bounds

router = APIRouter()


@router.get("/overview", response_model=ApiResponse[DirectoryOverview])
def get_overview(db: Session = Depends(get_db)) -> ApiResponse[DirectoryOverview]:
    """Return directory counts and the latest reviews."""

    return ApiResponse(data=get_directory_overview(db))


@router.get("/stores", response_model=ApiResponse[StoreListResponse])
def get_stores(
    q: str | None = Query(default=None),
    region: str | None = Query(default=None),
    paper: bool = Query(default=False),
    card: bool = Query(default=False),
    mobile: bool = Query(default=False),
    sort: StoreSort = Query(default="latest"),
    page: int = Query(default=1, ge=1),
    per_page: int | None = Query(default=None, ge=1, le=100),
    db: Session = Depends(get_db),
) -> ApiResponse[StoreListResponse]:
    """Search and page through the store directory."""

    payload = list_stores(
        db,
        query=q,
        region=region,
        paper=paper,
        card=card,
        mobile=mobile,
        sort=sort,
        page=page,
        per_page=per_page,
    )
    return ApiResponse(data=payload)


@router.get("/stores/map", response_model=ApiResponse[list[StoreRead]])
def get_stores_in_bounds(
    sw_lat: float = Query(..., ge=-90.0, le=90.0),
    sw_lng: float = Query(..., ge=-180.0, le=180.0),
    ne_lat: float = Query(..., ge=-90.0, le=90.0),
    ne_lng: float = Query(..., ge=-180.0, le=180.0),
    db: Session = Depends(get_db),
) -> ApiResponse[list[StoreRead]]:
    """Return geocoded stores inside the visible map bounds."""

    if sw_lat >= ne_lat or sw_lng >= ne_lng:
        raise HTTPException(status_code=422, detail="South-west corner must be below and left of north-east corner")
    stores = list_stores_in_bounds(db, sw_lat=sw_lat, sw_lng=sw_lng, ne_lat=ne_lat, ne_lng=ne_lng)
    return ApiResponse(data=[StoreRead.model_validate(store) for store in stores])


@router.get("/stores/{store_id}", response_model=ApiResponse[StoreDetail])
def get_store(
    store_id: int = Path(..., ge=1),
    user: ActingUser | None = Depends(optional_user),
    db: Session = Depends(get_db),
) -> ApiResponse[StoreDetail]:
    """Return one store with reviews, report tally and favorite state."""

    try:
        detail = get_store_detail(db, store_id, user.user_id if user is not None else None)
    except StoreDirectoryError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse(data=detail)
