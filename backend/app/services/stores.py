"""Store directory query services."""

from __future__ import annotations

import math

from sqlalchemy import case, func, or_, select
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.review import Review
from app.models.store import UNGEOCODED_COORDINATE, Store
from app.schemas.review import ReviewRead
from app.schemas.store import DirectoryOverview, StoreDetail, StoreListItem, StoreListResponse, StoreRead, StoreSort
from app.services.errors import RecordNotFound
from app.services.favorites import is_favorite
from app.services.reports import get_report_summary
from app.services.reviews import list_recent_reviews, list_reviews_for_store

ALL_REGIONS = "all"


def list_stores(
    db: Session,
    *,
    query: str | None = None,
    region: str | None = None,
    paper: bool = False,
    card: bool = False,
    mobile: bool = False,
    sort: StoreSort = "latest",
    page: int = 1,
    per_page: int | None = None,
) -> StoreListResponse:
    """Return one page of the directory with per-store review stats."""

    page_size = per_page if per_page is not None else get_settings().stores_page_size
    if page_size < 1:
        raise ValueError(f"per_page must be positive, got {page_size}")
    review_stats = (
        select(
            Review.store_id.label("store_id"),
            func.count(Review.id).label("review_count"),
            func.avg(Review.rating).label("avg_rating"),
            func.sum(case((Review.is_available.is_(True), 1), else_=0)).label("available_count"),
        )
        .group_by(Review.store_id)
        .subquery()
    )

    filters = []
    search_term = (query or "").strip()
    if search_term:
        filters.append(or_(Store.name.ilike(f"%{search_term}%"), Store.address.ilike(f"%{search_term}%")))
    region_prefix = (region or "").strip()
    if region_prefix and region_prefix.lower() != ALL_REGIONS:
        filters.append(Store.address.ilike(f"{region_prefix}%"))
    if paper:
        filters.append(Store.paper_available.is_(True))
    if card:
        filters.append(Store.card_available.is_(True))
    if mobile:
        filters.append(Store.mobile_available.is_(True))

    total = int(db.scalar(select(func.count(Store.id)).where(*filters)) or 0)

    review_count = func.coalesce(review_stats.c.review_count, 0)
    if sort == "name":
        ordering = (Store.name.asc(), Store.id.asc())
    elif sort == "reviews":
        ordering = (review_count.desc(), Store.id.desc())
    else:
        ordering = (Store.id.desc(),)

    stmt = (
        select(
            Store,
            review_count.label("review_count"),
            review_stats.c.avg_rating,
            func.coalesce(review_stats.c.available_count, 0).label("available_count"),
        )
        .outerjoin(review_stats, review_stats.c.store_id == Store.id)
        .where(*filters)
        .order_by(*ordering)
        .limit(page_size)
        .offset((page - 1) * page_size)
    )
    items = []
    for store, count, avg_rating, available_count in db.execute(stmt).all():
        count = int(count or 0)
        items.append(
            StoreListItem(
                **StoreRead.model_validate(store).model_dump(),
                review_count=count,
                avg_rating=float(avg_rating or 0.0),
                available_percent=_percent(int(available_count or 0), count),
            )
        )

    return StoreListResponse(
        items=items,
        total=total,
        page=page,
        per_page=page_size,
        total_pages=math.ceil(total / page_size) if total else 0,
    )


def list_stores_in_bounds(
    db: Session,
    *,
    sw_lat: float,
    sw_lng: float,
    ne_lat: float,
    ne_lng: float,
) -> list[Store]:
    """Return geocoded stores strictly inside a map viewport."""

    stmt = (
        select(Store)
        .where(
            Store.lat > sw_lat,
            Store.lat < ne_lat,
            Store.lng > sw_lng,
            Store.lng < ne_lng,
            Store.lat != UNGEOCODED_COORDINATE,
            Store.lng != UNGEOCODED_COORDINATE,
        )
        .order_by(Store.id.asc())
        .limit(get_settings().map_store_limit)
    )
    return list(db.scalars(stmt).all())


def get_store_detail(db: Session, store_id: int, user_id: str | None = None) -> StoreDetail:
    """Assemble the detail view of one store."""

    store = db.get(Store, store_id)
    if store is None:
        raise RecordNotFound(f"Store {store_id} not found")

    reviews = list_reviews_for_store(db, store_id)
    review_count = len(reviews)
    average_rating = sum(review.rating for review in reviews) / review_count if review_count else 0.0
    available = sum(1 for review in reviews if review.is_available)

    return StoreDetail(
        store=StoreRead.model_validate(store),
        reviews=[ReviewRead.model_validate(review) for review in reviews],
        review_count=review_count,
        average_rating=average_rating,
        available_percent=_percent(available, review_count),
        reports=get_report_summary(db, store_id, user_id=user_id),
        favorited=is_favorite(db, user_id, store_id) if user_id else False,
    )


def get_directory_overview(db: Session) -> DirectoryOverview:
    """Return landing-page counts and the latest reviews."""

    return DirectoryOverview(
        store_count=int(db.scalar(select(func.count(Store.id))) or 0),
        review_count=int(db.scalar(select(func.count(Review.id))) or 0),
        recent_reviews=list_recent_reviews(db, limit=get_settings().recent_reviews_limit),
    )


def _percent(part: int, whole: int) -> int | None:
    if whole <= 0:
        return None
    return math.floor(part * 100 / whole + 0.5)
