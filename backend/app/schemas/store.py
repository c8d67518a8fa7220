"""Store directory request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

from app.schemas.report import ReportSummary
from app.schemas.review import RecentReviewItem, ReviewRead

StoreSort = Literal["latest", "name", "reviews"]


class StoreSummary(BaseModel):
    """Minimal store fields for nested listings."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: str
    road_address: str | None


class StoreRead(BaseModel):
    """Serialized store."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: str
    road_address: str | None
    phone: str | None
    market_name: str | None
    category: str | None
    lat: float
    lng: float
    card_available: bool
    mobile_available: bool
    paper_available: bool
    source_submission_id: int | None
    created_at: datetime


class StoreListItem(StoreRead):
    """Store row with aggregated review stats."""

    review_count: int = 0
    avg_rating: float = 0.0
    available_percent: int | None = None


class StoreListResponse(BaseModel):
    """Paginated store directory page."""

    items: list[StoreListItem]
    total: int
    page: int
    per_page: int
    total_pages: int


class StoreDetail(BaseModel):
    """Store detail view payload."""

    store: StoreRead
    reviews: list[ReviewRead]
    review_count: int
    average_rating: float
    available_percent: int | None
    reports: ReportSummary
    favorited: bool


class DirectoryOverview(BaseModel):
    """Landing page counts and latest reviews."""

    store_count: int
    review_count: int
    recent_reviews: list[RecentReviewItem]
