"""Review and review-like schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

VoucherType = Literal["paper", "card", "mobile"]


class ReviewCreate(BaseModel):
    """New review payload."""

    content: str = Field(min_length=1, max_length=2000)
    rating: int = Field(ge=1, le=5)
    is_available: bool = True
    voucher_type: VoucherType | None = None
    min_amount: int | None = Field(default=None, ge=0)
    image_url: str | None = Field(default=None, max_length=1024)


class ReviewRead(BaseModel):
    """Serialized review."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    store_id: int
    user_id: str
    content: str
    rating: int
    is_available: bool
    voucher_type: str | None
    min_amount: int
    image_url: str | None
    created_at: datetime


class RecentReviewItem(ReviewRead):
    """Review joined with its store's name and address."""

    store_name: str
    store_address: str


class ReviewLikesRead(BaseModel):
    """Like counts per review and the reviews liked by the acting user."""

    like_counts: dict[int, int]
    liked_review_ids: list[int]


class ReviewLikeState(BaseModel):
    review_id: int
    liked: bool
    like_count: int
