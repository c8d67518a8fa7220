"""Canonical store directory ORM model."""

from sqlalchemy import Boolean, Float, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, CreatedAtMixin, IdMixin

# (0, 0) marks a store whose address has not been geocoded yet.
UNGEOCODED_COORDINATE = 0.0


class Store(Base, IdMixin, CreatedAtMixin):
    """Merchant listed in the voucher acceptance directory."""

    __tablename__ = "stores"
    __table_args__ = (Index("ix_stores_lat_lng", "lat", "lng"),)

    name: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    address: Mapped[str] = mapped_column(String(512), index=True, nullable=False)
    road_address: Mapped[str | None] = mapped_column(String(512), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    market_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    category: Mapped[str | None] = mapped_column(String(128), nullable=True)
    lat: Mapped[float] = mapped_column(Float, default=UNGEOCODED_COORDINATE, nullable=False)
    lng: Mapped[float] = mapped_column(Float, default=UNGEOCODED_COORDINATE, nullable=False)
    card_available: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    mobile_available: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    paper_available: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    source_submission_id: Mapped[int | None] = mapped_column(
        ForeignKey("store_submissions.id", ondelete="SET NULL"),
        unique=True,
        nullable=True,
    )
