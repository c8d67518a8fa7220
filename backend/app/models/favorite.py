"""Favorite store ORM model."""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, CreatedAtMixin, IdMixin


class Favorite(Base, IdMixin, CreatedAtMixin):
    """Store bookmarked by a user."""

    __tablename__ = "favorites"
    __table_args__ = (UniqueConstraint("store_id", "user_id", name="uq_favorites_store_user"),)

    store_id: Mapped[int] = mapped_column(ForeignKey("stores.id", ondelete="CASCADE"), index=True, nullable=False)
    user_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
