"""Confirmation ledger ORM model."""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, CreatedAtMixin, IdMixin


class StoreConfirmation(Base, IdMixin, CreatedAtMixin):
    """One user's confirmation of one pending submission."""

    __tablename__ = "store_confirmations"
    __table_args__ = (
        UniqueConstraint("submission_id", "user_id", name="uq_store_confirmations_submission_user"),
    )

    submission_id: Mapped[int] = mapped_column(
        ForeignKey("store_submissions.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
