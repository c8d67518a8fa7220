"""Store operating-status report ORM model."""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, CreatedAtMixin, IdMixin

REPORT_OPEN = "open"
REPORT_CLOSED = "closed"
REPORT_NO_VOUCHER = "no_voucher"


class ClosureReport(Base, IdMixin, CreatedAtMixin):
    """A user's assertion about whether a store still operates."""

    __tablename__ = "closure_reports"
    __table_args__ = (UniqueConstraint("store_id", "user_id", name="uq_closure_reports_store_user"),)

    store_id: Mapped[int] = mapped_column(ForeignKey("stores.id", ondelete="CASCADE"), index=True, nullable=False)
    user_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    status: Mapped[str] = mapped_column(String(32), nullable=False)
