"""SQLAlchemy metadata registry import for Alembic."""

from app.models import ClosureReport, Favorite, Review, ReviewLike, Store, StoreConfirmation, StoreSubmission
from app.models.base import Base

__all__ = [
    "Base",
    "Store",
    "StoreSubmission",
    "StoreConfirmation",
    "Review",
    "ReviewLike",
    "Favorite",
    "ClosureReport",
]
