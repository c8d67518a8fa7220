"""ORM models package exports."""

from app.models.closure_report import ClosureReport
from app.models.favorite import Favorite
from app.models.review import Review
from app.models.review_like import ReviewLike
from app.models.store import Store
from app.models.store_confirmation import StoreConfirmation
from app.models.store_submission import StoreSubmission

__all__ = [
    "Store",
    "StoreSubmission",
    "StoreConfirmation",
    "Review",
    "ReviewLike",
    "Favorite",
    "ClosureReport",
]
