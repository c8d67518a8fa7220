"""Favorite store schemas."""

from datetime import datetime

from pydantic import BaseModel

from app.schemas.store import StoreSummary


class FavoriteState(BaseModel):
    store_id: int
    favorited: bool


class FavoriteRead(BaseModel):
    """Favorite row with its store summary."""

    store_id: int
    created_at: datetime
    store: StoreSummary
