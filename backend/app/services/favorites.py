"""Favorite store services."""

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.identity import ActingUser
from app.models.favorite import Favorite
from app.models.store import Store
from app.schemas.favorite import FavoriteRead
from app.schemas.store import StoreSummary
from app.services.errors import RecordNotFound
from app.services.transactions import write_guard


def add_favorite(db: Session, user: ActingUser, store_id: int) -> bool:
    """Bookmark a store; adding an existing favorite changes nothing."""

    with write_guard(db, "add_favorite"):
        if db.get(Store, store_id) is None:
            raise RecordNotFound(f"Store {store_id} not found")
        if is_favorite(db, user.user_id, store_id):
            return True
        db.add(Favorite(store_id=store_id, user_id=user.user_id))
        try:
            db.commit()
        except IntegrityError:
            # A concurrent request stored the same favorite first.
            db.rollback()
    return True


def remove_favorite(db: Session, user: ActingUser, store_id: int) -> bool:
    with write_guard(db, "remove_favorite"):
        db.execute(delete(Favorite).where(Favorite.store_id == store_id, Favorite.user_id == user.user_id))
        db.commit()
    return False


def is_favorite(db: Session, user_id: str, store_id: int) -> bool:
    stmt = select(Favorite.id).where(Favorite.store_id == store_id, Favorite.user_id == user_id)
    return db.scalar(stmt) is not None


def list_favorites(db: Session, user: ActingUser) -> list[FavoriteRead]:
    """Return the user's favorites newest first with store summaries."""

    stmt = (
        select(Favorite, Store)
        .join(Store, Store.id == Favorite.store_id)
        .where(Favorite.user_id == user.user_id)
        .order_by(Favorite.created_at.desc(), Favorite.id.desc())
    )
    return [
        FavoriteRead(
            store_id=favorite.store_id,
            created_at=favorite.created_at,
            store=StoreSummary.model_validate(store),
        )
        for favorite, store in db.execute(stmt).all()
    ]
