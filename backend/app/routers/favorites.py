"""Favorite store routes."""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from app.db.dependencies import get_db
from app.identity import ActingUser, require_user
from app.routers.errors import to_http_exception
from app.schemas.common import ApiResponse
from app.schemas.favorite import FavoriteRead, FavoriteState
from app.services.errors import StoreDirectoryError
from app.services.favorites import add_favorite, list_favorites, remove_favorite

router = APIRouter()


@router.put("/stores/{store_id}/favorite", response_model=ApiResponse[FavoriteState])
def put_favorite(
    store_id: int = Path(..., ge=1),
    user: ActingUser = Depends(require_user),
    db: Session = Depends(get_db),
) -> ApiResponse[FavoriteState]:
    """Bookmark a store."""

    try:
        favorited = add_favorite(db, user, store_id)
    except StoreDirectoryError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse(data=FavoriteState(store_id=store_id, favorited=favorited))


@router.delete("/stores/{store_id}/favorite", response_model=ApiResponse[FavoriteState])
def delete_favorite(
    store_id: int = Path(..., ge=1),
    user: ActingUser = Depends(require_user),
    db: Session = Depends(get_db),
) -> ApiResponse[FavoriteState]:
    """Remove a bookmark."""

    try:
        favorited = remove_favorite(db, user, store_id)
    except StoreDirectoryError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse(data=FavoriteState(store_id=store_id, favorited=favorited))


@router.get("/me/favorites", response_model=ApiResponse[list[FavoriteRead]])
def get_my_favorites(
    user: ActingUser = Depends(require_user),
    db: Session = Depends(get_db),
) -> ApiResponse[list[FavoriteRead]]:
    return ApiResponse(data=list_favorites(db, user))
