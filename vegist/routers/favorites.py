# vegist/routers/favorites.py
from fastapi import APIRouter, Depends

from vegist.core.session import get_client_storage
from vegist.repositories.storage_repo import DatabaseStorage
from vegist.schemas.session import FavoriteStatus
from vegist.services.favorites import FavoritesStore

router = APIRouter(prefix="/favorites", tags=["Favorites"])


@router.get("", response_model=list[str])
def list_favorites(storage: DatabaseStorage = Depends(get_client_storage)):
    """Product ids on the client's wishlist."""
    return FavoritesStore(storage).list_favorites()


@router.get("/{product_id}", response_model=FavoriteStatus)
def get_favorite(product_id: str, storage: DatabaseStorage = Depends(get_client_storage)):
    return FavoriteStatus(
        product_id=product_id,
        is_favorite=FavoritesStore(storage).is_favorite(product_id),
    )


@router.post("/{product_id}/toggle", response_model=FavoriteStatus)
def toggle_favorite(product_id: str, storage: DatabaseStorage = Depends(get_client_storage)):
    """Add the product if absent, remove it otherwise."""
    return FavoriteStatus(
        product_id=product_id,
        is_favorite=FavoritesStore(storage).toggle_favorite(product_id),
    )
