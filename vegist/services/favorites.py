# vegist/services/favorites.py
import json
import logging

from vegist.core.errors import QuotaError, RemoteError
from vegist.repositories.storage_repo import KeyValueStore

logger = logging.getLogger(__name__)

FAVORITES_KEY = "favorites"


class FavoritesStore:
    """Wishlist: a set of product ids kept in the client store."""

    def __init__(self, storage: KeyValueStore):
        self.storage = storage

    def list_favorites(self) -> list[str]:
        try:
            raw = self.storage.get(FAVORITES_KEY)
            data = json.loads(raw) if raw else []
        except RemoteError as e:
            logger.error("Error loading favorites: %s", e.detail)
            return []
        except ValueError:
            logger.warning("Invalid favorites data in storage, ignoring it")
            return []

        if not isinstance(data, list):
            return []
        return [str(pid) for pid in data]

    def is_favorite(self, product_id: str) -> bool:
        return product_id in self.list_favorites()

    def toggle_favorite(self, product_id: str) -> bool:
        """
        Add or remove a product id.

        Returns:
            True if the product is a favorite after the call.
        """
        favorites = self.list_favorites()
        if product_id in favorites:
            favorites = [pid for pid in favorites if pid != product_id]
            now_favorite = False
        else:
            favorites.append(product_id)
            now_favorite = True

        try:
            self.storage.set(FAVORITES_KEY, json.dumps(favorites))
        except (QuotaError, RemoteError) as e:
            logger.error("Favorites not saved: %s", e.detail)
        return now_favorite
