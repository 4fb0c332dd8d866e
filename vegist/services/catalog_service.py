# vegist/services/catalog_service.py
import json
import logging
import uuid
from datetime import datetime, timezone

from pydantic import ValidationError as PydanticValidationError
from sqlmodel import Session

from vegist.core.errors import QuotaError, RemoteError
from vegist.core.storage_utils import resolve_image_url
from vegist.models.category import Category
from vegist.models.product import Product
from vegist.repositories.category_repo import CategoryRepository
from vegist.repositories.product_repo import ProductRepository
from vegist.repositories.storage_repo import KeyValueStore
from vegist.schemas.catalog import CatalogPage, CatalogState, FilterState, LoadCategory, SetPage
from vegist.schemas.product import CategoryRead, ProductRead
from vegist.services import catalog_filter

logger = logging.getLogger(__name__)

SELECTED_CATEGORY_KEY = "selected-category"
FILTER_STATE_KEY = "catalog-filter"

ALL_PRODUCTS_ID = "all-products"


def all_products_category(product_count: int = 0) -> CategoryRead:
    return CategoryRead(
        id=ALL_PRODUCTS_ID,
        name="All Products",
        image_url="",
        description="Browse all available products",
        product_count=product_count,
    )


def to_product_read(product: Product) -> ProductRead:
    """Table row -> closed read type, with image references resolved."""
    read = ProductRead.model_validate(product)
    return read.model_copy(
        update={
            "image_url": resolve_image_url(read.image_url),
            "images": [resolve_image_url(i) for i in read.images] if read.images else None,
        }
    )


def to_category_read(category: Category, product_count: int = 0) -> CategoryRead:
    return CategoryRead(
        id=str(category.id),
        name=category.name,
        image_url=resolve_image_url(category.image_url),
        description=category.description,
        product_count=product_count,
    )


class CatalogService:
    """
    Category browsing for one client.

    Responsibilities:
      - categories with derived product counts (+ synthetic "All Products")
      - loading a category's products with an in-memory fallback
      - running filter actions through the pure reducer
      - keeping the selected category and filter state in the client store
    """

    def __init__(
        self,
        product_repo: ProductRepository,
        category_repo: CategoryRepository,
        page_size: int = catalog_filter.PAGE_SIZE,
    ):
        self.product_repo = product_repo
        self.category_repo = category_repo
        self.page_size = page_size

    # ---- categories ----

    def list_categories(self, session: Session) -> list[CategoryRead]:
        """
        All categories ordered by name, "All Products" first.

        A data store failure yields an empty list.
        """
        try:
            categories = self.category_repo.list_all(session)
            products = self.product_repo.list_all(session)
        except RemoteError as e:
            logger.error("Error fetching categories: %s", e.detail)
            return []

        counted = [
            to_category_read(
                c,
                product_count=sum(1 for p in products if c.name in (p.categories or [])),
            )
            for c in categories
        ]
        return [all_products_category(len(products)), *counted]

    def resolve_category(self, session: Session, ref: str | None) -> CategoryRead:
        """
        Find a category by id or (case-insensitive) name.

        Unknown references fall back to All Products.
        """
        if not ref or ref == ALL_PRODUCTS_ID:
            return all_products_category()

        try:
            category = None
            try:
                category = self.category_repo.get_by_id(session, uuid.UUID(ref))
            except ValueError:
                pass
            if category is None:
                category = self.category_repo.get_by_name(session, ref)
        except RemoteError as e:
            logger.error("Error resolving category %r: %s", ref, e.detail)
            return all_products_category()

        if category is None:
            logger.warning("Unknown category %r, showing all products", ref)
            return all_products_category()
        return to_category_read(category)

    # ---- products ----

    def load_products(self, session: Session, category: CategoryRead) -> list[ProductRead]:
        """
        Products of a category.

        If the category query fails, load everything and filter by category
        name in memory; if that fails too, the category is empty.
        """
        try:
            if category.id == ALL_PRODUCTS_ID:
                rows = self.product_repo.list_all(session)
            else:
                rows = self.product_repo.list_by_category(session, category.name)
            return [to_product_read(p) for p in rows]
        except RemoteError as e:
            logger.error("Error fetching products: %s", e.detail)

        try:
            rows = self.product_repo.list_all(session)
        except RemoteError as e:
            logger.error("Fallback product query also failed: %s", e.detail)
            return []

        if category.id != ALL_PRODUCTS_ID:
            rows = [p for p in rows if category.name in (p.categories or [])]
        return [to_product_read(p) for p in rows]

    # ---- client store ----

    def _read_json(self, storage: KeyValueStore, key: str):
        try:
            raw = storage.get(key)
            return json.loads(raw) if raw else None
        except RemoteError as e:
            logger.error("Error reading %s: %s", key, e.detail)
        except ValueError:
            logger.warning("Invalid %s data in storage, ignoring it", key)
        return None

    def _write(self, storage: KeyValueStore, key: str, value: str) -> None:
        try:
            storage.set(key, value)
        except (QuotaError, RemoteError) as e:
            logger.error("%s not saved: %s", key, e.detail)

    def selected_category(self, storage: KeyValueStore) -> CategoryRead:
        data = self._read_json(storage, SELECTED_CATEGORY_KEY)
        if not data:
            return all_products_category()
        try:
            return CategoryRead.model_validate(data)
        except PydanticValidationError:
            logger.warning("Invalid stored category, showing all products")
            return all_products_category()

    def _save_state(self, storage: KeyValueStore, state: CatalogState) -> None:
        if state.category is not None:
            self._write(storage, SELECTED_CATEGORY_KEY, state.category.model_dump_json())
        payload = {
            "category_id": state.category.id if state.category else None,
            "filters": state.filters.model_dump(mode="json"),
        }
        self._write(storage, FILTER_STATE_KEY, json.dumps(payload))

    def _stored_filters(self, storage: KeyValueStore, category_id: str) -> FilterState | None:
        data = self._read_json(storage, FILTER_STATE_KEY)
        if not isinstance(data, dict) or data.get("category_id") != category_id:
            return None
        try:
            return FilterState.model_validate(data.get("filters") or {})
        except PydanticValidationError:
            logger.warning("Invalid stored filter state, using defaults")
            return None

    # ---- state ----

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    def current_state(self, session: Session, storage: KeyValueStore) -> CatalogState:
        """
        Rebuild the client's catalog state: selected category, fresh products,
        then the stored filters for that category (if any).
        """
        category = self.selected_category(storage)
        products = self.load_products(session, category)
        now = self._now()
        state = catalog_filter.reduce(
            CatalogState(),
            LoadCategory(category=category, products=products),
            now=now,
            page_size=self.page_size,
        )

        stored = self._stored_filters(storage, category.id)
        if stored is None:
            return state
        return state.model_copy(
            update={
                "filters": stored,
                "visible": catalog_filter.apply_filters(state.products, stored, now),
            }
        )

    def select_category(
        self,
        session: Session,
        storage: KeyValueStore,
        ref: str | None,
    ) -> CatalogPage:
        """Switch category: every filter is reset, sort order is kept."""
        category = self.resolve_category(session, ref)
        previous = self._stored_filters(storage, self.selected_category(storage).id)
        seed = CatalogState(filters=previous) if previous else CatalogState()

        state = catalog_filter.reduce(
            seed,
            LoadCategory(category=category, products=self.load_products(session, category)),
            now=self._now(),
            page_size=self.page_size,
        )
        self._save_state(storage, state)
        return catalog_filter.page_view(state, self.page_size)

    def view(
        self,
        session: Session,
        storage: KeyValueStore,
        page: int | None = None,
    ) -> CatalogPage:
        state = self.current_state(session, storage)
        if page is not None:
            state = catalog_filter.reduce(state, SetPage(page=page), page_size=self.page_size)
            self._save_state(storage, state)
        return catalog_filter.page_view(state, self.page_size)

    def dispatch(self, session: Session, storage: KeyValueStore, action) -> CatalogPage:
        """Apply one filter action to the client's catalog and persist it."""
        state = self.current_state(session, storage)
        state = catalog_filter.reduce(state, action, now=self._now(), page_size=self.page_size)
        self._save_state(storage, state)
        return catalog_filter.page_view(state, self.page_size)
