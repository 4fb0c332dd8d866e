# vegist/services/catalog_filter.py
"""
Filtering, sorting and paging of a category's product list.

Everything here is pure: the category view is a `CatalogState` and every
user action goes through `reduce(state, action)`, which returns a new state
with `visible` recomputed. There are no chained watchers: a slider move
only changes pending values, an apply commits them and recomputes once.
"""
import math
from datetime import datetime, timedelta, timezone
from typing import Iterable, Sequence

from vegist.schemas.catalog import (
    IN_STOCK,
    OUT_OF_STOCK,
    ApplyPrice,
    CatalogPage,
    CatalogState,
    FilterState,
    LoadCategory,
    PriceRange,
    ResetAvailability,
    ResetMaterials,
    ResetPrice,
    ResetProductTypes,
    SetAvailability,
    SetMaterials,
    SetPage,
    SetProductTypes,
    SetSlider,
    SetSort,
    SortKey,
)
from vegist.schemas.product import ProductRead

PAGE_SIZE = 8
NEW_PRODUCT_DAYS = 30
NEW_PRODUCT = "New Product"
DEFAULT_PRODUCT_TYPES = ["Best Seller", "New Product", "Special Product"]
DEFAULT_MAX_PRICE = 100


# ---- derived values ----


def category_max_price(products: Sequence[ProductRead]) -> float:
    """
    Highest price rounded up to the next multiple of 10
    (100 for an empty list).
    """
    if not products:
        return DEFAULT_MAX_PRICE
    highest = math.ceil(max(p.price for p in products))
    return math.ceil(highest / 10) * 10


def extract_materials(products: Iterable[ProductRead]) -> list[str]:
    return sorted({p.material for p in products if p.material and p.material.strip()})


def extract_product_types(products: Iterable[ProductRead]) -> list[str]:
    types = {t for p in products for t in p.product_types if t and t.strip()}
    if not types:
        return list(DEFAULT_PRODUCT_TYPES)
    return sorted(types)


def is_new_product(
    product: ProductRead,
    now: datetime | None = None,
    days: int = NEW_PRODUCT_DAYS,
) -> bool:
    """'New Product' is computed from the creation time, not stored."""
    now = now or datetime.now(timezone.utc)
    return product.created_at > now - timedelta(days=days)


# ---- predicates ----


def filter_by_price(products: Iterable[ProductRead], price: PriceRange) -> list[ProductRead]:
    return [p for p in products if price.min <= p.price <= price.max]


def filter_by_material(products: Iterable[ProductRead], materials: Sequence[str]) -> list[ProductRead]:
    if not materials:
        return list(products)
    return [p for p in products if p.material and p.material in materials]


def filter_by_product_type(
    products: Iterable[ProductRead],
    product_types: Sequence[str],
    now: datetime | None = None,
) -> list[ProductRead]:
    if not product_types:
        return list(products)

    selected = set(product_types)
    wants_new = NEW_PRODUCT in selected

    def matches(p: ProductRead) -> bool:
        if selected.intersection(p.product_types):
            return True
        return wants_new and is_new_product(p, now)

    return [p for p in products if matches(p)]


def filter_by_availability(
    products: Iterable[ProductRead],
    availability: Sequence[str],
) -> list[ProductRead]:
    """
    Both or neither selected: keep everything (out-of-stock products stay
    listed and are only marked by the client).
    """
    in_stock = IN_STOCK in availability
    out_of_stock = OUT_OF_STOCK in availability
    if in_stock == out_of_stock:
        return list(products)
    return [p for p in products if p.in_stock is in_stock]


def sort_products(products: Iterable[ProductRead], sort_by: SortKey) -> list[ProductRead]:
    """Stable sort; 'default' keeps input order."""
    items = list(products)
    if sort_by == "price-low":
        return sorted(items, key=lambda p: p.price)
    if sort_by == "price-high":
        return sorted(items, key=lambda p: p.price, reverse=True)
    if sort_by == "name":
        return sorted(items, key=lambda p: p.name.casefold())
    if sort_by == "newest":
        return sorted(items, key=lambda p: p.created_at, reverse=True)
    return items


def apply_filters(
    products: Iterable[ProductRead],
    filters: FilterState,
    now: datetime | None = None,
) -> list[ProductRead]:
    """
    price -> material -> product type -> availability -> sort.
    """
    result = filter_by_price(products, filters.applied_price)
    result = filter_by_material(result, filters.materials)
    result = filter_by_product_type(result, filters.product_types, now)
    result = filter_by_availability(result, filters.availability)
    return sort_products(result, filters.sort_by)


# ---- paging ----


def total_pages(total_items: int, page_size: int = PAGE_SIZE) -> int:
    return max(1, math.ceil(total_items / page_size))


def paginate(
    products: Sequence[ProductRead],
    page: int,
    page_size: int = PAGE_SIZE,
) -> list[ProductRead]:
    """Slice one 1-based page of an already filtered and sorted list."""
    page = max(1, page)
    start = (page - 1) * page_size
    return list(products[start : start + page_size])


def page_view(state: CatalogState, page_size: int = PAGE_SIZE) -> CatalogPage:
    pages = total_pages(len(state.visible), page_size)
    page = min(state.filters.page, pages)
    return CatalogPage(
        category=state.category,
        items=paginate(state.visible, page, page_size),
        page=page,
        page_size=page_size,
        total_items=len(state.visible),
        total_pages=pages,
        max_price=state.max_price,
        available_materials=state.available_materials,
        available_product_types=state.available_product_types,
        filters=state.filters,
    )


# ---- reducer ----


def _recompute(state: CatalogState, filters: FilterState, now: datetime | None) -> CatalogState:
    filters = filters.model_copy(update={"page": 1})
    return state.model_copy(
        update={
            "filters": filters,
            "visible": apply_filters(state.products, filters, now),
        }
    )


def initial_state(
    products: Sequence[ProductRead],
    category=None,
    now: datetime | None = None,
) -> CatalogState:
    return reduce(CatalogState(), LoadCategory(category=category, products=list(products)), now=now)


def reduce(
    state: CatalogState,
    action,
    now: datetime | None = None,
    page_size: int = PAGE_SIZE,
) -> CatalogState:
    """
    state x action -> state.

    Every action except SetSlider and SetPage recomputes `visible` and
    returns to page 1.
    """
    filters = state.filters

    if isinstance(action, LoadCategory):
        max_price = category_max_price(action.products)
        full_range = PriceRange(min=0, max=max_price)
        fresh = CatalogState(
            category=action.category,
            products=list(action.products),
            max_price=max_price,
            available_materials=extract_materials(action.products),
            available_product_types=extract_product_types(action.products),
            filters=FilterState(
                slider=full_range,
                applied_price=full_range.model_copy(),
                sort_by=filters.sort_by,
            ),
        )
        return _recompute(fresh, fresh.filters, now)

    if isinstance(action, SetSlider):
        slider = PriceRange(
            min=min(action.min, state.max_price),
            max=min(action.max, state.max_price),
        )
        return state.model_copy(
            update={"filters": filters.model_copy(update={"slider": slider})}
        )

    if isinstance(action, ApplyPrice):
        return _recompute(
            state,
            filters.model_copy(update={"applied_price": filters.slider.model_copy()}),
            now,
        )

    if isinstance(action, ResetPrice):
        full_range = PriceRange(min=0, max=state.max_price)
        return _recompute(
            state,
            filters.model_copy(
                update={"slider": full_range, "applied_price": full_range.model_copy()}
            ),
            now,
        )

    if isinstance(action, SetMaterials):
        return _recompute(
            state,
            FilterState.model_validate({**filters.model_dump(), "materials": action.materials}),
            now,
        )

    if isinstance(action, ResetMaterials):
        return _recompute(state, filters.model_copy(update={"materials": []}), now)

    if isinstance(action, SetProductTypes):
        return _recompute(
            state,
            FilterState.model_validate(
                {**filters.model_dump(), "product_types": action.product_types}
            ),
            now,
        )

    if isinstance(action, ResetProductTypes):
        return _recompute(state, filters.model_copy(update={"product_types": []}), now)

    if isinstance(action, SetAvailability):
        return _recompute(
            state,
            FilterState.model_validate(
                {**filters.model_dump(), "availability": action.availability}
            ),
            now,
        )

    if isinstance(action, ResetAvailability):
        return _recompute(state, filters.model_copy(update={"availability": []}), now)

    if isinstance(action, SetSort):
        return _recompute(state, filters.model_copy(update={"sort_by": action.sort_by}), now)

    if isinstance(action, SetPage):
        page = min(max(1, action.page), total_pages(len(state.visible), page_size))
        return state.model_copy(
            update={"filters": filters.model_copy(update={"page": page})}
        )

    raise ValueError(f"Unknown catalog action: {action!r}")
