import json

import pytest

from vegist.core.errors import RemoteError
from vegist.repositories.category_repo import CategoryRepository
from vegist.repositories.product_repo import ProductRepository
from vegist.schemas.catalog import ApplyPrice, SetMaterials, SetSlider, SetSort
from vegist.services.catalog_service import (
    ALL_PRODUCTS_ID,
    FILTER_STATE_KEY,
    SELECTED_CATEGORY_KEY,
    CatalogService,
)


class FailingCategoryQuery(ProductRepository):
    def list_by_category(self, session, category_name):
        raise RemoteError("category query failed")


class BrokenRepository(CategoryRepository):
    def list_all(self, session):
        raise RemoteError("down")


@pytest.fixture
def service():
    return CatalogService(ProductRepository(), CategoryRepository(), page_size=2)


@pytest.fixture
def catalog(make_category, make_product):
    make_category("Fruits")
    make_category("Dairy")
    make_product("Apple", 3, categories=["Fruits"], material="Local")
    make_product("Mango", 9, categories=["Fruits"], material="Imported")
    make_product("Pineapple", 14, categories=["Fruits", "Exotic"], material="Imported")
    make_product("Milk", 2, categories=["Dairy"])


def test_categories_have_counts_and_all_products_first(service, session, catalog):
    categories = service.list_categories(session)

    assert [(c.name, c.product_count) for c in categories] == [
        ("All Products", 4),
        ("Dairy", 1),
        ("Fruits", 3),
    ]
    assert categories[0].id == ALL_PRODUCTS_ID


def test_category_listing_failure_is_empty(session, catalog):
    service = CatalogService(ProductRepository(), BrokenRepository())
    assert service.list_categories(session) == []


def test_resolve_by_name_and_unknown_fallback(service, session, catalog):
    assert service.resolve_category(session, "fruits").name == "Fruits"
    assert service.resolve_category(session, "Toys").id == ALL_PRODUCTS_ID
    assert service.resolve_category(session, None).id == ALL_PRODUCTS_ID


def test_category_products_use_membership(service, session, catalog):
    fruits = service.resolve_category(session, "Fruits")
    names = {p.name for p in service.load_products(session, fruits)}
    assert names == {"Apple", "Mango", "Pineapple"}


def test_failed_category_query_falls_back_to_memory_filter(session, catalog):
    service = CatalogService(FailingCategoryQuery(), CategoryRepository())
    dairy = service.resolve_category(session, "Dairy")
    assert [p.name for p in service.load_products(session, dairy)] == ["Milk"]


def test_select_category_persists_selection(service, session, storage, catalog):
    page = service.select_category(session, storage, "Fruits")

    assert page.category.name == "Fruits"
    assert page.total_items == 3
    assert page.total_pages == 2
    assert page.max_price == 20
    assert page.available_materials == ["Imported", "Local"]
    assert json.loads(storage.data[SELECTED_CATEGORY_KEY])["name"] == "Fruits"


def test_filters_survive_between_requests(service, session, storage, catalog):
    service.select_category(session, storage, "Fruits")
    service.dispatch(session, storage, SetSlider(min=5, max=20))
    service.dispatch(session, storage, ApplyPrice())
    page = service.dispatch(session, storage, SetSort(sort_by="price-high"))

    assert [p.name for p in page.items] == ["Pineapple", "Mango"]

    again = service.view(session, storage)
    assert again.filters.applied_price.min == 5
    assert [p.name for p in again.items] == ["Pineapple", "Mango"]


def test_switching_category_resets_filters_keeps_sort(service, session, storage, catalog):
    service.select_category(session, storage, "Fruits")
    service.dispatch(session, storage, SetMaterials(materials=["Imported"]))
    service.dispatch(session, storage, SetSort(sort_by="name"))

    page = service.select_category(session, storage, "All Products")

    assert page.filters.materials == []
    assert page.filters.sort_by == "name"
    assert page.total_items == 4
    assert json.loads(storage.data[FILTER_STATE_KEY])["category_id"] == ALL_PRODUCTS_ID


def test_view_moves_page(service, session, storage, catalog):
    service.select_category(session, storage, "All Products")
    page = service.view(session, storage, page=5)
    assert page.page == 2
    assert len(page.items) == 2


def test_unreadable_store_shows_all_products(service, session, storage, catalog):
    storage.fail_reads = True
    page = service.view(session, storage)
    assert page.category.id == ALL_PRODUCTS_ID
    assert page.total_items == 4


def test_non_ascii_category_names(service, session, make_category, make_product):
    make_category("तरकारी")
    make_category("Fromage Crème")
    make_product("Gundruk", categories=["तरकारी"])
    make_product("Brie", categories=["Fromage Crème"])

    counts = {c.name: c.product_count for c in service.list_categories(session)}
    vegetables = service.resolve_category(session, "तरकारी")
    loaded = service.load_products(session, vegetables)

    assert counts["तरकारी"] == 1
    assert [p.name for p in loaded] == ["Gundruk"]
    assert [p.name for p in ProductRepository().list_by_category(session, "Fromage Crème")] == [
        "Brie"
    ]
