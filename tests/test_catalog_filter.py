from datetime import timedelta

import pytest

from conftest import NOW, product_read
from vegist.schemas.catalog import (
    ApplyPrice,
    FilterState,
    LoadCategory,
    PriceRange,
    ResetPrice,
    SetAvailability,
    SetMaterials,
    SetPage,
    SetProductTypes,
    SetSlider,
    SetSort,
)
from vegist.services import catalog_filter as cf


@pytest.fixture
def products():
    return [
        product_read("Banana", 4, material="Organic"),
        product_read("apple", 12, material="Local", product_types=["Best Seller"]),
        product_read("Cherry", 27, in_stock=False),
        product_read("Durian", 55, material="Organic", created_at=NOW - timedelta(days=3)),
    ]


def test_price_filter_is_inclusive(products):
    result = cf.filter_by_price(products, PriceRange(min=4, max=27))
    assert [p.name for p in result] == ["Banana", "apple", "Cherry"]
    assert all(4 <= p.price <= 27 for p in result)


def test_apply_filters_is_idempotent(products):
    filters = FilterState(
        applied_price=PriceRange(min=0, max=60),
        materials=["Organic"],
        sort_by="price-high",
    )
    once = cf.apply_filters(products, filters, NOW)
    twice = cf.apply_filters(once, filters, NOW)
    assert [p.id for p in once] == [p.id for p in twice]


def test_price_sorts_are_reverses_of_each_other(products):
    low = cf.sort_products(products, "price-low")
    high = cf.sort_products(products, "price-high")
    assert [p.price for p in low] == [4, 12, 27, 55]
    assert [p.id for p in low] == [p.id for p in reversed(high)]


def test_name_sort_ignores_case(products):
    assert [p.name for p in cf.sort_products(products, "name")] == [
        "apple",
        "Banana",
        "Cherry",
        "Durian",
    ]


def test_newest_sort_and_default_order(products):
    assert cf.sort_products(products, "newest")[0].name == "Durian"
    assert cf.sort_products(products, "default") == products


def test_material_filter_empty_selection_keeps_all(products):
    assert cf.filter_by_material(products, []) == products
    assert [p.name for p in cf.filter_by_material(products, ["Organic"])] == [
        "Banana",
        "Durian",
    ]


def test_availability_filter(products):
    assert [p.name for p in cf.filter_by_availability(products, ["Out of Stock"])] == ["Cherry"]
    assert len(cf.filter_by_availability(products, ["In Stock"])) == 3
    assert cf.filter_by_availability(products, ["In Stock", "Out of Stock"]) == products
    assert cf.filter_by_availability(products, []) == products


def test_new_product_type_matches_recent_products(products):
    result = cf.filter_by_product_type(products, ["New Product"], NOW)
    assert [p.name for p in result] == ["Durian"]

    result = cf.filter_by_product_type(products, ["New Product", "Best Seller"], NOW)
    assert [p.name for p in result] == ["apple", "Durian"]


def test_category_max_price_rounds_up(products):
    assert cf.category_max_price(products) == 60
    assert cf.category_max_price([product_read(price=40)]) == 40
    assert cf.category_max_price([product_read(price=40.5)]) == 50
    assert cf.category_max_price([]) == 100


def test_extracted_options(products):
    assert cf.extract_materials(products) == ["Local", "Organic"]
    assert cf.extract_product_types(products) == ["Best Seller"]
    assert cf.extract_product_types([product_read()]) == cf.DEFAULT_PRODUCT_TYPES


def test_load_category_resets_filters_but_keeps_sort(products):
    state = cf.initial_state(products, now=NOW)
    state = cf.reduce(state, SetSort(sort_by="price-low"), NOW)
    state = cf.reduce(state, SetMaterials(materials=["Organic"]), NOW)

    state = cf.reduce(state, LoadCategory(products=products[:2]), NOW)

    assert state.filters.materials == []
    assert state.filters.sort_by == "price-low"
    assert state.max_price == 20
    assert state.filters.applied_price == PriceRange(min=0, max=20)
    assert [p.name for p in state.visible] == ["Banana", "apple"]


def test_slider_only_changes_pending_values(products):
    state = cf.initial_state(products, now=NOW)
    moved = cf.reduce(state, SetSlider(min=10, max=500), NOW)

    assert moved.filters.slider == PriceRange(min=10, max=60)
    assert moved.visible == state.visible

    applied = cf.reduce(moved, ApplyPrice(), NOW)
    assert [p.name for p in applied.visible] == ["apple", "Cherry", "Durian"]

    reset = cf.reduce(applied, ResetPrice(), NOW)
    assert len(reset.visible) == 4
    assert reset.filters.slider == PriceRange(min=0, max=60)


def test_filter_change_returns_to_first_page():
    many = [product_read(f"P{i}", i + 1) for i in range(20)]
    state = cf.initial_state(many, now=NOW)

    state = cf.reduce(state, SetPage(page=3), NOW)
    assert state.filters.page == 3

    state = cf.reduce(state, SetAvailability(availability=["In Stock"]), NOW)
    assert state.filters.page == 1


def test_set_page_is_clamped():
    many = [product_read(f"P{i}", i + 1) for i in range(20)]
    state = cf.initial_state(many, now=NOW)

    assert cf.reduce(state, SetPage(page=99), NOW).filters.page == 3
    assert cf.reduce(state, SetPage(page=0), NOW).filters.page == 1


def test_page_view_slices_visible_list():
    many = [product_read(f"P{i}", i + 1) for i in range(20)]
    state = cf.reduce(cf.initial_state(many, now=NOW), SetPage(page=3), NOW)

    page = cf.page_view(state)

    assert page.total_items == 20
    assert page.total_pages == 3
    assert [p.name for p in page.items] == ["P16", "P17", "P18", "P19"]


def test_empty_result_has_one_page(products):
    state = cf.reduce(
        cf.initial_state(products, now=NOW),
        SetProductTypes(product_types=["Special Product"]),
        NOW,
    )
    page = cf.page_view(state)
    assert page.items == []
    assert page.total_pages == 1


def test_unknown_action_is_rejected(products):
    with pytest.raises(ValueError):
        cf.reduce(cf.initial_state(products, now=NOW), object())


def test_slider_is_capped_at_category_max(products):
    state = cf.initial_state(products, now=NOW)

    moved = cf.reduce(state, SetSlider(min=500, max=200), NOW)

    assert moved.filters.slider == PriceRange(min=60, max=60)
