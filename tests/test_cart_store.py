import json

from vegist.schemas.cart import CartLineItem
from vegist.services.cart_store import CART_STORAGE_KEY, CartStore
from vegist.services.favorites import FAVORITES_KEY, FavoritesStore


def item(product_id="p1", quantity=1, package=None, price=10.0, **kwargs):
    return CartLineItem(
        product_id=product_id,
        name=f"Product {product_id}",
        price=price,
        quantity=quantity,
        selected_package=package,
        **kwargs,
    )


def test_add_same_product_and_package_merges(storage):
    cart = CartStore(storage)
    cart.add_to_cart(item(quantity=2, package="500g"))
    cart.add_to_cart(item(quantity=3, package="500g"))

    assert len(cart.items) == 1
    assert cart.items[0].quantity == 5


def test_different_packages_are_separate_lines(storage):
    cart = CartStore(storage)
    cart.add_to_cart(item(package="500g"))
    cart.add_to_cart(item(package="1kg"))

    assert len(cart.items) == 2
    assert cart.item_count() == 2


def test_update_quantity_zero_removes_line(storage):
    cart = CartStore(storage)
    cart.add_to_cart(item("p1", quantity=2))
    cart.add_to_cart(item("p2", quantity=1))

    cart.update_quantity("p1", 0)

    assert [it.product_id for it in cart.items] == ["p2"]
    assert cart.item_count() == 1


def test_update_quantity_uses_package_key(storage):
    cart = CartStore(storage)
    cart.add_to_cart(item(package="500g"))
    cart.add_to_cart(item(package="1kg"))

    cart.update_quantity("p1", 4, "1kg")

    quantities = {it.selected_package: it.quantity for it in cart.items}
    assert quantities == {"500g": 1, "1kg": 4}


def test_update_unknown_line_is_ignored(storage):
    cart = CartStore(storage)
    cart.add_to_cart(item())
    cart.update_quantity("nope", 3)
    assert cart.items[0].quantity == 1


def test_remove_only_matching_package(storage):
    cart = CartStore(storage)
    cart.add_to_cart(item(package="500g"))
    cart.add_to_cart(item(package="1kg"))

    cart.remove_from_cart("p1", "500g")

    assert [it.selected_package for it in cart.items] == ["1kg"]


def test_every_mutation_persists_and_reloads(storage):
    cart = CartStore(storage)
    cart.add_to_cart(item("p1", quantity=2, discount_percentage=20, price=100))
    cart.add_to_cart(item("p2"))

    reloaded = CartStore(storage)
    assert [it.product_id for it in reloaded.items] == ["p1", "p2"]
    assert reloaded.total() == 170.0

    reloaded.clear_cart()
    assert json.loads(storage.data[CART_STORAGE_KEY]) == []


def test_malformed_storage_is_empty_cart(storage):
    storage.data[CART_STORAGE_KEY] = "{not json"
    cart = CartStore(storage)
    assert cart.items == []
    assert CART_STORAGE_KEY not in storage.data


def test_non_list_storage_is_empty_cart(storage):
    storage.data[CART_STORAGE_KEY] = json.dumps({"product_id": "p1"})
    assert CartStore(storage).items == []


def test_invalid_line_in_storage_is_empty_cart(storage):
    storage.data[CART_STORAGE_KEY] = json.dumps([{"product_id": "p1", "price": -1}])
    assert CartStore(storage).items == []


def test_unreadable_storage_is_empty_cart(storage):
    storage.fail_reads = True
    assert CartStore(storage).items == []


def test_quota_error_keeps_in_memory_cart(storage):
    storage.quota_bytes = 10
    cart = CartStore(storage)
    cart.add_to_cart(item())

    assert len(cart.items) == 1
    assert CART_STORAGE_KEY not in storage.data


def test_write_failure_does_not_raise(storage):
    cart = CartStore(storage)
    storage.fail_writes = True
    cart.add_to_cart(item())
    assert len(cart.items) == 1


def test_summary_and_panel_flag(storage):
    cart = CartStore(storage, free_shipping_threshold=50, shipping_fee=10)
    cart.add_to_cart(item(price=20, quantity=2))
    cart.open_cart()

    summary = CartStore(storage, free_shipping_threshold=50, shipping_fee=10).summary()

    assert summary.subtotal == 40
    assert summary.shipping_fee == 10
    assert summary.amount_to_free_shipping == 10
    assert summary.free_shipping_progress == 80
    assert summary.is_open is True
    assert summary.items[0].line_total == 40

    cart.close_cart()
    assert CartStore(storage).is_open is False


def test_toggle_favorite(storage):
    favorites = FavoritesStore(storage)

    assert favorites.toggle_favorite("p1") is True
    assert favorites.toggle_favorite("p2") is True
    assert favorites.is_favorite("p1")

    assert favorites.toggle_favorite("p1") is False
    assert favorites.list_favorites() == ["p2"]
    assert json.loads(storage.data[FAVORITES_KEY]) == ["p2"]


def test_bad_favorites_data_is_empty(storage):
    storage.data[FAVORITES_KEY] = "oops"
    assert FavoritesStore(storage).list_favorites() == []
