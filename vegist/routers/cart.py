# vegist/routers/cart.py
from fastapi import APIRouter, Depends

from vegist.core.config import get_settings
from vegist.core.session import get_client_storage
from vegist.repositories.storage_repo import DatabaseStorage
from vegist.schemas.cart import CartItemCreate, CartItemUpdate, CartSummary
from vegist.services.cart_store import CartStore

settings = get_settings()

router = APIRouter(prefix="/cart", tags=["Cart"])


def get_cart(storage: DatabaseStorage = Depends(get_client_storage)) -> CartStore:
    """FastAPI dependency: the calling client's cart, loaded from its store."""
    return CartStore(storage, settings.FREE_SHIPPING_THRESHOLD, settings.SHIPPING_FEE)


@router.get("", response_model=CartSummary)
def get_my_cart(cart: CartStore = Depends(get_cart)):
    """
    Cart summary with totals and free-shipping progress.
    """
    return cart.summary()


@router.post("", response_model=CartSummary)
def add_to_cart(payload: CartItemCreate, cart: CartStore = Depends(get_cart)):
    """
    Add a line. A line with the same product and package is merged.
    """
    cart.add_to_cart(payload)
    return cart.summary()


@router.patch("/{product_id}", response_model=CartSummary)
def update_cart_item(
    product_id: str,
    payload: CartItemUpdate,
    cart: CartStore = Depends(get_cart),
):
    """
    Set the quantity of the (product, package) line. Below 1 removes it.
    """
    cart.update_quantity(product_id, payload.quantity, payload.selected_package)
    return cart.summary()


@router.delete("/{product_id}", response_model=CartSummary)
def remove_cart_item(
    product_id: str,
    selected_package: str | None = None,
    cart: CartStore = Depends(get_cart),
):
    """
    Remove the (product, package) line.
    """
    cart.remove_from_cart(product_id, selected_package)
    return cart.summary()


@router.delete("", response_model=CartSummary)
def clear_cart(cart: CartStore = Depends(get_cart)):
    """
    Clear the entire cart.
    """
    cart.clear_cart()
    return cart.summary()


@router.post("/open", response_model=CartSummary)
def open_cart(cart: CartStore = Depends(get_cart)):
    cart.open_cart()
    return cart.summary()


@router.post("/close", response_model=CartSummary)
def close_cart(cart: CartStore = Depends(get_cart)):
    cart.close_cart()
    return cart.summary()
