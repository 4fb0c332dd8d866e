# vegist/services/cart_store.py
import json
import logging

from pydantic import ValidationError as PydanticValidationError

from vegist.core.errors import QuotaError, RemoteError
from vegist.repositories.storage_repo import KeyValueStore
from vegist.schemas.cart import CartLineItem, CartLineRead, CartSummary
from vegist.services import pricing

logger = logging.getLogger(__name__)

CART_STORAGE_KEY = "shopping_cart"
CART_OPEN_KEY = "cart_open"


class CartStore:
    """
    Client cart held in a key-value store.

    Responsibilities:
      - merge lines on (product_id, selected_package)
      - treat quantity < 1 as a removal request
      - write the whole collection after every mutation
      - never raise on unreadable or unwritable storage (log and carry on)
    """

    def __init__(
        self,
        storage: KeyValueStore,
        free_shipping_threshold: float = pricing.FREE_SHIPPING_THRESHOLD,
        shipping_fee: float = pricing.SHIPPING_FEE,
    ):
        self.storage = storage
        self.free_shipping_threshold = free_shipping_threshold
        self.shipping_fee = shipping_fee
        self.items: list[CartLineItem] = []
        self.is_open = False
        self.load()

    # ---- persistence ----

    def load(self) -> list[CartLineItem]:
        """
        Read the cart back from storage.

        Missing, malformed or non-list data yields an empty cart.
        """
        self.items = []
        try:
            raw = self.storage.get(CART_STORAGE_KEY)
            self.is_open = self.storage.get(CART_OPEN_KEY) == "true"
        except RemoteError as e:
            logger.error("Error loading cart: %s", e.detail)
            return self.items

        if not raw:
            return self.items

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                logger.warning("Invalid cart data in storage, resetting to empty cart")
                return self.items
            self.items = [CartLineItem.model_validate(row) for row in data]
        except (ValueError, PydanticValidationError) as e:
            logger.error("Corrupted cart in storage, clearing it: %s", e)
            self.items = []
            self._remove_stored_cart()

        return self.items

    def _save(self) -> None:
        payload = json.dumps([it.model_dump(mode="json") for it in self.items])
        try:
            self.storage.set(CART_STORAGE_KEY, payload)
        except QuotaError as e:
            logger.error("Cart not saved, storage quota exceeded: %s", e.detail)
            self._remove_stored_cart()
        except RemoteError as e:
            logger.error("Cart not saved: %s", e.detail)

    def _remove_stored_cart(self) -> None:
        try:
            self.storage.remove(CART_STORAGE_KEY)
        except RemoteError as e:
            logger.error("Could not clear stored cart: %s", e.detail)

    def _find(self, product_id: str, selected_package: str | None) -> int:
        key = (product_id, selected_package or None)
        for idx, it in enumerate(self.items):
            if it.key == key:
                return idx
        return -1

    # ---- mutations ----

    def add_to_cart(self, item: CartLineItem) -> list[CartLineItem]:
        """
        Add a line, or bump the quantity of the line with the same
        (product_id, selected_package).
        """
        item = CartLineItem.model_validate(item.model_dump())
        idx = self._find(item.product_id, item.selected_package)

        if idx > -1:
            existing = self.items[idx]
            self.items[idx] = existing.model_copy(
                update={"quantity": existing.quantity + item.quantity}
            )
            logger.debug("Updated cart line %s", existing.key)
        else:
            self.items.append(item)
            logger.debug("Added cart line %s", item.key)

        self._save()
        return self.items

    def update_quantity(
        self,
        product_id: str,
        quantity: int,
        selected_package: str | None = None,
    ) -> list[CartLineItem]:
        """
        Set the quantity of one line. Below 1 removes the line.
        Unknown lines are ignored.
        """
        if quantity < 1:
            return self.remove_from_cart(product_id, selected_package)

        idx = self._find(product_id, selected_package)
        if idx == -1:
            return self.items

        self.items[idx] = self.items[idx].model_copy(update={"quantity": quantity})
        self._save()
        return self.items

    def remove_from_cart(
        self,
        product_id: str,
        selected_package: str | None = None,
    ) -> list[CartLineItem]:
        key = (product_id, selected_package or None)
        self.items = [it for it in self.items if it.key != key]
        self._save()
        return self.items

    def clear_cart(self) -> list[CartLineItem]:
        self.items = []
        self._save()
        return self.items

    # ---- side panel flag ----

    def _set_open(self, value: bool) -> None:
        self.is_open = value
        try:
            self.storage.set(CART_OPEN_KEY, "true" if value else "false")
        except (QuotaError, RemoteError) as e:
            logger.error("Cart panel state not saved: %s", e.detail)

    def open_cart(self) -> None:
        self._set_open(True)

    def close_cart(self) -> None:
        self._set_open(False)

    # ---- derived ----

    def total(self) -> float:
        return pricing.cart_subtotal(self.items)

    def item_count(self) -> int:
        return sum(it.quantity for it in self.items)

    def summary(self) -> CartSummary:
        lines = [
            CartLineRead(
                **it.model_dump(),
                effective_price=pricing.effective_price(it.price, it.discount_percentage),
                line_total=pricing.line_total(it),
            )
            for it in self.items
        ]
        subtotal = self.total()
        return CartSummary(
            items=lines,
            item_count=self.item_count(),
            subtotal=subtotal,
            shipping_fee=pricing.shipping_fee(
                subtotal, self.free_shipping_threshold, self.shipping_fee
            ),
            amount_to_free_shipping=pricing.amount_to_free_shipping(
                subtotal, self.free_shipping_threshold
            ),
            free_shipping_progress=pricing.free_shipping_progress(
                subtotal, self.free_shipping_threshold
            ),
            is_open=self.is_open,
        )
