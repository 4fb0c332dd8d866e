# vegist/services/quick_view.py
import logging

from vegist.schemas.cart import CartLineItem
from vegist.schemas.product import ProductDetailRead
from vegist.services.cart_store import CartStore
from vegist.services.pricing import clamp_quantity

logger = logging.getLogger(__name__)


class QuickView:
    """
    Quick-view popup: Closed <-> Open(product).

    Opening resets the selection (first image, first package, quantity 1).
    While closed every selection change is ignored.
    """

    def __init__(self):
        self.product: ProductDetailRead | None = None
        self.image_index = 0
        self.selected_package: str | None = None
        self.quantity = 1

    @property
    def is_open(self) -> bool:
        return self.product is not None

    def open(self, product: ProductDetailRead) -> None:
        self.product = product
        self.image_index = 0
        self.selected_package = product.package_options[0] if product.package_options else None
        self.quantity = 1

    def close(self) -> None:
        self.product = None
        self.image_index = 0
        self.selected_package = None
        self.quantity = 1

    # ---- selection ----

    def select_image(self, index: int) -> None:
        if not self.is_open or not self.product.images:
            return
        self.image_index = index % len(self.product.images)

    def next_image(self) -> None:
        self.select_image(self.image_index + 1)

    def previous_image(self) -> None:
        self.select_image(self.image_index - 1)

    def select_package(self, package: str) -> None:
        if not self.is_open:
            return
        if package not in self.product.package_options:
            logger.warning("Unknown package %r for product %s", package, self.product.id)
            return
        self.selected_package = package

    def set_quantity(self, quantity: int) -> None:
        if not self.is_open:
            return
        self.quantity = clamp_quantity(quantity)

    def increment(self) -> None:
        self.set_quantity(self.quantity + 1)

    def decrement(self) -> None:
        self.set_quantity(self.quantity - 1)

    # ---- leaving the popup ----

    def current_line(self) -> CartLineItem | None:
        """The current selection as a cart line (None while closed)."""
        if not self.is_open:
            return None
        p = self.product
        image = p.images[0] if p.images else p.image_url
        return CartLineItem(
            product_id=str(p.id),
            name=p.name,
            price=p.price,
            quantity=self.quantity,
            image=image,
            selected_package=self.selected_package,
            discount_percentage=p.discount_percentage if p.discount_percentage > 0 else None,
            material=p.material,
        )

    def add_to_cart(self, cart: CartStore) -> CartLineItem | None:
        line = self.current_line()
        if line is None:
            return None
        cart.add_to_cart(line)
        self.close()
        return line

    def buy_now(self) -> CartLineItem | None:
        """Hand the selection to checkout as a single line and close."""
        line = self.current_line()
        self.close()
        return line
