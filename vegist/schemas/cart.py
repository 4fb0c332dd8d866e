# vegist/schemas/cart.py
from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class CartLineItem(SQLModel):
    """
    One cart row. Identity for merging and every mutation is
    (product_id, selected_package).
    """

    product_id: str
    name: str
    price: float = Field(gt=0)
    quantity: int = Field(default=1, ge=1)
    image: str = ""
    selected_package: str | None = None
    discount_percentage: float | None = Field(default=None, ge=0, le=100)
    material: str | None = None

    @field_validator("selected_package", mode="before")
    @classmethod
    def blank_package_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @property
    def key(self) -> tuple[str, str | None]:
        return self.product_id, self.selected_package


class CartItemCreate(CartLineItem):
    """
    Payload for adding to cart.
    """

    model_config = ConfigDict(extra="forbid")


class CartItemUpdate(SQLModel):
    """
    Payload for changing the quantity of a line.

    A quantity below 1 removes the line.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int
    selected_package: str | None = None


class CartLineRead(CartLineItem):
    """
    Cart row with computed prices.
    """

    effective_price: float
    line_total: float


class CartSummary(SQLModel):
    """
    Full cart response model with totals and free-shipping progress.
    """

    items: list[CartLineRead]
    item_count: int
    subtotal: float
    shipping_fee: float
    amount_to_free_shipping: float
    free_shipping_progress: float
    is_open: bool = False
