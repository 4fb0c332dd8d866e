# vegist/schemas/catalog.py
from typing import Annotated, Literal, Union

from pydantic import ConfigDict, Field as PydanticField, field_validator, model_validator
from sqlmodel import SQLModel, Field

from vegist.schemas.product import CategoryRead, ProductRead

SortKey = Literal["default", "price-low", "price-high", "name", "newest"]
Availability = Literal["In Stock", "Out of Stock"]

IN_STOCK: Availability = "In Stock"
OUT_OF_STOCK: Availability = "Out of Stock"


def _dedupe(values: list[str]) -> list[str]:
    seen: dict[str, None] = {}
    for v in values:
        if v and v.strip():
            seen.setdefault(v, None)
    return list(seen)


class PriceRange(SQLModel):
    min: float = Field(default=0, ge=0)
    max: float = Field(default=100, ge=0)

    @model_validator(mode="after")
    def ordered(self):
        if self.min > self.max:
            self.min, self.max = self.max, self.min
        return self


class FilterState(SQLModel):
    """
    Filter context for one category view.

    `slider` holds the pending (not yet applied) price values; only
    `applied_price` drives the visible list.
    """

    slider: PriceRange = Field(default_factory=PriceRange)
    applied_price: PriceRange = Field(default_factory=PriceRange)
    materials: list[str] = Field(default_factory=list)
    product_types: list[str] = Field(default_factory=list)
    availability: list[Availability] = Field(default_factory=list)
    sort_by: SortKey = "default"
    page: int = Field(default=1, ge=1)

    @field_validator("materials", "product_types", "availability")
    @classmethod
    def distinct(cls, v: list[str]) -> list[str]:
        return _dedupe(v)


# ---- reducer actions ----


class _Action(SQLModel):
    model_config = ConfigDict(extra="forbid")


class LoadCategory(_Action):
    """New product set for a category: resets every filter."""

    type: Literal["load_category"] = "load_category"
    category: CategoryRead | None = None
    products: list[ProductRead] = Field(default_factory=list)


class SetSlider(_Action):
    type: Literal["set_slider"] = "set_slider"
    min: float = Field(ge=0)
    max: float = Field(ge=0)


class ApplyPrice(_Action):
    type: Literal["apply_price"] = "apply_price"


class ResetPrice(_Action):
    type: Literal["reset_price"] = "reset_price"


class SetMaterials(_Action):
    type: Literal["set_materials"] = "set_materials"
    materials: list[str] = Field(default_factory=list)


class ResetMaterials(_Action):
    type: Literal["reset_materials"] = "reset_materials"


class SetProductTypes(_Action):
    type: Literal["set_product_types"] = "set_product_types"
    product_types: list[str] = Field(default_factory=list)


class ResetProductTypes(_Action):
    type: Literal["reset_product_types"] = "reset_product_types"


class SetAvailability(_Action):
    type: Literal["set_availability"] = "set_availability"
    availability: list[Availability] = Field(default_factory=list)


class ResetAvailability(_Action):
    type: Literal["reset_availability"] = "reset_availability"


class SetSort(_Action):
    type: Literal["set_sort"] = "set_sort"
    sort_by: SortKey


class SetPage(_Action):
    type: Literal["set_page"] = "set_page"
    page: int


CatalogAction = Annotated[
    Union[
        LoadCategory,
        SetSlider,
        ApplyPrice,
        ResetPrice,
        SetMaterials,
        ResetMaterials,
        SetProductTypes,
        ResetProductTypes,
        SetAvailability,
        ResetAvailability,
        SetSort,
        SetPage,
    ],
    PydanticField(discriminator="type"),
]

# Actions a client may send over HTTP (category loading is server-driven).
ClientCatalogAction = Annotated[
    Union[
        SetSlider,
        ApplyPrice,
        ResetPrice,
        SetMaterials,
        ResetMaterials,
        SetProductTypes,
        ResetProductTypes,
        SetAvailability,
        ResetAvailability,
        SetSort,
        SetPage,
    ],
    PydanticField(discriminator="type"),
]


class CatalogState(SQLModel):
    """
    Everything the category view derives from one product set.

    `visible` is the filtered and sorted list; it is recomputed by the
    reducer, never edited directly.
    """

    category: CategoryRead | None = None
    products: list[ProductRead] = Field(default_factory=list)
    max_price: float = 100
    available_materials: list[str] = Field(default_factory=list)
    available_product_types: list[str] = Field(default_factory=list)
    filters: FilterState = Field(default_factory=FilterState)
    visible: list[ProductRead] = Field(default_factory=list)


class CatalogPage(SQLModel):
    """
    One page of the category view.
    """

    category: CategoryRead | None
    items: list[ProductRead]
    page: int
    page_size: int
    total_items: int
    total_pages: int
    max_price: float
    available_materials: list[str]
    available_product_types: list[str]
    filters: FilterState


class CatalogActionRequest(SQLModel):
    """
    Body of POST /catalog/actions, e.g. {"action": {"type": "apply_price"}}.
    """

    model_config = ConfigDict(extra="forbid")

    action: ClientCatalogAction
