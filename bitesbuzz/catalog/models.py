from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    desi_food = "Desi Food"
    fast_food = "Fast Food"
    chinese = "Chinese"
    snacks = "Snacks"
    beverages = "Beverages"


class CatalogItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    category: Category
    price: float = Field(..., ge=0.0)
    discount_price: float | None = Field(default=None, ge=0.0)
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    reviews: int = Field(default=0, ge=0)
    tags: tuple[str, ...] = ()
    description: str = ""
    is_available: bool = True
    is_seasonal: bool = False
    is_promotional: bool = False

    @property
    def effective_price(self) -> float:
        return self.discount_price if self.discount_price is not None else self.price

    @property
    def has_discount(self) -> bool:
        return self.discount_price is not None and self.discount_price < self.price

    @property
    def discount_percentage(self) -> int:
        if not self.has_discount or self.price == 0:
            return 0
        return round((self.price - self.discount_price) / self.price * 100)

    @property
    def text(self) -> str:
        """Name, category and tags joined into one string for embedding."""
        return " ".join([self.name, self.category.value, *self.tags]).strip()


class ContextEntry(BaseModel):
    """A cart line or a historical order line."""

    model_config = ConfigDict(frozen=True)

    item: CatalogItem
    quantity: int = Field(default=1, ge=1)
