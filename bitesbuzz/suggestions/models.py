from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from ..catalog.models import CatalogItem, ContextEntry


class CartContext(BaseModel):
    mode: Literal["cart"] = "cart"
    entries: list[ContextEntry] = Field(default_factory=list)


class HistoryContext(BaseModel):
    mode: Literal["history"] = "history"
    past_orders: list[list[ContextEntry]] = Field(
        default_factory=list, description="Past orders, most recent first"
    )


SuggestionRequest = Annotated[Union[CartContext, HistoryContext], Field(discriminator="mode")]


class SuggestionResult(BaseModel):
    items: list[CatalogItem] = Field(default_factory=list)
    scores: list[float] = Field(default_factory=list)
    message: str = ""
    is_semantic: bool = False


# ── API bodies ───────────────────────────────────────────────────────────


class LineIn(BaseModel):
    item_id: str = Field(..., min_length=1)
    quantity: int = Field(default=1, ge=1, le=100)


class CartSuggestionBody(BaseModel):
    entries: list[LineIn] = Field(default_factory=list)


class HistorySuggestionBody(BaseModel):
    past_orders: list[list[LineIn]] = Field(default_factory=list)


class SuggestedItemOut(BaseModel):
    id: str
    name: str
    category: str
    price: float
    effective_price: float
    rating: float
    tags: list[str]
    score: float


class SuggestionResponse(BaseModel):
    suggestions: list[SuggestedItemOut]
    message: str
    is_semantic: bool
