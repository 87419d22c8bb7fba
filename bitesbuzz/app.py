from __future__ import annotations

import time

from fastapi import Depends, FastAPI, HTTPException, Query

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events, record_event
from .catalog.data_store import CatalogError, get_catalog, get_dataframe, get_item, resolve_entries
from .catalog.models import CatalogItem, ContextEntry
from .llm.groq_client import write_suggestion_message
from .recommendations.retrieval import (
    personalized_recommendations,
    popular_items,
    similar_items,
    trending_items,
)
from .suggestions.engine import SuggestionEngine, build_engine
from .suggestions.models import (
    CartContext,
    CartSuggestionBody,
    HistoryContext,
    HistorySuggestionBody,
    LineIn,
    SuggestedItemOut,
    SuggestionResponse,
    SuggestionResult,
)

app = FastAPI(title="BitesBuzz Suggestion API", version="1.0.0")

_engine = build_engine()


def get_engine() -> SuggestionEngine:
    return _engine


def _resolve(lines: list[LineIn]) -> list[ContextEntry]:
    try:
        return resolve_entries([(line.item_id, line.quantity) for line in lines])
    except CatalogError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


def _respond(
    mode: str,
    entries: list[ContextEntry],
    result: SuggestionResult,
    start_time: float,
) -> SuggestionResponse:
    context_names = list(dict.fromkeys(e.item.name for e in entries))
    message = write_suggestion_message(mode, context_names, result.items, result.message)

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    record_event("suggestion", {
        "mode": mode,
        "context_size": len(entries),
        "is_semantic": result.is_semantic,
        "item_ids": [item.id for item in result.items],
        "response_time_ms": elapsed_ms,
    })

    return SuggestionResponse(
        suggestions=[
            SuggestedItemOut(
                id=item.id,
                name=item.name,
                category=item.category.value,
                price=item.price,
                effective_price=item.effective_price,
                rating=item.rating,
                tags=list(item.tags),
                score=round(score, 4),
            )
            for item, score in zip(result.items, result.scores)
        ],
        message=message,
        is_semantic=result.is_semantic,
    )


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    df = get_dataframe()
    counts = df["category"].value_counts().to_dict()
    return {
        "categories": sorted(counts),
        "items_per_category": {k: int(v) for k, v in counts.items()},
        "total_items": int(len(df)),
    }


# ── Suggestion endpoints ─────────────────────────────────────────────────


@app.post("/suggestions/cart", response_model=SuggestionResponse)
def cart_suggestions(
    body: CartSuggestionBody,
    engine: SuggestionEngine = Depends(get_engine),
) -> SuggestionResponse:
    start_time = time.time()
    entries = _resolve(body.entries)
    result = engine.suggest(CartContext(entries=entries), get_catalog())
    return _respond("cart", entries, result, start_time)


@app.post("/suggestions/history", response_model=SuggestionResponse)
def history_suggestions(
    body: HistorySuggestionBody,
    engine: SuggestionEngine = Depends(get_engine),
) -> SuggestionResponse:
    start_time = time.time()
    orders = [_resolve(order) for order in body.past_orders]
    result = engine.suggest(HistoryContext(past_orders=orders), get_catalog())
    return _respond("history", [e for order in orders for e in order], result, start_time)


# ── Recommendation endpoints ─────────────────────────────────────────────


@app.get("/recommendations/popular", response_model=list[CatalogItem])
def popular(limit: int = Query(default=10, ge=1, le=50)) -> list[CatalogItem]:
    return popular_items(get_catalog(), limit)


@app.get("/recommendations/trending", response_model=list[CatalogItem])
def trending(limit: int = Query(default=10, ge=1, le=50)) -> list[CatalogItem]:
    return trending_items(get_catalog(), limit)


@app.post("/recommendations/personalized", response_model=list[CatalogItem])
def personalized(
    body: HistorySuggestionBody,
    limit: int = Query(default=10, ge=1, le=50),
) -> list[CatalogItem]:
    orders = [_resolve(order) for order in body.past_orders]
    return personalized_recommendations(orders, get_catalog(), limit)


@app.get("/items/{item_id}/similar", response_model=list[CatalogItem])
def similar(item_id: str, limit: int = Query(default=5, ge=1, le=20)) -> list[CatalogItem]:
    try:
        item = get_item(item_id)
    except CatalogError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return similar_items(item, get_catalog(), limit)


# ── Operational endpoints ────────────────────────────────────────────────


@app.get("/analytics")
def analytics() -> dict:
    return compute_analytics(get_events())


@app.get("/cache/stats")
def cache_stats(engine: SuggestionEngine = Depends(get_engine)) -> dict:
    if engine.semantic is None:
        return {"enabled": False, "size": 0, "hits": 0, "misses": 0, "hit_rate": 0.0}
    return {"enabled": True, **engine.semantic.cache.stats()}
