from __future__ import annotations

from collections import Counter
from typing import Any


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    calls = [e for e in events if e["type"] == "suggestion"]
    total = len(calls)

    # Average response time
    times = [c["response_time_ms"] for c in calls if "response_time_ms" in c]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Calls per mode
    mode_counter: Counter[str] = Counter(c.get("mode", "unknown") for c in calls)

    # Provenance
    semantic = sum(1 for c in calls if c.get("is_semantic"))
    empty = sum(1 for c in calls if not c.get("item_ids"))

    # Most suggested items
    item_counter: Counter[str] = Counter()
    for c in calls:
        for item_id in c.get("item_ids", []) or []:
            item_counter[item_id] += 1
    top_items = [{"id": i, "count": n} for i, n in item_counter.most_common(10)]

    return {
        "total_suggestion_calls": total,
        "avg_response_time_ms": avg_time,
        "calls_by_mode": dict(mode_counter),
        "semantic_rate": round(semantic / total * 100, 1) if total else 0.0,
        "empty_results": empty,
        "top_suggested_items": top_items,
    }
