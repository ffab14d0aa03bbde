from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, NamedTuple


def _round2(x: float | Decimal) -> float:
    """Round to 2 decimal places (half-up)."""
    return float(Decimal(str(x)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))


class ScoredItem(NamedTuple):
    score: float
    item_weight: float
    group_id: Any
    group_weight: float


def scored_items_from(evaluation_items) -> list[ScoredItem]:
    """
    Flatten EvaluationItem rows (with kpi_item__kpi_group loaded) into
    ScoredItem tuples. Group ids are stringified so results serialize as JSON
    object keys.
    """
    return [
        ScoredItem(
            score=row.score,
            item_weight=row.kpi_item.weight,
            group_id=str(row.kpi_item.kpi_group_id),
            group_weight=row.kpi_item.kpi_group.weight,
        )
        for row in evaluation_items
    ]


def calculate_weighted_scores(items: Iterable[ScoredItem]) -> Dict[str, Any]:
    """
    1) Group score (0..100): weighted mean of the item scores in the group,
       normalized by the group's own item weights
           sum(score * item_weight) / sum(item_weight)   (0 if no weight)
    2) Final score: sum(group_score * group_weight / 100)

    Group weights are absolute percentages of the final scale and are not
    required to total 100. A group only shows up when at least one of its
    items is in ``items``. No rounding happens here.

    Returns:
        {"final_score": float,
         "group_scores": {group_id: {"score": float, "weight": float}}}
    """
    acc: Dict[Any, Dict[str, float]] = {}

    for item in items:
        group = acc.setdefault(item.group_id, {
            "weight": item.group_weight,
            "weighted_sum": 0.0,
            "total_item_weight": 0.0,
        })
        group["weighted_sum"] += item.score * item.item_weight
        group["total_item_weight"] += item.item_weight

    final_score = 0.0
    group_scores: Dict[Any, Dict[str, float]] = {}
    for group_id, group in acc.items():
        if group["total_item_weight"] > 0:
            score = group["weighted_sum"] / group["total_item_weight"]
        else:
            score = 0.0
        group_scores[group_id] = {"score": score, "weight": group["weight"]}
        final_score += score * (group["weight"] / 100)

    return {"final_score": final_score, "group_scores": group_scores}
