from __future__ import annotations

import re
from collections import defaultdict
from typing import Any, Dict, Iterable, List, NamedTuple, Optional

from django.db import DEFAULT_DB_ALIAS
from django.db.models import Prefetch, Q

from kpi_app.models import Evaluation, EvaluationItem, Quarter
from kpi_app.services.score_math import _round2

PERIOD_RE = re.compile(r"^(?P<year>\d{4})-(?P<quarter>Q[1-4])$")


class Period(NamedTuple):
    year: int
    quarter: str

    @classmethod
    def parse(cls, token: str) -> "Period":
        """'2024-Q1' → Period(2024, 'Q1'); raises ValueError otherwise."""
        match = PERIOD_RE.match((token or "").strip())
        if not match:
            raise ValueError(f"Invalid period '{token}'. Expected YYYY-Qn, e.g. 2024-Q1.")
        return cls(int(match["year"]), Quarter(match["quarter"]).value)

    def __str__(self):
        return f"{self.year}-{self.quarter}"


def parse_periods(raw: Optional[str]) -> Optional[List[Period]]:
    """Comma separated tokens from a query string; empty → None (no filter)."""
    if not raw:
        return None
    tokens = [t for t in (p.strip() for p in raw.split(",")) if t]
    return [Period.parse(t) for t in tokens] or None


class PeriodAggregator:
    """
    Merges every evaluation of one subject (optionally limited to some
    periods) into a single KPI view:

    • one score per KPI item = mean of its scores across evaluations (2dp)
    • one comment per KPI group = comment of the most recently created
      evaluation that has one
    • group / final scores recomputed from the averaged item scores
    """

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using

    def aggregate(self, subject_id, periods: Optional[Iterable[Period]] = None) -> Optional[Dict[str, Any]]:
        evaluations = self._fetch(subject_id, periods)
        if not evaluations:
            return None

        kpi_scores: Dict[Any, List[float]] = defaultdict(list)
        kpi_info: Dict[Any, Any] = {}
        group_info: Dict[Any, Any] = {}
        latest_comments: Dict[Any, Dict[str, Any]] = {}

        for evaluation in evaluations:
            for row in evaluation.items.all():
                kpi = row.kpi_item
                kpi_scores[kpi.pk].append(row.score)
                kpi_info.setdefault(kpi.pk, kpi)
                group_info.setdefault(kpi.kpi_group_id, kpi.kpi_group)

            for comm in evaluation.comments.all():
                # equal created_at: the first one in fetch order is kept
                existing = latest_comments.get(comm.kpi_group_id)
                if existing is None or evaluation.created_at > existing["date"]:
                    latest_comments[comm.kpi_group_id] = {
                        "comment": comm.comment,
                        "date": evaluation.created_at,
                    }

        groups: Dict[Any, Dict[str, Any]] = {}
        ordered = sorted(kpi_scores, key=lambda k: (kpi_info[k].kpi_group.created_at, kpi_info[k].created_at))
        for kpi_id in ordered:
            kpi = kpi_info[kpi_id]
            scores = kpi_scores[kpi_id]
            group_id = kpi.kpi_group_id
            if group_id not in groups:
                group = group_info[group_id]
                groups[group_id] = {
                    "id": str(group_id),
                    "name": group.name,
                    "weight": group.weight,
                    "items": [],
                    "comment": latest_comments.get(group_id, {}).get("comment", ""),
                }
            groups[group_id]["items"].append({
                "id": str(kpi.pk),
                "name": kpi.name,
                "weight": kpi.weight,
                "score": _round2(sum(scores) / len(scores)),
            })

        # group/final scores from the averaged item scores; the final score
        # sums the already rounded group scores
        final_score = 0.0
        group_scores: Dict[str, Dict[str, float]] = {}
        for group_id, group in groups.items():
            weighted_sum = sum(i["score"] * i["weight"] for i in group["items"])
            total_item_weight = sum(i["weight"] for i in group["items"])
            group_score = weighted_sum / total_item_weight if total_item_weight > 0 else 0.0
            group_scores[str(group_id)] = {
                "score": _round2(group_score),
                "weight": group["weight"],
            }
            final_score += group_scores[str(group_id)]["score"] * (group["weight"] / 100)

        return {
            "evaluation": evaluations[0],
            "groups": list(groups.values()),
            "final_score": _round2(final_score),
            "group_scores": group_scores,
            "available_periods": self.available_periods(subject_id),
        }

    def available_periods(self, subject_id) -> List[str]:
        """Distinct 'YYYY-Qn' of all the subject's evaluations, newest first."""
        rows = (Evaluation.objects.using(self.using)
                .filter(employee_id=subject_id)
                .order_by("-year", "-quarter")
                .values_list("year", "quarter")
                .distinct())
        return [str(Period(year, quarter)) for year, quarter in rows]

    def _fetch(self, subject_id, periods) -> List[Evaluation]:
        qs = Evaluation.objects.using(self.using).filter(employee_id=subject_id)
        periods = list(periods or [])
        if periods:
            match = Q()
            for p in periods:
                match |= Q(year=p.year, quarter=p.quarter)
            qs = qs.filter(match)

        item_rows = (EvaluationItem.objects.using(self.using)
                     .select_related("kpi_item__kpi_group"))
        return list(qs
                    .select_related("employee__team")
                    .prefetch_related(Prefetch("items", queryset=item_rows), "comments")
                    .order_by("-created_at", "-year", "-quarter"))
