from typing import List

from django.db import DEFAULT_DB_ALIAS
from django.db.models import Sum

from kpi_app.models import KpiGroup, TargetRole

TOTAL_WEIGHT = 100.0
TOLERANCE = 0.01


def audience_groups(group: KpiGroup, using: str = DEFAULT_DB_ALIAS):
    """Groups that are scored together with ``group`` for one subject."""
    qs = KpiGroup.objects.using(using).filter(target_role=group.target_role)
    if group.target_role == TargetRole.MANAGER:
        return qs
    return qs.filter(team_id=group.team_id)


def group_weight_warnings(group: KpiGroup, using: str = DEFAULT_DB_ALIAS) -> List[str]:
    """
    Non-blocking check: group weights of one audience are expected to total
    100, but other totals are still accepted and scored as-is.
    """
    total = audience_groups(group, using).aggregate(total=Sum("weight"))["total"] or 0.0
    if abs(total - TOTAL_WEIGHT) > TOLERANCE:
        return [f"Group weights for this audience total {total:g}%, not {TOTAL_WEIGHT:g}%."]
    return []
