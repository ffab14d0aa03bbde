from typing import Any, Dict, Optional

from django.db import DEFAULT_DB_ALIAS
from django.contrib.auth import get_user_model

from kpi_app.models import Evaluation
from kpi_app.services.evaluation_service import EvaluationService

User = get_user_model()


class TeamRollup:
    """
    Team score = mean final score of each member's most recently created
    evaluation (drafts included). Members without any evaluation count in
    member_count only.
    """

    def __init__(self, using: str = DEFAULT_DB_ALIAS, scorer: Optional[EvaluationService] = None):
        self.using = using
        self.scorer = scorer or EvaluationService(using=using)

    def rollup(self, team_id) -> Dict[str, Any]:
        members = list(User.objects.using(self.using).filter(team_id=team_id))
        if not members:
            return {"overall_score": 0, "member_count": 0, "evaluated_count": 0}

        total = 0.0
        evaluated = 0
        for member in members:
            latest = (Evaluation.objects.using(self.using)
                      .filter(employee=member)
                      .order_by("-created_at")
                      .first())
            if latest is None:
                continue
            total += self.scorer.calculate_score(latest.pk)["final_score"]
            evaluated += 1

        return {
            "overall_score": total / evaluated if evaluated else 0,
            "member_count": len(members),
            "evaluated_count": evaluated,
        }
