from typing import Any, Dict, List, Optional

from django.db import DEFAULT_DB_ALIAS
from django.contrib.auth import get_user_model

from accounts.models import Role, Team
from kpi_app.models import Evaluation
from kpi_app.services.activity_log import ActivityLogService
from kpi_app.services.evaluation_service import managed_team_ids

User = get_user_model()

RECENT_PER_SOURCE = 5
RECENT_FEED_SIZE = 10
ADMIN_FEED_SIZE = 20


def _empty_stats() -> Dict[str, Any]:
    return {
        "stats": {"total_teams": 0, "total_employees": 0, "pending_evaluations": 0},
        "recent_activity": [],
    }


class DashboardScopeSelector:
    """
    Picks what the dashboard shows for a caller:
    • MANAGER → counts and activity limited to the teams they manage
    • ADMIN   → global counts, activity from the audit log
    """

    def __init__(self, using: str = DEFAULT_DB_ALIAS, activity_logs: Optional[ActivityLogService] = None):
        self.using = using
        self.activity_logs = activity_logs or ActivityLogService(using=using)

    def stats_for(self, user) -> Dict[str, Any]:
        if user.role == Role.MANAGER:
            return self.manager_stats(user)
        return self.global_stats()

    def manager_stats(self, manager) -> Dict[str, Any]:
        team_ids = managed_team_ids(manager, self.using)
        if not team_ids:
            return _empty_stats()

        members = (User.objects.using(self.using)
                   .filter(role=Role.EMPLOYEE, team_id__in=team_ids))
        evaluations = (Evaluation.objects.using(self.using)
                       .filter(employee__team_id__in=team_ids))

        stats = {
            "total_teams": len(team_ids),
            "total_employees": members.count(),
            "pending_evaluations": evaluations.filter(is_submitted=False).count(),
        }

        submitted = (evaluations.filter(is_submitted=True)
                     .select_related("employee")
                     .order_by("-updated_at")[:RECENT_PER_SOURCE])
        joined = members.order_by("-created_at")[:RECENT_PER_SOURCE]

        activity: List[Dict[str, Any]] = [
            {
                "type": "EVALUATION_SUBMITTED",
                "date": e.updated_at,
                "title": "Evaluation Submitted",
                "description": f"Evaluation for {e.employee.name} was submitted",
                "user": e.employee.name,
            }
            for e in submitted
        ] + [
            {
                "type": "USER_JOINED",
                "date": u.created_at,
                "title": "New Team Member",
                "description": f"{u.name} joined as {u.role.lower()}",
                "user": u.name,
            }
            for u in joined
        ]
        activity.sort(key=lambda a: a["date"], reverse=True)

        return {"stats": stats, "recent_activity": activity[:RECENT_FEED_SIZE]}

    def global_stats(self) -> Dict[str, Any]:
        stats = {
            "total_teams": Team.objects.using(self.using).count(),
            "total_employees": User.objects.using(self.using).filter(role=Role.EMPLOYEE).count(),
            "pending_evaluations": Evaluation.objects.using(self.using).filter(is_submitted=False).count(),
        }
        activity = [
            {
                "type": log["action"],
                "date": log["created_at"],
                "title": log["title"],
                "description": log["description"],
                "user": log["user"]["name"],
            }
            for log in self.activity_logs.recent_logs(ADMIN_FEED_SIZE)
        ]
        return {"stats": stats, "recent_activity": activity}
