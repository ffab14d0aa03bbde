import logging
from typing import Any, Dict, List, Optional

from django.db import DEFAULT_DB_ALIAS, DatabaseError

from kpi_app.models import ActivityLog, ActivityAction

logger = logging.getLogger(__name__)


class ActivityLogService:
    """Audit trail writer/reader. Writes never fail the calling request."""

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using

    def log(self, user, action: str, details: Optional[Dict[str, Any]] = None) -> Optional[ActivityLog]:
        try:
            return ActivityLog.objects.using(self.using).create(
                user=user,
                action=action,
                details=details or None,
            )
        except DatabaseError:
            logger.exception("Failed to log activity %s for user %s", action, getattr(user, "pk", None))
            return None

    def recent_logs(self, limit: int = 20) -> List[Dict[str, Any]]:
        logs = (ActivityLog.objects.using(self.using)
                .select_related("user")
                .order_by("-created_at")[:limit])
        return [
            {
                "activity_log_id": log.activity_log_id,
                "action": log.action,
                "details": log.details,
                "created_at": log.created_at,
                "user": {
                    "user_id": log.user.user_id,
                    "name": log.user.name,
                    "role": log.user.role,
                    "email": log.user.email,
                },
                "title": format_title(log),
                "description": format_description(log),
            }
            for log in logs
        ]


def format_title(log: ActivityLog) -> str:
    user_name = log.user.name
    titles = {
        ActivityAction.LOGIN:              f"{user_name} Logged In",
        ActivityAction.EVALUATION_UPDATED: f"{user_name} Updated Evaluation",
        ActivityAction.KPI_GROUP_CREATED:  f"{user_name} Created KPI Group",
        ActivityAction.KPI_GROUP_UPDATED:  f"{user_name} Updated KPI Group",
        ActivityAction.KPI_ITEM_CREATED:   f"{user_name} Created KPI Item",
        ActivityAction.KPI_ITEM_UPDATED:   f"{user_name} Updated KPI Item",
    }
    return titles.get(log.action, f"{user_name} performed {log.action}")


def format_description(log: ActivityLog) -> str:
    details = log.details or {}
    if log.action == ActivityAction.LOGIN:
        return f"Logged in via {details.get('method') or 'email'}"
    if log.action == ActivityAction.EVALUATION_UPDATED:
        return f"Updated evaluation for {details.get('employee_name') or 'employee'}"
    if log.action in (ActivityAction.KPI_GROUP_CREATED, ActivityAction.KPI_GROUP_UPDATED):
        verb = "Created" if log.action == ActivityAction.KPI_GROUP_CREATED else "Updated"
        return f'{verb} group "{details.get("group_name", "")}"'
    if log.action in (ActivityAction.KPI_ITEM_CREATED, ActivityAction.KPI_ITEM_UPDATED):
        verb = "Created" if log.action == ActivityAction.KPI_ITEM_CREATED else "Updated"
        return f'{verb} item "{details.get("item_name", "")}"'
    return ""
