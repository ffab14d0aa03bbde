import pytest
from django.urls import reverse
from accounts.models import Role
from kpi_app.models import ActivityAction
from kpi_app.services.activity_log import ActivityLogService
from kpi_app.services.dashboard_stats import DashboardScopeSelector


@pytest.mark.django_db
class TestDashboardScope:
    def test_manager_without_team_gets_zeros(self, create_user, create_evaluation):
        manager = create_user(role=Role.MANAGER)
        create_evaluation()  # someone else's data must not leak in

        data = DashboardScopeSelector().stats_for(manager)

        assert data == {
            "stats": {"total_teams": 0, "total_employees": 0, "pending_evaluations": 0},
            "recent_activity": [],
        }

    def test_manager_sees_only_managed_teams(self, create_user, create_team, create_evaluation):
        manager = create_user(role=Role.MANAGER)
        mine = create_team(manager=manager)
        other = create_team()
        alice = create_user(name="Alice", team=mine)
        create_user(name="Bob", team=mine)
        outsider = create_user(name="Eve", team=other)

        create_evaluation(employee=alice, quarter="Q1")
        create_evaluation(employee=alice, quarter="Q2", is_submitted=True)
        create_evaluation(employee=outsider)

        data = DashboardScopeSelector().stats_for(manager)

        assert data["stats"] == {"total_teams": 1, "total_employees": 2, "pending_evaluations": 1}
        types = {a["type"] for a in data["recent_activity"]}
        assert types == {"EVALUATION_SUBMITTED", "USER_JOINED"}
        assert all(a["user"] != "Eve" for a in data["recent_activity"])
        dates = [a["date"] for a in data["recent_activity"]]
        assert dates == sorted(dates, reverse=True)

    def test_manager_feed_is_capped(self, create_user, create_team):
        manager = create_user(role=Role.MANAGER)
        team = create_team(manager=manager)
        for _ in range(8):
            create_user(team=team)

        data = DashboardScopeSelector().stats_for(manager)
        # at most five joins, no submissions
        assert len(data["recent_activity"]) == 5

    def test_admin_gets_global_counts_and_audit_feed(self, create_user, create_team, create_evaluation):
        admin = create_user(role=Role.ADMIN, name="Root")
        create_team()
        create_team()
        create_evaluation()
        create_evaluation(is_submitted=True)
        ActivityLogService().log(admin, ActivityAction.LOGIN, {"method": "email"})

        data = DashboardScopeSelector().stats_for(admin)

        assert data["stats"] == {"total_teams": 2, "total_employees": 2, "pending_evaluations": 1}
        [entry] = data["recent_activity"]
        assert entry["type"] == ActivityAction.LOGIN
        assert entry["title"] == "Root Logged In"
        assert entry["description"] == "Logged in via email"


@pytest.mark.django_db
class TestDashboardView:
    def test_employee_is_forbidden(self, api_client, create_user):
        api_client.force_authenticate(user=create_user())
        res = api_client.get(reverse("dashboard"))
        assert res.status_code == 403

    def test_manager_gets_scoped_payload(self, api_client, create_user):
        api_client.force_authenticate(user=create_user(role=Role.MANAGER))
        res = api_client.get(reverse("dashboard"))
        assert res.status_code == 200
        assert res.data["stats"]["total_teams"] == 0
