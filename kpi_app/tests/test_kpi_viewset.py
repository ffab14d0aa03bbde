import pytest
from django.urls import reverse
from accounts.models import Role
from kpi_app.models import ActivityAction, ActivityLog, KpiGroup, KpiItem, TargetRole


@pytest.mark.django_db
class TestKpiGroupWrites:
    def test_admin_create_warns_when_weights_do_not_total_100(self, api_client, create_user, create_team):
        admin = create_user(role=Role.ADMIN)
        team = create_team()
        api_client.force_authenticate(user=admin)

        res = api_client.post(
            reverse("kpi-group-list"),
            {"name": "Delivery", "weight": 40, "target_role": "Employee", "team_id": str(team.pk)},
            format="json",
        )

        assert res.status_code == 201
        assert res.data["target_role"] == TargetRole.EMPLOYEE
        assert res.data["weights_balanced"] is False
        assert res.data["warnings"]
        assert ActivityLog.objects.filter(action=ActivityAction.KPI_GROUP_CREATED).count() == 1

    def test_balanced_audience_has_no_warnings(self, api_client, create_user, create_team, create_group):
        team = create_team()
        create_group(team=team, weight=60)
        api_client.force_authenticate(user=create_user(role=Role.ADMIN))

        res = api_client.post(
            reverse("kpi-group-list"),
            {"name": "Growth", "weight": 40, "team_id": str(team.pk)},
            format="json",
        )

        assert res.status_code == 201
        assert res.data["weights_balanced"] is True
        assert "warnings" not in res.data

    def test_manager_groups_are_global(self, api_client, create_user, create_team):
        api_client.force_authenticate(user=create_user(role=Role.ADMIN))
        res = api_client.post(
            reverse("kpi-group-list"),
            {"name": "Leadership", "weight": 100, "target_role": "MANAGER", "team_id": str(create_team().pk)},
            format="json",
        )
        assert res.status_code == 201
        assert KpiGroup.objects.get(pk=res.data["kpi_group_id"]).team_id is None
        assert res.data["weights_balanced"] is True

    def test_non_admin_cannot_write(self, api_client, create_user):
        api_client.force_authenticate(user=create_user(role=Role.MANAGER))
        res = api_client.post(reverse("kpi-group-list"), {"name": "X", "weight": 10}, format="json")
        assert res.status_code == 403

    def test_delete_is_not_allowed(self, api_client, create_user, create_group):
        group = create_group()
        api_client.force_authenticate(user=create_user(role=Role.ADMIN))
        res = api_client.delete(reverse("kpi-group-detail", args=[group.pk]))
        assert res.status_code == 405
        assert KpiGroup.objects.filter(pk=group.pk).exists()


@pytest.mark.django_db
class TestKpiGroupReads:
    def test_for_target_routes_by_role(self, api_client, create_user, create_team, create_group):
        team = create_team()
        emp_group = create_group(name="Team KPI", team=team)
        create_group(name="Other team KPI", team=create_team())
        mgr_group = create_group(name="Manager KPI", target_role=TargetRole.MANAGER)
        api_client.force_authenticate(user=create_user())

        url = reverse("kpi-group-for-target")
        emp_res = api_client.get(url, {"role": "EMPLOYEE", "team_id": str(team.pk)})
        mgr_res = api_client.get(url, {"role": "MANAGER"})

        assert [g["kpi_group_id"] for g in emp_res.data] == [str(emp_group.pk)]
        assert [g["kpi_group_id"] for g in mgr_res.data] == [str(mgr_group.pk)]

    def test_for_target_employee_requires_team(self, api_client, create_user):
        api_client.force_authenticate(user=create_user())
        res = api_client.get(reverse("kpi-group-for-target"), {"role": "EMPLOYEE"})
        assert res.status_code == 400


@pytest.mark.django_db
class TestKpiItemWrites:
    def test_item_cannot_move_groups(self, api_client, create_user, create_item, create_group):
        item = create_item()
        other = create_group(name="Other")
        api_client.force_authenticate(user=create_user(role=Role.ADMIN))

        res = api_client.patch(
            reverse("kpi-item-detail", args=[item.pk]),
            {"kpi_group_id": str(other.pk)},
            format="json",
        )

        assert res.status_code == 400
        item.refresh_from_db()
        assert item.kpi_group_id != other.pk

    def test_item_update_logs_and_checks_group_weights(self, api_client, create_user, create_item):
        item = create_item(name="Old")
        api_client.force_authenticate(user=create_user(role=Role.ADMIN))

        res = api_client.patch(reverse("kpi-item-detail", args=[item.pk]), {"name": "New"}, format="json")

        assert res.status_code == 200
        assert KpiItem.objects.get(pk=item.pk).name == "New"
        # fixture group alone carries weight 100
        assert res.data["weights_balanced"] is True
        log = ActivityLog.objects.get(action=ActivityAction.KPI_ITEM_UPDATED)
        assert log.details == {"item_name": "New", "group_name": item.kpi_group.name}
