import pytest
from django.urls import reverse
from accounts.models import Role
from kpi_app.models import ActivityAction, ActivityLog, Evaluation, EvaluationComment, EvaluationItem


@pytest.mark.django_db
class TestEvaluationCreateOrGet:
    def test_create_then_get_existing(self, api_client, create_user):
        admin = create_user(role=Role.ADMIN)
        subject = create_user()
        api_client.force_authenticate(user=admin)
        payload = {"employee_id": str(subject.pk), "quarter": "Q1", "year": 2024}

        first = api_client.post(reverse("evaluation-list"), payload, format="json")
        second = api_client.post(reverse("evaluation-list"), payload, format="json")

        assert first.status_code == 201
        assert second.status_code == 200
        assert first.data["evaluation_id"] == second.data["evaluation_id"]
        assert first.data["period"] == "2024-Q1"
        assert Evaluation.objects.filter(employee=subject).count() == 1

    def test_manager_cannot_evaluate_manager(self, api_client, create_user):
        manager = create_user(role=Role.MANAGER)
        peer = create_user(role=Role.MANAGER)
        api_client.force_authenticate(user=manager)

        res = api_client.post(
            reverse("evaluation-list"),
            {"employee_id": str(peer.pk), "quarter": "Q1", "year": 2024},
            format="json",
        )
        assert res.status_code == 403
        assert not Evaluation.objects.filter(employee=peer).exists()

    def test_employee_cannot_create(self, api_client, create_user):
        emp = create_user()
        api_client.force_authenticate(user=emp)
        res = api_client.post(
            reverse("evaluation-list"),
            {"employee_id": str(emp.pk), "quarter": "Q1", "year": 2024},
            format="json",
        )
        assert res.status_code == 403

    def test_anonymous_is_rejected(self, api_client):
        res = api_client.get(reverse("evaluation-list"))
        assert res.status_code in (401, 403)


@pytest.mark.django_db
class TestEvaluationListing:
    def test_manager_sees_team_and_own(self, api_client, create_user, create_team, create_evaluation):
        manager = create_user(role=Role.MANAGER)
        team = create_team(manager=manager)
        ev_team = create_evaluation(employee=create_user(team=team))
        ev_own = create_evaluation(employee=manager)
        create_evaluation()  # outside the manager's teams

        api_client.force_authenticate(user=manager)
        res = api_client.get(reverse("evaluation-list"))

        assert res.status_code == 200
        ids = {row["evaluation_id"] for row in res.data}
        assert ids == {str(ev_team.pk), str(ev_own.pk)}

    def test_admin_sees_all(self, api_client, create_user, create_evaluation):
        create_evaluation()
        create_evaluation()
        api_client.force_authenticate(user=create_user(role=Role.ADMIN))
        res = api_client.get(reverse("evaluation-list"))
        assert len(res.data) == 2


@pytest.mark.django_db
class TestScoreEndpoints:
    def test_submit_scores_returns_score_and_logs(self, api_client, create_user, create_item, create_evaluation):
        admin = create_user(role=Role.ADMIN)
        item = create_item()
        ev = create_evaluation()
        api_client.force_authenticate(user=admin)

        res = api_client.post(
            reverse("evaluation-scores", args=[ev.pk]),
            {
                "items": [{"kpi_item_id": str(item.pk), "score": 85}],
                "comments": [{"kpi_group_id": str(item.kpi_group_id), "comment": ""}],
            },
            format="json",
        )

        assert res.status_code == 200
        assert res.data["final_score"] == pytest.approx(85.0)
        assert str(item.kpi_group_id) in res.data["group_scores"]
        assert ActivityLog.objects.filter(user=admin, action=ActivityAction.EVALUATION_UPDATED).count() == 1

    def test_null_comment_is_skipped(self, api_client, create_user, create_item, create_evaluation):
        item = create_item()
        ev = create_evaluation()
        EvaluationComment.objects.create(evaluation=ev, kpi_group=item.kpi_group, comment="Keep me")
        api_client.force_authenticate(user=create_user(role=Role.ADMIN))

        res = api_client.post(
            reverse("evaluation-scores", args=[ev.pk]),
            {
                "items": [{"kpi_item_id": str(item.pk), "score": 70}],
                "comments": [{"kpi_group_id": str(item.kpi_group_id), "comment": None}],
            },
            format="json",
        )

        assert res.status_code == 200
        assert EvaluationComment.objects.get(evaluation=ev).comment == "Keep me"

    def test_score_out_of_range_is_rejected(self, api_client, create_user, create_item, create_evaluation):
        item = create_item()
        ev = create_evaluation()
        api_client.force_authenticate(user=create_user(role=Role.ADMIN))
        res = api_client.post(
            reverse("evaluation-scores", args=[ev.pk]),
            {"items": [{"kpi_item_id": str(item.pk), "score": 101}]},
            format="json",
        )
        assert res.status_code == 400
        assert not EvaluationItem.objects.exists()

    def test_unknown_kpi_item_is_404(self, api_client, create_user, create_evaluation):
        ev = create_evaluation()
        api_client.force_authenticate(user=create_user(role=Role.ADMIN))
        res = api_client.post(
            reverse("evaluation-scores", args=[ev.pk]),
            {"items": [{"kpi_item_id": "00000000-0000-0000-0000-000000000000", "score": 50}]},
            format="json",
        )
        assert res.status_code == 404

    def test_employee_reads_own_score_only(self, api_client, create_user, create_evaluation):
        emp = create_user()
        own = create_evaluation(employee=emp)
        other = create_evaluation()
        api_client.force_authenticate(user=emp)

        assert api_client.get(reverse("evaluation-score", args=[own.pk])).status_code == 200
        assert api_client.get(reverse("evaluation-score", args=[other.pk])).status_code == 403


@pytest.mark.django_db
class TestSubjectView:
    def test_no_evaluation_message(self, api_client, create_user):
        emp = create_user()
        api_client.force_authenticate(user=emp)
        res = api_client.get(reverse("evaluation-subject-view", kwargs={"user_id": emp.pk}))
        assert res.status_code == 200
        assert res.data == {"message": "No evaluation found"}

    def test_employee_cannot_view_someone_else(self, api_client, create_user):
        emp = create_user()
        other = create_user()
        api_client.force_authenticate(user=emp)
        res = api_client.get(reverse("evaluation-subject-view", kwargs={"user_id": other.pk}))
        assert res.status_code == 403

    def test_bad_period_is_400(self, api_client, create_user):
        api_client.force_authenticate(user=create_user(role=Role.MANAGER))
        url = reverse("evaluation-subject-view", kwargs={"user_id": create_user().pk})
        res = api_client.get(url, {"periods": "2024-Q9"})
        assert res.status_code == 400
        assert "periods" in res.data

    def test_aggregate_payload(self, api_client, create_user, create_item, create_evaluation):
        emp = create_user()
        item = create_item()
        ev = create_evaluation(employee=emp, quarter="Q3", year=2024)
        EvaluationItem.objects.create(evaluation=ev, kpi_item=item, score=64)
        api_client.force_authenticate(user=emp)

        res = api_client.get(reverse("evaluation-subject-view", kwargs={"user_id": emp.pk}),
                             {"periods": "2024-Q3"})

        assert res.status_code == 200
        assert res.data["evaluation"]["evaluation_id"] == str(ev.pk)
        assert res.data["final_score"] == 64.0
        assert res.data["available_periods"] == ["2024-Q3"]


@pytest.mark.django_db
class TestTeamStatsEndpoint:
    def test_manager_can_read(self, api_client, create_user, create_team):
        team = create_team()
        create_user(team=team)
        api_client.force_authenticate(user=create_user(role=Role.MANAGER))
        res = api_client.get(reverse("evaluation-team-stats", kwargs={"team_id": team.pk}))
        assert res.status_code == 200
        assert res.data == {"overall_score": 0, "member_count": 1, "evaluated_count": 0}

    def test_employee_is_forbidden(self, api_client, create_user, create_team):
        api_client.force_authenticate(user=create_user())
        res = api_client.get(reverse("evaluation-team-stats", kwargs={"team_id": create_team().pk}))
        assert res.status_code == 403
