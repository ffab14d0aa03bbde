import pytest
from io import StringIO
from django.contrib.auth import get_user_model
from django.core.management import call_command
from accounts.models import Role, Team
from kpi_app.models import Evaluation, EvaluationComment, EvaluationItem, KpiGroup, TargetRole


@pytest.mark.django_db
class TestSeedKpi:
    def test_seed_is_repeatable(self):
        call_command("seed_kpi", stdout=StringIO())
        call_command("seed_kpi", stdout=StringIO())

        User = get_user_model()
        assert User.objects.filter(role=Role.ADMIN).count() == 1
        team = Team.objects.get(name="Core Team")
        assert team.manager.role == Role.MANAGER
        assert User.objects.get(email="employee@example.com").team == team

        emp_groups = KpiGroup.objects.filter(target_role=TargetRole.EMPLOYEE, team=team)
        mgr_groups = KpiGroup.objects.filter(target_role=TargetRole.MANAGER, team__isnull=True)
        assert sum(g.weight for g in emp_groups) == 100
        assert sum(g.weight for g in mgr_groups) == 100


@pytest.mark.django_db
class TestClearScores:
    def test_deletes_scores_and_comments_but_keeps_evaluations(self, create_evaluation, create_item):
        item = create_item()
        ev = create_evaluation()
        EvaluationItem.objects.create(evaluation=ev, kpi_item=item, score=50)
        EvaluationComment.objects.create(evaluation=ev, kpi_group=item.kpi_group, comment="ok")

        out = StringIO()
        call_command("clear_scores", "--yes", stdout=out)

        assert not EvaluationItem.objects.exists()
        assert not EvaluationComment.objects.exists()
        assert Evaluation.objects.filter(pk=ev.pk).exists()
        assert "Deleted 1 scores and 1 comments." in out.getvalue()
