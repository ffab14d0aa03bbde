import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid
from django.conf import settings
from django.db import migrations, models


PERCENT = [django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="KpiGroup",
            fields=[
                ("kpi_group_id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=160)),
                ("weight", models.FloatField(validators=PERCENT)),
                ("target_role", models.CharField(choices=[("EMPLOYEE", "Employee"), ("MANAGER", "Manager")], default="EMPLOYEE", max_length=8)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("team", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="kpi_groups", to="accounts.team")),
            ],
            options={
                "ordering": ["created_at"],
            },
        ),
        migrations.CreateModel(
            name="KpiItem",
            fields=[
                ("kpi_item_id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=200)),
                ("weight", models.FloatField(validators=PERCENT)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("kpi_group", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="kpi_app.kpigroup")),
            ],
            options={
                "ordering": ["created_at"],
            },
        ),
        migrations.CreateModel(
            name="Evaluation",
            fields=[
                ("evaluation_id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("quarter", models.CharField(choices=[("Q1", "Q1"), ("Q2", "Q2"), ("Q3", "Q3"), ("Q4", "Q4")], max_length=2)),
                ("year", models.PositiveSmallIntegerField()),
                ("is_submitted", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("employee", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="evaluations", to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name="EvaluationItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("score", models.FloatField(validators=PERCENT)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("evaluation", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="kpi_app.evaluation")),
                ("kpi_item", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="evaluation_items", to="kpi_app.kpiitem")),
            ],
        ),
        migrations.CreateModel(
            name="EvaluationComment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("comment", models.TextField()),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("evaluation", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="comments", to="kpi_app.evaluation")),
                ("kpi_group", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="evaluation_comments", to="kpi_app.kpigroup")),
            ],
        ),
        migrations.CreateModel(
            name="ActivityLog",
            fields=[
                ("activity_log_id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("action", models.CharField(choices=[("LOGIN", "Login"), ("EVALUATION_UPDATED", "Evaluation updated"), ("KPI_GROUP_CREATED", "KPI group created"), ("KPI_GROUP_UPDATED", "KPI group updated"), ("KPI_ITEM_CREATED", "KPI item created"), ("KPI_ITEM_UPDATED", "KPI item updated")], max_length=24)),
                ("details", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="activity_logs", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.AddConstraint(
            model_name="evaluation",
            constraint=models.UniqueConstraint(fields=("employee", "quarter", "year"), name="uniq_eval_per_employee_period"),
        ),
        migrations.AddConstraint(
            model_name="evaluationitem",
            constraint=models.UniqueConstraint(fields=("evaluation", "kpi_item"), name="uniq_item_score_per_eval"),
        ),
        migrations.AddConstraint(
            model_name="evaluationcomment",
            constraint=models.UniqueConstraint(fields=("evaluation", "kpi_group"), name="uniq_group_comment_per_eval"),
        ),
    ]
