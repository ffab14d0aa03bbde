import uuid
from django.db import models
from django.utils import timezone
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator

# ── Lookup / Enum helpers ────────────────────────────────────────────────

class TargetRole(models.TextChoices):
    EMPLOYEE = "EMPLOYEE", "Employee"
    MANAGER  = "MANAGER",  "Manager"

class Quarter(models.TextChoices):
    Q1 = "Q1", "Q1"
    Q2 = "Q2", "Q2"
    Q3 = "Q3", "Q3"
    Q4 = "Q4", "Q4"

class ActivityAction(models.TextChoices):
    LOGIN              = "LOGIN",              "Login"
    EVALUATION_UPDATED = "EVALUATION_UPDATED", "Evaluation updated"
    KPI_GROUP_CREATED  = "KPI_GROUP_CREATED",  "KPI group created"
    KPI_GROUP_UPDATED  = "KPI_GROUP_UPDATED",  "KPI group updated"
    KPI_ITEM_CREATED   = "KPI_ITEM_CREATED",   "KPI item created"
    KPI_ITEM_UPDATED   = "KPI_ITEM_UPDATED",   "KPI item updated"


PERCENT_VALIDATORS = [MinValueValidator(0), MaxValueValidator(100)]


# ── KPI hierarchy ────────────────────────────────────────────────────────
class KpiGroup(models.Model):
    kpi_group_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name         = models.CharField(max_length=160)
    weight       = models.FloatField(validators=PERCENT_VALIDATORS)  # % of the final score
    target_role  = models.CharField(max_length=8, choices=TargetRole.choices, default=TargetRole.EMPLOYEE)
    team         = models.ForeignKey("accounts.Team", on_delete=models.CASCADE, null=True, blank=True, related_name="kpi_groups")
    created_at   = models.DateTimeField(default=timezone.now)
    updated_at   = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]

    def __str__(self):
        return f"{self.name} ({self.weight:g}%)"


class KpiItem(models.Model):
    kpi_item_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name        = models.CharField(max_length=200)
    weight      = models.FloatField(validators=PERCENT_VALIDATORS)  # relative to siblings in the group
    kpi_group   = models.ForeignKey(KpiGroup, on_delete=models.CASCADE, related_name="items")
    created_at  = models.DateTimeField(default=timezone.now)
    updated_at  = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]

    def __str__(self):
        return self.name


# ── Evaluations & related ---------------------------------------------------
class Evaluation(models.Model):
    evaluation_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    employee      = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="evaluations")
    quarter       = models.CharField(max_length=2, choices=Quarter.choices)
    year          = models.PositiveSmallIntegerField()
    is_submitted  = models.BooleanField(default=False)
    created_at    = models.DateTimeField(default=timezone.now)
    updated_at    = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["employee", "quarter", "year"], name="uniq_eval_per_employee_period")
        ]

    @property
    def period(self):
        return f"{self.year}-{self.quarter}"

    def __str__(self):
        return f"{self.employee} {self.period}"


class EvaluationItem(models.Model):
    evaluation = models.ForeignKey(Evaluation, on_delete=models.CASCADE, related_name="items")
    kpi_item   = models.ForeignKey(KpiItem, on_delete=models.CASCADE, related_name="evaluation_items")
    score      = models.FloatField(validators=PERCENT_VALIDATORS)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["evaluation", "kpi_item"], name="uniq_item_score_per_eval")
        ]


class EvaluationComment(models.Model):
    evaluation = models.ForeignKey(Evaluation, on_delete=models.CASCADE, related_name="comments")
    kpi_group  = models.ForeignKey(KpiGroup, on_delete=models.CASCADE, related_name="evaluation_comments")
    comment    = models.TextField()
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["evaluation", "kpi_group"], name="uniq_group_comment_per_eval")
        ]


# ── Audit ────────────────────────────────────────────────────────────────
class ActivityLog(models.Model):
    activity_log_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user            = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="activity_logs")
    action          = models.CharField(max_length=24, choices=ActivityAction.choices)
    details         = models.JSONField(null=True, blank=True)
    created_at      = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at"]
