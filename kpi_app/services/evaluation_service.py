import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Sequence, Tuple

from django.db import DEFAULT_DB_ALIAS, DatabaseError, transaction
from django.db.models import Prefetch, Q
from django.utils import timezone

from accounts.models import Role, Team
from kpi_app.exceptions import EvaluationNotFound, KpiNotFound, SubmissionFailed
from kpi_app.models import Evaluation, EvaluationComment, EvaluationItem, KpiGroup, KpiItem
from kpi_app.services.score_math import calculate_weighted_scores, scored_items_from

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreEntry:
    kpi_item_id: Any
    score: float


@dataclass(frozen=True)
class GroupComment:
    kpi_group_id: Any
    comment: str

    @property
    def is_blank(self) -> bool:
        return not (self.comment or "").strip()


def managed_team_ids(user, using: str = DEFAULT_DB_ALIAS):
    return list(Team.objects.using(using)
                .filter(manager=user)
                .values_list("team_id", flat=True))


class EvaluationService:
    """
    Evaluation lifecycle against one database alias:
    create-or-get, score submission (atomic), score calculation and
    role-scoped listing.
    """

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using

    def _evaluations(self):
        return Evaluation.objects.using(self.using)

    # ── create-or-get ──────────────────────────────────────────────────
    def create_or_get(self, subject_id, quarter: str, year: int) -> Tuple[Evaluation, bool]:
        evaluation, created = self._evaluations().get_or_create(
            employee_id=subject_id, quarter=quarter, year=year,
        )
        if created:
            logger.info("Created evaluation %s for %s %s-%s",
                        evaluation.pk, subject_id, year, quarter)
        return evaluation, created

    # ── scoring ────────────────────────────────────────────────────────
    def calculate_score(self, evaluation_id) -> Dict[str, Any]:
        item_rows = EvaluationItem.objects.using(self.using).select_related("kpi_item__kpi_group")
        evaluation = (self._evaluations()
                      .filter(pk=evaluation_id)
                      .prefetch_related(Prefetch("items", queryset=item_rows))
                      .first())
        if evaluation is None:
            raise EvaluationNotFound()
        return calculate_weighted_scores(scored_items_from(evaluation.items.all()))

    # ── submission ─────────────────────────────────────────────────────
    def submit_scores(
        self,
        evaluation_id,
        items: Sequence[ScoreEntry],
        comments: Iterable[GroupComment] = (),
    ) -> Dict[str, Any]:
        """
        Upsert item scores and non-blank group comments, then mark the
        evaluation submitted, all in one transaction. Blank comments are
        skipped and never clear a stored comment. The score is recomputed
        from the committed state.

        Raises:
            EvaluationNotFound / KpiNotFound: unknown ids; nothing is written.
            SubmissionFailed: a database error rolled the batch back.
        """
        comments = [c for c in comments if not c.is_blank]
        logger.info("Submitting scores: evaluation=%s items=%d comments=%d",
                    evaluation_id, len(items), len(comments))

        try:
            with transaction.atomic(using=self.using):
                if not self._evaluations().filter(pk=evaluation_id).exists():
                    raise EvaluationNotFound()
                self._check_kpis_exist(items, comments)

                for entry in items:
                    EvaluationItem.objects.using(self.using).update_or_create(
                        evaluation_id=evaluation_id,
                        kpi_item_id=entry.kpi_item_id,
                        defaults={"score": entry.score},
                    )

                for entry in comments:
                    EvaluationComment.objects.using(self.using).update_or_create(
                        evaluation_id=evaluation_id,
                        kpi_group_id=entry.kpi_group_id,
                        defaults={"comment": entry.comment},
                    )

                self._mark_submitted(evaluation_id)
        except DatabaseError as exc:
            logger.exception("Score submission for evaluation %s rolled back", evaluation_id)
            raise SubmissionFailed() from exc

        return self.calculate_score(evaluation_id)

    def _check_kpis_exist(self, items, comments) -> None:
        item_ids = {e.kpi_item_id for e in items}
        if item_ids:
            found = set(KpiItem.objects.using(self.using)
                        .filter(pk__in=item_ids)
                        .values_list("pk", flat=True))
            missing = {str(i) for i in item_ids} - {str(i) for i in found}
            if missing:
                raise KpiNotFound(f"KPI item(s) not found: {', '.join(sorted(missing))}")

        group_ids = {c.kpi_group_id for c in comments}
        if group_ids:
            found = set(KpiGroup.objects.using(self.using)
                        .filter(pk__in=group_ids)
                        .values_list("pk", flat=True))
            missing = {str(i) for i in group_ids} - {str(i) for i in found}
            if missing:
                raise KpiNotFound(f"KPI group(s) not found: {', '.join(sorted(missing))}")

    def _mark_submitted(self, evaluation_id) -> None:
        self._evaluations().filter(pk=evaluation_id).update(
            is_submitted=True, updated_at=timezone.now()
        )

    # ── listing ────────────────────────────────────────────────────────
    def list_evaluations(self, user):
        """
        ADMIN   → every evaluation
        MANAGER → evaluations of members of the teams they manage + their own
        others  → nothing
        """
        qs = (self._evaluations()
              .select_related("employee__team")
              .order_by("-created_at"))
        if user.role == Role.ADMIN:
            return qs
        if user.role == Role.MANAGER:
            team_ids = managed_team_ids(user, self.using)
            return qs.filter(Q(employee__team_id__in=team_ids) | Q(employee=user)).distinct()
        return qs.none()
