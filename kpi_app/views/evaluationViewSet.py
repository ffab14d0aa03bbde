from rest_framework import mixins, viewsets, status, filters
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend
from django.shortcuts import get_object_or_404

from accounts.models import Role
from kpi_app.filters import EvaluationFilter
from kpi_app.models import Evaluation, ActivityAction
from kpi_app.permissions import IsAdminOrManager, can_evaluate, can_view_subject, is_own_record
from kpi_app.serializers.evaluation_serializer import (
    EvaluationSerializer, EvaluationCreateSerializer, SubmitScoresSerializer
)
from kpi_app.services.activity_log import ActivityLogService
from kpi_app.services.evaluation_service import EvaluationService
from kpi_app.services.period_aggregator import PeriodAggregator, parse_periods
from kpi_app.services.team_rollup import TeamRollup


UUID_PATTERN = r"[0-9a-fA-F-]{36}"


class EvaluationViewSet(mixins.ListModelMixin,
                        mixins.RetrieveModelMixin,
                        mixins.CreateModelMixin,
                        viewsets.GenericViewSet):
    """
    Permissions
    -----------
    • ADMIN / MANAGER → list, retrieve, create-or-get, submit scores,
                        team stats. Managers see their teams' evaluations
                        plus their own and may not evaluate other managers.
    • Employee        → own score and own aggregate view only.
    """
    serializer_class = EvaluationSerializer
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_class = EvaluationFilter
    ordering_fields = ["created_at", "updated_at", "year", "quarter"]
    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_PATTERN

    #----dynamic permissions----
    def get_permissions(self):
        if self.action in ("score", "subject_view"):
            return [IsAuthenticated()]
        return [IsAdminOrManager()]

    def get_queryset(self):
        return EvaluationService().list_evaluations(self.request.user)

    # ── create-or-get ──────────────────────────────────────────
    def create(self, request, *args, **kwargs):
        serializer = EvaluationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        subject = serializer.validated_data["employee"]

        if not can_evaluate(request.user, subject):
            self.permission_denied(
                request,
                message="Managers can only evaluate employees, not other managers."
            )

        evaluation, created = EvaluationService().create_or_get(
            subject.pk,
            serializer.validated_data["quarter"],
            serializer.validated_data["year"],
        )
        return Response(
            EvaluationSerializer(evaluation).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    # ── write path ─────────────────────────────────────────────
    @action(detail=True, methods=["post"], url_path="scores")
    def scores(self, request, pk=None):
        evaluation = get_object_or_404(Evaluation.objects.select_related("employee"), pk=pk)
        if not can_evaluate(request.user, evaluation.employee):
            self.permission_denied(
                request,
                message="Managers can only evaluate employees, not other managers."
            )

        payload = SubmitScoresSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        items, comments = payload.entries()

        result = EvaluationService().submit_scores(evaluation.pk, items, comments)

        ActivityLogService().log(request.user, ActivityAction.EVALUATION_UPDATED, {
            "evaluation_id": str(evaluation.pk),
            "employee_name": evaluation.employee.name,
        })
        return Response(result, status=status.HTTP_200_OK)

    # ── read paths ─────────────────────────────────────────────
    @action(detail=True, methods=["get"], url_path="score")
    def score(self, request, pk=None):
        evaluation = get_object_or_404(Evaluation, pk=pk)
        if request.user.role == Role.EMPLOYEE and not is_own_record(request.user, evaluation.employee_id):
            self.permission_denied(request, message="You can only view your own evaluations.")
        return Response(EvaluationService().calculate_score(evaluation.pk))

    @action(detail=False, methods=["get"], url_path=rf"user/(?P<user_id>{UUID_PATTERN})")
    def subject_view(self, request, user_id=None):
        """
        Aggregate KPI view for one subject.
        ?periods=2024-Q1,2024-Q2 limits the evaluations merged; without it
        every evaluation of the subject is merged.
        """
        if not can_view_subject(request.user, user_id):
            self.permission_denied(request, message="You can only view your own evaluations.")

        try:
            periods = parse_periods(request.query_params.get("periods"))
        except ValueError as e:
            raise ValidationError({"periods": [str(e)]})

        result = PeriodAggregator().aggregate(user_id, periods)
        if result is None:
            return Response({"message": "No evaluation found"}, status=status.HTTP_200_OK)

        result["evaluation"] = EvaluationSerializer(result["evaluation"]).data
        return Response(result, status=status.HTTP_200_OK)

    @action(detail=False, methods=["get"], url_path=rf"team/(?P<team_id>{UUID_PATTERN})/stats")
    def team_stats(self, request, team_id=None):
        return Response(TeamRollup().rollup(team_id), status=status.HTTP_200_OK)
