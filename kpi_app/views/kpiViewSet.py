from rest_framework import mixins, viewsets, filters, status
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from kpi_app.filters import KpiGroupFilter, KpiItemFilter
from kpi_app.models import KpiGroup, KpiItem, TargetRole, ActivityAction
from kpi_app.permissions import ReadOnlyOrAdmin
from kpi_app.serializers.kpi_serializer import (
    KpiGroupSerializer, KpiItemSerializer, KpiTargetQuerySerializer
)
from kpi_app.services.activity_log import ActivityLogService
from kpi_app.services.kpi_importer import KpiImporter, parse_kpi_rows
from kpi_app.services.kpi_weights import group_weight_warnings

UUID_PATTERN = r"[0-9a-fA-F-]{36}"


class _KpiWriteMixin:
    """
    Create / update for KPI rows: no deletes, every write goes to the
    activity log and the response carries a non-blocking weight check.
    """
    log_created = None
    log_updated = None

    def _log_details(self, obj):
        raise NotImplementedError

    def _weight_group(self, obj):
        raise NotImplementedError

    def _respond(self, obj, status_code):
        data = dict(self.get_serializer(obj).data)
        warnings = group_weight_warnings(self._weight_group(obj))
        data["weights_balanced"] = not warnings
        if warnings:
            data["warnings"] = warnings
        return Response(data, status=status_code)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        obj = serializer.save()
        ActivityLogService().log(request.user, self.log_created, self._log_details(obj))
        return self._respond(obj, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        obj = serializer.save()
        ActivityLogService().log(request.user, self.log_updated, self._log_details(obj))
        return self._respond(obj, status.HTTP_200_OK)


class KpiGroupViewSet(_KpiWriteMixin,
                      mixins.ListModelMixin, mixins.RetrieveModelMixin,
                      mixins.CreateModelMixin, mixins.UpdateModelMixin,
                      viewsets.GenericViewSet):
    """
    • GET   /kpi-groups/                   → all groups with items
    • GET   /kpi-groups/team/{team_id}/    → employee KPIs of a team
    • GET   /kpi-groups/managers/          → global manager KPIs
    • GET   /kpi-groups/for-target/?team_id=&role=
    • POST  /kpi-groups/import/            → bulk load (Admin)
    • POST / PATCH                         → Admin only
    """
    queryset = KpiGroup.objects.select_related("team").prefetch_related("items")
    serializer_class = KpiGroupSerializer
    permission_classes = [ReadOnlyOrAdmin]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_class = KpiGroupFilter
    search_fields = ["name"]
    lookup_value_regex = UUID_PATTERN

    log_created = ActivityAction.KPI_GROUP_CREATED
    log_updated = ActivityAction.KPI_GROUP_UPDATED

    def _log_details(self, obj):
        return {"group_name": obj.name}

    def _weight_group(self, obj):
        return obj

    @action(detail=False, methods=["get"], url_path=rf"team/(?P<team_id>{UUID_PATTERN})")
    def by_team(self, request, team_id=None):
        qs = self.get_queryset().filter(team_id=team_id, target_role=TargetRole.EMPLOYEE)
        return Response(self.get_serializer(qs, many=True).data)

    @action(detail=False, methods=["get"], url_path="managers")
    def managers(self, request):
        qs = self.get_queryset().filter(target_role=TargetRole.MANAGER)
        return Response(self.get_serializer(qs, many=True).data)

    @action(detail=False, methods=["get"], url_path="for-target")
    def for_target(self, request):
        """KPI set that applies to a subject: managers → global, others → their team."""
        params = KpiTargetQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)

        if params.validated_data["role"] == TargetRole.MANAGER:
            return self.managers(request)
        return self.by_team(request, team_id=params.validated_data["team_id"])

    # Bulk import of the KPI hierarchy
    @action(detail=False, methods=["post"], url_path="import")
    def import_kpis(self, request, *args, **kwargs):
        """
        JSON array or multipart CSV/XLSX under 'file', one row per KPI item.
        ?dry_run=true validates and counts without writing.
        """
        dry_run = request.query_params.get("dry_run") == "true"
        try:
            rows = parse_kpi_rows(request)
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        result = KpiImporter().run(rows, dry_run=dry_run)
        if result["status"] == "invalid":
            return Response(result, status=status.HTTP_400_BAD_REQUEST)
        if result["status"] == "ok":
            return Response(result, status=status.HTTP_200_OK)

        log = ActivityLogService()
        for group in result["kpi_groups"]:
            log.log(request.user, ActivityAction.KPI_GROUP_CREATED, {"group_name": group["name"]})
        for item in result["kpi_items"]:
            log.log(request.user, ActivityAction.KPI_ITEM_CREATED,
                    {"item_name": item["name"], "group_name": item["group_name"]})
        return Response(result, status=status.HTTP_201_CREATED)


class KpiItemViewSet(_KpiWriteMixin,
                     mixins.ListModelMixin, mixins.RetrieveModelMixin,
                     mixins.CreateModelMixin, mixins.UpdateModelMixin,
                     viewsets.GenericViewSet):
    queryset = KpiItem.objects.select_related("kpi_group")
    serializer_class = KpiItemSerializer
    permission_classes = [ReadOnlyOrAdmin]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_class = KpiItemFilter
    search_fields = ["name"]
    lookup_value_regex = UUID_PATTERN

    log_created = ActivityAction.KPI_ITEM_CREATED
    log_updated = ActivityAction.KPI_ITEM_UPDATED

    def _log_details(self, obj):
        return {"item_name": obj.name, "group_name": obj.kpi_group.name}

    def _weight_group(self, obj):
        return obj.kpi_group
