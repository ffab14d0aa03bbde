# kpi_app/views/activity_log_viewset.py
from rest_framework import viewsets, filters
from django_filters.rest_framework import DjangoFilterBackend
from kpi_app.models import ActivityLog
from kpi_app.permissions import IsAdmin
from kpi_app.serializers.activity_log import ActivityLogSerializer


class ActivityLogViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = ActivityLogSerializer
    permission_classes = [IsAdmin]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ["action", "user"]
    ordering = ["-created_at"]

    def get_queryset(self):
        return ActivityLog.objects.select_related("user")
