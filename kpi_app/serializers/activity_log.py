from rest_framework import serializers
from kpi_app.models import ActivityLog
from kpi_app.services.activity_log import format_title, format_description


class ActivityLogSerializer(serializers.ModelSerializer):
    """Read-only; rows are written by ActivityLogService."""
    user_id   = serializers.UUIDField(source="user.user_id", read_only=True)
    user_name = serializers.CharField(source="user.name", read_only=True)
    user_role = serializers.CharField(source="user.role", read_only=True)
    title       = serializers.SerializerMethodField()
    description = serializers.SerializerMethodField()

    class Meta:
        model = ActivityLog
        fields = [
            "activity_log_id",
            "action",
            "details",
            "user_id",
            "user_name",
            "user_role",
            "title",
            "description",
            "created_at",
        ]
        read_only_fields = fields

    def get_title(self, obj: ActivityLog) -> str:
        return format_title(obj)

    def get_description(self, obj: ActivityLog) -> str:
        return format_description(obj)
