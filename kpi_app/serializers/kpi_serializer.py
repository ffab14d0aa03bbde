# kpi_app/serializers/kpi_serializer.py

from rest_framework import serializers
from accounts.models import Team
from kpi_app.models import KpiGroup, KpiItem, TargetRole
from kpi_app.utils import LabelChoiceField


class KpiItemSerializer(serializers.ModelSerializer):
    kpi_item_id = serializers.UUIDField(read_only=True)

    # Clients POST with a `kpi_group_id`; we write into .kpi_group
    kpi_group_id = serializers.PrimaryKeyRelatedField(
        source="kpi_group",
        queryset=KpiGroup.objects.all()
    )
    name   = serializers.CharField(max_length=200)
    weight = serializers.FloatField(min_value=0, max_value=100)

    class Meta:
        model  = KpiItem
        fields = ["kpi_item_id", "kpi_group_id", "name", "weight", "created_at", "updated_at"]
        read_only_fields = ("kpi_item_id", "created_at", "updated_at")

    def validate_kpi_group_id(self, group):
        # scores already recorded against the item belong to its current group
        if self.instance is not None and self.instance.kpi_group_id != group.pk:
            raise serializers.ValidationError("A KPI item cannot be moved to another group.")
        return group


class KpiItemBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model  = KpiItem
        fields = ["kpi_item_id", "name", "weight"]


class KpiGroupSerializer(serializers.ModelSerializer):
    kpi_group_id = serializers.UUIDField(read_only=True)
    name         = serializers.CharField(max_length=160)
    weight       = serializers.FloatField(min_value=0, max_value=100)
    target_role  = LabelChoiceField(choices=TargetRole.choices, required=False, default=TargetRole.EMPLOYEE)
    team_id      = serializers.PrimaryKeyRelatedField(
        source="team",
        queryset=Team.objects.all(),
        allow_null=True,
        required=False,
    )
    team  = serializers.CharField(source="team.name", read_only=True, default=None)
    items = KpiItemBriefSerializer(many=True, read_only=True)

    class Meta:
        model  = KpiGroup
        fields = [
            "kpi_group_id", "name", "weight",
            "target_role", "team_id", "team",
            "items",
            "created_at", "updated_at",
        ]
        read_only_fields = ("kpi_group_id", "created_at", "updated_at")

    def validate(self, attrs):
        target_role = attrs.get("target_role", getattr(self.instance, "target_role", TargetRole.EMPLOYEE))
        # manager KPIs are global
        if target_role == TargetRole.MANAGER:
            attrs["team"] = None
        return attrs


class KpiTargetQuerySerializer(serializers.Serializer):
    """?role=&team_id= for /kpi-groups/for-target/"""
    role    = LabelChoiceField(choices=TargetRole.choices, required=False, default=TargetRole.EMPLOYEE)
    team_id = serializers.UUIDField(required=False, allow_null=True, default=None)

    def validate(self, attrs):
        if attrs["role"] == TargetRole.EMPLOYEE and attrs["team_id"] is None:
            raise serializers.ValidationError({"team_id": ["Required for employee KPIs."]})
        return attrs
