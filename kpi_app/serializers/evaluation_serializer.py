from rest_framework import serializers
from django.contrib.auth import get_user_model
from kpi_app.models import Evaluation, Quarter
from kpi_app.utils import LabelChoiceField
from kpi_app.services.evaluation_service import ScoreEntry, GroupComment

User = get_user_model()


class EvaluationSerializer(serializers.ModelSerializer):
    """
    Read shape of an evaluation: period metadata plus brief subject info.
    Scores live behind /score/ and the aggregate view.
    """
    employee_id   = serializers.UUIDField(source="employee.user_id", read_only=True)
    employee      = serializers.CharField(source="employee.name", read_only=True)
    employee_role = serializers.CharField(source="employee.role", read_only=True)
    team          = serializers.CharField(source="employee.team.name", read_only=True, default=None)
    period        = serializers.CharField(read_only=True)

    class Meta:
        model = Evaluation
        fields = [
            "evaluation_id",
            "employee", "employee_id", "employee_role", "team",
            "quarter", "year", "period",
            "is_submitted",
            "created_at", "updated_at",
        ]
        read_only_fields = fields


class EvaluationCreateSerializer(serializers.Serializer):
    #--WRITE-ONLY--
    employee_id = serializers.PrimaryKeyRelatedField(
        source="employee",
        queryset=User.objects.all(),
    )
    quarter = LabelChoiceField(choices=Quarter.choices)
    year    = serializers.IntegerField(min_value=2000, max_value=2100)


class ScoreEntrySerializer(serializers.Serializer):
    kpi_item_id = serializers.UUIDField()
    score       = serializers.FloatField(min_value=0, max_value=100)


class GroupCommentSerializer(serializers.Serializer):
    kpi_group_id = serializers.UUIDField()
    comment      = serializers.CharField(allow_blank=True, allow_null=True, required=False, default="", trim_whitespace=False)


class SubmitScoresSerializer(serializers.Serializer):
    items    = ScoreEntrySerializer(many=True)
    comments = GroupCommentSerializer(many=True, required=False, default=list)

    def entries(self):
        """validated payload → (ScoreEntry list, GroupComment list)"""
        data = self.validated_data
        items = [ScoreEntry(kpi_item_id=i["kpi_item_id"], score=i["score"]) for i in data["items"]]
        comments = [GroupComment(kpi_group_id=c["kpi_group_id"], comment=c.get("comment", ""))
                    for c in data.get("comments", [])]
        return items, comments
