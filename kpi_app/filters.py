import django_filters as filters
from kpi_app.models import Evaluation, KpiGroup, KpiItem, Quarter, TargetRole


class EvaluationFilter(filters.FilterSet):
    employee_id  = filters.UUIDFilter(field_name="employee__user_id", lookup_expr="exact")
    team_id      = filters.UUIDFilter(field_name="employee__team__team_id", lookup_expr="exact")
    quarter      = filters.ChoiceFilter(choices=Quarter.choices)
    year         = filters.NumberFilter(field_name="year")
    is_submitted = filters.BooleanFilter(field_name="is_submitted")

    class Meta:
        model = Evaluation
        fields = ["employee_id", "team_id", "quarter", "year", "is_submitted"]


class KpiGroupFilter(filters.FilterSet):
    team_id     = filters.UUIDFilter(field_name="team__team_id", lookup_expr="exact")
    target_role = filters.ChoiceFilter(choices=TargetRole.choices)

    class Meta:
        model = KpiGroup
        fields = ["team_id", "target_role"]


class KpiItemFilter(filters.FilterSet):
    kpi_group_id = filters.UUIDFilter(field_name="kpi_group__kpi_group_id", lookup_expr="exact")

    class Meta:
        model = KpiItem
        fields = ["kpi_group_id"]
