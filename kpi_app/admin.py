from django.contrib import admin
from . import models as m


# ───────────────────────────────
#  Basic inline helpers
# ───────────────────────────────
class KpiItemInline(admin.TabularInline):
    model = m.KpiItem
    extra = 0
    fields = ("name", "weight")


class EvaluationItemInline(admin.TabularInline):
    model = m.EvaluationItem
    extra = 0
    autocomplete_fields = ["kpi_item"]
    fields = ("kpi_item", "score", "updated_at")
    readonly_fields = ("updated_at",)


class EvaluationCommentInline(admin.TabularInline):
    model = m.EvaluationComment
    extra = 0
    autocomplete_fields = ["kpi_group"]
    fields = ("kpi_group", "comment", "updated_at")
    readonly_fields = ("updated_at",)


# ───────────────────────────────
#  KPI hierarchy
# ───────────────────────────────
@admin.register(m.KpiGroup)
class KpiGroupAdmin(admin.ModelAdmin):
    list_display  = ("name", "weight", "target_role", "team", "created_at")
    list_filter   = ("target_role", "team")
    search_fields = ("name", "team__name")
    autocomplete_fields = ["team"]
    inlines = [KpiItemInline]


@admin.register(m.KpiItem)
class KpiItemAdmin(admin.ModelAdmin):
    list_display  = ("name", "weight", "kpi_group")
    list_filter   = ("kpi_group__target_role",)
    search_fields = ("name", "kpi_group__name")
    autocomplete_fields = ["kpi_group"]


# ───────────────────────────────
#  Evaluation
# ───────────────────────────────
@admin.register(m.Evaluation)
class EvaluationAdmin(admin.ModelAdmin):
    list_display  = ("employee", "year", "quarter", "is_submitted", "created_at", "updated_at")
    list_filter   = ("year", "quarter", "is_submitted")
    search_fields = ("employee__name", "employee__email")
    autocomplete_fields = ["employee"]
    inlines = [EvaluationItemInline, EvaluationCommentInline]


# ───────────────────────────────
#  Activity log
# ───────────────────────────────
@admin.register(m.ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    list_display  = ("action", "user", "created_at")
    list_filter   = ("action",)
    search_fields = ("user__name", "user__email")
    readonly_fields = ("user", "action", "details", "created_at")
