from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User, Team


# ───────────────────────────────
#  User
# ───────────────────────────────
@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display  = ("email", "name", "role", "team", "is_staff", "created_at")
    list_filter   = ("role", "team", "is_staff", "is_active")
    search_fields = ("email", "name", "username")
    ordering      = ("-created_at",)
    autocomplete_fields = ["team"]
    fieldsets = (
        (None,            {"fields": ("email", "username", "password")}),
        ("Personal info", {"fields": ("name", "avatar")}),
        ("Organisation",  {"fields": ("role", "team")}),
        ("Permissions",   {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")}),
        ("Dates",         {"fields": ("last_login", "date_joined")}),
    )
    add_fieldsets = (
        (None, {
            "classes": ("wide",),
            "fields": ("email", "username", "name", "role", "team", "password1", "password2"),
        }),
    )


# ───────────────────────────────
#  Team
# ───────────────────────────────
class MemberInline(admin.TabularInline):
    model = User
    fk_name = "team"
    fields = ("name", "email", "role")
    readonly_fields = ("name", "email", "role")
    extra = 0
    can_delete = False
    show_change_link = True


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display  = ("name", "manager", "member_count", "created_at")
    search_fields = ("name", "manager__name")
    autocomplete_fields = ["manager"]
    inlines = [MemberInline]

    @admin.display(description="Members")
    def member_count(self, obj):
        return obj.members.count()
