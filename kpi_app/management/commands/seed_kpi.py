# kpi_app/management/commands/seed_kpi.py
from django.core.management.base import BaseCommand
from django.db import transaction
from django.contrib.auth import get_user_model
from accounts.models import Role, Team
from kpi_app import models as m

User = get_user_model()

DEMO_USERS = [
    # email, name, role, password
    ("admin@example.com",    "Admin User",    Role.ADMIN,    "admin12345"),
    ("manager@example.com",  "Manager User",  Role.MANAGER,  "manager12345"),
    ("employee@example.com", "Employee User", Role.EMPLOYEE, "employee12345"),
]

EMPLOYEE_KPIS = [
    # group, weight, [(item, weight), ...]
    ("Delivery",      40, [("On-time delivery", 10), ("Quality of work", 10), ("Ownership", 10), ("Estimation", 10)]),
    ("Collaboration", 30, [("Communication", 50), ("Teamwork", 50)]),
    ("Growth",        30, [("Learning", 60), ("Initiative", 40)]),
]

MANAGER_KPIS = [
    ("Leadership", 60, [("Coaching", 50), ("Decision making", 50)]),
    ("Results",    40, [("Team targets", 100)]),
]


class Command(BaseCommand):
    help = "Seed demo users, a team and employee/manager KPI groups."

    @transaction.atomic
    def handle(self, *args, **options):
        users = {}
        for email, name, role, password in DEMO_USERS:
            user, created = User.objects.get_or_create(
                email=email,
                defaults=dict(username=email.split("@")[0], name=name, role=role,
                              is_staff=role == Role.ADMIN, is_superuser=role == Role.ADMIN),
            )
            if created:
                user.set_password(password)
                user.save(update_fields=["password"])
                self.stdout.write(self.style.SUCCESS(f"✓ {role.label} user {email} created"))
            else:
                self.stdout.write(self.style.WARNING(f"{role.label} user {email} already exists"))
            users[role] = user

        team, _ = Team.objects.get_or_create(name="Core Team", defaults={"manager": users[Role.MANAGER]})
        User.objects.filter(pk=users[Role.EMPLOYEE].pk).update(team=team)

        self._seed_groups(EMPLOYEE_KPIS, m.TargetRole.EMPLOYEE, team)
        self._seed_groups(MANAGER_KPIS, m.TargetRole.MANAGER, None)
        self.stdout.write(self.style.SUCCESS("Seeded KPI hierarchy."))

    def _seed_groups(self, rows, target_role, team):
        for group_name, group_weight, items in rows:
            group, _ = m.KpiGroup.objects.get_or_create(
                name=group_name, target_role=target_role, team=team,
                defaults={"weight": group_weight},
            )
            for item_name, item_weight in items:
                m.KpiItem.objects.get_or_create(
                    name=item_name, kpi_group=group,
                    defaults={"weight": item_weight},
                )
