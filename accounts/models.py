import uuid
from django.db import models
from django.utils import timezone
from django.contrib.auth.models import AbstractUser


class Role(models.TextChoices):
    ADMIN    = "ADMIN",    "Admin"
    MANAGER  = "MANAGER",  "Manager"
    EMPLOYEE = "EMPLOYEE", "Employee"


class Team(models.Model):
    team_id    = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name       = models.CharField(max_length=120, unique=True)
    manager    = models.ForeignKey("accounts.User", on_delete=models.SET_NULL, null=True, blank=True, related_name="managed_teams")
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name


class User(AbstractUser):
    user_id    = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name       = models.CharField(max_length=120)
    email      = models.EmailField(unique=True)
    avatar     = models.URLField(blank=True)
    role       = models.CharField(max_length=8, choices=Role.choices, default=Role.EMPLOYEE)
    team       = models.ForeignKey(Team, on_delete=models.SET_NULL, null=True, blank=True, related_name="members")
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    # login is by email; username stays for the admin site
    USERNAME_FIELD  = "email"
    REQUIRED_FIELDS = ["username"]

    def __str__(self):
        return self.name or self.email
