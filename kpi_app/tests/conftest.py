import pytest
from uuid import uuid4
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from accounts.models import Role, Team
from kpi_app.models import Evaluation, KpiGroup, KpiItem, TargetRole


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def create_user(db):
    User = get_user_model()
    def _create_user(**kw):
        data = {
            "username": f"u_{uuid4().hex[:8]}",
            "email": f"{uuid4().hex[:8]}@test.local",
            "password": "pass12345",
            "name": "Test User",
            "role": Role.EMPLOYEE,
        }
        data.update(kw)
        return User.objects.create_user(**data)
    return _create_user


@pytest.fixture
def create_team(db):
    def _create_team(**kw):
        defaults = dict(name=f"Team {uuid4().hex[:6]}")
        defaults.update(kw)
        return Team.objects.create(**defaults)
    return _create_team


@pytest.fixture
def create_group(db):
    def _create_group(**kw):
        defaults = dict(name="Delivery", weight=100, target_role=TargetRole.EMPLOYEE)
        defaults.update(kw)
        return KpiGroup.objects.create(**defaults)
    return _create_group


@pytest.fixture
def create_item(db, create_group):
    def _create_item(**kw):
        group = kw.pop("kpi_group", None) or create_group()
        defaults = dict(name="Quality", weight=10, kpi_group=group)
        defaults.update(kw)
        return KpiItem.objects.create(**defaults)
    return _create_item


@pytest.fixture
def create_evaluation(db, create_user):
    def _create_evaluation(**kw):
        employee = kw.pop("employee", None) or create_user()
        defaults = dict(employee=employee, quarter="Q1", year=2024)
        defaults.update(kw)
        return Evaluation.objects.create(**defaults)
    return _create_evaluation
