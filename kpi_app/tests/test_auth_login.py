import pytest
from django.urls import reverse
from accounts.models import Role
from kpi_app.models import ActivityAction, ActivityLog


@pytest.mark.django_db
class TestEmailLogin:
    def test_login_returns_tokens_and_logs(self, api_client, create_user):
        user = create_user(email="lead@test.local", password="s3cret-pass", role=Role.MANAGER, name="Lead")

        res = api_client.post(
            reverse("jwt-login"),
            {"email": "lead@test.local", "password": "s3cret-pass"},
            format="json",
        )

        assert res.status_code == 200
        assert "access" in res.data and "refresh" in res.data
        assert res.data["user"]["role"] == Role.MANAGER
        log = ActivityLog.objects.get(user=user)
        assert log.action == ActivityAction.LOGIN
        assert log.details == {"method": "email"}

    def test_wrong_password_is_401_and_not_logged(self, api_client, create_user):
        create_user(email="lead@test.local", password="s3cret-pass")
        res = api_client.post(
            reverse("jwt-login"),
            {"email": "lead@test.local", "password": "nope"},
            format="json",
        )
        assert res.status_code == 401
        assert not ActivityLog.objects.exists()
