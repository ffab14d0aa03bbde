# kpi_app/urls/api.py
from rest_framework.routers import DefaultRouter
from kpi_app.views.evaluationViewSet import EvaluationViewSet
from kpi_app.views.kpiViewSet import KpiGroupViewSet, KpiItemViewSet
from kpi_app.views.activity_log_viewset import ActivityLogViewSet
from kpi_app.views.dashboardView import DashboardView
from accounts.views import EmailLoginView

from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView  # POST /api/auth/refresh/

router = DefaultRouter()

router.register("evaluations", EvaluationViewSet, basename="evaluation")      # GET /api/evaluations/
router.register("kpi-groups", KpiGroupViewSet, basename="kpi-group")          # GET /api/kpi-groups/
router.register("kpi-items", KpiItemViewSet, basename="kpi-item")             # GET /api/kpi-items/
router.register("activity-logs", ActivityLogViewSet, basename="activity-log") # GET /api/activity-logs/

urlpatterns = [
    # JWT
    path("auth/login/",   EmailLoginView.as_view(),   name="jwt-login"),
    path("auth/refresh/", TokenRefreshView.as_view(), name="jwt-refresh"),
    path("dashboard/",    DashboardView.as_view(),    name="dashboard"),
    # REST resources
    *router.urls
]
