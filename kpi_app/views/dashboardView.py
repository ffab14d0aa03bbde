from rest_framework.views import APIView
from rest_framework.response import Response
from kpi_app.permissions import IsAdminOrManager
from kpi_app.services.dashboard_stats import DashboardScopeSelector


class DashboardView(APIView):
    """
    GET /dashboard/
    Managers get numbers for their own team(s); admins get global numbers
    and the system activity log.
    """
    permission_classes = [IsAdminOrManager]

    def get(self, request):
        return Response(DashboardScopeSelector().stats_for(request.user))
