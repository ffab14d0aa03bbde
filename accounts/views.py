from rest_framework import status
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.views import TokenObtainPairView
from accounts.serializers.auth_serializers import EmailLoginSerializer
from kpi_app.models import ActivityAction
from kpi_app.services.activity_log import ActivityLogService


class EmailLoginView(TokenObtainPairView):
    serializer_class = EmailLoginSerializer

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        try:
            serializer.is_valid(raise_exception=True)
        except TokenError as e:
            raise InvalidToken(e.args[0])

        ActivityLogService().log(serializer.user, ActivityAction.LOGIN, {"method": "email"})
        return Response(serializer.validated_data, status=status.HTTP_200_OK)
