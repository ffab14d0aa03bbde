# accounts/serializers/auth_serializers.py
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer


class EmailLoginSerializer(TokenObtainPairSerializer):
    """
    email + password login (User.USERNAME_FIELD is "email").
    Adds role / name / team claims to the token and echoes a small user
    block in the response body.
    """

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token["role"] = user.role
        token["name"] = user.name or user.email
        token["team_id"] = str(user.team_id) if user.team_id else None
        return token

    def validate(self, attrs):
        data = super().validate(attrs)
        user = self.user
        data["user"] = {
            "user_id": str(user.user_id),
            "email": user.email,
            "name": user.name,
            "role": user.role,
            "avatar": user.avatar,
        }
        return data
