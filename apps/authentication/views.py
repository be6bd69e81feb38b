"""Authentication: registration, session login/logout, current user."""

import logging

from django.contrib.auth import authenticate, get_user_model, login, logout
from rest_framework import generics, status
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.response import Response
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView
from rest_framework import serializers
from drf_spectacular.utils import extend_schema

from apps.audit.recorder import AuditRecorder, request_origin

User = get_user_model()
logger = logging.getLogger("docketflow.auth")
audit = AuditRecorder()


# ── Serializers ───────────────────────────────────────────────────────────────
class UserRegisterSerializer(serializers.ModelSerializer):
    username = serializers.CharField(
        min_length=3, max_length=150,
        error_messages={"min_length": "Username must be at least 3 characters."},
    )
    password = serializers.CharField(
        write_only=True, min_length=6,
        error_messages={"min_length": "Password must be at least 6 characters."},
    )
    role     = serializers.ChoiceField(choices=User.Role.choices, default=User.Role.STAFF)

    class Meta:
        model  = User
        fields = ["username", "password", "role"]

    def validate_username(self, value):
        if User.objects.filter(username=value).exists():
            raise serializers.ValidationError("A user with that username already exists.")
        return value

    def create(self, validated_data):
        return User.objects.create_user(**validated_data)


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField(
        min_length=3, error_messages={"min_length": "Username is required."},
    )
    password = serializers.CharField(
        min_length=6, error_messages={"min_length": "Password must be at least 6 characters."},
    )


class UserSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model  = User
        fields = ["id", "username", "role"]
        read_only_fields = fields


# ── Views ─────────────────────────────────────────────────────────────────────
@extend_schema(tags=["Auth"])
class RegisterView(generics.CreateAPIView):
    """POST /api/auth/register/: Create an account and start a session."""
    queryset           = User.objects.all()
    serializer_class   = UserRegisterSerializer
    permission_classes = [AllowAny]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        login(request, user, backend="django.contrib.auth.backends.ModelBackend")
        audit.record(
            "auth.register", "user", user.pk,
            summary=f"User {user.username} registered as {user.role}",
            meta={"role": user.role},
            actor=user, origin=request_origin(request),
        )
        logger.info("Registered user %s", user.username)
        return Response(UserSummarySerializer(user).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Auth"], request=LoginSerializer, responses=UserSummarySerializer)
class LoginView(APIView):
    """POST /api/auth/login/: Verify credentials and start a session."""
    permission_classes = [AllowAny]

    def post(self, request):
        ser = LoginSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        user = authenticate(
            request,
            username=ser.validated_data["username"],
            password=ser.validated_data["password"],
        )
        if user is None:
            logger.warning("Failed login for %s", ser.validated_data["username"])
            raise AuthenticationFailed("Invalid username or password.")
        login(request, user)
        audit.record(
            "auth.login", "user", user.pk,
            summary=f"User {user.username} logged in",
            actor=user, origin=request_origin(request),
        )
        return Response(UserSummarySerializer(user).data)


@extend_schema(tags=["Auth"], request=None)
class LogoutView(APIView):
    """POST /api/auth/logout/: End the current session."""
    permission_classes = [AllowAny]

    def post(self, request):
        user = request.user if request.user.is_authenticated else None
        origin = request_origin(request)
        logout(request)
        if user is not None:
            audit.record(
                "auth.logout", "user", user.pk,
                summary=f"User {user.username} logged out",
                actor=user, origin=origin,
            )
        return Response({"ok": True})


@extend_schema(tags=["Auth"])
class MeView(generics.RetrieveAPIView):
    """GET /api/auth/me/: The user behind the current session or token."""
    serializer_class   = UserSummarySerializer
    permission_classes = [IsAuthenticated]

    def get_object(self):
        return self.request.user
