"""Views for authentication flows (register, login, token refresh)."""

from __future__ import annotations

import logging

from django.contrib.auth import authenticate  # type: ignore
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.permissions import AllowAny
from rest_framework_simplejwt.tokens import RefreshToken  # type: ignore

from .auth_serializers import LoginSerializer, RegisterSerializer
from .serializers import UserSerializer

logger = logging.getLogger(__name__)


def _auth_payload(user, message: str) -> dict:
    refresh = RefreshToken.for_user(user)
    return {
        "success": True,
        "user": UserSerializer(user).data,
        "token": str(refresh.access_token),
        "refresh": str(refresh),
        "message": message,
    }


class RegisterView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):  # type: ignore
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("Staff user registered: %s", user.username)
        return Response(_auth_payload(user, "Registration successful"), status=status.HTTP_201_CREATED)


class LoginView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):  # type: ignore
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = authenticate(
            request,
            username=serializer.validated_data["username"],
            password=serializer.validated_data["password"],
        )
        if user is None:
            logger.warning("Failed login for %s", serializer.validated_data["username"])
            raise exceptions.AuthenticationFailed("Invalid credentials")
        return Response(_auth_payload(user, "Login successful"), status=status.HTTP_200_OK)
