# accounts/views.py
from rest_framework_simplejwt.views import TokenObtainPairView
from rest_framework import generics
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle, UserRateThrottle
from rest_framework.views import APIView
from django.contrib.auth import get_user_model
import logging

from .permissions import IsAdmin, IsManagerOrAdmin
from .serializers import (
    CustomTokenSerializer,
    MeSerializer,
    RegisterSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)
User = get_user_model()


class CustomLoginView(TokenObtainPairView):
    serializer_class = CustomTokenSerializer
    throttle_classes = [AnonRateThrottle, UserRateThrottle]


class RegisterView(generics.CreateAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]
    serializer_class = RegisterSerializer

    def perform_create(self, serializer):
        user = serializer.save()
        logger.info("User registered: id=%s role=%s by=%s",
                    user.id, user.role, self.request.user.id)


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(MeSerializer(request.user).data)


class ManagersAdminsListView(generics.ListAPIView):
    """Assignee picker for employee requests."""
    permission_classes = [IsAuthenticated, IsManagerOrAdmin]
    serializer_class = UserSerializer
    pagination_class = None

    def get_queryset(self):
        return User.objects.filter(
            role__in=[User.ROLE_MANAGER, User.ROLE_ADMIN],
            is_active=True,
        ).order_by("first_name", "last_name", "username")
