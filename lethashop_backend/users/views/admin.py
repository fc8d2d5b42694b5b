# users/views/admin.py

"""
ADMIN USER MANAGEMENT

- GET       /api/admin/users/?role=&is_active=&q=
- GET       /api/admin/users/<id>/
- PUT|PATCH /api/admin/users/<id>/status/   {"is_active": bool}

Policy:
- users.manage capability required.
- An admin cannot deactivate their own account (lock-out guard).
"""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.db.models import Q
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.responses import error_response
from permissions.roles import CAP_USERS_MANAGE, HasCapability
from users.serializers import UserSerializer, UserStatusSerializer

logger = logging.getLogger(__name__)

User = get_user_model()


class AdminUserViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_USERS_MANAGE
    filterset_fields = ["role", "is_active"]

    def get_queryset(self):
        qs = User.objects.all().order_by("-created_at")
        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(Q(email__icontains=q) | Q(name__icontains=q))
        return qs

    @extend_schema(
        tags=["Admin"],
        parameters=[OpenApiParameter("q", str, description="Search email or name")],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(
        tags=["Admin"],
        request=UserStatusSerializer,
        responses={
            200: UserSerializer,
            400: OpenApiResponse(description="Cannot deactivate yourself"),
        },
    )
    @action(detail=True, methods=["put", "patch"], url_path="status")
    def set_status(self, request, pk=None):
        user = self.get_object()

        serializer = UserStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        is_active = serializer.validated_data["is_active"]

        if user.pk == request.user.pk and not is_active:
            return error_response(
                code="SELF_DEACTIVATION",
                message="You cannot deactivate your own account.",
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        if user.is_active != is_active:
            user.is_active = is_active
            user.save(update_fields=["is_active", "updated_at"])
            logger.info(
                "User status changed",
                extra={"user_id": str(user.id), "is_active": is_active, "by": str(request.user.id)},
            )

        return Response(UserSerializer(user).data, status=status.HTTP_200_OK)
