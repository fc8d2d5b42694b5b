from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle
from rest_framework.views import APIView

from users.serializers import ProfileUpdateSerializer, UserSerializer


class MeUserThrottle(UserRateThrottle):
    scope = "user"


class MeView(APIView):
    """
    Current user, whichever way they authenticated (JWT or session cookie).
    """

    permission_classes = [IsAuthenticated]
    throttle_classes = [MeUserThrottle]

    @extend_schema(tags=["Auth"], responses={200: UserSerializer})
    def get(self, request):
        return Response(UserSerializer(request.user).data, status=status.HTTP_200_OK)


class ProfileView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["Auth"],
        request=ProfileUpdateSerializer,
        responses={
            200: UserSerializer,
            400: OpenApiResponse(description="No valid fields to update"),
        },
    )
    def put(self, request):
        serializer = ProfileUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = request.user
        for field, value in serializer.validated_data.items():
            setattr(user, field, value.strip() if isinstance(value, str) else value)
        user.save(update_fields=[*serializer.validated_data.keys(), "updated_at"])

        return Response(UserSerializer(user).data, status=status.HTTP_200_OK)

    def patch(self, request):
        return self.put(request)
