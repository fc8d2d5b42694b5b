# users/serializers.py

from django.contrib.auth import get_user_model
from rest_framework import serializers

from permissions.roles import is_admin_user

User = get_user_model()

MIN_PASSWORD_LENGTH = 6


# ---------------- SIGN UP ----------------
class SignUpSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        min_length=MIN_PASSWORD_LENGTH,
        style={"input_type": "password"},
    )
    name = serializers.CharField(required=False, allow_blank=True, max_length=150)

    def validate_email(self, value: str):
        email = User.objects.normalize_email((value or "").strip())
        if User.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError("User with this email already exists")
        return email

    def create(self, validated_data):
        return User.objects.create_user(
            email=validated_data["email"],
            password=validated_data["password"],
            name=(validated_data.get("name") or "").strip(),
        )


# ---------------- SIGN IN (INPUT ONLY) ----------------
class SignInSerializer(serializers.Serializer):
    """
    Input validation only.
    Authentication is handled in the view.
    """
    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
    )


class SignOutSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, allow_blank=True)


# ---------------- PROFILE ----------------
class ProfileUpdateSerializer(serializers.Serializer):
    """
    Only name + avatar_url are user-editable.
    Anything else in the payload is ignored.
    """
    name = serializers.CharField(required=False, allow_blank=True, max_length=150)
    avatar_url = serializers.URLField(required=False, allow_blank=True, max_length=500)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("No valid fields to update")
        return attrs


# ---------------- OAUTH PROXY ----------------
class SessionExchangeSerializer(serializers.Serializer):
    code = serializers.CharField()


# ---------------- USER OUTPUT ----------------
class UserSerializer(serializers.ModelSerializer):
    """
    Safe user representation for frontend consumption.
    is_admin folds superusers in, so the admin UI gates on one flag.
    """
    is_admin = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "name",
            "avatar_url",
            "role",
            "is_admin",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_is_admin(self, obj) -> bool:
        return is_admin_user(obj)


class AuthResponseSerializer(serializers.Serializer):
    user = UserSerializer()
    access = serializers.CharField()
    refresh = serializers.CharField()


class UserStatusSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()
