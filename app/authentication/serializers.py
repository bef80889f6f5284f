"""
Serializers for identity endpoints.

This module provides DRF serializers for:
- Registration and login (input only; rules live in IdentityService)
- Own profile (includes email) and public profile (friend-code lookup)
- Partial profile updates

Related files:
    - models.py: User and Profile models
    - views.py: Views that use these serializers
    - services.py: IdentityService

Security:
    - Password fields are write-only
    - Email is only exposed on the caller's own profile
"""

from rest_framework import serializers

from authentication.models import Profile


class RegisterSerializer(serializers.Serializer):
    """Input for account creation."""

    email = serializers.CharField(max_length=254)
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class LoginSerializer(serializers.Serializer):
    """Input for credential login."""

    email = serializers.CharField(max_length=254)
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class SessionSerializer(serializers.Serializer):
    """Session returned by register/login."""

    user_id = serializers.CharField(read_only=True)
    access = serializers.CharField(read_only=True)
    refresh = serializers.CharField(read_only=True)


class PublicProfileSerializer(serializers.ModelSerializer):
    """
    Profile as seen by other users.

    `id` is the friend code; `created_at` is the account creation time.
    """

    id = serializers.UUIDField(source="user_id", read_only=True)
    profile_completed = serializers.BooleanField(read_only=True)
    created_at = serializers.DateTimeField(source="user.date_joined", read_only=True)

    class Meta:
        model = Profile
        fields = [
            "id",
            "display_name",
            "photo_url",
            "profile_completed",
            "last_seen",
            "created_at",
        ]
        read_only_fields = fields


class ProfileSerializer(PublicProfileSerializer):
    """Caller's own profile (adds email)."""

    email = serializers.EmailField(source="user.email", read_only=True)

    class Meta(PublicProfileSerializer.Meta):
        fields = [
            "id",
            "email",
            "display_name",
            "photo_url",
            "profile_completed",
            "last_seen",
            "created_at",
        ]
        read_only_fields = fields


class ProfileUpdateSerializer(serializers.Serializer):
    """
    Partial profile update.

    Only keys present in the request are applied; `photo_url: null`
    removes the photo.
    """

    display_name = serializers.CharField(
        required=False, allow_blank=True, trim_whitespace=True
    )
    photo_url = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=500
    )
