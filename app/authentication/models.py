"""
Identity models.

This module defines the identity store of the messaging backend:
- User: Account keyed by an opaque UUID, authenticated by email + password
- Profile: Display data shown to friends and conversation partners

Related files:
    - managers.py: Custom user manager for email-based creation
    - services.py: IdentityService business logic
    - signals.py: Auto-create profile on user creation

Lifecycle:
    An account exists in an incomplete state right after signup: the profile
    has no display name until the user completes it. That is a valid state,
    reported as profile_completed=False, not an error.
"""

from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager
from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class User(UUIDPrimaryKeyMixin, AbstractBaseUser, PermissionsMixin):
    """
    Account record using email as the login identifier.

    The UUID primary key doubles as the user's "friend code": it is the only
    reference other components hold, and users share it to send friend
    requests.

    Fields:
        id: UUID primary key (friend code)
        email: Login identifier, unique, stored lowercased
        is_active: Whether the user may authenticate
        is_staff: Whether the user can access Django admin
        date_joined: When the account was created
        updated_at: When the user record was last modified

    Usage:
        user = User.objects.create_user(
            email="ada@example.com",
            password="correct horse battery staple",
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (login identifier)",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        db_table = "authentication_user"
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email

    def get_full_name(self):
        """Display name from profile, or email if not set."""
        try:
            return self.profile.display_name or self.email
        except Profile.DoesNotExist:
            return self.email

    def get_short_name(self):
        """Display name from profile, or email local part if not set."""
        try:
            return self.profile.display_name or self.email.split("@")[0]
        except Profile.DoesNotExist:
            return self.email.split("@")[0]


class Profile(BaseModel):
    """
    Public profile of a user.

    Fields:
        user: OneToOne link to User (also serves as primary key)
        display_name: Name shown to other users (empty until completed)
        photo_url: Avatar URL, usually a resolved media store reference
        last_seen: Last time a realtime connection opened or closed

    Note:
        Profile is automatically created via signals when a User is created.
        Friend edges and friend requests keep their own snapshots of
        display_name/photo_url; edits here do not rewrite them.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
        primary_key=True,
        help_text="User this profile belongs to",
    )

    display_name = models.CharField(
        max_length=80,
        blank=True,
        help_text="Name shown to friends and conversation partners",
    )

    photo_url = models.URLField(
        max_length=500,
        blank=True,
        help_text="Avatar URL (empty when no photo is set)",
    )

    last_seen = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the user last connected to or left the realtime channel",
    )

    class Meta:
        db_table = "authentication_profile"
        verbose_name = "profile"
        verbose_name_plural = "profiles"

    def __str__(self):
        return self.display_name or str(self.user)

    @property
    def profile_completed(self) -> bool:
        """Whether the profile-completion step (display name) has been done."""
        return bool(self.display_name)
