"""
Identity services.

This module provides IdentityService, the single entry point for account
creation, credential checks and profile reads/updates.

Related files:
    - models.py: User, Profile
    - signals.py: Profile auto-creation
    - realtime/topics.py: profile topic published on every profile change

Security:
    - Passwords validated against AUTH_PASSWORD_VALIDATORS (WEAK_CREDENTIAL)
    - Login failures never reveal whether the email exists (INVALID_CREDENTIAL)
    - Emails and passwords are never logged
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from django.contrib.auth import authenticate as django_authenticate
from django.contrib.auth.models import update_last_login
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import URLValidator, validate_email
from django.db import IntegrityError
from django.utils import timezone
from rest_framework_simplejwt.tokens import RefreshToken

from core.exceptions import ErrorCode
from core.helpers import parse_uuid
from core.services import BaseService, ServiceResult
from realtime.publisher import publish
from realtime.topics import profile_topic

if TYPE_CHECKING:
    from authentication.models import Profile, User

DISPLAY_NAME_MAX_LENGTH = 80

# Marks a profile field that was not supplied (distinct from an explicit None)
UNSET = object()


@dataclass(frozen=True)
class Session:
    """Authenticated session: the user id plus a JWT access/refresh pair."""

    user_id: str
    access: str
    refresh: str

    def to_dict(self) -> dict[str, str]:
        return {"user_id": self.user_id, "access": self.access, "refresh": self.refresh}


class IdentityService(BaseService):
    """
    Accounts and profiles.

    Usage:
        result = IdentityService.create_account("ada@example.com", password)
        if result.success:
            user = result.data

        session = IdentityService.authenticate("ada@example.com", password).data
        IdentityService.update_profile(user, display_name="Ada")
    """

    @classmethod
    def create_account(cls, email: str, password: str) -> ServiceResult[User]:
        """
        Create a user with an empty (incomplete) profile.

        Args:
            email: Login email (case-insensitive)
            password: Raw password, checked against the password policy

        Returns:
            ServiceResult with the created User

        Error codes:
            VALIDATION_ERROR: Missing or malformed email
            ALREADY_EXISTS: Email already registered
            WEAK_CREDENTIAL: Password rejected by the policy
        """
        from authentication.models import User

        validation = cls.validate_required(email=email, password=password)
        if validation:
            return validation

        email = User.objects.normalize_email(email)
        try:
            validate_email(email)
        except DjangoValidationError:
            return ServiceResult.failure(
                "Enter a valid email address",
                error_code=ErrorCode.VALIDATION_ERROR,
                errors={"email": ["Enter a valid email address."]},
            )

        if User.objects.filter(email__iexact=email).exists():
            return ServiceResult.failure(
                "An account with this email already exists",
                error_code=ErrorCode.ALREADY_EXISTS,
            )

        try:
            validate_password(password, user=User(email=email))
        except DjangoValidationError as e:
            return ServiceResult.failure(
                "Password does not meet the password policy",
                error_code=ErrorCode.WEAK_CREDENTIAL,
                errors={"password": list(e.messages)},
            )

        try:
            with cls.atomic():
                user = User.objects.create_user(email=email, password=password)
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email
            return ServiceResult.failure(
                "An account with this email already exists",
                error_code=ErrorCode.ALREADY_EXISTS,
            )

        cls.get_logger().info(f"Account created: {user.pk}")
        return ServiceResult.success(user)

    @classmethod
    def authenticate(cls, email: str, password: str) -> ServiceResult[Session]:
        """
        Check credentials and issue a JWT pair.

        Error codes:
            INVALID_CREDENTIAL: Unknown email, wrong password or inactive account
        """
        user = None
        if email and password:
            user = django_authenticate(email=email.strip(), password=password)

        if user is None:
            cls.get_logger().info("Rejected login attempt")
            return ServiceResult.failure(
                "Invalid email or password",
                error_code=ErrorCode.INVALID_CREDENTIAL,
            )

        refresh = RefreshToken.for_user(user)
        update_last_login(None, user)

        cls.get_logger().info(f"User authenticated: {user.pk}")
        return ServiceResult.success(
            Session(
                user_id=str(user.pk),
                access=str(refresh.access_token),
                refresh=str(refresh),
            )
        )

    @classmethod
    def get_profile(cls, user_id) -> ServiceResult[Profile]:
        """
        Fetch a profile by user id (friend code).

        Malformed ids are reported as NOT_FOUND, never as a server error.

        Error codes:
            NOT_FOUND: No active user with this id
        """
        from authentication.models import Profile

        uid = parse_uuid(user_id)
        if uid is None:
            return ServiceResult.failure(
                "User not found", error_code=ErrorCode.NOT_FOUND
            )

        profile = (
            Profile.objects.select_related("user")
            .filter(user_id=uid, user__is_active=True)
            .first()
        )
        if profile is None:
            return ServiceResult.failure(
                "User not found", error_code=ErrorCode.NOT_FOUND
            )
        return ServiceResult.success(profile)

    @classmethod
    def update_profile(
        cls,
        user: User,
        display_name=UNSET,
        photo_url=UNSET,
    ) -> ServiceResult[Profile]:
        """
        Partially update a profile.

        Omitted fields are left untouched. An explicit None photo_url clears
        the photo; display_name cannot be cleared once given.

        Args:
            user: Owner of the profile
            display_name: New display name (non-blank, at most 80 characters)
            photo_url: New avatar URL, or None to remove it

        Error codes:
            VALIDATION_ERROR: Blank/oversized display name or malformed URL
        """
        from authentication.models import Profile

        errors: dict[str, list[str]] = {}
        changes: dict[str, str] = {}

        if display_name is not UNSET:
            name = (display_name or "").strip()
            if not name:
                errors["display_name"] = ["Display name cannot be blank."]
            elif len(name) > DISPLAY_NAME_MAX_LENGTH:
                errors["display_name"] = [
                    f"Display name cannot exceed {DISPLAY_NAME_MAX_LENGTH} characters."
                ]
            else:
                changes["display_name"] = name

        if photo_url is not UNSET:
            url = (photo_url or "").strip()
            if url:
                try:
                    URLValidator()(url)
                except DjangoValidationError:
                    errors["photo_url"] = ["Enter a valid URL."]
            changes["photo_url"] = url

        if errors:
            return ServiceResult.failure(
                "Invalid profile data",
                error_code=ErrorCode.VALIDATION_ERROR,
                errors=errors,
            )

        with cls.atomic():
            profile, _ = Profile.objects.select_for_update().get_or_create(user=user)
            if changes:
                for field_name, value in changes.items():
                    setattr(profile, field_name, value)
                profile.save(update_fields=[*changes, "updated_at"])
                publish(profile_topic(user.pk))

        if changes:
            cls.get_logger().info(
                f"Profile updated for user {user.pk}: {', '.join(sorted(changes))}"
            )
        return ServiceResult.success(profile)

    @classmethod
    def touch_last_seen(cls, user_id) -> None:
        """Record that the user just connected to or left the realtime channel."""
        from authentication.models import Profile

        with cls.atomic():
            updated = Profile.objects.filter(user_id=user_id).update(
                last_seen=timezone.now()
            )
            if updated:
                publish(profile_topic(user_id))

    @classmethod
    def get_users(cls, user_ids) -> dict:
        """
        Fetch active users (with profiles) by id.

        Returns:
            Dict mapping UUID to User for every id that exists
        """
        from authentication.models import User

        uids = {uid for uid in (parse_uuid(u) for u in user_ids) if uid is not None}
        if not uids:
            return {}
        users = User.objects.select_related("profile").filter(pk__in=uids, is_active=True)
        return {user.pk: user for user in users}
