"""
Base service layer patterns for business logic encapsulation.

This module provides foundational patterns for the service layer:
- ServiceResult: Standard result wrapper for consistent success/failure handling
- BaseService: Base class with logging and transaction helpers

Service Layer Philosophy:
    Views and websocket consumers handle transport concerns, models handle
    data, services handle the rules. Every mutation of the messaging system
    (friend requests, group membership, message append) goes through a service
    so the REST API and the realtime consumer enforce identical rules.

Pattern Comparison:
    - ServiceResult: expected failures (validation, forbidden, not found)
    - Exceptions: unexpected failures (database errors, transport outages)

Usage:
    from core.exceptions import ErrorCode
    from core.services import BaseService, ServiceResult

    class GroupService(BaseService):
        @classmethod
        def rename(cls, group, actor, name) -> ServiceResult[Group]:
            if group.created_by_id != actor.id:
                return ServiceResult.failure(
                    "Only the group creator can rename the group",
                    error_code=ErrorCode.FORBIDDEN,
                )

            with cls.atomic():
                group.name = name
                group.save(update_fields=["name", "updated_at"])

            cls.get_logger().info(f"Renamed group {group.id}")
            return ServiceResult.success(group)

    # In a view
    result = GroupService.rename(group, request.user, name)
    if not result.success:
        return Response(result.to_response(), status=result.status_code)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from django.db import transaction

from core.exceptions import (
    RETRYABLE_ERROR_CODES,
    ErrorCode,
    status_for_error_code,
)

if TYPE_CHECKING:
    from collections.abc import Generator
    from typing import Any

# Generic type for ServiceResult data
T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful (None if failed)
        error: Error message if failed (None if successful)
        error_code: One of core.exceptions.ErrorCode
        errors: Field-level errors for validation failures

    Usage:
        result = MessageService.send(conversation_id, sender, text="hi")
        if result.success:
            message = result.data
        else:
            print(f"Error: {result.error} ({result.error_code})")
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None
    errors: dict[str, list[str]] | None = field(default=None)

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        """
        Create a successful result.

        Args:
            data: The result data

        Returns:
            ServiceResult with success=True and data set
        """
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        errors: dict[str, list[str]] | None = None,
    ) -> ServiceResult[T]:
        """
        Create a failed result.

        Args:
            error: Human-readable error message
            error_code: Machine-readable error code (ErrorCode)
            errors: Field-level errors (for validation failures)

        Example:
            return ServiceResult.failure(
                "Cannot send a friend request to yourself",
                error_code=ErrorCode.SELF_REQUEST,
            )
        """
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            errors=errors,
        )

    @property
    def status_code(self) -> int:
        """HTTP status for a failed result (200 on success)."""
        if self.success:
            return 200
        return status_for_error_code(self.error_code)

    @property
    def retryable(self) -> bool:
        """Whether the failure is transient and safe to retry."""
        return not self.success and self.error_code in RETRYABLE_ERROR_CODES

    def to_response(self) -> dict[str, Any]:
        """
        Convert to API response format.

        Returns:
            Dict with success status and data or error details
        """
        if self.success:
            return {"success": True, "data": self.data}

        response: dict[str, Any] = {
            "success": False,
            "error": self.error,
        }
        if self.error_code:
            response["error_code"] = self.error_code
        if self.errors:
            response["errors"] = self.errors
        if self.retryable:
            response["retryable"] = True
        return response

    def __bool__(self) -> bool:
        """Allow using result in boolean context."""
        return self.success


class BaseService:
    """
    Base class for service layer classes.

    Provides:
    - Logging setup per service
    - Database transaction management
    - Required field validation

    Design Notes:
        - Use @classmethod (no instance state)
        - Use ServiceResult for expected failures
        - Raise exceptions for unexpected failures
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        Everything inside the block commits together or not at all; realtime
        notifications registered inside the block are only sent after commit.

        Example:
            with cls.atomic():
                Friendship.objects.create(owner=a, friend=b)
                Friendship.objects.create(owner=b, friend=a)
        """
        with transaction.atomic():
            yield

    @classmethod
    def validate_required(cls, **kwargs) -> ServiceResult | None:
        """
        Validate that required fields are provided.

        Returns a failure result if any field is None or blank, None otherwise.

        Example:
            validation = cls.validate_required(email=email, password=password)
            if validation:
                return validation
        """
        errors = {}
        for field_name, value in kwargs.items():
            if value is None or (isinstance(value, str) and not value.strip()):
                errors[field_name] = ["This field is required."]

        if errors:
            return ServiceResult.failure(
                "Required fields missing",
                error_code=ErrorCode.VALIDATION_ERROR,
                errors=errors,
            )
        return None
