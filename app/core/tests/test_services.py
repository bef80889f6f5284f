"""
Tests for ServiceResult and BaseService.
"""

import logging

import pytest
from django.db import connection

from core.exceptions import ErrorCode
from core.services import BaseService, ServiceResult


class ExampleService(BaseService):
    pass


class TestServiceResult:
    """Tests for ServiceResult."""

    def test_success(self):
        result = ServiceResult.success({"id": 1})

        assert result
        assert result.status_code == 200
        assert result.to_response() == {"success": True, "data": {"id": 1}}

    def test_failure_payload(self):
        result = ServiceResult.failure(
            "Bad name",
            error_code=ErrorCode.VALIDATION_ERROR,
            errors={"name": ["Required."]},
        )

        assert not result
        assert result.status_code == 400
        assert result.to_response() == {
            "success": False,
            "error": "Bad name",
            "error_code": "VALIDATION_ERROR",
            "errors": {"name": ["Required."]},
        }

    @pytest.mark.parametrize(
        "error_code,status_code",
        [
            (ErrorCode.NOT_FOUND, 404),
            (ErrorCode.FORBIDDEN, 403),
            (ErrorCode.ALREADY_EXISTS, 409),
            (ErrorCode.INVALID_CREDENTIAL, 401),
            (ErrorCode.WEAK_CREDENTIAL, 400),
            (ErrorCode.EMPTY_MESSAGE, 400),
            (ErrorCode.SELF_REQUEST, 400),
            (ErrorCode.TRANSIENT, 503),
            (None, 400),
        ],
    )
    def test_status_codes(self, error_code, status_code):
        assert ServiceResult.failure("x", error_code=error_code).status_code == status_code

    def test_only_transient_is_retryable(self):
        """
        Only TRANSIENT failures are marked retryable.

        Why it matters: Clients retry anything flagged retryable; retrying a
        FORBIDDEN or EMPTY_MESSAGE failure can never succeed.
        """
        transient = ServiceResult.failure("down", error_code=ErrorCode.TRANSIENT)
        forbidden = ServiceResult.failure("no", error_code=ErrorCode.FORBIDDEN)

        assert transient.retryable
        assert transient.to_response()["retryable"] is True
        assert not forbidden.retryable
        assert "retryable" not in forbidden.to_response()


class TestBaseService:
    """Tests for BaseService helpers."""

    def test_logger_is_named_after_service(self):
        logger = ExampleService.get_logger()

        assert isinstance(logger, logging.Logger)
        assert logger.name == f"{__name__}.ExampleService"

    @pytest.mark.django_db
    def test_atomic_opens_transaction(self):
        with ExampleService.atomic():
            assert connection.in_atomic_block

    def test_validate_required(self):
        failure = ExampleService.validate_required(email="a@b.c", password="  ", name=None)

        assert failure.error_code == ErrorCode.VALIDATION_ERROR
        assert set(failure.errors) == {"password", "name"}

    def test_validate_required_passes(self):
        assert ExampleService.validate_required(email="a@b.c") is None
