"""
Core Application - Infrastructure & Base Classes

Shared, domain-agnostic building blocks used by every app of the messaging
backend:

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key (opaque, copyable ids)

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - ErrorCode: Error taxonomy shared by REST and websocket clients
    - BaseApplicationError and subclasses (NotFoundError, TransientError, ...)
    - api_exception_handler: DRF exception handler

Helpers (import from core.helpers):
    - parse_uuid: Opaque id parsing

Note:
    Django models and model mixins are NOT imported here to avoid
    AppRegistryNotReady errors. Import them directly from their modules.
"""

# Services (no Django model dependencies)
from .services import BaseService, ServiceResult

# Exceptions
from .exceptions import (
    BaseApplicationError,
    ConflictError,
    ErrorCode,
    NotFoundError,
    PermissionDeniedError,
    TransientError,
    ValidationError,
)

# Helpers
from .helpers import parse_uuid

__all__ = [
    # Services
    "BaseService",
    "ServiceResult",
    # Exceptions
    "BaseApplicationError",
    "ConflictError",
    "ErrorCode",
    "NotFoundError",
    "PermissionDeniedError",
    "TransientError",
    "ValidationError",
    # Helpers
    "parse_uuid",
]
