"""
Error Hierarchy for Redirect Object Generation

Two failure classes flow through the pipeline:
- Structured store errors (StoreError) are captured per operation and
  returned as values; they never stop a run.
- Everything else is raised. Configuration and input errors are raised
  before any remote operation starts; unexpected errors during a run
  are fatal to that run.

Each error type includes:
- Unique error code for programmatic handling
- Human-readable message for logging
- Optional cause for root cause analysis
- Creation time for correlation with run logs

Usage:
    result = await store.put_object(key, body, content_type, metadata)
    match result:
        case Ok(_):
            ...
        case Err(StoreError() as error):
            log_failure(error.service_code, error.message)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Sequence
from uuid import uuid4


# =============================================================================
# ERROR CODE ENUMERATION
# =============================================================================
class ErrorCode(Enum):
    """
    Unique error codes for programmatic error handling.

    Codes are grouped by subsystem:
    - 1xxx: Configuration errors
    - 2xxx: Input errors
    - 3xxx: Object store errors
    - 4xxx: Planning errors
    - 9xxx: Internal/unknown errors
    """

    # Configuration errors (1xxx)
    CONFIG_INVALID_BUILD_PATH = 1001
    CONFIG_INVALID_BUCKET = 1002
    CONFIG_INVALID_PREFIX = 1003
    CONFIG_INVALID_PARALLEL = 1004
    CONFIG_MISSING_VALUE = 1005
    CONFIG_INVALID_VALUE = 1006

    # Input errors (2xxx)
    INPUT_UNABLE_TO_LOAD = 2001
    INPUT_INVALID_REDIRECTS = 2002

    # Store errors (3xxx)
    STORE_SERVICE_ERROR = 3001
    STORE_NOT_FOUND = 3002

    # Planning errors (4xxx)
    PLANNING_KEY_COLLISION = 4001

    # Internal errors (9xxx)
    INTERNAL_ERROR = 9001


# =============================================================================
# BASE ERROR CLASS
# =============================================================================
@dataclass
class RedirectError(Exception):
    """
    Base class for all redirect generation errors.

    Provides common infrastructure for error handling:
    - Unique error ID for log correlation
    - Error code for programmatic handling
    - Creation timestamp
    - Cause chain for root cause analysis
    """

    code: ErrorCode
    message: str
    error_id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    cause: Optional[BaseException] = None
    context: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Initialize Exception base class with message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize error to dictionary for structured logging."""
        return {
            "error_id": self.error_id,
            "code": self.code.name,
            "code_value": self.code.value,
            "message": self.message,
            "created_at": self.created_at.isoformat(),
            "context": self.context,
        }

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"code={self.code.name}, "
            f"message={self.message!r}, "
            f"error_id={self.error_id!r})"
        )


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================
@dataclass
class ConfigurationError(RedirectError):
    """Invalid run configuration. Raised before any remote operation."""

    @classmethod
    def invalid_build_path(cls, path: str) -> ConfigurationError:
        return cls(
            code=ErrorCode.CONFIG_INVALID_BUILD_PATH,
            message=f"Input build {path} is not a readable directory.",
            context={"build_path": path},
        )

    @classmethod
    def invalid_bucket(cls, bucket: str) -> ConfigurationError:
        return cls(
            code=ErrorCode.CONFIG_INVALID_BUCKET,
            message=f"Invalid bucket name, got {bucket}",
            context={"bucket": bucket},
        )

    @classmethod
    def invalid_prefix(cls, prefix: str) -> ConfigurationError:
        return cls(
            code=ErrorCode.CONFIG_INVALID_PREFIX,
            message=f"Invalid prefix, got {prefix}",
            context={"prefix": prefix},
        )

    @classmethod
    def invalid_parallel(
        cls,
        raw: Any,
        cause: Optional[BaseException] = None,
    ) -> ConfigurationError:
        return cls(
            code=ErrorCode.CONFIG_INVALID_PARALLEL,
            message=f"Invalid integer value for parallel, got {raw}",
            cause=cause,
            context={"parallel": str(raw)},
        )

    @classmethod
    def missing(cls, name: str) -> ConfigurationError:
        return cls(
            code=ErrorCode.CONFIG_MISSING_VALUE,
            message=f"Missing required setting '{name}'",
            context={"name": name},
        )

    @classmethod
    def invalid_value(
        cls,
        name: str,
        reason: str,
        cause: Optional[BaseException] = None,
    ) -> ConfigurationError:
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{name}': {reason}",
            cause=cause,
            context={"name": name},
        )


# =============================================================================
# INPUT ERRORS
# =============================================================================
@dataclass
class InputError(RedirectError):
    """Failures loading or validating the redirect rule source."""

    @classmethod
    def unable_to_load(
        cls,
        source: str,
        reason: str,
        cause: Optional[BaseException] = None,
    ) -> InputError:
        return cls(
            code=ErrorCode.INPUT_UNABLE_TO_LOAD,
            message=f'Unable to load JSON from "{source}": {reason}',
            cause=cause,
            context={"source": source},
        )

    @classmethod
    def invalid_redirects(cls, index: Optional[int] = None) -> InputError:
        context: dict[str, Any] = {}
        if index is not None:
            context["index"] = index
        return cls(
            code=ErrorCode.INPUT_INVALID_REDIRECTS,
            message="Invalid redirects data",
            context=context,
        )


# =============================================================================
# STORE ERRORS
# =============================================================================
@dataclass
class StoreError(RedirectError):
    """
    Structured failure reported by the object store service.

    Only service-side errors become a StoreError (permission denied,
    throttling, missing copy source). Transport failures and programming
    errors are not converted and propagate to the caller.
    """

    service_code: str = ""
    status_code: Optional[int] = None
    operation: str = ""

    @classmethod
    def from_client_error(cls, error: Any, key: str = "") -> StoreError:
        """
        Convert a botocore ClientError.

        Reads the standard response envelope:
        {"Error": {"Code", "Message"}, "ResponseMetadata": {"HTTPStatusCode"}}
        """
        response = getattr(error, "response", None) or {}
        details = response.get("Error", {})
        service_code = str(details.get("Code") or "Unknown")
        status = response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        operation = getattr(error, "operation_name", "") or ""
        message = str(details.get("Message") or error)
        return cls(
            code=ErrorCode.STORE_SERVICE_ERROR,
            message=message,
            cause=error,
            context={"key": key},
            service_code=service_code,
            status_code=int(status) if status is not None else None,
            operation=operation,
        )

    @classmethod
    def not_found(cls, key: str, operation: str = "CopyObject") -> StoreError:
        return cls(
            code=ErrorCode.STORE_NOT_FOUND,
            message="The specified key does not exist.",
            context={"key": key},
            service_code="NoSuchKey",
            status_code=404,
            operation=operation,
        )

    @classmethod
    def service(
        cls,
        service_code: str,
        message: str,
        key: str = "",
        status_code: Optional[int] = None,
        operation: str = "",
    ) -> StoreError:
        """Build a service error directly (used by non-S3 stores)."""
        return cls(
            code=ErrorCode.STORE_SERVICE_ERROR,
            message=message,
            context={"key": key},
            service_code=service_code,
            status_code=status_code,
            operation=operation,
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["service_code"] = self.service_code
        data["status_code"] = self.status_code
        data["operation"] = self.operation
        return data


# =============================================================================
# PLANNING ERRORS
# =============================================================================
@dataclass
class PlanningError(RedirectError):
    """Raised when groups cannot be turned into distinct storage objects."""

    @classmethod
    def key_collision(cls, key: str, locations: Sequence[str]) -> PlanningError:
        joined = ", ".join(repr(loc) for loc in locations)
        return cls(
            code=ErrorCode.PLANNING_KEY_COLLISION,
            message=f"Locations {joined} all map to storage key '{key}'",
            context={"key": key, "locations": list(locations)},
        )
