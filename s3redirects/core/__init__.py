"""
Core module: Type definitions, error hierarchy, validation, and configuration.

This module provides the foundational abstractions for redirect generation:
- Result/Either monads for structured store failures
- Immutable rule, group, plan, and outcome value types
- Error hierarchy with error codes
- Configuration management with validation
"""

from s3redirects.core.types import (
    Result,
    Ok,
    Err,
    RedirectRule,
    RedirectGroup,
    RedirectPlan,
    OperationOutcome,
)
from s3redirects.core.errors import (
    ErrorCode,
    RedirectError,
    ConfigurationError,
    InputError,
    StoreError,
    PlanningError,
)
from s3redirects.core.config import RedirectsConfig, S3Config

__all__ = [
    "Result",
    "Ok",
    "Err",
    "RedirectRule",
    "RedirectGroup",
    "RedirectPlan",
    "OperationOutcome",
    "ErrorCode",
    "RedirectError",
    "ConfigurationError",
    "InputError",
    "StoreError",
    "PlanningError",
    "RedirectsConfig",
    "S3Config",
]
