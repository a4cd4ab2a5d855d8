"""
Core Type Definitions for Redirect Object Generation

Implements Result/Either monads for explicit error flow at I/O boundaries
and the immutable value types that travel through the pipeline.

Design Principles:
- Structured failures are values (Err), not exceptions
- Unexpected failures are exceptions and are never wrapped
- Every value crossing a concurrency boundary is immutable

Data Flow:
    RedirectRule -> RedirectGroup -> RedirectPlan -> OperationOutcome
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Generic,
    Literal,
    Mapping,
    Optional,
    TypeVar,
    Union,
)

if TYPE_CHECKING:
    from s3redirects.core.errors import StoreError

# =============================================================================
# TYPE VARIABLES FOR GENERIC CONTAINERS
# =============================================================================
T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Transform result type


# =============================================================================
# RESULT MONAD
# =============================================================================
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """
    Success variant of Result monad.

    Immutable container for successful computation results.
    """

    value: T

    def is_ok(self) -> Literal[True]:
        return True

    def is_err(self) -> Literal[False]:
        return False

    def unwrap(self) -> T:
        """Extract value. Safe to call after is_ok() check."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Return value, ignoring default."""
        return self.value

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        """Apply transformation to success value."""
        return Ok(fn(self.value))

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """
    Failure variant of Result monad.

    Carries the structured error for the caller to inspect.
    """

    error: E

    def is_ok(self) -> Literal[False]:
        return False

    def is_err(self) -> Literal[True]:
        return True

    def unwrap(self) -> Any:
        """
        Attempting to unwrap an error is a programming error.

        Raises:
            RuntimeError: Always, with error context
        """
        raise RuntimeError(f"Called unwrap() on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        """Return default value on error."""
        return default

    def map(self, fn: Callable[[Any], U]) -> Err[E]:
        """No-op on error variant - propagates error unchanged."""
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


# Union type for pattern matching
Result = Union[Ok[T], Err[E]]


# =============================================================================
# REDIRECT RULE
# =============================================================================
@dataclass(frozen=True, slots=True)
class RedirectRule:
    """
    A single redirect rule as supplied by the rule source.

    Attributes:
        location: Source path being redirected away from.
        redirect: Destination the proxy should send clients to.
        pattern: Optional source-side pattern, consumed only by the
            proxy at serve time. Carried through unchanged.
    """

    location: str
    redirect: str
    pattern: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RedirectRule:
        """Build a rule from an already-validated JSON object."""
        return cls(
            location=data["location"],
            redirect=data["redirect"],
            pattern=data.get("pattern"),
        )

    def to_dict(self) -> dict[str, str]:
        data = {"location": self.location, "redirect": self.redirect}
        if self.pattern is not None:
            data["pattern"] = self.pattern
        return data


# =============================================================================
# REDIRECT GROUP
# =============================================================================
@dataclass(frozen=True, slots=True)
class RedirectGroup:
    """All rules sharing one location, in original input order."""

    location: str
    rules: tuple[RedirectRule, ...]

    def __len__(self) -> int:
        return len(self.rules)


# =============================================================================
# REDIRECT PLAN
# =============================================================================
@dataclass(frozen=True, slots=True)
class RedirectPlan:
    """
    Deterministic storage key and metadata derived from one group.

    Attributes:
        location: Group location the plan was derived from.
        sub_path: Storage key relative to the prefix
            (also the path probed in the build mirror).
        key: Full remote key, prefix joined with sub_path.
        metadata: Ordered redirect metadata document.
    """

    location: str
    sub_path: str
    key: str
    metadata: Mapping[str, str] = field(default_factory=dict)


# =============================================================================
# OPERATION OUTCOME
# =============================================================================
@dataclass(frozen=True, slots=True)
class OperationOutcome:
    """
    Result of executing one plan against the object store.

    copied is True when the metadata-replace path was taken and
    False when a fresh placeholder object was created.
    """

    sub_path: str
    copied: bool
    error: Optional["StoreError"] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def action(self) -> str:
        """Verb describing the write path, for diagnostics."""
        return "Updating" if self.copied else "Creating"
