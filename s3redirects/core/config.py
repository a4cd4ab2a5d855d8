"""
Configuration Management for Redirect Object Generation

Provides validated configuration with sensible defaults.
Supports environment variable overrides.

Design:
- Immutable after construction
- Fail-fast: validate() runs before any remote operation
- Type-safe with dataclasses
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Optional

from s3redirects.core import constants as C
from s3redirects.core.errors import ConfigurationError
from s3redirects.core.types import Err, Ok, Result
from s3redirects.core.validation import is_valid_bucket_name, is_valid_prefix

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in _TRUTHY


def parse_parallel(raw: Any) -> int:
    """
    Parse the parallel setting.

    Raises:
        ConfigurationError: If raw is not an integer literal.
    """
    if isinstance(raw, bool):
        raise ConfigurationError.invalid_parallel(raw)
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip(), 10)
    except ValueError as e:
        raise ConfigurationError.invalid_parallel(raw, cause=e) from e


@dataclass(frozen=True, slots=True)
class S3Config:
    """
    S3-compatible client configuration.

    Credentials are not part of this config: they come from the
    standard AWS provider chain (environment, profile, instance role).

    Attributes:
        region: AWS region.
        endpoint_url: Custom endpoint for MinIO/LocalStack (None for AWS).
        force_path_style: Address buckets as https://host/bucket/key.
        max_pool_connections: HTTP connection pool size.
        connect_timeout_seconds: TCP connect timeout.
        read_timeout_seconds: Read operation timeout.
        max_retries: botocore's built-in retry attempts.
    """

    region: str = C.DEFAULT_REGION
    endpoint_url: Optional[str] = None
    force_path_style: bool = True
    max_pool_connections: int = C.DEFAULT_PARALLEL
    connect_timeout_seconds: int = C.DEFAULT_CONNECT_TIMEOUT_SECONDS
    read_timeout_seconds: int = C.DEFAULT_READ_TIMEOUT_SECONDS
    max_retries: int = C.DEFAULT_MAX_RETRIES

    def __post_init__(self) -> None:
        if self.max_pool_connections <= 0:
            raise ValueError(
                f"max_pool_connections must be > 0, got {self.max_pool_connections}"
            )
        if self.connect_timeout_seconds <= 0:
            raise ValueError("connect_timeout_seconds must be > 0")
        if self.read_timeout_seconds <= 0:
            raise ValueError("read_timeout_seconds must be > 0")

    @classmethod
    def from_env(cls, prefix: str = "S3") -> S3Config:
        """
        Construct configuration from environment variables.

        Environment Variables:
        - {prefix}_REGION (falls back to AWS_REGION, AWS_DEFAULT_REGION)
        - {prefix}_ENDPOINT_URL (falls back to AWS_ENDPOINT_URL)
        - {prefix}_FORCE_PATH_STYLE: default true
        - {prefix}_MAX_POOL_CONNECTIONS
        """
        region = (
            os.getenv(f"{prefix}_REGION")
            or os.getenv("AWS_REGION")
            or os.getenv("AWS_DEFAULT_REGION")
            or C.DEFAULT_REGION
        )
        endpoint_url = os.getenv(f"{prefix}_ENDPOINT_URL") or os.getenv("AWS_ENDPOINT_URL")
        return cls(
            region=region,
            endpoint_url=endpoint_url or None,
            force_path_style=_env_bool(f"{prefix}_FORCE_PATH_STYLE", True),
            max_pool_connections=int(
                os.getenv(f"{prefix}_MAX_POOL_CONNECTIONS", str(C.DEFAULT_PARALLEL))
            ),
        )


@dataclass(frozen=True, slots=True)
class RedirectsConfig:
    """
    Root configuration for one generation run.

    Attributes:
        build_path: Local build mirror, already synchronized to the bucket.
        redirects_source: Local JSON file path or https:// URL.
        bucket: Target bucket name.
        prefix: Key prefix that the build mirror was synchronized under.
        parallel: Maximum concurrently outstanding store operations.
        fail_on_key_collision: Abort before writing when two locations
            map to the same storage key.
        s3: Client configuration.
    """

    build_path: str
    redirects_source: str
    bucket: str
    prefix: str
    parallel: int = C.DEFAULT_PARALLEL
    fail_on_key_collision: bool = False
    s3: S3Config = field(default_factory=S3Config)

    @classmethod
    def from_env(cls) -> Result[RedirectsConfig, ConfigurationError]:
        """
        Load configuration from environment variables.

        Environment variables are prefixed with S3REDIRECTS_.
        Example: S3REDIRECTS_BUCKET, S3REDIRECTS_PARALLEL
        """
        p = C.ENV_PREFIX
        values: dict[str, str] = {}
        for name in ("BUILD", "REDIRECTS", "BUCKET", "PREFIX"):
            raw = os.getenv(f"{p}_{name}")
            if not raw:
                return Err(ConfigurationError.missing(f"{p}_{name}"))
            values[name] = raw

        try:
            parallel = parse_parallel(os.getenv(f"{p}_PARALLEL", str(C.DEFAULT_PARALLEL)))
        except ConfigurationError as e:
            return Err(e)

        try:
            s3 = S3Config.from_env()
        except ValueError as e:
            return Err(ConfigurationError.invalid_value("S3", str(e), cause=e))

        return Ok(cls(
            build_path=values["BUILD"],
            redirects_source=values["REDIRECTS"],
            bucket=values["BUCKET"],
            prefix=values["PREFIX"],
            parallel=parallel,
            fail_on_key_collision=_env_bool(f"{p}_FAIL_ON_KEY_COLLISION", False),
            s3=s3,
        ))

    def validate(self) -> Result[None, ConfigurationError]:
        """Validate configuration invariants, first failure wins."""
        # Imported here: sources depends on core, not the other way round
        from s3redirects.sources import is_readable_directory

        if not is_readable_directory(self.build_path):
            return Err(ConfigurationError.invalid_build_path(self.build_path))
        if not is_valid_bucket_name(self.bucket):
            return Err(ConfigurationError.invalid_bucket(self.bucket))
        if not is_valid_prefix(self.prefix):
            return Err(ConfigurationError.invalid_prefix(self.prefix))
        if isinstance(self.parallel, bool) or not isinstance(self.parallel, int) or self.parallel <= 0:
            return Err(ConfigurationError.invalid_parallel(self.parallel))
        return Ok(None)
