"""
S3-Compatible Object Store
==========================

Async S3 client wrapper for the two writes redirect generation needs:
fresh placeholder objects (PutObject) and in-place metadata rewrites
(CopyObject onto itself with MetadataDirective=REPLACE).

Design Principles:
------------------
1. **Result Monad**: Service errors (botocore ClientError) come back as
   Err(StoreError); nothing else is caught.
2. **No Retry Layer**: botocore's own retry config is the only retry.
3. **Pooled Connections**: The pool is sized to the run's parallelism.

Thread Safety:
--------------
- aioboto3 clients are safe for concurrent async operations
- The only shared mutable state is the metrics counters, updated
  from the event loop thread
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Union

import aioboto3
from aiobotocore.config import AioConfig
from botocore.exceptions import ClientError

from s3redirects.core.config import S3Config
from s3redirects.core.errors import StoreError
from s3redirects.core.types import Err, Ok, Result

if TYPE_CHECKING:
    from types_aiobotocore_s3 import S3Client

logger = logging.getLogger(__name__)


# =============================================================================
# METRICS COLLECTOR
# =============================================================================

@dataclass(slots=True)
class S3Metrics:
    """Counters and latency for store writes."""

    put_count: int = 0
    copy_count: int = 0
    error_count: int = 0
    bytes_uploaded: int = 0
    latency_sum_ns: int = 0

    def record(self, operation: str, latency_ns: int, size_bytes: int = 0) -> None:
        if operation == "put":
            self.put_count += 1
        else:
            self.copy_count += 1
        self.bytes_uploaded += size_bytes
        self.latency_sum_ns += latency_ns

    @property
    def operation_count(self) -> int:
        return self.put_count + self.copy_count

    def average_latency_ms(self) -> float:
        if self.operation_count == 0:
            return 0.0
        return self.latency_sum_ns / self.operation_count / 1_000_000


# =============================================================================
# S3 OBJECT STORE
# =============================================================================

class S3ObjectStore:
    """
    S3-compatible object store bound to one bucket.

    Example:
        >>> async with S3ObjectStore("docs-bucket", S3Config()) as store:
        ...     await store.put_object("p/x/index.html", body, "text/html", {})
    """

    __slots__ = (
        "_bucket",
        "_config",
        "_client",
        "_session",
        "_metrics",
        "_owns_client",
    )

    def __init__(
        self,
        bucket: str,
        config: Optional[S3Config] = None,
        client: Optional["S3Client"] = None,
    ) -> None:
        """
        Args:
            bucket: Target bucket name.
            config: Client configuration.
            client: Pre-built client. When given, connect() and close()
                leave its lifecycle to the caller.
        """
        self._bucket = bucket
        self._config = config or S3Config()
        self._client: Optional[Any] = client
        self._session: Any = None
        self._metrics = S3Metrics()
        self._owns_client = client is None

    # -------------------------------------------------------------------------
    # CONNECTION MANAGEMENT
    # -------------------------------------------------------------------------

    async def connect(self) -> None:
        """
        Create the aioboto3 session and S3 client.

        Credentials come from the default AWS provider chain.
        """
        if self._client is not None:
            return

        self._session = aioboto3.Session()

        s3_options: Dict[str, Any] = {}
        if self._config.force_path_style:
            s3_options["addressing_style"] = "path"

        client_config = AioConfig(
            max_pool_connections=self._config.max_pool_connections,
            connect_timeout=self._config.connect_timeout_seconds,
            read_timeout=self._config.read_timeout_seconds,
            retries={"max_attempts": self._config.max_retries},
            s3=s3_options,
        )

        client_kwargs: Dict[str, Any] = {
            "region_name": self._config.region,
            "config": client_config,
        }
        if self._config.endpoint_url:
            client_kwargs["endpoint_url"] = self._config.endpoint_url

        self._client = await self._session.client("s3", **client_kwargs).__aenter__()
        self._owns_client = True
        logger.debug(
            "S3 client ready for bucket %s (endpoint=%s)",
            self._bucket,
            self._config.endpoint_url or "aws",
        )

    async def close(self) -> None:
        """
        Close the S3 client and release resources.

        Safe to call multiple times.
        """
        if self._client is not None and self._owns_client:
            await self._client.__aexit__(None, None, None)
            self._client = None

    async def __aenter__(self) -> S3ObjectStore:
        await self.connect()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    def _require_client(self) -> Any:
        if self._client is None:
            raise RuntimeError("S3ObjectStore used before connect()")
        return self._client

    # -------------------------------------------------------------------------
    # WRITES
    # -------------------------------------------------------------------------

    async def put_object(
        self,
        key: str,
        body: Union[bytes, str],
        content_type: str,
        metadata: Mapping[str, str],
    ) -> Result[None, StoreError]:
        """
        Upload a small object in one request.

        Returns:
            Ok(None) on success.
            Err(StoreError) when the service rejects the request.
        """
        client = self._require_client()
        data = body.encode("utf-8") if isinstance(body, str) else body
        start_ns = time.perf_counter_ns()

        try:
            await client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                Metadata=dict(metadata),
            )
        except ClientError as e:
            self._metrics.error_count += 1
            return Err(StoreError.from_client_error(e, key))

        self._metrics.record("put", time.perf_counter_ns() - start_ns, len(data))
        return Ok(None)

    async def replace_metadata(
        self,
        key: str,
        content_type: str,
        metadata: Mapping[str, str],
    ) -> Result[None, StoreError]:
        """
        Copy an object onto itself, replacing metadata and content type.

        Server-side only: the body is never transferred through the client.
        """
        client = self._require_client()
        start_ns = time.perf_counter_ns()

        try:
            await client.copy_object(
                Bucket=self._bucket,
                Key=key,
                CopySource={"Bucket": self._bucket, "Key": key},
                MetadataDirective="REPLACE",
                ContentType=content_type,
                Metadata=dict(metadata),
            )
        except ClientError as e:
            self._metrics.error_count += 1
            return Err(StoreError.from_client_error(e, key))

        self._metrics.record("copy", time.perf_counter_ns() - start_ns)
        return Ok(None)

    # -------------------------------------------------------------------------
    # UTILITY
    # -------------------------------------------------------------------------

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def metrics(self) -> S3Metrics:
        """Get current metrics snapshot."""
        return self._metrics


# =============================================================================
# MODULE EXPORTS
# =============================================================================

__all__ = [
    "S3ObjectStore",
    "S3Metrics",
]
