"""
In-Memory Object Store

S3-shaped store for tests and local dry runs. Mirrors the service
semantics the pipeline relies on:
- put_object overwrites body, content type, and metadata
- replace_metadata requires the key to exist and keeps the body
- injected failures are returned as Err(StoreError), like a service error
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Union

from s3redirects.core.errors import StoreError
from s3redirects.core.types import Err, Ok, Result


@dataclass(frozen=True, slots=True)
class StoredObject:
    """Snapshot of one stored object."""
    body: bytes
    content_type: str
    metadata: Dict[str, str] = field(default_factory=dict)


class InMemoryObjectStore:
    """
    In-memory object store.

    Example:
        store = InMemoryObjectStore()
        store.seed("p/docs/index.html", b"<html>...</html>")
        await store.replace_metadata("p/docs/index.html", "text/html", {...})
    """

    __slots__ = ("_objects", "_failures", "_lock", "put_calls", "copy_calls")

    def __init__(self) -> None:
        self._objects: Dict[str, StoredObject] = {}
        self._failures: Dict[str, StoreError] = {}
        self._lock = asyncio.Lock()
        self.put_calls = 0
        self.copy_calls = 0

    def seed(
        self,
        key: str,
        body: bytes,
        content_type: str = "text/html",
        metadata: Optional[Mapping[str, str]] = None,
    ) -> None:
        """Place an object directly, as a prior sync would have."""
        self._objects[key] = StoredObject(body, content_type, dict(metadata or {}))

    def fail_on(self, key: str, error: Optional[StoreError] = None) -> None:
        """Make every write to key return a service error."""
        self._failures[key] = error or StoreError.service(
            "AccessDenied", "Access Denied", key=key, status_code=403,
        )

    def get(self, key: str) -> Optional[StoredObject]:
        return self._objects.get(key)

    def keys(self) -> list[str]:
        return sorted(self._objects)

    async def put_object(
        self,
        key: str,
        body: Union[bytes, str],
        content_type: str,
        metadata: Mapping[str, str],
    ) -> Result[None, StoreError]:
        async with self._lock:
            self.put_calls += 1
            if key in self._failures:
                return Err(self._failures[key])
            data = body.encode("utf-8") if isinstance(body, str) else body
            self._objects[key] = StoredObject(data, content_type, dict(metadata))
            return Ok(None)

    async def replace_metadata(
        self,
        key: str,
        content_type: str,
        metadata: Mapping[str, str],
    ) -> Result[None, StoreError]:
        async with self._lock:
            self.copy_calls += 1
            if key in self._failures:
                return Err(self._failures[key])
            current = self._objects.get(key)
            if current is None:
                return Err(StoreError.not_found(key))
            self._objects[key] = StoredObject(current.body, content_type, dict(metadata))
            return Ok(None)
