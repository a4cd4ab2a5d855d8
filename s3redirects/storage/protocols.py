"""
Object Store Protocol

Structural interface (PEP 544) for the two writes the pipeline issues.

Contract:
    - Structured service failures are returned as Err(StoreError).
    - Anything else (transport crash, bad arguments) is raised.
"""

from __future__ import annotations

from typing import Mapping, Protocol, Union, runtime_checkable

from s3redirects.core.errors import StoreError
from s3redirects.core.types import Result


@runtime_checkable
class ObjectStore(Protocol):
    """
    Minimal object store used by the operation executor.

    Example:
        class MyStore(ObjectStore):
            async def put_object(self, key, body, content_type, metadata):
                ...
    """

    async def put_object(
        self,
        key: str,
        body: Union[bytes, str],
        content_type: str,
        metadata: Mapping[str, str],
    ) -> Result[None, StoreError]:
        """Create or overwrite an object with body and metadata."""
        ...

    async def replace_metadata(
        self,
        key: str,
        content_type: str,
        metadata: Mapping[str, str],
    ) -> Result[None, StoreError]:
        """
        Rewrite an existing object's metadata in place.

        The body is left untouched. Metadata is replaced, not merged.
        """
        ...
