"""
Storage Module: Object Store Backends
=====================================

Provides:
- ObjectStore protocol used by the operation executor
- In-memory implementation for tests and dry runs
- S3-compatible implementation (aioboto3)
"""

from s3redirects.storage.protocols import ObjectStore
from s3redirects.storage.memory_store import InMemoryObjectStore, StoredObject
from s3redirects.storage.s3_store import S3ObjectStore, S3Metrics

__all__ = [
    "ObjectStore",
    "InMemoryObjectStore",
    "StoredObject",
    "S3ObjectStore",
    "S3Metrics",
]
