"""
Unit Tests: S3 Object Store

Tests run against a fake client injected into S3ObjectStore, so no
network or credentials are needed.

Tests:
    - PutObject and CopyObject request shapes
    - ClientError -> Err(StoreError)
    - Non-service exceptions propagate
    - Client lifecycle and metrics
"""

import pytest
from botocore.exceptions import ClientError

from s3redirects.core.config import S3Config
from s3redirects.core.errors import ErrorCode, StoreError
from s3redirects.storage.protocols import ObjectStore
from s3redirects.storage.s3_store import S3ObjectStore


def _client_error(code="AccessDenied", message="Access Denied", status=403, op="PutObject"):
    return ClientError(
        {
            "Error": {"Code": code, "Message": message},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        op,
    )


class FakeS3Client:
    """Records calls and optionally raises a configured exception."""

    def __init__(self, raises=None):
        self.calls = []
        self.raises = raises
        self.exited = False

    async def put_object(self, **kwargs):
        self.calls.append(("put_object", kwargs))
        if self.raises is not None:
            raise self.raises
        return {"ETag": '"abc"'}

    async def copy_object(self, **kwargs):
        self.calls.append(("copy_object", kwargs))
        if self.raises is not None:
            raise self.raises
        return {"CopyObjectResult": {}}

    async def __aexit__(self, *exc):
        self.exited = True


# =============================================================================
# REQUEST SHAPE TESTS
# =============================================================================
class TestRequests:
    """Tests for the requests sent to S3."""

    @pytest.mark.asyncio
    async def test_put_object(self):
        client = FakeS3Client()
        store = S3ObjectStore("docs-bucket", client=client)

        result = await store.put_object(
            "p/a/index.html", "<!doctype html>", "text/html", {"redirect-location-1": "/x"},
        )

        assert result.is_ok()
        name, kwargs = client.calls[0]
        assert name == "put_object"
        assert kwargs == {
            "Bucket": "docs-bucket",
            "Key": "p/a/index.html",
            "Body": b"<!doctype html>",
            "ContentType": "text/html",
            "Metadata": {"redirect-location-1": "/x"},
        }

    @pytest.mark.asyncio
    async def test_replace_metadata(self):
        client = FakeS3Client()
        store = S3ObjectStore("docs-bucket", client=client)

        result = await store.replace_metadata("p/a/index.html", "text/html", {"redirect-location-1": "/x"})

        assert result.is_ok()
        name, kwargs = client.calls[0]
        assert name == "copy_object"
        assert kwargs == {
            "Bucket": "docs-bucket",
            "Key": "p/a/index.html",
            "CopySource": {"Bucket": "docs-bucket", "Key": "p/a/index.html"},
            "MetadataDirective": "REPLACE",
            "ContentType": "text/html",
            "Metadata": {"redirect-location-1": "/x"},
        }

    def test_satisfies_protocol(self):
        assert isinstance(S3ObjectStore("docs-bucket", client=FakeS3Client()), ObjectStore)


# =============================================================================
# ERROR TESTS
# =============================================================================
class TestErrors:
    """Tests for error conversion."""

    @pytest.mark.asyncio
    async def test_client_error_becomes_err(self):
        store = S3ObjectStore("docs-bucket", client=FakeS3Client(raises=_client_error()))

        result = await store.put_object("p/a/index.html", b"", "text/html", {})

        assert result.is_err()
        error = result.error
        assert isinstance(error, StoreError)
        assert error.code is ErrorCode.STORE_SERVICE_ERROR
        assert error.service_code == "AccessDenied"
        assert error.status_code == 403
        assert error.operation == "PutObject"
        assert error.context == {"key": "p/a/index.html"}
        assert str(error) == "Access Denied"
        assert store.metrics.error_count == 1

    @pytest.mark.asyncio
    async def test_copy_client_error(self):
        raises = _client_error("NoSuchKey", "The specified key does not exist.", 404, "CopyObject")
        store = S3ObjectStore("docs-bucket", client=FakeS3Client(raises=raises))

        result = await store.replace_metadata("p/a/index.html", "text/html", {})

        assert result.error.service_code == "NoSuchKey"
        assert result.error.operation == "CopyObject"

    @pytest.mark.asyncio
    async def test_other_exceptions_propagate(self):
        store = S3ObjectStore("docs-bucket", client=FakeS3Client(raises=TimeoutError("slow")))
        with pytest.raises(TimeoutError):
            await store.put_object("k", b"", "text/html", {})

    @pytest.mark.asyncio
    async def test_requires_connect(self):
        store = S3ObjectStore("docs-bucket")
        with pytest.raises(RuntimeError):
            await store.put_object("k", b"", "text/html", {})

    def test_error_to_dict(self):
        error = StoreError.from_client_error(_client_error(), "k")
        data = error.to_dict()
        assert data["code"] == "STORE_SERVICE_ERROR"
        assert data["service_code"] == "AccessDenied"
        assert data["status_code"] == 403


# =============================================================================
# LIFECYCLE TESTS
# =============================================================================
class TestLifecycle:
    """Tests for client ownership and metrics."""

    @pytest.mark.asyncio
    async def test_injected_client_not_closed(self):
        client = FakeS3Client()
        async with S3ObjectStore("docs-bucket", S3Config(), client=client) as store:
            await store.put_object("k", b"abc", "text/html", {})
        assert not client.exited

    @pytest.mark.asyncio
    async def test_metrics(self):
        store = S3ObjectStore("docs-bucket", client=FakeS3Client())
        await store.put_object("k", b"abcd", "text/html", {})
        await store.replace_metadata("k", "text/html", {})

        metrics = store.metrics
        assert metrics.put_count == 1
        assert metrics.copy_count == 1
        assert metrics.bytes_uploaded == 4
        assert metrics.operation_count == 2
        assert metrics.average_latency_ms() >= 0.0

    def test_bucket_property(self):
        assert S3ObjectStore("docs-bucket", client=FakeS3Client()).bucket == "docs-bucket"


# =============================================================================
# MAIN
# =============================================================================
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
