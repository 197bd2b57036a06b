"""Unit tests for the local filesystem blob storage."""

import pytest

from brokerbook.domain.exceptions import StorageUnavailableError
from brokerbook.infrastructure.storage.local_blob_storage import LocalBlobStorage


@pytest.mark.asyncio
async def test_upload_writes_file_and_returns_public_url(tmp_path):
    storage = LocalBlobStorage(str(tmp_path), "http://cdn.test/uploads/")

    url = await storage.upload(b"data", "customers/eko-1/eko-1_front.jpg", "image/jpeg")

    assert url == "http://cdn.test/uploads/customers/eko-1/eko-1_front.jpg"
    assert (tmp_path / "customers" / "eko-1" / "eko-1_front.jpg").read_bytes() == b"data"


@pytest.mark.asyncio
async def test_path_segments_cannot_escape_upload_dir(tmp_path):
    root = tmp_path / "uploads"
    storage = LocalBlobStorage(str(root), "http://cdn.test/uploads")

    url = await storage.upload(b"x", "customers/../../etc/pass wd", "image/png")

    written = storage.resolve("customers/../../etc/pass wd")
    assert written.is_relative_to(root)
    assert written.read_bytes() == b"x"
    assert ".." not in url


@pytest.mark.asyncio
async def test_write_failure_is_storage_unavailable(tmp_path):
    storage = LocalBlobStorage(str(tmp_path), "http://cdn.test/uploads")
    (tmp_path / "customers").write_text("not a directory")

    with pytest.raises(StorageUnavailableError):
        await storage.upload(b"x", "customers/eko-1/eko-1_front.png", "image/png")
