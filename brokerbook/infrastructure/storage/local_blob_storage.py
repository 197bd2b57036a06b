"""Local filesystem blob storage for record photos and documents.

Storage layout:
    <upload_dir>/<collection>/<record_id>/<record_id>_<slot>.<ext>

Files are served back by the ``/uploads`` static mount, so the URL returned
for a stored blob is ``<public_base_url>/<path>``.
"""

import logging
import re
from pathlib import Path

from brokerbook.application.interfaces import BlobStorage
from brokerbook.domain.exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)


def _sanitise(name: str, max_len: int = 120) -> str:
    """Replace characters outside ``[\\w.-]`` with underscores and truncate."""
    cleaned = re.sub(r"[^\w.\-]", "_", name)[:max_len].strip("_.")
    return cleaned or "unnamed"


class LocalBlobStorage(BlobStorage):
    """Infrastructure adapter writing blobs below ``upload_dir``."""

    def __init__(self, upload_dir: str, public_base_url: str):
        self._upload_dir = Path(upload_dir)
        self._upload_dir.mkdir(parents=True, exist_ok=True)
        self._public_base_url = public_base_url.rstrip("/")

    def resolve(self, path: str) -> Path:
        """Map a blob path to its location on disk, one sanitised segment at a time."""
        segments = [_sanitise(part) for part in path.split("/") if part]
        return self._upload_dir.joinpath(*segments)

    async def upload(self, content: bytes, path: str, content_type: str) -> str:
        dest_path = self.resolve(path)
        try:
            dest_path.parent.mkdir(parents=True, exist_ok=True)
            dest_path.write_bytes(content)
        except OSError as exc:
            logger.error("Failed to store blob %s: %s", dest_path, exc)
            raise StorageUnavailableError(f"store file {path}", str(exc)) from exc

        logger.info("Stored blob: %s (%d bytes, %s)", dest_path, len(content), content_type)
        relative = dest_path.relative_to(self._upload_dir).as_posix()
        return f"{self._public_base_url}/{relative}"
