"""Abstract blob storage (port) for uploaded photos and documents."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class FileUpload:
    """Raw bytes of one uploaded file, as decoded by the HTTP layer."""

    content: bytes
    content_type: str
    filename: str = ""


class BlobStorage(ABC):
    """Stores a byte buffer at a destination path and returns its public URL.

    The record store never inspects the bytes; it only keeps the URL.
    """

    @abstractmethod
    async def upload(self, content: bytes, path: str, content_type: str) -> str:
        """Store ``content`` under ``path`` and return the public URL."""
        ...
