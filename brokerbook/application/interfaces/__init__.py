from .blob_storage import BlobStorage, FileUpload
from .record_repository import RecordRepository
from .sequence_counter import SequenceCounter

__all__ = [
    "BlobStorage",
    "FileUpload",
    "RecordRepository",
    "SequenceCounter",
]
