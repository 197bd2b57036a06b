from .record_store import (
    InMemoryRecordRepository,
    InMemoryRecordStore,
    InMemorySequenceCounter,
)

__all__ = [
    "InMemoryRecordRepository",
    "InMemoryRecordStore",
    "InMemorySequenceCounter",
]
