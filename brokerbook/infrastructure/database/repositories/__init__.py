from .record_repository import SQLAlchemyRecordRepository
from .sequence_counter import SQLAlchemySequenceCounter

__all__ = [
    "SQLAlchemyRecordRepository",
    "SQLAlchemySequenceCounter",
]
