from .base import Base
from .session import Database
from .models import RecordCounterModel, RecordModel

__all__ = [
    "Base",
    "Database",
    "RecordCounterModel",
    "RecordModel",
]
