from .record import RecordCounterModel, RecordModel

__all__ = [
    "RecordCounterModel",
    "RecordModel",
]
