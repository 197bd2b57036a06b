from .merge_reconciler import MergeReconciler
from .policy_lifecycle import PolicyLifecycle
from .record_service import RecordService, RecordStats

__all__ = [
    "MergeReconciler",
    "PolicyLifecycle",
    "RecordService",
    "RecordStats",
]
