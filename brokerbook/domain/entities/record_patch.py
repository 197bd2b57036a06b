"""Partial update of a record.

Presence in ``fields`` / ``sections`` means "set"; absence means "keep".
A ``None`` value for a scalar or sub-field resets it to its default.
"""

from dataclasses import dataclass, field
from typing import Any

from brokerbook.domain.entities.field_update import KEEP, FieldUpdate


@dataclass
class RecordPatch:
    fields: dict[str, Any] = field(default_factory=dict)
    sections: dict[str, dict[str, Any]] = field(default_factory=dict)
    status: FieldUpdate = KEEP
