"""Policy lifecycle states shared by every record kind."""

from enum import Enum


class PolicyStatus(str, Enum):
    """Stored or derived status of an insured record.

    An unset status is represented by ``None`` on the entity and means
    "derive from the expiry date".
    """

    ACTIVE = "Active"
    EXPIRED = "Expired"
    CANCELLED = "Cancelled"
