"""Value object for tenant-scoped record identifiers (``{tenant}-{sequence}``)."""

import re
from dataclasses import dataclass

from brokerbook.domain.exceptions import InvalidRecordIdError

SEPARATOR = "-"
_DIGITS = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class RecordId:
    tenant: str
    sequence: int

    def __str__(self) -> str:
        return f"{self.tenant}{SEPARATOR}{self.sequence}"

    @classmethod
    def parse(cls, raw: str) -> "RecordId":
        """Split a raw id into tenant handle and sequence number.

        The sequence is the part after the *last* separator, so tenant
        handles that themselves contain a dash still round-trip.
        """
        tenant, sep, suffix = raw.rpartition(SEPARATOR)
        if not sep or not tenant or not _DIGITS.fullmatch(suffix) or int(suffix) < 1:
            raise InvalidRecordIdError(raw)
        return cls(tenant=tenant, sequence=int(suffix))

    def belongs_to(self, tenant: str) -> bool:
        return self.tenant == tenant


def sequence_of(raw: str) -> int:
    """Numeric suffix of an id, 0 when it cannot be parsed (sorts first)."""
    try:
        return RecordId.parse(raw).sequence
    except InvalidRecordIdError:
        return 0
