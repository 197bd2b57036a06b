"""Policy lifecycle: status validation, derivation and expiry rules."""

from typing import Generic

from brokerbook.domain.entities.field_update import FieldUpdate, Set
from brokerbook.domain.entities.policy_status import PolicyStatus
from brokerbook.domain.entities.record_schema import R, RecordSchema
from brokerbook.domain.exceptions import InvalidStatusError


class PolicyLifecycle(Generic[R]):
    """State machine over ``Active`` (derived), ``Expired`` and ``Cancelled``.

    Transitions:
        unset/Active → Cancelled   caller request
        Cancelled    → unset       caller reset (``Clear``)
        unset/Active → Expired     sweep only, expiry date strictly in the past
        Expired      → other       caller request only
    """

    def __init__(self, schema: RecordSchema[R]):
        self._schema = schema

    @property
    def settable(self) -> list[str]:
        return sorted(status.value for status in self._schema.settable_statuses)

    def validate_request(self, update: FieldUpdate) -> FieldUpdate:
        """Check a caller-supplied status update before it reaches the merge.

        ``Keep`` and ``Clear`` always pass. ``Set`` must name one of the
        statuses this record kind lets callers choose; the raw value is
        normalised to a ``PolicyStatus``.
        """
        if not isinstance(update, Set):
            return update
        raw = update.value
        try:
            status = PolicyStatus(raw)
        except ValueError:
            raise InvalidStatusError(raw, self.settable) from None
        if status not in self._schema.settable_statuses:
            raise InvalidStatusError(raw, self.settable)
        return Set(status)

    @staticmethod
    def parse_filter(raw: str) -> PolicyStatus:
        """Parse a status used to filter listings (any lifecycle state)."""
        try:
            return PolicyStatus(raw)
        except ValueError:
            raise InvalidStatusError(raw, [s.value for s in PolicyStatus]) from None

    def effective_status(self, record: R, now: int) -> PolicyStatus:
        """Stored status when set, otherwise derived from the expiry date."""
        if record.status is not None:
            return record.status
        expiry = self._schema.expiry_of(record)
        if expiry is not None and expiry < now:
            return PolicyStatus.EXPIRED
        return PolicyStatus.ACTIVE

    def is_due_for_expiry(self, record: R, now: int) -> bool:
        """Whether the sweep should move this record to ``Expired``."""
        if record.status not in (None, PolicyStatus.ACTIVE):
            return False
        expiry = self._schema.expiry_of(record)
        return expiry is not None and expiry < now
