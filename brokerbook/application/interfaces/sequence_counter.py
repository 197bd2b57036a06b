"""Abstract per-tenant sequence counter (port)."""

from abc import ABC, abstractmethod


class SequenceCounter(ABC):
    """Issues monotonically increasing integers per tenant, starting at 1.

    ``next_sequence`` must be atomic with respect to other allocations for the
    same tenant: two concurrent calls never return the same value. A failed
    call allocates nothing and raises ``StorageUnavailableError``.
    """

    @abstractmethod
    async def next_sequence(self, tenant: str) -> int:
        """Allocate and return the next sequence number for the tenant."""
        ...

    @abstractmethod
    async def current_sequence(self, tenant: str) -> int:
        """Return the last issued number (0 if none) without allocating."""
        ...
