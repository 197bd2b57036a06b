"""Abstract repository interface (port) for tenant-scoped record persistence."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Generic

from brokerbook.domain.entities.record_schema import R, RecordSchema


class RecordRepository(ABC, Generic[R]):
    """Port for record persistence: implemented in the infrastructure layer.

    A repository is bound to one record kind. Every method is keyed by the
    tenant handle so a call can never reach outside that tenant's sub-tree.
    Implementations raise ``StorageUnavailableError`` when the backing store
    fails, and never leave a half-written record behind.
    """

    def __init__(self, schema: RecordSchema[R]):
        self._schema = schema

    @property
    def schema(self) -> RecordSchema[R]:
        return self._schema

    @abstractmethod
    async def get_by_id(self, tenant: str, record_id: str) -> R | None:
        """Retrieve a single record, or None when absent."""
        ...

    @abstractmethod
    async def get_all(self, tenant: str) -> list[R]:
        """Retrieve every record of the tenant, in no particular order."""
        ...

    @abstractmethod
    async def create(self, record: R) -> R:
        """Persist a new record and return it."""
        ...

    @abstractmethod
    async def update(self, record: R) -> R:
        """Replace an existing record with its new version."""
        ...

    @abstractmethod
    async def update_if(
        self,
        tenant: str,
        record_id: str,
        mutate: Callable[[R], R | None],
    ) -> R | None:
        """Re-read a record and store ``mutate(current)`` as one atomic step.

        ``mutate`` returns the new version, or None to leave the record as it
        is. Returns the stored record, or None when the record is absent or
        ``mutate`` declined. No other write to the record can land between
        the read and the write.
        """
        ...

    @abstractmethod
    async def delete(self, tenant: str, record_id: str) -> bool:
        """Delete a record. Returns True if deleted, False if not found."""
        ...

    @abstractmethod
    async def count(self, tenant: str) -> int:
        """Number of records currently held by the tenant."""
        ...
