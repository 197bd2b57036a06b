"""In-process record store: the ``memory`` storage backend.

Layout mirrors the SQL tables: documents are kept per ``(kind, tenant)``
and every tenant has its own counter per kind. Used for local development
and as the backend the tests run against.
"""

import asyncio
import copy
import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

from brokerbook.application.interfaces import RecordRepository, SequenceCounter
from brokerbook.domain.entities import RecordSchema
from brokerbook.domain.entities.record_schema import R
from brokerbook.domain.exceptions import EntityNotFoundError, StorageUnavailableError

logger = logging.getLogger(__name__)

_Key = tuple[str, str]


class InMemoryRecordStore:
    """Shared state behind the in-memory repositories and counters.

    One instance lives on ``app.state`` for the lifetime of the process.
    """

    def __init__(self) -> None:
        self.documents: dict[_Key, dict[str, dict[str, Any]]] = defaultdict(dict)
        self.counters: dict[_Key, int] = defaultdict(int)
        self._locks: dict[_Key, asyncio.Lock] = defaultdict(asyncio.Lock)

    def lock(self, kind: str, tenant: str) -> asyncio.Lock:
        """Lock serialising counter bumps and guarded record writes of one tenant."""
        return self._locks[(kind, tenant)]


class InMemoryRecordRepository(RecordRepository[R]):
    """Stores deep copies of serialised documents, never the live entities."""

    def __init__(self, store: InMemoryRecordStore, schema: RecordSchema[R]):
        super().__init__(schema)
        self._store = store

    def _bucket(self, tenant: str) -> dict[str, dict[str, Any]]:
        return self._store.documents[(self._schema.kind, tenant)]

    def _to_entity(self, record_id: str, tenant: str, document: dict[str, Any]) -> R:
        return self._schema.from_document(record_id, tenant, copy.deepcopy(document))

    async def get_by_id(self, tenant: str, record_id: str) -> R | None:
        document = self._bucket(tenant).get(record_id)
        if document is None:
            return None
        return self._to_entity(record_id, tenant, document)

    async def get_all(self, tenant: str) -> list[R]:
        return [
            self._to_entity(record_id, tenant, document)
            for record_id, document in self._bucket(tenant).items()
        ]

    async def create(self, record: R) -> R:
        bucket = self._bucket(record.tenant)
        if record.id in bucket:
            # Counters never go backwards, so this only happens if the
            # store was edited behind the counter's back.
            logger.error("Refusing to overwrite existing %s %s", self._schema.kind, record.id)
            raise StorageUnavailableError(
                f"create {self._schema.kind} {record.id}", "id already in use"
            )
        bucket[record.id] = self._schema.to_document(record)
        return self._to_entity(record.id, record.tenant, bucket[record.id])

    async def update(self, record: R) -> R:
        bucket = self._bucket(record.tenant)
        if record.id not in bucket:
            raise EntityNotFoundError(self._schema.label, record.id)
        bucket[record.id] = self._schema.to_document(record)
        return self._to_entity(record.id, record.tenant, bucket[record.id])

    async def update_if(
        self,
        tenant: str,
        record_id: str,
        mutate: Callable[[R], R | None],
    ) -> R | None:
        async with self._store.lock(self._schema.kind, tenant):
            current = await self.get_by_id(tenant, record_id)
            if current is None:
                return None
            updated = mutate(current)
            if updated is None:
                return None
            return await self.update(updated)

    async def delete(self, tenant: str, record_id: str) -> bool:
        return self._bucket(tenant).pop(record_id, None) is not None

    async def count(self, tenant: str) -> int:
        return len(self._bucket(tenant))


class InMemorySequenceCounter(SequenceCounter):
    """Per-tenant counter serialised by an ``asyncio.Lock`` per (kind, tenant)."""

    def __init__(self, store: InMemoryRecordStore, kind: str):
        self._store = store
        self._kind = kind

    async def next_sequence(self, tenant: str) -> int:
        key = (self._kind, tenant)
        async with self._store.lock(*key):
            self._store.counters[key] += 1
            return self._store.counters[key]

    async def current_sequence(self, tenant: str) -> int:
        return self._store.counters.get((self._kind, tenant), 0)
