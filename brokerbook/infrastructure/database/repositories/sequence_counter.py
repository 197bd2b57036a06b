"""Per-tenant sequence counter backed by an atomic upsert."""

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from brokerbook.application.interfaces import SequenceCounter
from brokerbook.infrastructure.database.errors import storage_errors
from brokerbook.infrastructure.database.models import RecordCounterModel

_counters = RecordCounterModel.__table__

_UPSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SQLAlchemySequenceCounter(SequenceCounter):
    """Allocates numbers with a single ``INSERT ... ON CONFLICT DO UPDATE ... RETURNING``.

    The increment and the read of the new value happen in one statement, so
    concurrent allocations for the same tenant are serialised by the
    database row lock and can never observe the same value. Because the
    counter row is written inside the request transaction, a create that
    fails later rolls the allocation back with it.
    """

    def __init__(self, session: AsyncSession, kind: str):
        self._session = session
        self._kind = kind

    def _upsert(self):
        dialect = self._session.get_bind().dialect.name
        insert = _UPSERTS.get(dialect)
        if insert is None:
            raise ValueError(f"Sequence counter does not support the '{dialect}' dialect")
        return insert

    async def next_sequence(self, tenant: str) -> int:
        insert = self._upsert()
        stmt = (
            insert(_counters)
            .values(kind=self._kind, tenant=tenant, value=1)
            .on_conflict_do_update(
                index_elements=[_counters.c.kind, _counters.c.tenant],
                set_={"value": _counters.c.value + 1},
            )
            .returning(_counters.c.value)
        )
        with storage_errors(f"allocate a {self._kind} number"):
            result = await self._session.execute(stmt)
            return result.scalar_one()

    async def current_sequence(self, tenant: str) -> int:
        stmt = select(_counters.c.value).where(
            _counters.c.kind == self._kind, _counters.c.tenant == tenant
        )
        with storage_errors(f"read the {self._kind} counter"):
            result = await self._session.execute(stmt)
            value = result.scalar_one_or_none()
        return value or 0
