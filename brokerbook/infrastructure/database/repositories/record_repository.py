"""Concrete repository implementation for records backed by SQLAlchemy."""

from collections.abc import Callable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from brokerbook.application.interfaces import RecordRepository
from brokerbook.domain.entities import RecordId, RecordSchema
from brokerbook.domain.entities.record_schema import R
from brokerbook.domain.exceptions import EntityNotFoundError
from brokerbook.infrastructure.database.errors import storage_errors
from brokerbook.infrastructure.database.models import RecordModel


class SQLAlchemyRecordRepository(RecordRepository[R]):
    """Implements the RecordRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession, schema: RecordSchema[R]):
        super().__init__(schema)
        self._session = session

    def _to_entity(self, model: RecordModel) -> R:
        """Map ORM model → domain entity."""
        return self._schema.from_document(model.record_id, model.tenant, model.data)

    def _to_model(self, entity: R) -> RecordModel:
        """Map domain entity → ORM model (for creation)."""
        return RecordModel(
            kind=self._schema.kind,
            tenant=entity.tenant,
            record_id=entity.id,
            sequence=RecordId.parse(entity.id).sequence,
            status=entity.status.value if entity.status else None,
            data=self._schema.to_document(entity),
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    def _apply(self, model: RecordModel, entity: R) -> None:
        model.data = self._schema.to_document(entity)
        model.status = entity.status.value if entity.status else None
        model.updated_at = entity.updated_at

    async def _get_model(self, tenant: str, record_id: str) -> RecordModel | None:
        return await self._session.get(RecordModel, (self._schema.kind, tenant, record_id))

    async def get_by_id(self, tenant: str, record_id: str) -> R | None:
        with storage_errors(f"read {self._schema.kind} {record_id}"):
            model = await self._get_model(tenant, record_id)
        return self._to_entity(model) if model else None

    async def get_all(self, tenant: str) -> list[R]:
        stmt = (
            select(RecordModel)
            .where(RecordModel.kind == self._schema.kind, RecordModel.tenant == tenant)
            .order_by(RecordModel.sequence.asc())
        )
        with storage_errors(f"list {self._schema.collection}"):
            result = await self._session.execute(stmt)
            models = result.scalars().all()
        return [self._to_entity(model) for model in models]

    async def create(self, record: R) -> R:
        model = self._to_model(record)
        with storage_errors(f"create {self._schema.kind} {record.id}"):
            self._session.add(model)
            await self._session.flush()
        return self._to_entity(model)

    async def update(self, record: R) -> R:
        with storage_errors(f"update {self._schema.kind} {record.id}"):
            model = await self._get_model(record.tenant, record.id)
            if model is None:
                raise EntityNotFoundError(self._schema.label, record.id)
            self._apply(model, record)
            await self._session.flush()
        return self._to_entity(model)

    async def update_if(
        self,
        tenant: str,
        record_id: str,
        mutate: Callable[[R], R | None],
    ) -> R | None:
        # Row lock held until the request transaction ends; populate_existing
        # refreshes a copy already sitting in the identity map.
        stmt = (
            select(RecordModel)
            .where(
                RecordModel.kind == self._schema.kind,
                RecordModel.tenant == tenant,
                RecordModel.record_id == record_id,
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        with storage_errors(f"update {self._schema.kind} {record_id}"):
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()
            if model is None:
                return None
            updated = mutate(self._to_entity(model))
            if updated is None:
                return None
            self._apply(model, updated)
            await self._session.flush()
        return self._to_entity(model)

    async def delete(self, tenant: str, record_id: str) -> bool:
        with storage_errors(f"delete {self._schema.kind} {record_id}"):
            model = await self._get_model(tenant, record_id)
            if model is None:
                return False
            await self._session.delete(model)
            await self._session.flush()
        return True

    async def count(self, tenant: str) -> int:
        stmt = (
            select(func.count())
            .select_from(RecordModel)
            .where(RecordModel.kind == self._schema.kind, RecordModel.tenant == tenant)
        )
        with storage_errors(f"count {self._schema.collection}"):
            result = await self._session.execute(stmt)
            return result.scalar_one()
