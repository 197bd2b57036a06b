"""Integration tests for the SQLAlchemy repository and counter on SQLite."""

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError

from brokerbook.application.services import RecordService
from brokerbook.domain.entities import (
    CUSTOMER_SCHEMA,
    PROPERTY_SCHEMA,
    Customer,
    PolicyStatus,
    RecordPatch,
    Set,
)
from brokerbook.domain.exceptions import StorageUnavailableError
from brokerbook.infrastructure.database import Database, RecordModel
from brokerbook.infrastructure.database.errors import storage_errors
from brokerbook.infrastructure.database.repositories import (
    SQLAlchemyRecordRepository,
    SQLAlchemySequenceCounter,
)


@pytest_asyncio.fixture
async def database(tmp_path) -> AsyncIterator[Database]:
    db = Database(f"sqlite:///{tmp_path / 'records.db'}")
    await db.create_all()
    yield db
    await db.dispose()


def _service(session, schema=CUSTOMER_SCHEMA) -> RecordService:
    return RecordService(
        schema,
        SQLAlchemyRecordRepository(session, schema),
        SQLAlchemySequenceCounter(session, schema.kind),
    )


@pytest.mark.asyncio
async def test_database_uses_async_driver(database: Database):
    assert database.url.startswith("sqlite+aiosqlite:///")


@pytest.mark.asyncio
async def test_counter_upsert_increments_per_tenant(database: Database):
    async with database.session() as session:
        counter = SQLAlchemySequenceCounter(session, "customer")
        assert await counter.current_sequence("eko") == 0
        assert await counter.next_sequence("eko") == 1
        assert await counter.next_sequence("eko") == 2
        assert await counter.next_sequence("rina") == 1

    async with database.session() as session:
        counter = SQLAlchemySequenceCounter(session, "customer")
        assert await counter.current_sequence("eko") == 2
        assert await SQLAlchemySequenceCounter(session, "property").current_sequence("eko") == 0


@pytest.mark.asyncio
async def test_failed_transaction_rolls_back_allocation(database: Database):
    with pytest.raises(RuntimeError):
        async with database.session() as session:
            await SQLAlchemySequenceCounter(session, "customer").next_sequence("eko")
            raise RuntimeError("boom")

    async with database.session() as session:
        assert await SQLAlchemySequenceCounter(session, "customer").current_sequence("eko") == 0


@pytest.mark.asyncio
async def test_separate_sessions_get_distinct_numbers(database: Database):
    async def allocate() -> int:
        async with database.session() as session:
            return await SQLAlchemySequenceCounter(session, "customer").next_sequence("eko")

    values = [await allocate() for _ in range(5)]

    assert values == [1, 2, 3, 4, 5]


@pytest.mark.asyncio
async def test_record_round_trip(database: Database):
    async with database.session() as session:
        service = _service(session)
        created = await service.create_record(
            "eko",
            RecordPatch(
                fields={"name": "Budi"},
                sections={"car_data": {"car_brand": "Toyota", "due_date": 1_000}},
            ),
        )
        assert created.id == "eko-1"

    async with database.session() as session:
        service = _service(session)
        fetched = await service.get_record("eko-1", "eko")
        assert isinstance(fetched, Customer)
        assert fetched.car_data.car_brand == "Toyota"
        assert fetched.car_data.due_date == 1_000
        assert fetched.car_data.plate_number == ""

        updated = await service.update_record(
            "eko-1", "eko", RecordPatch(sections={"car_data": {"plate_number": "B123"}})
        )
        assert updated.car_data.car_brand == "Toyota"

        assert await service.sweep_expired("eko") == 1

    async with database.session() as session:
        service = _service(session)
        fetched = await service.get_record("eko-1", "eko")
        assert fetched.car_data.plate_number == "B123"
        assert fetched.status is PolicyStatus.EXPIRED
        assert [c.id for c in await service.search_records("eko", "b123")] == ["eko-1"]


@pytest.mark.asyncio
async def test_list_count_and_delete_keep_counter(database: Database):
    async with database.session() as session:
        service = _service(session)
        for i in range(11):
            await service.create_record("eko", RecordPatch(fields={"name": f"C{i}"}))
        await service.create_record("rina", RecordPatch(fields={"name": "R"}))
        await service.delete_record("eko-11", "eko")

    async with database.session() as session:
        service = _service(session)
        records = await service.list_records("eko")
        assert [r.id for r in records] == [f"eko-{i}" for i in range(1, 11)]
        assert await service.count_records("eko") == 10

        created = await service.create_record("eko", RecordPatch(fields={"name": "New"}))
        assert created.id == "eko-12"


@pytest.mark.asyncio
async def test_customer_and_property_share_tables_without_colliding(database: Database):
    async with database.session() as session:
        customers = _service(session, CUSTOMER_SCHEMA)
        properties = _service(session, PROPERTY_SCHEMA)
        await customers.create_record("eko", RecordPatch(fields={"name": "Budi"}))
        prop = await properties.create_record(
            "eko", RecordPatch(fields={"owner_name": "Dewi"}, status=Set("Active"))
        )

        assert prop.id == "eko-1"
        assert await customers.count_records("eko") == 1
        assert await properties.count_records("eko") == 1
        assert (await properties.get_record("eko-1", "eko")).status is PolicyStatus.ACTIVE


@pytest.mark.asyncio
async def test_guarded_update_rereads_row_changed_by_another_session(database: Database):
    async with database.session() as session:
        await _service(session).create_record(
            "eko", RecordPatch(fields={"name": "Budi"}, sections={"car_data": {"due_date": 1_000}})
        )

    async with database.session() as sweeping:
        repository = SQLAlchemyRecordRepository(sweeping, CUSTOMER_SCHEMA)
        stale = await repository.get_by_id("eko", "eko-1")
        assert stale.status is None

        async with database.session() as cancelling:
            await _service(cancelling).update_record(
                "eko-1", "eko", RecordPatch(status=Set("Cancelled"))
            )

        seen = []

        def observe(current: Customer):
            seen.append(current.status)
            return None

        assert await repository.update_if("eko", "eko-1", observe) is None
        assert seen == [PolicyStatus.CANCELLED]
        assert await repository.update_if("eko", "eko-404", observe) is None


@pytest.mark.asyncio
async def test_failed_commit_is_storage_unavailable(database: Database):
    async with database.session() as session:
        await _service(session).create_record("eko", RecordPatch(fields={"name": "Budi"}))

    with pytest.raises(StorageUnavailableError) as exc_info:
        async with database.session() as session:
            session.add(
                RecordModel(
                    kind="customer",
                    tenant="eko",
                    record_id="eko-1",
                    sequence=1,
                    data={},
                    created_at=0,
                    updated_at=0,
                )
            )

    assert exc_info.value.retryable is True
    async with database.session() as session:
        assert (await _service(session).get_record("eko-1", "eko")).name == "Budi"



def test_storage_errors_translates_sqlalchemy_failures():
    with pytest.raises(StorageUnavailableError) as exc_info:
        with storage_errors("read customer eko-1"):
            raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    assert exc_info.value.retryable is True
    assert "read customer eko-1" in str(exc_info.value)
