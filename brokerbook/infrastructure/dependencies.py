"""FastAPI dependency injection: wires infrastructure to application layer."""

from collections.abc import AsyncGenerator

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from brokerbook.application.services import RecordService
from brokerbook.config import Settings
from brokerbook.domain.entities import (
    CUSTOMER_SCHEMA,
    PROPERTY_SCHEMA,
    Customer,
    Property,
    RecordSchema,
    Tenant,
)
from brokerbook.infrastructure.database import Database
from brokerbook.infrastructure.database.repositories import (
    SQLAlchemyRecordRepository,
    SQLAlchemySequenceCounter,
)
from brokerbook.infrastructure.memory import (
    InMemoryRecordRepository,
    InMemoryRecordStore,
    InMemorySequenceCounter,
)

# Roles allowed to work with customer and property records.
RECORD_ROLES = frozenset({"user", "paid_user"})


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with."""
    return request.app.state.settings


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession | None, None]:
    """One transaction per request on the SQL backend; ``None`` on the memory backend."""
    settings: Settings = request.app.state.settings
    if settings.storage_backend == "memory":
        yield None
        return
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session


async def get_current_tenant(
    x_tenant_handle: str | None = Header(None),
    x_tenant_role: str = Header("user"),
) -> Tenant:
    """Resolve the caller from the gateway-authenticated tenant headers."""
    handle = (x_tenant_handle or "").strip()
    if not handle:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    role = x_tenant_role.strip().lower()
    if role not in RECORD_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Role '{role}' may not access records",
        )
    return Tenant(handle=handle, role=role)


def _build_record_service(
    request: Request,
    session: AsyncSession | None,
    schema: RecordSchema,
) -> RecordService:
    state = request.app.state
    settings: Settings = state.settings
    if session is None:
        store: InMemoryRecordStore = state.memory_store
        repository = InMemoryRecordRepository(store, schema)
        counter = InMemorySequenceCounter(store, schema.kind)
    else:
        repository = SQLAlchemyRecordRepository(session, schema)
        counter = SQLAlchemySequenceCounter(session, schema.kind)
    return RecordService(
        schema,
        repository,
        counter,
        state.blob_storage,
        timeout=settings.storage_timeout_seconds,
    )


async def get_customer_service(
    request: Request,
    session: AsyncSession | None = Depends(get_db_session),
) -> AsyncGenerator[RecordService[Customer], None]:
    """Provides a RecordService for customers with the configured backend wired up."""
    yield _build_record_service(request, session, CUSTOMER_SCHEMA)


async def get_property_service(
    request: Request,
    session: AsyncSession | None = Depends(get_db_session),
) -> AsyncGenerator[RecordService[Property], None]:
    """Provides a RecordService for properties with the configured backend wired up."""
    yield _build_record_service(request, session, PROPERTY_SCHEMA)
