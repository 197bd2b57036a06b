"""SQLAlchemy ORM models for tenant-scoped records and their counters."""

from sqlalchemy import JSON, BigInteger, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from brokerbook.infrastructure.database.base import Base


class RecordModel(Base):
    """ORM model: maps to the 'records' table.

    Logical layout ``records[kind][tenant][record_id] -> document``; the
    sequence and status are copied out of the document for ordering and
    filtering.
    """

    __tablename__ = "records"

    kind: Mapped[str] = mapped_column(String(32), primary_key=True)
    tenant: Mapped[str] = mapped_column(String(255), primary_key=True)
    record_id: Mapped[str] = mapped_column(String(300), primary_key=True)
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    updated_at: Mapped[int] = mapped_column(BigInteger, nullable=False)

    __table_args__ = (
        Index("ix_records_tenant_sequence", "kind", "tenant", "sequence"),
    )

    def __repr__(self) -> str:
        return f"<RecordModel(kind='{self.kind}', id='{self.record_id}')>"


class RecordCounterModel(Base):
    """ORM model: maps to the 'record_counters' table (last issued number)."""

    __tablename__ = "record_counters"

    kind: Mapped[str] = mapped_column(String(32), primary_key=True)
    tenant: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<RecordCounterModel(kind='{self.kind}', tenant='{self.tenant}', value={self.value})>"
