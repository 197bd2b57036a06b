"""Application service (use case) for tenant-scoped record operations."""

import asyncio
import logging
import mimetypes
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, replace
from typing import Generic, TypeVar

from brokerbook.application.interfaces import (
    BlobStorage,
    FileUpload,
    RecordRepository,
    SequenceCounter,
)
from brokerbook.application.services.merge_reconciler import MergeReconciler
from brokerbook.application.services.policy_lifecycle import PolicyLifecycle
from brokerbook.domain.entities import (
    PolicyStatus,
    RecordId,
    RecordPatch,
    RecordSchema,
    Set,
    epoch_millis,
    sequence_of,
)
from brokerbook.domain.entities.record_schema import R
from brokerbook.domain.exceptions import (
    EntityNotFoundError,
    ForbiddenError,
    StorageUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RecordStats:
    total: int
    current_counter: int
    next_id: str


class RecordService(Generic[R]):
    """Orchestrates record CRUD, search and lifecycle for one record kind.

    Every operation is parameterised by the caller's tenant handle and checks
    that any addressed id carries that same handle before touching storage.
    Depends on the repository, counter and blob storage ports (DI).
    """

    def __init__(
        self,
        schema: RecordSchema[R],
        repository: RecordRepository[R],
        counter: SequenceCounter,
        blob_storage: BlobStorage | None = None,
        *,
        clock: Callable[[], int] = epoch_millis,
        timeout: float | None = None,
    ) -> None:
        self._schema = schema
        self._repository = repository
        self._counter = counter
        self._blob_storage = blob_storage
        self._clock = clock
        self._timeout = timeout
        self._merge = MergeReconciler(schema)
        self._lifecycle = PolicyLifecycle(schema)

    @property
    def schema(self) -> RecordSchema[R]:
        return self._schema

    @property
    def lifecycle(self) -> PolicyLifecycle[R]:
        return self._lifecycle

    # ── Queries ─────────────────────────────────────────────────────

    async def get_record(self, record_id: str, tenant: str) -> R:
        self._authorize(record_id, tenant)
        record = await self._call(
            self._repository.get_by_id(tenant, record_id),
            f"read {self._schema.kind} {record_id}",
        )
        if record is None:
            raise EntityNotFoundError(self._schema.label, record_id)
        return record

    async def list_records(self, tenant: str) -> list[R]:
        """All of the tenant's records, ordered by the numeric id suffix."""
        records = await self._call(
            self._repository.get_all(tenant),
            f"list {self._schema.collection}",
        )
        return sorted(records, key=lambda r: sequence_of(r.id))

    async def search_records(self, tenant: str, query: str) -> list[R]:
        """Case-insensitive substring match over the kind's searchable fields."""
        term = (query or "").strip().lower()
        if not term:
            raise ValidationError("Search query is required", field="q")
        records = await self.list_records(tenant)
        return [r for r in records if self._matches(r, term)]

    async def list_by_status(self, tenant: str, status: str) -> list[R]:
        """Records whose effective status equals ``status``."""
        wanted = self._lifecycle.parse_filter(status)
        now = self._clock()
        records = await self.list_records(tenant)
        return [r for r in records if self._lifecycle.effective_status(r, now) == wanted]

    async def count_records(self, tenant: str) -> int:
        return await self._call(
            self._repository.count(tenant), f"count {self._schema.collection}"
        )

    async def current_sequence(self, tenant: str) -> int:
        return await self._call(
            self._counter.current_sequence(tenant), "read the record counter"
        )

    async def get_stats(self, tenant: str) -> RecordStats:
        total = await self.count_records(tenant)
        current = await self.current_sequence(tenant)
        return RecordStats(
            total=total,
            current_counter=current,
            next_id=str(RecordId(tenant, current + 1)),
        )

    def effective_status(self, record: R) -> PolicyStatus:
        return self._lifecycle.effective_status(record, self._clock())

    # ── Commands ────────────────────────────────────────────────────

    async def create_record(self, tenant: str, patch: RecordPatch) -> R:
        """Validate, allocate the next id, fill default shapes and persist.

        The payload is merged into a blank record before a number is
        allocated, so an invalid payload never consumes a sequence number.
        """
        patch = replace(patch, status=self._lifecycle.validate_request(patch.status))
        now = self._clock()
        draft = self._merge.merge(self._schema.blank("", tenant, now), patch, now=now)
        self._require_mandatory(draft)

        sequence = await self._call(
            self._counter.next_sequence(tenant), "allocate a record number"
        )
        record = replace(draft, id=str(RecordId(tenant, sequence)))
        created = await self._call(
            self._repository.create(record), f"create {self._schema.kind}"
        )
        logger.info("%s created: %s by tenant %s", self._schema.label, created.id, tenant)
        return created

    async def update_record(self, record_id: str, tenant: str, patch: RecordPatch) -> R:
        self._authorize(record_id, tenant)
        patch = replace(patch, status=self._lifecycle.validate_request(patch.status))
        await self.get_record(record_id, tenant)

        def apply(current: R) -> R:
            merged = self._merge.merge(current, patch, now=self._clock())
            self._require_mandatory(merged)
            return merged

        updated = await self._call(
            self._repository.update_if(tenant, record_id, apply),
            f"update {self._schema.kind} {record_id}",
        )
        if updated is None:
            raise EntityNotFoundError(self._schema.label, record_id)
        return updated

    async def delete_record(self, record_id: str, tenant: str) -> None:
        """Hard delete. The tenant's counter is left untouched."""
        await self.get_record(record_id, tenant)
        await self._call(
            self._repository.delete(tenant, record_id),
            f"delete {self._schema.kind} {record_id}",
        )
        logger.info("%s deleted: %s by tenant %s", self._schema.label, record_id, tenant)

    async def sweep_expired(self, tenant: str) -> int:
        """Move every record whose expiry date has passed to ``Expired``.

        Cancelled and already-expired records are skipped, so a second run
        with nothing newly due returns 0. Each candidate is re-checked against
        its stored version at write time, so a status change that lands after
        the listing is never overwritten.
        """
        now = self._clock()

        def expire(current: R) -> R | None:
            if not self._lifecycle.is_due_for_expiry(current, now):
                return None
            return self._merge.merge(
                current, RecordPatch(status=Set(PolicyStatus.EXPIRED)), now=now
            )

        expired = 0
        for record in await self.list_records(tenant):
            if not self._lifecycle.is_due_for_expiry(record, now):
                continue
            updated = await self._call(
                self._repository.update_if(tenant, record.id, expire),
                f"expire {self._schema.kind} {record.id}",
            )
            if updated is not None:
                expired += 1
        if expired:
            logger.info(
                "%d %s moved to Expired for tenant %s",
                expired, self._schema.collection, tenant,
            )
        return expired

    async def attach_files(
        self,
        record_id: str,
        tenant: str,
        section: str,
        files: Mapping[str, FileUpload],
    ) -> tuple[R, dict[str, str]]:
        """Upload files to blob storage and store their URLs in a section.

        Returns the updated record and the ``slot -> url`` mapping. The record
        is only written once every upload has succeeded.
        """
        self._authorize(record_id, tenant)
        if section not in self._schema.attachable_sections:
            raise ValidationError(
                f"Files cannot be attached to '{section}'", field="section"
            )
        section_type = self._schema.sections[section]
        unknown = sorted(set(files) - set(section_type.field_names()))
        if unknown:
            raise ValidationError(
                f"Unknown file slot(s) for {section}: {', '.join(unknown)}",
                field=unknown[0],
            )
        if not files:
            raise ValidationError("No files uploaded", field="files")
        if self._blob_storage is None:
            raise StorageUnavailableError("upload files", "no blob storage configured")

        await self.get_record(record_id, tenant)

        slots = list(files)
        urls = await asyncio.gather(
            *(self._upload(record_id, slot, files[slot]) for slot in slots)
        )
        uploaded = dict(zip(slots, urls))

        record = await self.update_record(
            record_id, tenant, RecordPatch(sections={section: uploaded})
        )
        logger.info(
            "Attached %d file(s) to %s.%s", len(uploaded), record_id, section
        )
        return record, uploaded

    # ── Helpers ─────────────────────────────────────────────────────

    def _authorize(self, record_id: str, tenant: str) -> RecordId:
        parsed = RecordId.parse(record_id)
        if not parsed.belongs_to(tenant):
            logger.warning(
                "Access violation: tenant '%s' addressed %s '%s'",
                tenant, self._schema.kind, record_id,
            )
            raise ForbiddenError(self._schema.label, record_id, tenant)
        return parsed

    def _require_mandatory(self, record: R) -> None:
        for name in self._schema.mandatory_fields:
            value = getattr(record, name)
            if not isinstance(value, str) or not value.strip():
                label = name.replace("_", " ").capitalize()
                raise ValidationError(f"{label} is required", field=name)

    def _matches(self, record: R, term: str) -> bool:
        for path in self._schema.search_fields:
            value = self._schema.value_at(record, path)
            if isinstance(value, str) and term in value.lower():
                return True
        return False

    async def _upload(self, record_id: str, slot: str, upload: FileUpload) -> str:
        extension = mimetypes.guess_extension(upload.content_type) or ""
        path = f"{self._schema.collection}/{record_id}/{record_id}_{slot}{extension}"
        return await self._call(
            self._blob_storage.upload(upload.content, path, upload.content_type),  # type: ignore[union-attr]
            f"upload {slot} for {record_id}",
        )

    async def _call(self, awaitable: Awaitable[T], action: str) -> T:
        """Await a collaborator call, surfacing a timeout as StorageUnavailable."""
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            logger.error("Timed out after %ss trying to %s", self._timeout, action)
            raise StorageUnavailableError(action, "timed out") from exc
