"""Record CRUD, search, lifecycle and upload endpoints.

Customers and properties expose the same routes; ``create_record_router``
builds them for one record kind.
"""

import logging
from collections.abc import Callable

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from starlette.datastructures import UploadFile

from brokerbook.application.interfaces import FileUpload
from brokerbook.application.schemas import to_patch
from brokerbook.application.services import RecordService
from brokerbook.config import Settings
from brokerbook.domain.entities import Record, RecordSchema, Tenant
from brokerbook.domain.exceptions import ValidationError
from brokerbook.infrastructure.dependencies import get_app_settings, get_current_tenant

logger = logging.getLogger(__name__)


def _alias_map(names) -> dict[str, str]:
    """Accept both the camelCase wire name and the snake_case name."""
    mapping = {name: name for name in names}
    mapping.update({to_camel(name): name for name in names})
    return mapping


def create_record_router(
    *,
    schema: RecordSchema,
    payload_model: type[BaseModel],
    response_model: type[BaseModel],
    get_service: Callable,
    item_key: str,
    tag: str,
    document_sections: tuple[str, ...] = (),
) -> APIRouter:
    """Build the router for one record kind, mounted at ``/{collection}``.

    ``item_key`` names the single-record key of the success envelope
    (``customer``); the list key is the collection name (``customers``).
    Sections listed in ``document_sections`` accept PDF uploads in addition
    to images.
    """
    router = APIRouter(prefix=f"/{schema.collection}", tags=[tag])
    list_key = schema.collection
    section_names = _alias_map(schema.attachable_sections)

    def _to_response(service: RecordService, record: Record) -> dict:
        response = response_model.model_validate(record, from_attributes=True)
        response.effective_status = service.effective_status(record)
        return response.model_dump(by_alias=True, mode="json")

    def _to_list(service: RecordService, records: list[Record]) -> dict:
        return {
            "success": True,
            list_key: [_to_response(service, r) for r in records],
            "count": len(records),
        }

    @router.get("")
    async def list_records(
        tenant: Tenant = Depends(get_current_tenant),
        service: RecordService = Depends(get_service),
    ) -> dict:
        """All of the caller's records, ordered by id number."""
        records = await service.list_records(tenant.handle)
        return _to_list(service, records)

    @router.get("/search")
    async def search_records(
        q: str = Query("", description="Case-insensitive substring"),
        tenant: Tenant = Depends(get_current_tenant),
        service: RecordService = Depends(get_service),
    ) -> dict:
        records = await service.search_records(tenant.handle, q)
        return _to_list(service, records)

    @router.get("/stats")
    async def get_stats(
        tenant: Tenant = Depends(get_current_tenant),
        service: RecordService = Depends(get_service),
    ) -> dict:
        stats = await service.get_stats(tenant.handle)
        return {
            "success": True,
            "stats": {
                "total": stats.total,
                "currentCounter": stats.current_counter,
                "nextId": stats.next_id,
            },
        }

    @router.post("/sweep-expired")
    async def sweep_expired(
        tenant: Tenant = Depends(get_current_tenant),
        service: RecordService = Depends(get_service),
    ) -> dict:
        """Move every record whose expiry date has passed to ``Expired``."""
        expired = await service.sweep_expired(tenant.handle)
        return {"success": True, "expired": expired}

    @router.get("/status/{policy_status}")
    async def list_by_status(
        policy_status: str,
        tenant: Tenant = Depends(get_current_tenant),
        service: RecordService = Depends(get_service),
    ) -> dict:
        records = await service.list_by_status(tenant.handle, policy_status)
        return _to_list(service, records)

    @router.get("/{record_id}")
    async def get_record(
        record_id: str,
        tenant: Tenant = Depends(get_current_tenant),
        service: RecordService = Depends(get_service),
    ) -> dict:
        record = await service.get_record(record_id, tenant.handle)
        return {"success": True, item_key: _to_response(service, record)}

    @router.post("", status_code=status.HTTP_201_CREATED)
    async def create_record(
        data: payload_model,  # type: ignore[valid-type]
        tenant: Tenant = Depends(get_current_tenant),
        service: RecordService = Depends(get_service),
    ) -> dict:
        """Create a record; its id is allocated from the caller's counter."""
        record = await service.create_record(tenant.handle, to_patch(data, schema))
        return {
            "success": True,
            "message": f"{schema.label} created",
            item_key: _to_response(service, record),
        }

    @router.put("/{record_id}")
    async def update_record(
        record_id: str,
        data: payload_model,  # type: ignore[valid-type]
        tenant: Tenant = Depends(get_current_tenant),
        service: RecordService = Depends(get_service),
    ) -> dict:
        """Partial update: omitted fields are kept, ``null`` resets a field."""
        record = await service.update_record(
            record_id, tenant.handle, to_patch(data, schema)
        )
        return {
            "success": True,
            "message": f"{schema.label} updated",
            item_key: _to_response(service, record),
        }

    @router.delete("/{record_id}")
    async def delete_record(
        record_id: str,
        tenant: Tenant = Depends(get_current_tenant),
        service: RecordService = Depends(get_service),
    ) -> dict:
        await service.delete_record(record_id, tenant.handle)
        return {"success": True, "message": f"{schema.label} deleted"}

    @router.post("/{record_id}/files/{section}")
    async def upload_files(
        record_id: str,
        section: str,
        request: Request,
        tenant: Tenant = Depends(get_current_tenant),
        service: RecordService = Depends(get_service),
        settings: Settings = Depends(get_app_settings),
    ) -> dict:
        """Multipart upload; each form field name is a slot of ``section``."""
        section_name = section_names.get(section, section)
        slot_names = (
            _alias_map(schema.sections[section_name].field_names())
            if section_name in schema.sections
            else {}
        )
        allow_pdf = section_name in document_sections
        max_bytes = settings.max_upload_size_mb * 1024 * 1024

        files: dict[str, FileUpload] = {}
        form = await request.form()
        for key, value in form.multi_items():
            if not isinstance(value, UploadFile):
                continue
            content_type = value.content_type or "application/octet-stream"
            if not (
                content_type.startswith("image/")
                or (allow_pdf and content_type == "application/pdf")
            ):
                raise ValidationError(
                    f"Unsupported file type '{content_type}' for {key}", field=key
                )
            content = await value.read(max_bytes + 1)
            if len(content) > max_bytes:
                raise ValidationError(
                    f"File {key} exceeds {settings.max_upload_size_mb} MB", field=key
                )
            files[slot_names.get(key, key)] = FileUpload(
                content=content,
                content_type=content_type,
                filename=value.filename or "",
            )

        record, urls = await service.attach_files(
            record_id, tenant.handle, section_name, files
        )
        return {
            "success": True,
            "message": "Files uploaded",
            "files": {to_camel(slot): url for slot, url in urls.items()},
            item_key: _to_response(service, record),
        }

    return router
