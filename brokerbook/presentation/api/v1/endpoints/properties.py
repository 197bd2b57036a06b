"""Property (building policy) endpoints."""

from brokerbook.application.schemas import PropertyPayload, PropertyResponse
from brokerbook.domain.entities import PROPERTY_SCHEMA
from brokerbook.infrastructure.dependencies import get_property_service
from brokerbook.presentation.api.v1.endpoints.records import create_record_router

router = create_record_router(
    schema=PROPERTY_SCHEMA,
    payload_model=PropertyPayload,
    response_model=PropertyResponse,
    get_service=get_property_service,
    item_key="property",
    tag="Properties",
    document_sections=("documents",),
)
