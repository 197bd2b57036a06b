"""Customer (vehicle policy) endpoints."""

from brokerbook.application.schemas import CustomerPayload, CustomerResponse
from brokerbook.domain.entities import CUSTOMER_SCHEMA
from brokerbook.infrastructure.dependencies import get_customer_service
from brokerbook.presentation.api.v1.endpoints.records import create_record_router

router = create_record_router(
    schema=CUSTOMER_SCHEMA,
    payload_model=CustomerPayload,
    response_model=CustomerResponse,
    get_service=get_customer_service,
    item_key="customer",
    tag="Customers",
    document_sections=("document_photos",),
)
