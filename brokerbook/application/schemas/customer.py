"""Pydantic DTOs (Data Transfer Objects) for the Customer feature."""

from pydantic import AliasChoices, Field

from brokerbook.application.schemas.common import CamelModel, SectionSchema
from brokerbook.domain.entities import PolicyStatus


class CarDataSchema(SectionSchema):
    owner_name: str | None = None
    car_brand: str | None = Field(None, examples=["Toyota"])
    car_model: str | None = Field(None, examples=["Avanza"])
    plate_number: str | None = Field(None, examples=["B 1234 XYZ"])
    chassis_number: str | None = None
    engine_number: str | None = None
    due_date: int | None = Field(None, description="Policy due date, epoch ms")
    car_price: int | None = None


class DocumentStatusSchema(SectionSchema):
    has_stnk: bool | None = Field(None, alias="hasSTNK")
    has_sim: bool | None = Field(None, alias="hasSIM")
    has_ktp: bool | None = Field(None, alias="hasKTP")


class CarPhotosSchema(SectionSchema):
    left_side: str | None = None
    right_side: str | None = None
    front: str | None = None
    back: str | None = None


class DocumentPhotosSchema(SectionSchema):
    stnk: str | None = None
    sim: str | None = None
    ktp: str | None = None


class CustomerPayload(CamelModel):
    """Body for creating or updating a customer.

    On update, omitted fields are left unchanged; ``status: null`` resets the
    status so it is derived from ``carData.dueDate`` again.
    """

    name: str | None = Field(None, max_length=255, examples=["Budi"])
    email: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)
    address: str | None = None
    notes: str | None = None
    status: str | None = Field(None, examples=["Cancelled"])
    car_data: CarDataSchema | None = None
    document_status: DocumentStatusSchema | None = None
    car_photos: CarPhotosSchema | None = None
    document_photos: DocumentPhotosSchema | None = None


class CustomerResponse(CamelModel):
    """Schema returned to the client."""

    id: str
    created_by: str = Field(
        validation_alias=AliasChoices("tenant", "createdBy"),
        serialization_alias="createdBy",
    )
    name: str
    email: str
    phone: str
    address: str
    notes: str
    status: PolicyStatus | None
    effective_status: PolicyStatus | None = None
    car_data: CarDataSchema
    document_status: DocumentStatusSchema
    car_photos: CarPhotosSchema
    document_photos: DocumentPhotosSchema
    created_at: int
    updated_at: int
