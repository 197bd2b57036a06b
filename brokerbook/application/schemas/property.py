"""Pydantic DTOs (Data Transfer Objects) for the Property feature."""

from pydantic import AliasChoices, Field

from brokerbook.application.schemas.common import CamelModel, SectionSchema
from brokerbook.domain.entities import PolicyStatus


class PropertyDetailsSchema(SectionSchema):
    property_type: str | None = Field(None, examples=["House"])
    address: str | None = None
    city: str | None = None
    province: str | None = None
    postal_code: str | None = None
    building_area: str | None = None
    land_area: str | None = None
    number_of_floors: str | None = None
    year_built: str | None = None
    property_value: str | None = None
    building_structure: str | None = None


class InsuranceDataSchema(SectionSchema):
    policy_number: str | None = None
    insurance_company: str | None = None
    coverage_type: str | None = Field(None, examples=["All Risk"])
    insurance_value: str | None = None
    premium: str | None = None
    start_date: int | None = Field(None, description="Coverage start, epoch ms")
    end_date: int | None = Field(None, description="Coverage end, epoch ms")
    deductible: str | None = None


class PropertyPhotosSchema(SectionSchema):
    front: str | None = None
    back: str | None = None
    left: str | None = None
    right: str | None = None
    interior1: str | None = None
    interior2: str | None = None
    interior3: str | None = None
    interior4: str | None = None


class PropertyDocumentsSchema(SectionSchema):
    certificate: str | None = None
    imb: str | None = None
    pbb: str | None = None
    other: str | None = None


class PropertyPayload(CamelModel):
    """Body for creating or updating a property: omitted fields are left unchanged."""

    owner_name: str | None = Field(None, max_length=255)
    owner_phone: str | None = Field(None, max_length=50)
    owner_email: str | None = Field(None, max_length=255)
    owner_address: str | None = None
    notes: str | None = None
    status: str | None = Field(None, examples=["Active", "Cancelled"])
    property_data: PropertyDetailsSchema | None = None
    insurance_data: InsuranceDataSchema | None = None
    property_photos: PropertyPhotosSchema | None = None
    documents: PropertyDocumentsSchema | None = None


class PropertyResponse(CamelModel):
    """Schema returned to the client."""

    id: str
    created_by: str = Field(
        validation_alias=AliasChoices("tenant", "createdBy"),
        serialization_alias="createdBy",
    )
    owner_name: str
    owner_phone: str
    owner_email: str
    owner_address: str
    notes: str
    status: PolicyStatus | None
    effective_status: PolicyStatus | None = None
    property_data: PropertyDetailsSchema
    insurance_data: InsuranceDataSchema
    property_photos: PropertyPhotosSchema
    documents: PropertyDocumentsSchema
    created_at: int
    updated_at: int
