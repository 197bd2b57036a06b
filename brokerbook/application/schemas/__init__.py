from .common import CamelModel, SectionSchema, to_patch
from .customer import (
    CarDataSchema,
    CarPhotosSchema,
    CustomerPayload,
    CustomerResponse,
    DocumentPhotosSchema,
    DocumentStatusSchema,
)
from .property import (
    InsuranceDataSchema,
    PropertyDetailsSchema,
    PropertyDocumentsSchema,
    PropertyPayload,
    PropertyPhotosSchema,
    PropertyResponse,
)

__all__ = [
    "CamelModel",
    "SectionSchema",
    "to_patch",
    "CarDataSchema",
    "CarPhotosSchema",
    "CustomerPayload",
    "CustomerResponse",
    "DocumentPhotosSchema",
    "DocumentStatusSchema",
    "InsuranceDataSchema",
    "PropertyDetailsSchema",
    "PropertyDocumentsSchema",
    "PropertyPayload",
    "PropertyPhotosSchema",
    "PropertyResponse",
]
