from .field_update import CLEAR, KEEP, Clear, FieldUpdate, Keep, Set
from .policy_status import PolicyStatus
from .record import Customer, Property, Record, epoch_millis
from .record_id import RecordId, sequence_of
from .record_patch import RecordPatch
from .record_schema import CUSTOMER_SCHEMA, PROPERTY_SCHEMA, RecordSchema
from .sections import (
    CarData,
    CarPhotos,
    DocumentPhotos,
    DocumentStatus,
    InsuranceData,
    PropertyDetails,
    PropertyDocuments,
    PropertyPhotos,
    Section,
)
from .tenant import Tenant

__all__ = [
    "CLEAR",
    "KEEP",
    "Clear",
    "FieldUpdate",
    "Keep",
    "Set",
    "PolicyStatus",
    "Customer",
    "Property",
    "Record",
    "epoch_millis",
    "RecordId",
    "sequence_of",
    "RecordPatch",
    "CUSTOMER_SCHEMA",
    "PROPERTY_SCHEMA",
    "RecordSchema",
    "CarData",
    "CarPhotos",
    "DocumentPhotos",
    "DocumentStatus",
    "InsuranceData",
    "PropertyDetails",
    "PropertyDocuments",
    "PropertyPhotos",
    "Section",
    "Tenant",
]
