"""Domain entities: customer and property records owned by a tenant."""

import time
from dataclasses import dataclass, field

from brokerbook.domain.entities.policy_status import PolicyStatus
from brokerbook.domain.entities.sections import (
    CarData,
    CarPhotos,
    DocumentPhotos,
    DocumentStatus,
    InsuranceData,
    PropertyDetails,
    PropertyDocuments,
    PropertyPhotos,
)


def epoch_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


@dataclass(kw_only=True)
class Record:
    """Fields shared by every record kind.

    ``id`` is ``{tenant}-{sequence}`` and never changes once assigned.
    ``status`` of ``None`` means "derive from the expiry date".
    """

    id: str
    tenant: str
    notes: str = ""
    status: PolicyStatus | None = None
    created_at: int = field(default_factory=epoch_millis)
    updated_at: int = field(default_factory=epoch_millis)


@dataclass(kw_only=True)
class Customer(Record):
    """A vehicle-insurance customer."""

    name: str
    email: str = ""
    phone: str = ""
    address: str = ""
    car_data: CarData = field(default_factory=CarData)
    document_status: DocumentStatus = field(default_factory=DocumentStatus)
    car_photos: CarPhotos = field(default_factory=CarPhotos)
    document_photos: DocumentPhotos = field(default_factory=DocumentPhotos)


@dataclass(kw_only=True)
class Property(Record):
    """A property-insurance record."""

    owner_name: str
    owner_phone: str = ""
    owner_email: str = ""
    owner_address: str = ""
    property_data: PropertyDetails = field(default_factory=PropertyDetails)
    insurance_data: InsuranceData = field(default_factory=InsuranceData)
    property_photos: PropertyPhotos = field(default_factory=PropertyPhotos)
    documents: PropertyDocuments = field(default_factory=PropertyDocuments)
