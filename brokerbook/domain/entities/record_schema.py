"""Record schemas: the shape and rules of each record kind.

Customers and properties follow the same design; a ``RecordSchema`` captures
everything that differs between them so that the counter, the merge logic,
the lifecycle and the store can stay kind-agnostic.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from brokerbook.domain.entities.policy_status import PolicyStatus
from brokerbook.domain.entities.record import Customer, Property, Record
from brokerbook.domain.entities.sections import (
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

R = TypeVar("R", bound=Record)


@dataclass(frozen=True, eq=False)
class RecordSchema(Generic[R]):
    kind: str
    collection: str
    label: str
    record_type: type[R]
    scalar_fields: tuple[str, ...]
    mandatory_fields: tuple[str, ...]
    sections: Mapping[str, type[Section]]
    expiry_field: tuple[str, str]
    settable_statuses: frozenset[PolicyStatus]
    search_fields: tuple[str, ...]
    attachable_sections: tuple[str, ...]

    # ── Construction ────────────────────────────────────────────────

    def blank(self, record_id: str, tenant: str, now: int) -> R:
        """A record with every scalar empty and every section at its default shape."""
        scalars = {name: "" for name in self.scalar_fields}
        return self.record_type(
            id=record_id,
            tenant=tenant,
            created_at=now,
            updated_at=now,
            **scalars,
        )

    def to_document(self, record: R) -> dict[str, Any]:
        """Serialise a record to the JSON document kept by the persistence layer."""
        document: dict[str, Any] = {
            name: getattr(record, name) for name in self.scalar_fields
        }
        for name in self.sections:
            document[name] = getattr(record, name).to_dict()
        if record.status is not None:
            document["status"] = record.status.value
        document["created_at"] = record.created_at
        document["updated_at"] = record.updated_at
        return document

    def from_document(self, record_id: str, tenant: str, document: dict[str, Any]) -> R:
        """Rebuild a record from a stored document, filling any missing pieces."""
        scalars = {name: document.get(name) or "" for name in self.scalar_fields}
        sections = {
            name: section_type.from_dict(document.get(name))
            for name, section_type in self.sections.items()
        }
        raw_status = document.get("status")
        return self.record_type(
            id=record_id,
            tenant=tenant,
            status=PolicyStatus(raw_status) if raw_status else None,
            created_at=document.get("created_at") or 0,
            updated_at=document.get("updated_at") or 0,
            **scalars,
            **sections,
        )

    # ── Field access ────────────────────────────────────────────────

    @staticmethod
    def value_at(record: Record, path: str) -> Any:
        """Resolve a dotted path such as ``car_data.plate_number``."""
        value: Any = record
        for part in path.split("."):
            value = getattr(value, part, None)
            if value is None:
                return None
        return value

    def expiry_of(self, record: R) -> int | None:
        section, sub_field = self.expiry_field
        return getattr(getattr(record, section), sub_field)


CUSTOMER_SCHEMA: RecordSchema[Customer] = RecordSchema(
    kind="customer",
    collection="customers",
    label="Customer",
    record_type=Customer,
    scalar_fields=("name", "email", "phone", "address", "notes"),
    mandatory_fields=("name",),
    sections={
        "car_data": CarData,
        "document_status": DocumentStatus,
        "car_photos": CarPhotos,
        "document_photos": DocumentPhotos,
    },
    expiry_field=("car_data", "due_date"),
    settable_statuses=frozenset({PolicyStatus.CANCELLED}),
    search_fields=(
        "name",
        "email",
        "phone",
        "car_data.owner_name",
        "car_data.plate_number",
        "car_data.car_brand",
        "car_data.car_model",
    ),
    attachable_sections=("car_photos", "document_photos"),
)

PROPERTY_SCHEMA: RecordSchema[Property] = RecordSchema(
    kind="property",
    collection="properties",
    label="Property",
    record_type=Property,
    scalar_fields=("owner_name", "owner_phone", "owner_email", "owner_address", "notes"),
    mandatory_fields=("owner_name",),
    sections={
        "property_data": PropertyDetails,
        "insurance_data": InsuranceData,
        "property_photos": PropertyPhotos,
        "documents": PropertyDocuments,
    },
    expiry_field=("insurance_data", "end_date"),
    settable_statuses=frozenset({PolicyStatus.ACTIVE, PolicyStatus.CANCELLED}),
    search_fields=(
        "owner_name",
        "owner_phone",
        "owner_email",
        "property_data.address",
        "property_data.city",
        "property_data.property_type",
        "insurance_data.policy_number",
        "insurance_data.insurance_company",
    ),
    attachable_sections=("property_photos", "documents"),
)
