"""Nested sub-objects carried by records.

Every section is a fixed-shape mapping of named sub-fields to scalar values.
The dataclass defaults *are* the documented default shape: a freshly created
record, or a stored record missing some sub-fields, gets these values.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any, TypeVar

S = TypeVar("S", bound="Section")


class Section:
    """Mixin giving section dataclasses a tolerant dict mapping."""

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))  # type: ignore[arg-type]

    @classmethod
    def default_of(cls, name: str) -> Any:
        return getattr(cls(), name)

    @classmethod
    def from_dict(cls: type[S], data: dict[str, Any] | None) -> S:
        """Build a section, filling missing or null sub-fields with defaults.

        Unknown keys are ignored so that older stored documents still load.
        """
        data = data or {}
        known = {
            name: data[name]
            for name in cls.field_names()
            if data.get(name) is not None
        }
        return cls(**known)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)  # type: ignore[call-overload]


# ── Customer sections ────────────────────────────────────────────────


@dataclass(frozen=True)
class CarData(Section):
    owner_name: str = ""
    car_brand: str = ""
    car_model: str = ""
    plate_number: str = ""
    chassis_number: str = ""
    engine_number: str = ""
    due_date: int | None = None  # epoch ms
    car_price: int = 0


@dataclass(frozen=True)
class DocumentStatus(Section):
    has_stnk: bool = False
    has_sim: bool = False
    has_ktp: bool = False


@dataclass(frozen=True)
class CarPhotos(Section):
    left_side: str = ""
    right_side: str = ""
    front: str = ""
    back: str = ""


@dataclass(frozen=True)
class DocumentPhotos(Section):
    stnk: str = ""
    sim: str = ""
    ktp: str = ""


# ── Property sections ────────────────────────────────────────────────


@dataclass(frozen=True)
class PropertyDetails(Section):
    property_type: str = ""  # House, Apartment, Office, Warehouse, ...
    address: str = ""
    city: str = ""
    province: str = ""
    postal_code: str = ""
    building_area: str = ""  # m²
    land_area: str = ""  # m²
    number_of_floors: str = ""
    year_built: str = ""
    property_value: str = ""
    building_structure: str = ""  # Concrete, Wood, Steel, ...


@dataclass(frozen=True)
class InsuranceData(Section):
    policy_number: str = ""
    insurance_company: str = ""
    coverage_type: str = ""  # Fire, Earthquake, Flood, All Risk, ...
    insurance_value: str = ""
    premium: str = ""
    start_date: int | None = None  # epoch ms
    end_date: int | None = None  # epoch ms
    deductible: str = ""


@dataclass(frozen=True)
class PropertyPhotos(Section):
    front: str = ""
    back: str = ""
    left: str = ""
    right: str = ""
    interior1: str = ""
    interior2: str = ""
    interior3: str = ""
    interior4: str = ""


@dataclass(frozen=True)
class PropertyDocuments(Section):
    certificate: str = ""
    imb: str = ""
    pbb: str = ""
    other: str = ""
