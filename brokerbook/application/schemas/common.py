"""Shared pydantic base models and payload → patch conversion."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from brokerbook.domain.entities import CLEAR, RecordPatch, RecordSchema, Set


class CamelModel(BaseModel):
    """Wire models use camelCase keys (``carData.plateNumber``)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        from_attributes=True,
    )


class SectionSchema(CamelModel):
    """A nested section. Every sub-field is optional so payloads can be partial."""

    model_config = ConfigDict(extra="forbid")


def to_patch(payload: BaseModel, schema: RecordSchema) -> RecordPatch:
    """Convert a validated payload into a ``RecordPatch``.

    Only the keys the caller actually sent are considered, so an omitted
    field is kept while an explicit ``null`` clears it. An explicit ``null``
    for a whole section resets every sub-field of that section.
    """
    data: dict[str, Any] = payload.model_dump(exclude_unset=True)
    patch = RecordPatch()

    if "status" in data:
        raw_status = data.pop("status")
        patch.status = CLEAR if raw_status is None else Set(raw_status)

    for name, value in data.items():
        section_type = schema.sections.get(name)
        if section_type is None:
            patch.fields[name] = value
        elif value is None:
            patch.sections[name] = dict.fromkeys(section_type.field_names())
        else:
            patch.sections[name] = value
    return patch
