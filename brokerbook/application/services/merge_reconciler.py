"""Nested merge reconciler: applies partial updates without clobbering sub-fields."""

from collections.abc import Mapping
from dataclasses import replace
from typing import Any, Generic

from brokerbook.domain.entities.field_update import Clear, Set
from brokerbook.domain.entities.record_patch import RecordPatch
from brokerbook.domain.entities.record_schema import R, RecordSchema
from brokerbook.domain.entities.sections import S
from brokerbook.domain.exceptions import ValidationError


class MergeReconciler(Generic[R]):
    """Produces the new version of a record from the old one and a patch.

    Rules:
      - scalar present in the patch → overwritten (``None`` resets to ``""``)
      - section present in the patch → merged one level deep; only the
        sub-fields the patch names change, ``None`` resets a sub-field to
        its default
      - anything absent from the patch is carried over unchanged
      - ``updated_at`` is always stamped last

    The input record is never mutated.
    """

    def __init__(self, schema: RecordSchema[R]):
        self._schema = schema

    def merge(self, record: R, patch: RecordPatch, *, now: int) -> R:
        changes: dict[str, Any] = {}

        for name, value in patch.fields.items():
            if name not in self._schema.scalar_fields:
                raise ValidationError(f"Unknown field '{name}'", field=name)
            changes[name] = "" if value is None else value

        for name, sub_changes in patch.sections.items():
            section_type = self._schema.sections.get(name)
            if section_type is None:
                raise ValidationError(f"Unknown section '{name}'", field=name)
            base = getattr(record, name, None) or section_type()
            changes[name] = self.merge_section(base, sub_changes)

        if isinstance(patch.status, Clear):
            changes["status"] = None
        elif isinstance(patch.status, Set):
            changes["status"] = patch.status.value

        changes["updated_at"] = now
        return replace(record, **changes)

    @staticmethod
    def merge_section(base: S, sub_changes: Mapping[str, Any]) -> S:
        known = base.field_names()
        unknown = sorted(set(sub_changes) - set(known))
        if unknown:
            raise ValidationError(
                f"Unknown field(s) {', '.join(unknown)} for {type(base).__name__}",
                field=unknown[0],
            )
        resolved = {
            name: base.default_of(name) if value is None else value
            for name, value in sub_changes.items()
        }
        return replace(base, **resolved)
