"""Tagged update value: keep the current value, clear it, or set a new one."""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Keep:
    """The field was omitted from the update payload."""


@dataclass(frozen=True)
class Clear:
    """The field was explicitly reset to its unset state."""


@dataclass(frozen=True)
class Set(Generic[T]):
    """The field was explicitly given a new value."""

    value: T


FieldUpdate = Keep | Clear | Set[Any]

KEEP = Keep()
CLEAR = Clear()
