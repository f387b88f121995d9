"""Explicit field patches for partial updates.

A patch maps each patchable field name to either ``UNSET`` (leave the stored
value untouched) or ``Set(value)`` (replace it). Keeping the two states
distinct means an omitted field can never be confused with a cleared one.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Final, Generic, TypeVar

T = TypeVar("T")


class _Unset:
    """Marker for a field the caller did not provide."""

    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = _Unset()


@dataclass(frozen=True)
class Set(Generic[T]):
    """A field explicitly provided by the caller."""

    value: T


FieldPatch = Set[Any] | _Unset


class Patch:
    """Mapping of field name to ``FieldPatch`` over a fixed set of fields."""

    def __init__(self, fields: Iterable[str], values: Mapping[str, Any] | None = None):
        """Initialize the patch.

        Args:
            fields: Names of every patchable field
            values: Explicitly provided field values

        Raises:
            KeyError: If a provided value names a field that is not patchable
        """
        self._fields: dict[str, FieldPatch] = dict.fromkeys(fields, UNSET)
        for name, value in (values or {}).items():
            if name not in self._fields:
                raise KeyError(f"Field '{name}' is not patchable")
            self._fields[name] = Set(value)

    def __getitem__(self, name: str) -> FieldPatch:
        return self._fields[name]

    def __iter__(self):
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"Patch({self._fields!r})"

    @property
    def is_empty(self) -> bool:
        """Return True if no field is set."""
        return not self.set_fields()

    def set_fields(self) -> dict[str, Any]:
        """Return the explicitly provided fields and their values."""
        return {
            name: field.value for name, field in self._fields.items() if isinstance(field, Set)
        }

    def apply_to(self, target: Any) -> dict[str, Any]:
        """Assign every set field onto ``target``.

        Args:
            target: Object whose attributes are updated

        Returns:
            The fields that were applied
        """
        changes = self.set_fields()
        for name, value in changes.items():
            setattr(target, name, value)
        return changes
