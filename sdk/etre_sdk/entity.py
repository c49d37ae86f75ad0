"""
Entity representation for Etre SDK.

An Entity is a schemaless bag of labels exchanged with the store. Values
are plain Python values (str, int, float, bool, dict, list, None). Labels
starting with an underscore from a fixed set are meta-labels managed by
the store:

    _id       unique, permanent id; absent before insert
    _type     entity type; must match the client's entity type
    _rev      revision, incremented on every write
    _ts       timestamp of the last write
    _setId    \\
    _setOp     > optional set (logical write group), all-or-nothing
    _setSize  /

_rev has been stored with three integer widths over protocol versions.
Decoders that preserve the stored width return Int32 or Int64; decoders
that don't (JSON) return plain int. normalize_rev() accepts all three and
nothing else.

Invariants:
    - labels() is sorted ascending and stable for an unmodified entity
    - has() depends only on key existence, never on the value
    - string() and set() never raise
    - id(), type() and rev() raise EntityDataError on missing or corrupt data;
      they never fall back to a default

Entity does no locking. Do not mutate one while another thread reads it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from .constants import (
    META_LABEL_ID,
    META_LABEL_REV,
    META_LABEL_SET_ID,
    META_LABEL_SET_OP,
    META_LABEL_SET_SIZE,
    META_LABEL_TS,
    META_LABEL_TYPE,
)
from .errors import EntityDataError

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

LabelValue = Union[str, int, float, bool, Dict[str, Any], List[Any], None]

META_LABELS = frozenset(
    {
        META_LABEL_ID,
        META_LABEL_REV,
        META_LABEL_SET_ID,
        META_LABEL_SET_OP,
        META_LABEL_SET_SIZE,
        META_LABEL_TS,
        META_LABEL_TYPE,
    }
)


class Int32(int):
    """Integer stored as a 32-bit value (protocol versions before 0.11)."""

    def __new__(cls, value: int = 0) -> Int32:
        value = int(value)
        if not INT32_MIN <= value <= INT32_MAX:
            raise OverflowError(f"{value} out of range for Int32")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"Int32({int(self)})"


class Int64(int):
    """Integer stored as a 64-bit value."""

    def __new__(cls, value: int = 0) -> Int64:
        value = int(value)
        if not INT64_MIN <= value <= INT64_MAX:
            raise OverflowError(f"{value} out of range for Int64")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"Int64({int(self)})"


def _as_int64(value: Any) -> Optional[int]:
    """Return value as a plain int if it is one of the integer encodings."""
    # bool is an int subclass but was never a valid encoding
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    if not INT64_MIN <= value <= INT64_MAX:
        return None
    return int(value)


def normalize_rev(value: Any, entity_id: str = "") -> int:
    """Normalize a stored _rev to a signed 64-bit int.

    Args:
        value: Stored value (Int64, Int32 or native int)
        entity_id: _id for the error message, if known

    Returns:
        Revision as a plain int

    Raises:
        EntityDataError: If value is any other type or out of range
    """
    rev = _as_int64(value)
    if rev is None:
        raise EntityDataError(
            f"entity {entity_id} has invalid _rev data type: {type(value).__name__}; "
            "expected Int64 (or int/Int32 before v0.11)",
            label=META_LABEL_REV,
            value=value,
        )
    return rev


def is_metalabel(label: str) -> bool:
    """Return True if label is one of the reserved meta-labels."""
    return label in META_LABELS


@dataclass(frozen=True)
class Set:
    """A user-defined logical grouping of writes (insert, update, delete).

    Attributes:
        id: Set id (_setId)
        op: Set operation name (_setOp)
        size: Number of writes in the set (_setSize)
    """

    id: str = ""
    op: str = ""
    size: int = 0


class Entity(Dict[str, Any]):
    """A single Etre entity.

    The caller is responsible for knowing or determining the type of
    value for each label.

    If _type is set, writes verify that it matches the client's entity
    type. _id cannot be set on insert and must be set on update and delete.
    _id corresponds to Write.entity_id.

    Example:
        >>> e = Entity({"_id": "59f10d2a5669fc79103a1111", "_rev": 3, "host": "db1"})
        >>> e.rev()
        3
        >>> e.labels()
        ['_id', '_rev', 'host']
    """

    def _meta_string(self, label: str) -> str:
        try:
            value = self[label]
        except KeyError:
            raise EntityDataError(f"entity has no {label}", label=label) from None
        if not isinstance(value, str):
            raise EntityDataError(
                f"entity has invalid {label} data type: {type(value).__name__}; expected str",
                label=label,
                value=value,
            )
        return value

    def id(self) -> str:
        """Return _id.

        Raises:
            EntityDataError: If _id is not set or not a string
        """
        return self._meta_string(META_LABEL_ID)

    def type(self) -> str:
        """Return _type.

        Raises:
            EntityDataError: If _type is not set or not a string
        """
        return self._meta_string(META_LABEL_TYPE)

    def rev(self) -> int:
        """Return _rev normalized to a signed 64-bit int.

        Raises:
            EntityDataError: If _rev is not set or not an integer encoding
        """
        return normalize_rev(self.get(META_LABEL_REV), self.string(META_LABEL_ID))

    def has(self, label: str) -> bool:
        """Return True if the entity has the label, regardless of its value."""
        return label in self

    def labels(self) -> List[str]:
        """Return all labels, sorted, including meta-labels."""
        return sorted(self)

    def string(self, label: str) -> str:
        """Return the string value of the label.

        If the label is not set or its value is not a string, an empty
        string is returned.
        """
        value = self.get(label)
        if isinstance(value, str):
            return value
        return ""

    def set(self) -> Set:
        """Return the set this entity was written in, if any.

        Missing or mistyped set labels leave the field at its zero value.
        """
        size = _as_int64(self.get(META_LABEL_SET_SIZE))
        return Set(
            id=self.string(META_LABEL_SET_ID),
            op=self.string(META_LABEL_SET_OP),
            size=size if size is not None else 0,
        )

    def user_labels(self) -> List[str]:
        """Return sorted labels excluding meta-labels."""
        return [label for label in self.labels() if not is_metalabel(label)]

    def __repr__(self) -> str:
        return f"Entity({dict.__repr__(self)})"
