"""
Pre-flight checks for Etre SDK.

These run before any request is sent:
- Entity type matches the client's entity type
- _id is absent on insert and present on update/delete
- Entity, label and query arguments are not empty

Invariants:
    - Checks never modify their arguments
    - Checks raise EtreError subclasses, never return error codes
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

from .constants import META_LABEL_ID, META_LABEL_TYPE
from .entity import Entity
from .errors import (
    IdNotSetError,
    IdSetError,
    NoEntityError,
    NoLabelError,
    NoQueryError,
    TypeMismatchError,
)


class WriteOp(Enum):
    """Write operations, with their CDC op codes as values."""

    INSERT = "i"
    UPDATE = "u"
    DELETE = "d"


def check_type(entity_type: str, entity: Entity) -> None:
    """Raise TypeMismatchError if entity _type is set and differs.

    If _type is not set, the client entity type is presumed.
    """
    if entity.has(META_LABEL_TYPE) and entity.get(META_LABEL_TYPE) != entity_type:
        raise TypeMismatchError(entity.string(META_LABEL_TYPE), entity_type)


def check_entity(op: WriteOp, entity_type: str, entity: Entity) -> None:
    """Check one entity before it is written.

    Args:
        op: Write operation
        entity_type: Client entity type
        entity: Entity to write

    Raises:
        TypeMismatchError: If _type is set and differs from entity_type
        IdSetError: If _id is set on insert
        IdNotSetError: If _id is not set on update or delete
    """
    check_type(entity_type, entity)
    if op is WriteOp.INSERT:
        if entity.has(META_LABEL_ID):
            raise IdSetError(entity.string(META_LABEL_ID))
    elif not entity.string(META_LABEL_ID):
        raise IdNotSetError()


def require_entities(entities: Sequence[object]) -> None:
    """Raise NoEntityError if entities (or ids) is empty."""
    if not entities:
        raise NoEntityError()


def require_labels(labels: Sequence[str]) -> None:
    """Raise NoLabelError if labels is empty."""
    if not labels:
        raise NoLabelError()


def require_query(query: str) -> None:
    """Raise NoQueryError if query is empty or only whitespace."""
    if not query or not query.strip():
        raise NoQueryError()
