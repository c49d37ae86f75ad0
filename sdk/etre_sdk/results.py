"""
Write results for Etre SDK.

Every write operation (insert, update, delete), single or batched, yields
exactly one WriteResult. Writes stop on the first error, so on failure
the successful writes are a prefix of the input:

    entities:  [e0, e1, e2]     e1 fails
    result:    writes=[w0], error=Error(entity_id=e1 _id)

len(writes) is therefore the index of the entity that failed. Earlier
writes are not rolled back; that is up to the store.

Invariants:
    - writes are in input order
    - nothing after the failing entity is recorded
    - is_zero() is True only when no write was recorded and no error set
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple, Union

from .entity import Entity
from .errors import Error, UnhandledResponseError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Write:
    """The successful write of one entity.

    Attributes:
        entity_id: _id of the entity (all write ops)
        uri: Fully-qualified address of the new entity (insert only)
        diff: Previous values of the changed labels (update only)

    diff is copied on construction; an empty diff is omitted on the wire.
    Writes hold a mapping and are not hashable.
    """

    entity_id: str
    uri: str = ""
    diff: Optional[Entity] = None

    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.diff is not None:
            object.__setattr__(self, "diff", Entity(self.diff))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to wire dictionary."""
        result: Dict[str, Any] = {"entityId": self.entity_id}
        if self.uri:
            result["uri"] = self.uri
        if self.diff:
            result["diff"] = dict(self.diff)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Write:
        """Create from wire dictionary."""
        diff = data.get("diff")
        return cls(
            entity_id=data["entityId"],
            uri=data.get("uri", ""),
            diff=Entity(diff) if diff is not None else None,
        )


@dataclass(frozen=True)
class WriteResult:
    """Result of a write operation.

    If error is set, some or all writes failed. For example, if the
    first entity causes an error, len(writes) == 0. If the third entity
    fails, len(writes) == 2.

    Attributes:
        writes: Successful writes, in input order
        error: Error before, during, or after writes
    """

    writes: Tuple[Write, ...] = ()
    error: Optional[Error] = None

    def __post_init__(self) -> None:
        # Accept any sequence but store a tuple
        if not isinstance(self.writes, tuple):
            object.__setattr__(self, "writes", tuple(self.writes))

    def is_zero(self) -> bool:
        """Return True if nothing was written and no error was set."""
        return self.error is None and len(self.writes) == 0

    @property
    def ok(self) -> bool:
        """Whether all writes succeeded."""
        return self.error is None

    def entity_ids(self) -> Tuple[str, ...]:
        """Return the _id of every successful write."""
        return tuple(w.entity_id for w in self.writes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to wire dictionary."""
        result: Dict[str, Any] = {"writes": [w.to_dict() for w in self.writes]}
        if self.error is not None:
            result["error"] = self.error.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> WriteResult:
        """Create from wire dictionary."""
        error = data.get("error")
        return cls(
            writes=tuple(Write.from_dict(w) for w in data.get("writes") or ()),
            error=Error.from_dict(error) if error is not None else None,
        )


def _text(body: Union[bytes, str]) -> str:
    return body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body


def _load_json(body: Union[bytes, str], http_status: int) -> Any:
    text = _text(body)
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        logger.debug("Response is not JSON (HTTP %d): %r", http_status, text[:200])
        raise UnhandledResponseError(text, http_status) from None


def decode_error(body: Union[bytes, str], http_status: int = 0) -> Error:
    """Decode an error response body.

    Args:
        body: Raw response body
        http_status: HTTP status of the response

    Returns:
        Error value; http_status is filled from the response if absent

    Raises:
        UnhandledResponseError: If the body is not shaped as an Error
    """
    data = _load_json(body, http_status)
    if (
        not isinstance(data, dict)
        or not isinstance(data.get("type"), str)
        or not isinstance(data.get("message"), str)
    ):
        raise UnhandledResponseError(_text(body), http_status)
    error = Error.from_dict(data)
    if not error.http_status and http_status:
        error = replace(error, http_status=http_status)
    return error


def decode_write_result(body: Union[bytes, str], http_status: int = 0) -> WriteResult:
    """Decode a write response body.

    Raises:
        UnhandledResponseError: If the body is not shaped as a WriteResult
    """
    data = _load_json(body, http_status)
    if not isinstance(data, dict) or not isinstance(data.get("writes", []), (list, type(None))):
        raise UnhandledResponseError(_text(body), http_status)
    try:
        return WriteResult.from_dict(data)
    except (KeyError, TypeError, AttributeError):
        raise UnhandledResponseError(_text(body), http_status) from None
