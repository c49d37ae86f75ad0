"""
Error types for Etre SDK.

This module defines two kinds of errors:
- Error: the immutable error value reported by the server. It is data,
  not an exception, and travels inside a WriteResult or other response.
- EtreError and subclasses: client-local conditions detected before any
  network round trip (type mismatch, missing _id, empty arguments, ...).

EntityDataError is separate from both: it marks corrupt local data, such
as an _rev that is not an integer, and is never a soft error.

Invariants:
    - Error values are never mutated; Error.new returns a copy
    - Every EtreError has a taxonomy slug (code) and an HTTP status
    - EtreError.to_error() produces the same shape the server reports
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Error:
    """Standard error value for all handled errors.

    Client errors (HTTP 4xx) and internal errors (HTTP 5xx) are returned
    as an Error if the server handled them. If not handled (crash, panic),
    the response data is undefined; see decode_error().

    Attributes:
        message: Human-readable and loggable error message
        type: Error slug (e.g. db-error, missing-param)
        entity_id: _id of the entity that caused the error, if any
        http_status: HTTP status code
    """

    message: str = ""
    type: str = ""
    entity_id: str = ""
    http_status: int = 0

    def new(self, msg_fmt: str = "", *msg_args: Any) -> Error:
        """Return a copy with the message filled in.

        An empty format returns this Error itself. If the arguments do not
        fit the format, the format is kept and the arguments are appended
        rather than raising.

        Example:
            >>> ERR_NOT_FOUND.new("entity %s not found", "abc")
        """
        if not msg_fmt:
            return self
        if not msg_args:
            message = msg_fmt
        else:
            try:
                message = msg_fmt % msg_args
            except (TypeError, ValueError):
                message = f"{msg_fmt} (args: {', '.join(repr(a) for a in msg_args)})"
        return replace(self, message=message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to wire dictionary."""
        return {
            "message": self.message,
            "type": self.type,
            "entityId": self.entity_id,
            "httpStatus": self.http_status,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Error:
        """Create from wire dictionary."""
        return cls(
            message=data.get("message", ""),
            type=data.get("type", ""),
            entity_id=data.get("entityId", ""),
            http_status=data.get("httpStatus", 0),
        )

    def __str__(self) -> str:
        return f"Etre error {self.type}: {self.message}"


# Server error templates. Fill in the message per occurrence with .new().
ERR_INTERNAL = Error(type="internal-error", http_status=500, message="internal server error")
ERR_DB = Error(type="db-error", http_status=500)
ERR_MISSING_PARAM = Error(type="missing-param", http_status=400)
ERR_INVALID_PARAM = Error(type="invalid-param", http_status=400)
ERR_INVALID_QUERY = Error(type="invalid-query", http_status=400)
ERR_NOT_FOUND = Error(type="entity-not-found", http_status=404, message="entity not found")
ERR_DUPLICATE_ENTITY = Error(type="duplicate-entity", http_status=409)
ERR_CALLER_BLOCKED = Error(type="caller-blocked", http_status=429, message="caller blocked")


class EntityDataError(Exception):
    """Entity data is corrupt.

    Raised when a meta-label has a value of a type that no protocol
    version ever wrote, e.g. _rev stored as a string or float. This
    is unrecoverable and must not be handled like an EtreError.
    """

    def __init__(self, message: str, label: str, value: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.label = label
        self.value = value


class EtreError(Exception):
    """Base exception for all client-local Etre SDK errors.

    Attributes:
        message: Error message
        code: Error slug for programmatic handling
        http_status: Closest HTTP status, used by to_error()
        details: Additional error context
    """

    code = "etre-error"
    http_status = 400

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details or {}

    def to_error(self, entity_id: str = "") -> Error:
        """Convert to an Error value attributed to entity_id."""
        return Error(
            message=self.message,
            type=self.code,
            entity_id=entity_id,
            http_status=self.http_status,
        )


class TypeMismatchError(EtreError):
    """Entity _type and client entity type are different."""

    code = "type-mismatch"

    def __init__(self, entity_type: str, client_type: str) -> None:
        super().__init__(
            f"entity _type {entity_type!r} and client entity type {client_type!r} are different",
            details={"entity_type": entity_type, "client_type": client_type},
        )
        self.entity_type = entity_type
        self.client_type = client_type


class IdSetError(EtreError):
    """Entity _id is set but not allowed on insert."""

    code = "id-set"

    def __init__(self, entity_id: str = "") -> None:
        super().__init__(
            "entity _id is set but not allowed on insert",
            details={"entity_id": entity_id},
        )
        self.entity_id = entity_id


class IdNotSetError(EtreError):
    """Entity _id is not set."""

    code = "id-not-set"

    def __init__(self) -> None:
        super().__init__("entity _id is not set")


class NoEntityError(EtreError):
    """Empty entity or id list; at least one required."""

    code = "no-entity"

    def __init__(self) -> None:
        super().__init__("empty entity or id list; at least one required")


class NoLabelError(EtreError):
    """Empty label list; at least one required."""

    code = "no-label"

    def __init__(self) -> None:
        super().__init__("empty label list; at least one required")


class NoQueryError(EtreError):
    """Empty query string."""

    code = "no-query"

    def __init__(self) -> None:
        super().__init__("empty query string")


class BadDataError(EtreError):
    """Data from CDC feed is not event or control.

    Attributes:
        data: The offending feed message
    """

    code = "bad-data"

    def __init__(self, data: Any = None) -> None:
        super().__init__(
            "data from CDC feed is not event or control",
            details={"data": data},
        )
        self.data = data


class CallerBlockedError(EtreError):
    """Caller blocked by server policy."""

    code = "caller-blocked"
    http_status = 429

    def __init__(self, caller: str = "") -> None:
        super().__init__("caller blocked", details={"caller": caller})
        self.caller = caller


class EntityNotFoundError(EtreError):
    """Entity not found."""

    code = "entity-not-found"
    http_status = 404

    def __init__(self, entity_id: str = "") -> None:
        super().__init__("entity not found", details={"entity_id": entity_id})
        self.entity_id = entity_id


class ClientTimeoutError(EtreError):
    """Client timeout."""

    code = "client-timeout"
    http_status = 0

    def __init__(self, timeout: Optional[float] = None) -> None:
        super().__init__("client timeout", details={"timeout": timeout})
        self.timeout = timeout


class ServerError(EtreError):
    """Error reported by the server, raised on the client side.

    Writers raise this to stop a batch with the server's Error value.

    Attributes:
        error: The Error value as reported
    """

    def __init__(self, error: Error) -> None:
        super().__init__(str(error), code=error.type, details=error.to_dict())
        self.error = error
        self.http_status = error.http_status

    def to_error(self, entity_id: str = "") -> Error:
        """Return the reported Error, filling entity_id only if it is empty."""
        if self.error.entity_id or not entity_id:
            return self.error
        return replace(self.error, entity_id=entity_id)


class UnhandledResponseError(EtreError):
    """Response is not shaped as an Error.

    The server crashed or the request never reached Etre. The body
    is kept as text so callers can print it.

    Attributes:
        body: Raw response body decoded as text
    """

    code = "unhandled-response"
    http_status = 500

    def __init__(self, body: str, http_status: int = 0) -> None:
        super().__init__(
            f"unhandled response (HTTP {http_status}): {body}",
            details={"body": body, "http_status": http_status},
        )
        self.body = body
        if http_status:
            self.http_status = http_status
