"""
Etre Python SDK - entity, write-result and CDC types for the Etre entity store.

This SDK provides the data types shared by Etre clients:
- Entity with meta-label accessors (_id, _type, _rev, set labels)
- WriteResult/Write for the stop-at-first-failure write protocol
- CDCEvent for change data capture consumers
- Error value and client-side exceptions

Example:
    >>> from etre_sdk import Entity, WriteOp, write_batch
    >>>
    >>> hosts = [Entity({"hostname": "db1"}), Entity({"hostname": "db2"})]
    >>> wr = write_batch(WriteOp.INSERT, "host", hosts, insert_one)
    >>> if wr.error:
    ...     print(f"failed at entity {len(wr.writes)}: {wr.error}")

Invariants:
    - _id, _type and _rev wire names never change
    - Value types are immutable; Entity is a plain mapping
    - No function performs I/O

Version: 0.12.0
"""

import logging

from .batch import Writer, write_batch
from .cdc import CDCEvent, CDCOp, Control, changed_labels, decode_feed_message
from .config import ClientSettings, request_headers
from .constants import (
    API_ROOT,
    CDC_WRITE_TIMEOUT,
    META_LABEL_ID,
    META_LABEL_REV,
    META_LABEL_TYPE,
    QUERY_TIMEOUT_HEADER,
    TRACE_HEADER,
    VERSION,
    VERSION_HEADER,
)
from .debug import disable_debug, enable_debug
from .entity import META_LABELS, Entity, Int32, Int64, Set, is_metalabel, normalize_rev
from .errors import (
    BadDataError,
    CallerBlockedError,
    ClientTimeoutError,
    EntityDataError,
    EntityNotFoundError,
    Error,
    EtreError,
    IdNotSetError,
    IdSetError,
    NoEntityError,
    NoLabelError,
    NoQueryError,
    ServerError,
    TypeMismatchError,
    UnhandledResponseError,
)
from .query import Latency, QueryFilter
from .results import Write, WriteResult, decode_error, decode_write_result
from .validate import WriteOp

__version__ = VERSION

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Version
    "__version__",
    # Constants
    "VERSION",
    "API_ROOT",
    "META_LABEL_ID",
    "META_LABEL_TYPE",
    "META_LABEL_REV",
    "META_LABELS",
    "CDC_WRITE_TIMEOUT",
    "VERSION_HEADER",
    "TRACE_HEADER",
    "QUERY_TIMEOUT_HEADER",
    # Entities
    "Entity",
    "Set",
    "Int32",
    "Int64",
    "is_metalabel",
    "normalize_rev",
    # Writes
    "WriteOp",
    "Write",
    "WriteResult",
    "Writer",
    "write_batch",
    "decode_write_result",
    "decode_error",
    # CDC
    "CDCEvent",
    "CDCOp",
    "Control",
    "changed_labels",
    "decode_feed_message",
    # Queries
    "QueryFilter",
    "Latency",
    # Config and logging
    "ClientSettings",
    "request_headers",
    "enable_debug",
    "disable_debug",
    # Errors
    "Error",
    "EtreError",
    "EntityDataError",
    "ServerError",
    "UnhandledResponseError",
    "TypeMismatchError",
    "IdSetError",
    "IdNotSetError",
    "NoEntityError",
    "NoLabelError",
    "NoQueryError",
    "BadDataError",
    "CallerBlockedError",
    "EntityNotFoundError",
    "ClientTimeoutError",
]
