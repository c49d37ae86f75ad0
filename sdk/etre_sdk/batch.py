"""
Batched writes for Etre SDK.

write_batch() drives a transport-supplied writer over a list of entities
and folds the outcomes into one WriteResult, stopping at the first failure.

Example:
    >>> def insert_one(entity):
    ...     resp = http.post(f"{API_ROOT}/entity/host", json=entity)
    ...     if resp.status_code != 201:
    ...         raise ServerError(decode_error(resp.content, resp.status_code))
    ...     return Write.from_dict(resp.json())
    >>> wr = write_batch(WriteOp.INSERT, "host", hosts, insert_one)
    >>> if wr.error:
    ...     print(f"{len(wr.writes)} written, failed at {wr.error.entity_id}")
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from .constants import META_LABEL_ID
from .entity import Entity
from .errors import EtreError
from .results import Write, WriteResult
from .validate import WriteOp, check_entity, require_entities

logger = logging.getLogger(__name__)

Writer = Callable[[Entity], Write]


def write_batch(
    op: WriteOp,
    entity_type: str,
    entities: Sequence[Entity],
    writer: Writer,
    log: Optional[logging.Logger] = None,
) -> WriteResult:
    """Write entities in order, stopping at the first failure.

    Each entity is checked (see validate.check_entity) and then passed
    to writer. A failed check or an EtreError raised by writer stops the
    batch; the result holds every earlier write plus an Error naming the
    failing entity by _id, if it has one. Earlier writes are kept.

    Args:
        op: Write operation
        entity_type: Client entity type
        entities: Entities to write, in order
        writer: Writes one entity, returns its Write or raises EtreError
        log: Debug logger (defaults to this module's logger)

    Returns:
        WriteResult with len(writes) == index of the failing entity

    Raises:
        NoEntityError: If entities is empty
    """
    log = log or logger
    require_entities(entities)

    writes: List[Write] = []
    for i, entity in enumerate(entities):
        try:
            check_entity(op, entity_type, entity)
            write = writer(entity)
        except EtreError as e:
            entity_id = entity.string(META_LABEL_ID)
            log.debug(
                "%s %s: entity %d/%d (%s) failed: %s",
                op.name.lower(), entity_type, i + 1, len(entities), entity_id or "new", e,
            )
            return WriteResult(writes=tuple(writes), error=e.to_error(entity_id))
        writes.append(write)

    log.debug("%s %s: %d entities written", op.name.lower(), entity_type, len(writes))
    return WriteResult(writes=tuple(writes))
