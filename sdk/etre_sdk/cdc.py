"""
Change data capture (CDC) events for Etre SDK.

Every committed write produces exactly one CDCEvent. Events are ordered
by ts in the store's event stream and never change once created.

    op       old                    new
    insert   None                   all user labels
    update   changed labels, before changed labels, after
    delete   all user labels        None

Set fields are copied from the written entity's set() unchanged. Whether
the events of one set agree with each other is for the consumer to check.

Invariants:
    - old is None on insert, new is None on delete, both set on update
    - entity_rev is 0 on insert and the post-write _rev otherwise
    - to_dict() omits optional fields instead of emitting null

How to change safely:
    - Wire field names are shared with every consumer; never rename them
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

from .entity import Entity, Set, is_metalabel, normalize_rev
from .errors import BadDataError
from .validate import WriteOp

logger = logging.getLogger(__name__)

CDCOp = WriteOp


def _same_value(a: Any, b: Any) -> bool:
    """Compare label values by type as well as value, so 1 -> True is a change."""
    if type(a) is not type(b):
        return False
    if isinstance(a, dict):
        return a.keys() == b.keys() and all(_same_value(a[k], b[k]) for k in a)
    if isinstance(a, list):
        return len(a) == len(b) and all(_same_value(x, y) for x, y in zip(a, b))
    return a == b


def changed_labels(before: Entity, after: Entity) -> Tuple[Entity, Entity]:
    """Return the user labels that differ between two versions of an entity.

    A label added in after appears only in new; a label removed in after
    appears only in old. A value whose type changed (1 -> True, 1 -> 1.0)
    counts as changed. Meta-labels are ignored.

    Returns:
        Tuple of (old values, new values)
    """
    old = Entity()
    new = Entity()
    for label in sorted(set(before) | set(after)):
        if is_metalabel(label):
            continue
        in_before = label in before
        in_after = label in after
        if in_before and in_after and _same_value(before[label], after[label]):
            continue
        if in_before:
            old[label] = before[label]
        if in_after:
            new[label] = after[label]
    return old, new


def _user_labels(entity: Entity) -> Entity:
    return Entity({k: v for k, v in entity.items() if not is_metalabel(k)})


def _new_event_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class CDCEvent:
    """A change data capture event for one committed write.

    Attributes:
        id: Event id
        ts: Unix nanoseconds
        op: Write operation (i, u, d on the wire)
        caller: User or app that made the write
        entity_id: _id of the entity
        entity_type: _type of the entity
        entity_rev: Entity revision as of this op, 0 on insert
        old: Old values of affected labels, None on insert
        new: New values of affected labels, None on delete
        set_id: _setId of the written entity, if set
        set_op: _setOp of the written entity, if set
        set_size: _setSize of the written entity, if set

    old and new are copied on construction, so later changes to the
    entities they came from do not reach the event. Events hold mappings
    and are not hashable.
    """

    id: str
    ts: int
    op: CDCOp
    caller: str
    entity_id: str
    entity_type: str
    entity_rev: int = 0
    old: Optional[Entity] = None
    new: Optional[Entity] = None
    set_id: str = ""
    set_op: str = ""
    set_size: int = 0

    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.old is not None:
            object.__setattr__(self, "old", Entity(self.old))
        if self.new is not None:
            object.__setattr__(self, "new", Entity(self.new))
        if self.op is CDCOp.INSERT and self.old is not None:
            raise ValueError("insert event cannot have old values")
        if self.op is CDCOp.DELETE and self.new is not None:
            raise ValueError("delete event cannot have new values")
        if self.op is CDCOp.UPDATE and (self.old is None or self.new is None):
            raise ValueError("update event must have old and new values")

    @property
    def set(self) -> Set:
        """The set fields as a Set."""
        return Set(id=self.set_id, op=self.set_op, size=self.set_size)

    @classmethod
    def _from_write(
        cls,
        op: CDCOp,
        caller: str,
        entity: Entity,
        rev: int,
        old: Optional[Entity],
        new: Optional[Entity],
        event_id: Optional[str],
        ts: Optional[int],
    ) -> CDCEvent:
        s = entity.set()
        return cls(
            id=event_id or _new_event_id(),
            ts=ts if ts is not None else time.time_ns(),
            op=op,
            caller=caller,
            entity_id=entity.id(),
            entity_type=entity.type(),
            entity_rev=rev,
            old=old,
            new=new,
            set_id=s.id,
            set_op=s.op,
            set_size=s.size,
        )

    @classmethod
    def for_insert(
        cls,
        caller: str,
        entity: Entity,
        *,
        event_id: Optional[str] = None,
        ts: Optional[int] = None,
    ) -> CDCEvent:
        """Create the event for an inserted entity.

        entity must have _id and _type as stored.
        """
        return cls._from_write(
            CDCOp.INSERT, caller, entity, 0, None, _user_labels(entity), event_id, ts
        )

    @classmethod
    def for_update(
        cls,
        caller: str,
        before: Entity,
        after: Entity,
        *,
        event_id: Optional[str] = None,
        ts: Optional[int] = None,
    ) -> CDCEvent:
        """Create the event for an update.

        Args:
            caller: User or app that made the write
            before: Entity as stored before the update
            after: Entity as stored after the update, with the new _rev
            event_id: Event id (defaults to a new random id)
            ts: Unix nanoseconds (defaults to now)
        """
        old, new = changed_labels(before, after)
        return cls._from_write(CDCOp.UPDATE, caller, after, after.rev(), old, new, event_id, ts)

    @classmethod
    def for_delete(
        cls,
        caller: str,
        entity: Entity,
        *,
        event_id: Optional[str] = None,
        ts: Optional[int] = None,
    ) -> CDCEvent:
        """Create the event for a deleted entity, as it was when deleted."""
        return cls._from_write(
            CDCOp.DELETE, caller, entity, entity.rev(), _user_labels(entity), None, event_id, ts
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to wire dictionary."""
        result: Dict[str, Any] = {
            "eventId": self.id,
            "ts": self.ts,
            "op": self.op.value,
            "user": self.caller,
            "entityId": self.entity_id,
            "entityType": self.entity_type,
            "rev": self.entity_rev,
        }
        if self.old is not None:
            result["old"] = dict(self.old)
        if self.new is not None:
            result["new"] = dict(self.new)
        if self.set_id:
            result["setId"] = self.set_id
        if self.set_op:
            result["setOp"] = self.set_op
        if self.set_size:
            result["setSize"] = self.set_size
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CDCEvent:
        """Create from wire dictionary.

        Raises:
            EntityDataError: If rev is not an integer encoding
            ValueError: If op is unknown or old/new do not match op
        """
        entity_id = data.get("entityId", "")
        rev = data["rev"] if "rev" in data else data.get("entityRev", 0)
        old = data.get("old")
        new = data.get("new")
        for name, value in (("old", old), ("new", new)):
            if value is not None and not isinstance(value, dict):
                raise ValueError(f"{name} must be an object, got {type(value).__name__}")
        return cls(
            id=data.get("eventId", ""),
            ts=data.get("ts", 0),
            op=CDCOp(data["op"]),
            caller=data.get("user", ""),
            entity_id=entity_id,
            entity_type=data.get("entityType", ""),
            entity_rev=normalize_rev(rev, entity_id),
            old=Entity(old) if old is not None else None,
            new=Entity(new) if new is not None else None,
            set_id=data.get("setId", ""),
            set_op=data.get("setOp", ""),
            set_size=data.get("setSize", 0),
        )


@dataclass(frozen=True)
class Control:
    """A control message on the CDC feed.

    Attributes:
        control: Control message name (e.g. start, ping)
        error: Error message from the server, if any
        start_ts: Feed start time, Unix nanoseconds
        extra: Any other fields sent with the message

    Not hashable, since extra is a dict.
    """

    control: str
    error: str = ""
    start_ts: int = 0
    extra: Dict[str, Any] = field(default_factory=dict)

    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra", dict(self.extra))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Control:
        """Create from wire dictionary."""
        known = {"control", "error", "startTs"}
        return cls(
            control=data["control"],
            error=data.get("error", ""),
            start_ts=data.get("startTs", 0),
            extra={k: v for k, v in data.items() if k not in known},
        )


def decode_feed_message(data: Any) -> Union[CDCEvent, Control]:
    """Decode one message from the CDC feed.

    Args:
        data: Decoded JSON message

    Returns:
        Control if the message has "control", CDCEvent if it has "eventId"

    Raises:
        BadDataError: If the message is neither, or an event is malformed
    """
    if not isinstance(data, dict):
        raise BadDataError(data)
    if isinstance(data.get("control"), str):
        logger.debug("CDC control: %s", data["control"])
        return Control.from_dict(data)
    if "eventId" in data:
        try:
            return CDCEvent.from_dict(data)
        except (KeyError, ValueError) as e:
            logger.debug("Bad CDC event %s: %s", data.get("eventId"), e)
            raise BadDataError(data) from e
    raise BadDataError(data)
