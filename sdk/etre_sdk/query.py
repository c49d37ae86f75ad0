"""
Query options and latency for Etre SDK.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class QueryFilter:
    """Filtering options for entity queries.

    Attributes:
        return_labels: Labels included in matching entities. Empty returns
            all labels, including meta-labels.
        distinct: Return unique entities; requires exactly one return label
        use_rw_store: Ask the server to read from the writer store, for
            read-after-write consistency
    """

    return_labels: Tuple[str, ...] = ()
    distinct: bool = False
    use_rw_store: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.return_labels, tuple):
            object.__setattr__(self, "return_labels", tuple(self.return_labels))
        if self.distinct and len(self.return_labels) != 1:
            raise ValueError(
                f"distinct requires exactly one return label, got {len(self.return_labels)}"
            )


@dataclass(frozen=True)
class Latency:
    """Network latencies in milliseconds."""

    send: int = 0  # client -> server
    recv: int = 0  # server -> client
    rtt: int = 0  # client -> server -> client
