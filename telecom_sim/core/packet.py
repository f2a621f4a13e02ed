"""Packet record for network simulation.

This module defines the Packet class, an immutable record of one packet
draw made during a tick: where it came from, where it went and how each
link along the way treated it.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class HopOutcome:
    """Result of pushing one packet across one hop.

    Attributes:
        source: Node the hop leaves from.
        target: Node the hop arrives at.
        success: False when the directed link was at capacity and the
            packet was queued instead.
    """

    source: str
    target: str
    success: bool


@dataclass(frozen=True)
class Packet:
    """Represents a routed packet.

    Attributes:
        id: Unique identifier within a simulation run.
        source: Source node ID.
        destination: Destination node ID.
        path: Node IDs from source to destination.
        hops: Per-link transmission outcome, in path order.
        transmitted: Whether every hop succeeded.
        tick: Tick index at creation.
    """

    id: int
    source: str
    destination: str
    path: Tuple[str, ...]
    hops: Tuple[HopOutcome, ...]
    transmitted: bool
    tick: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "from": self.source,
            "to": self.destination,
            "path": list(self.path),
            "hops": [
                {"from": hop.source, "to": hop.target, "success": hop.success}
                for hop in self.hops
            ],
            "transmitted": self.transmitted,
            "tick": self.tick,
        }
