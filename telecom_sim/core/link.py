"""Link class for network simulation.

This module defines the Link class, which represents a directed,
capacity-limited network link between two nodes, together with its
backlog queue.
"""

from typing import NamedTuple


class LinkKey(NamedTuple):
    """Directed (source, target) pair identifying a link."""

    source: str
    target: str

    def __str__(self) -> str:
        return f"{self.source}-{self.target}"


class Link:
    """Represents a directed network link between nodes.

    Attributes:
        source: Source node ID.
        target: Target node ID.
        capacity: Link capacity in packets per tick.
        load: Packets carried during the current tick, never above capacity.
        queue_size: Packets waiting for a later tick.
    """

    def __init__(self, source: str, target: str, capacity: int) -> None:
        """Initialize a network link.

        Args:
            source: Source node ID.
            target: Target node ID.
            capacity: Link capacity in packets per tick.
        """
        self.source = source
        self.target = target
        self.capacity = capacity
        self.load = 0
        self.queue_size = 0

    @property
    def key(self) -> LinkKey:
        return LinkKey(self.source, self.target)

    def consume_capacity(self, amount: int = 1) -> bool:
        """Apply load to this tick's usage, queuing whatever does not fit.

        Args:
            amount: Packets to push across the link.

        Returns:
            True if the whole amount fit under capacity, False if any of it
            was diverted to the backlog queue.
        """
        requested = self.load + amount
        if requested > self.capacity:
            overflow = requested - max(self.load, self.capacity)
            self.load = self.capacity
            self.queue_size += overflow
            return False
        self.load = requested
        return True

    def drain(self) -> int:
        """Release up to one capacity's worth of backlog.

        Returns:
            Number of queued packets released this tick.
        """
        released = min(self.queue_size, self.capacity)
        self.queue_size -= released
        return released

    def clear_load(self) -> None:
        """Start a new tick with no load on the link."""
        self.load = 0

    def set_capacity(self, capacity: int) -> None:
        """Change the capacity, keeping this tick's load within it."""
        self.capacity = capacity
        self.load = min(self.load, capacity)

    def utilization(self) -> float:
        """Current load as a percentage of capacity.

        Returns:
            Utilization in the range [0, 100].
        """
        return self.load / self.capacity * 100

    def is_congested(self) -> bool:
        return self.load >= self.capacity or self.queue_size > 0

    def __repr__(self) -> str:
        """Return string representation of the link.

        Returns:
            String representation of the link.
        """
        return f"Link({self.source}->{self.target}, {self.load}/{self.capacity}, queue={self.queue_size})"
