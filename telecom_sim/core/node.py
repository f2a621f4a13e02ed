"""Node class for network simulation.

This module defines the Node class, which represents a traffic source and
sink in the simulated network.
"""


class Node:
    """Represents a network node.

    Attributes:
        id: Unique identifier for the node.
        packets_generated: Packets requested from this node since reset.
        packets_received: Packets delivered to this node end to end.
        current_load: Packets this node originated in the latest tick.
    """

    def __init__(self, node_id: str) -> None:
        """Initialize a network node.

        Args:
            node_id: Unique identifier for the node.
        """
        self.id = node_id
        self.packets_generated = 0
        self.packets_received = 0
        self.current_load = 0

    def record_generated(self, count: int) -> None:
        """Account for the packets this node was asked to send this tick.

        Args:
            count: The node's rate for the active time slot.
        """
        self.packets_generated += count
        self.current_load = count

    def packet_arrived(self) -> None:
        """Handle a packet arriving at this node as its destination."""
        self.packets_received += 1

    def clear_load(self) -> None:
        self.current_load = 0

    def __repr__(self) -> str:
        """Return string representation of the node.

        Returns:
            String representation of the node.
        """
        return f"Node({self.id})"
