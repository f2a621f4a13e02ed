"""Simulation state for network simulation.

This module defines the SimulationState class, the single object holding
everything a tick mutates: the clock, the run flag, cumulative counters,
per-node and per-link state and the packet history.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from telecom_sim.config import LinkSpec
from telecom_sim.core.enums import SimulationStatus
from telecom_sim.core.link import Link, LinkKey
from telecom_sim.core.node import Node
from telecom_sim.core.packet import Packet


@dataclass
class SimulationState:
    """Mutable state of one simulation run.

    Attributes:
        slot_labels: Ordered time slot labels.
        slot_index: Position of the active time slot.
        step: Number of completed ticks.
        status: Whether an external driver should keep ticking.
        total_generated: Packets requested since reset.
        total_transmitted: Packets delivered since reset, including backlog
            releases.
        total_unroutable: Draws discarded because no path existed.
        nodes: Node objects keyed by node ID.
        links: Link objects keyed by (source, target).
        packets: Packets routed during the latest tick.
        next_packet_id: Id handed to the next routed packet.
    """

    slot_labels: Sequence[str]
    slot_index: int = 0
    step: int = 0
    status: SimulationStatus = SimulationStatus.STOPPED
    total_generated: int = 0
    total_transmitted: int = 0
    total_unroutable: int = 0
    nodes: Dict[str, Node] = field(default_factory=dict)
    links: Dict[LinkKey, Link] = field(default_factory=dict)
    packets: List[Packet] = field(default_factory=list)
    next_packet_id: int = 1

    @classmethod
    def from_topology(
        cls,
        node_ids: Sequence[str],
        link_specs: Sequence[LinkSpec],
        slot_labels: Sequence[str],
    ) -> "SimulationState":
        """Build a fresh state for a topology.

        Args:
            node_ids: Node IDs in topology order.
            link_specs: Directed links with their configured capacities.
            slot_labels: Ordered time slot labels.

        Returns:
            A stopped state at tick 0 in the first time slot.
        """
        state = cls(slot_labels=tuple(slot_labels))
        state.nodes = {node_id: Node(node_id) for node_id in node_ids}
        for entry in link_specs:
            link = Link(entry.source, entry.target, entry.capacity)
            state.links[link.key] = link
        return state

    @property
    def current_time(self) -> str:
        return self.slot_labels[self.slot_index]

    @property
    def is_running(self) -> bool:
        return self.status is SimulationStatus.RUNNING

    def advance_time_slot(self) -> bool:
        """Move to the next time slot, saturating at the last one.

        Returns:
            True if the slot changed.
        """
        if self.slot_index >= len(self.slot_labels) - 1:
            return False
        self.slot_index += 1
        return True

    def drain_backlog(self) -> int:
        """Release queued packets on every link, one capacity per link at most.

        Releases are credited as transmitted, but never beyond the number of
        packets generated; a packet queued on several hops is only delivered
        once.

        Returns:
            Number of packets credited as transmitted.
        """
        released = sum(link.drain() for link in self.links.values() if link.queue_size)
        credited = min(released, self.total_generated - self.total_transmitted)
        self.total_transmitted += credited
        return credited

    def clear_tick(self) -> None:
        """Forget this-tick loads and history before new traffic arrives."""
        for link in self.links.values():
            link.clear_load()
        for node in self.nodes.values():
            node.clear_load()
        self.packets = []

    def clear_link_state(self) -> None:
        """Drop loads and backlog, keeping counters and configuration."""
        for link in self.links.values():
            link.clear_load()
            link.queue_size = 0
        for node in self.nodes.values():
            node.clear_load()
        self.packets = []

