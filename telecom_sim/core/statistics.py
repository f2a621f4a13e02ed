"""Statistics for network simulation.

This module derives the reportable snapshot (per-node, per-link, recent
packets and a summary) from a SimulationState. Building a snapshot never
mutates the state.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple
import numpy as np

from telecom_sim.core.packet import Packet
from telecom_sim.core.state import SimulationState


@dataclass(frozen=True)
class NodeView:
    id: str
    packets_generated: int
    packets_received: int
    current_load: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "packetsGenerated": self.packets_generated,
            "packetsReceived": self.packets_received,
            "currentLoad": self.current_load,
        }


@dataclass(frozen=True)
class LinkView:
    source: str
    target: str
    capacity: int
    current_load: int
    utilization: float
    queue_size: int
    congested: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.source,
            "to": self.target,
            "capacity": self.capacity,
            "currentLoad": self.current_load,
            "utilization": self.utilization,
            "queueSize": self.queue_size,
            "congested": self.congested,
        }


@dataclass(frozen=True)
class Summary:
    """Cumulative totals since the last reset.

    Attributes:
        total_generated: Packets requested, routable or not.
        total_transmitted: Packets delivered end to end or released from
            backlog.
        packet_loss: (generated - transmitted) / generated as a percentage.
        average_queue_size: Mean backlog across all links.
        total_unroutable: Draws discarded for lack of a path. They are part
            of packet_loss as well.
    """

    total_generated: int
    total_transmitted: int
    packet_loss: float
    average_queue_size: float
    total_unroutable: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalPacketsGenerated": self.total_generated,
            "totalPacketsTransmitted": self.total_transmitted,
            "packetLoss": self.packet_loss,
            "averageQueueSize": self.average_queue_size,
            "totalPacketsUnroutable": self.total_unroutable,
        }


@dataclass(frozen=True)
class NetworkSnapshot:
    current_time: str
    simulation_step: int
    is_running: bool
    nodes: Tuple[NodeView, ...]
    links: Tuple[LinkView, ...]
    packets: Tuple[Packet, ...]
    summary: Summary

    def link(self, source: str, target: str) -> LinkView:
        for view in self.links:
            if view.source == source and view.target == target:
                return view
        raise KeyError(f"{source}-{target}")

    def node(self, node_id: str) -> NodeView:
        for view in self.nodes:
            if view.id == node_id:
                return view
        raise KeyError(node_id)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation with the field names the HTTP API uses."""
        return {
            "currentTime": self.current_time,
            "simulationStep": self.simulation_step,
            "isRunning": self.is_running,
            "nodes": [node.to_dict() for node in self.nodes],
            "links": [link.to_dict() for link in self.links],
            "packets": [packet.to_dict() for packet in self.packets],
            "summary": self.summary.to_dict(),
        }


def packet_loss(generated: int, transmitted: int) -> float:
    """Loss percentage, 0 when nothing was generated."""
    if generated <= 0:
        return 0.0
    return round((generated - transmitted) / generated * 100, 2)


def build_snapshot(state: SimulationState, history_limit: int) -> NetworkSnapshot:
    """Collect the reportable view of a simulation state.

    Args:
        state: State to read.
        history_limit: Number of most recent packets to include.

    Returns:
        An immutable snapshot.
    """
    nodes = tuple(
        NodeView(
            id=node.id,
            packets_generated=node.packets_generated,
            packets_received=node.packets_received,
            current_load=node.current_load,
        )
        for node in state.nodes.values()
    )
    links = tuple(
        LinkView(
            source=link.source,
            target=link.target,
            capacity=link.capacity,
            current_load=link.load,
            utilization=round(link.utilization(), 2),
            queue_size=link.queue_size,
            congested=link.is_congested(),
        )
        for link in state.links.values()
    )

    queue_sizes = np.array([link.queue_size for link in state.links.values()], dtype=float)
    average_queue_size = float(queue_sizes.mean()) if queue_sizes.size else 0.0

    packets = tuple(state.packets[-history_limit:]) if history_limit > 0 else ()

    summary = Summary(
        total_generated=state.total_generated,
        total_transmitted=state.total_transmitted,
        packet_loss=packet_loss(state.total_generated, state.total_transmitted),
        average_queue_size=average_queue_size,
        total_unroutable=state.total_unroutable,
    )
    return NetworkSnapshot(
        current_time=state.current_time,
        simulation_step=state.step,
        is_running=state.is_running,
        nodes=nodes,
        links=links,
        packets=packets,
        summary=summary,
    )
