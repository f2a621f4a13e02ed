"""Network simulator class for network simulation.

This module defines the NetworkSimulator class, the engine that owns one
SimulationState and advances it one tick at a time: drain backlog, generate
traffic for the active time slot, route every draw and bill capacity along
its path.
"""

import logging
import random
import threading
import networkx as nx
from typing import Any, Callable, Dict, List, Optional, Sequence

from telecom_sim.config import SimulationConfig, default_config
from telecom_sim.core.enums import SimulationStatus
from telecom_sim.core.errors import InvalidArgumentError, LinkNotFoundError, SimulationError
from telecom_sim.core.link import LinkKey
from telecom_sim.core.packet import HopOutcome, Packet
from telecom_sim.core.routing_algorithms import DijkstraRouter, Router
from telecom_sim.core.state import SimulationState
from telecom_sim.core.statistics import NetworkSnapshot, build_snapshot
from telecom_sim.traffic.generators import TrafficGenerator
from telecom_sim.utils.rng import RandomSource

logger = logging.getLogger(__name__)


class NetworkSimulator:
    """Tick-driven traffic simulation over a fixed topology.

    All public operations are serialised on one re-entrant lock, so a
    statistics read never observes a partially applied tick.

    Attributes:
        config: Static topology, time slots and reporting settings.
        rng: Random source used for destination selection.
        graph: Undirected routing view of the topology.
        router: Path computation for generated packets.
        traffic: Per-slot traffic generator.
        state: Mutable state of the current run.
        hooks: Callbacks keyed by event type.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        rng: Optional[RandomSource] = None,
        router_func: Callable[[nx.Graph], Router] = DijkstraRouter,
    ) -> None:
        """Initialize the network simulator.

        Args:
            config: Simulation inputs, the five-node reference network by
                default.
            rng: Random source for destinations. Defaults to a
                ``random.Random`` seeded from the configuration.
            router_func: Factory building the router from the routing graph.
        """
        self.config = (config if config is not None else default_config()).validate()
        self._owns_rng = rng is None
        self.rng: RandomSource = rng if rng is not None else random.Random(self.config.seed)
        self._lock = threading.RLock()

        self.graph = nx.Graph()
        self.graph.add_nodes_from(self.config.nodes)
        for entry in self.config.links:
            self.graph.add_edge(entry.source, entry.target)
        self.router = router_func(self.graph)

        self.hooks: Dict[str, List[Callable[..., Any]]] = {
            "tick_end": [],  # a tick completed
            "reset": [],  # state returned to its initial values
        }

        self.traffic: TrafficGenerator
        self.state: SimulationState
        self.initialize()

    def initialize(self) -> None:
        """(Re)populate node, link and traffic state from the configuration."""
        with self._lock:
            self.state = SimulationState.from_topology(
                self.config.nodes, self.config.links, self.config.slot_labels
            )
            self.traffic = TrafficGenerator(
                self.config.nodes, self.config.time_slots, self.rng, self.config.max_rate
            )

    @property
    def is_running(self) -> bool:
        return self.state.is_running

    @property
    def current_time(self) -> str:
        return self.state.current_time

    def start(self) -> None:
        """Mark the simulation as running on a clean link-state baseline.

        Loads, queues and the packet history are cleared; cumulative
        counters, the active time slot and administrative changes are kept.
        """
        with self._lock:
            self.state.clear_link_state()
            self.state.status = SimulationStatus.RUNNING
        logger.info("Simulation started at step %d (%s)", self.state.step, self.state.current_time)

    def pause(self) -> None:
        with self._lock:
            self.state.status = SimulationStatus.STOPPED
        logger.info("Simulation paused at step %d", self.state.step)

    def reset(self) -> None:
        """Stop the simulation and return every field to its initial value."""
        with self._lock:
            if self._owns_rng and self.config.seed is not None:
                self.rng = random.Random(self.config.seed)
            self.initialize()
        logger.info("Simulation reset")
        self.call_hooks("reset", self)

    def tick(self) -> None:
        """Execute one simulation step, whether or not the simulation runs."""
        with self._lock:
            state = self.state
            released = state.drain_backlog()
            state.clear_tick()

            slot = state.current_time
            congested = 0
            for source, destination in self.traffic.generate(slot):
                path = self.router.compute_path(source, destination)
                if len(path) < 2:
                    state.total_unroutable += 1
                    continue
                packet = self._transmit(source, destination, path)
                state.packets.append(packet)
                if packet.transmitted:
                    state.nodes[destination].packet_arrived()
                    state.total_transmitted += 1
                else:
                    congested += 1

            for node_id, rate in self.traffic.rates_for(slot).items():
                state.nodes[node_id].record_generated(rate)
            state.total_generated += self.traffic.requested(slot)
            state.step += 1

            logger.debug(
                "Step %d (%s): %d routed, %d congested, %d released from backlog",
                state.step,
                slot,
                len(state.packets),
                congested,
                released,
            )
        self.call_hooks("tick_end", self)

    def _transmit(self, source: str, destination: str, path: Sequence[str]) -> Packet:
        """Bill one packet against every directed link on its path.

        Hops without a configured link in their direction are not metered.
        """
        state = self.state
        hops: List[HopOutcome] = []
        for hop_source, hop_target in zip(path, path[1:]):
            link = state.links.get(LinkKey(hop_source, hop_target))
            success = link.consume_capacity(1) if link is not None else True
            hops.append(HopOutcome(hop_source, hop_target, success))

        packet = Packet(
            id=state.next_packet_id,
            source=source,
            destination=destination,
            path=tuple(path),
            hops=tuple(hops),
            transmitted=all(hop.success for hop in hops),
            tick=state.step,
        )
        state.next_packet_id += 1
        return packet

    def advance_time_slot(self) -> str:
        """Move to the next time slot; stays put at the last one.

        Returns:
            The active time slot label afterwards.
        """
        with self._lock:
            if self.state.advance_time_slot():
                logger.info("Advanced to time slot %s", self.state.current_time)
            return self.state.current_time

    def set_node_rate(self, node_id: str, rate: int) -> None:
        """Change a node's traffic rate in the active time slot.

        Args:
            node_id: Node whose rate changes.
            rate: Packets per tick, a non-negative integer.

        Raises:
            InvalidArgumentError: If the rate is negative, above the configured
                max_rate or not an integer.
            NodeNotFoundError: If the node does not exist.
        """
        with self._lock:
            slot = self.state.current_time
            try:
                self.traffic.set_rate(slot, node_id, rate)
            except SimulationError as error:
                logger.warning("Rejected rate update for %s: %s", node_id, error)
                raise
        logger.info("Traffic rate for node %s in %s set to %d", node_id, slot, rate)

    def set_link_capacity(self, source: str, target: str, capacity: int) -> None:
        """Change a directed link's capacity from the next tick on.

        Args:
            source: Source node ID.
            target: Target node ID.
            capacity: Packets per tick, a positive integer.

        Raises:
            InvalidArgumentError: If the capacity is not a positive integer.
            LinkNotFoundError: If no link runs from source to target.
        """
        with self._lock:
            try:
                if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
                    raise InvalidArgumentError(
                        f"Valid capacity (> 0) is required, got {capacity!r}"
                    )
                link = self.state.links.get(LinkKey(source, target))
                if link is None:
                    raise LinkNotFoundError(source, target)
            except SimulationError as error:
                logger.warning("Rejected capacity update for %s-%s: %s", source, target, error)
                raise
            link.set_capacity(capacity)
        logger.info("Capacity of link %s-%s set to %d", source, target, capacity)

    def compute_path(self, source: str, destination: str) -> List[str]:
        """Shortest path by hop count over the current topology."""
        return self.router.compute_path(source, destination)

    def get_stats(self) -> NetworkSnapshot:
        """Aggregate the current state into an immutable snapshot."""
        with self._lock:
            return build_snapshot(self.state, self.config.history_limit)

    def topology(self) -> Dict[str, Any]:
        """Node and link layout for visualization.

        Returns:
            Dictionary with "nodes" and "links" lists.
        """
        with self._lock:
            return {
                "nodes": [{"id": node_id, "label": node_id} for node_id in self.state.nodes],
                "links": [
                    {"source": link.source, "target": link.target, "capacity": link.capacity}
                    for link in self.state.links.values()
                ],
            }

    def register_hook(self, event_type: str, callback: Callable[..., Any]) -> None:
        """Register a callback function for a specific event type.

        Args:
            event_type: The type of event to register for.
            callback: The function to call when the event occurs.
        """
        if event_type not in self.hooks:
            raise ValueError(f"Unknown hook type: {event_type}")
        self.hooks[event_type].append(callback)

    def call_hooks(self, event_type: str, *args: Any, **kwargs: Any) -> None:
        """Call all registered callbacks for the given event type.

        Args:
            event_type: The type of event that occurred.
            *args, **kwargs: Arguments to pass to the callback functions.
        """
        if event_type in self.hooks:
            for callback in self.hooks[event_type]:
                callback(*args, **kwargs)

    def run(self, ticks: int, advance_every: Optional[int] = None) -> NetworkSnapshot:
        """Run a fixed number of ticks back to back.

        Args:
            ticks: Number of ticks to execute.
            advance_every: Advance the time slot after this many ticks, if set.

        Returns:
            Snapshot after the last tick.
        """
        for i in range(1, ticks + 1):
            self.tick()
            if advance_every and i % advance_every == 0:
                self.advance_time_slot()
        return self.get_stats()
