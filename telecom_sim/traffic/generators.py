"""Traffic generators for network simulation.

This module turns the per-node rate table of the active time slot into
packet draws, each with a uniformly random destination.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from telecom_sim.core.errors import InvalidArgumentError, NodeNotFoundError
from telecom_sim.utils.rng import RandomSource

logger = logging.getLogger(__name__)


def random_destination(source: str, nodes: Sequence[str], rng: RandomSource) -> str:
    """Pick a destination other than the source.

    Args:
        source: Node the packet originates from.
        nodes: All node IDs.
        rng: Random source used for the pick.

    Returns:
        A node ID different from source.
    """
    candidates = [node for node in nodes if node != source]
    return rng.choice(candidates)


class TrafficGenerator:
    """Produces per-tick packet draws from time slot rate tables.

    Attributes:
        nodes: Node IDs in topology order.
        rng: Random source for destination selection.
        rates: Rate table per time slot label, in packets per tick.
    """

    def __init__(
        self,
        nodes: Sequence[str],
        time_slots: Mapping[str, Mapping[str, int]],
        rng: RandomSource,
        max_rate: Optional[int] = None,
    ) -> None:
        """Initialize the generator.

        Args:
            nodes: Node IDs in topology order.
            time_slots: Rate table per time slot label. Copied, so later
                updates never leak back into the caller's tables.
            rng: Random source for destination selection.
            max_rate: Highest rate set_rate accepts, or None for no limit.
        """
        self.nodes = list(nodes)
        self.rng = rng
        self.max_rate = max_rate
        self.rates: Dict[str, Dict[str, int]] = {
            label: {node: rates.get(node, 0) for node in self.nodes}
            for label, rates in time_slots.items()
        }

    def rates_for(self, slot: str) -> Dict[str, int]:
        return dict(self.rates[slot])

    def requested(self, slot: str) -> int:
        """Total packets the slot asks for in one tick."""
        return sum(self.rates[slot].values())

    def generate(self, slot: str) -> List[Tuple[str, str]]:
        """Draw this tick's packets for a time slot.

        Every node with a positive rate emits exactly that many draws.

        Args:
            slot: Active time slot label.

        Returns:
            (source, destination) pairs in node order.
        """
        draws: List[Tuple[str, str]] = []
        if len(self.nodes) < 2:
            return draws
        for source in self.nodes:
            for _ in range(self.rates[slot][source]):
                draws.append((source, random_destination(source, self.nodes, self.rng)))
        logger.debug("Generated %d draws for slot %s", len(draws), slot)
        return draws

    def set_rate(self, slot: str, node_id: str, rate: int) -> None:
        """Change one node's rate in one time slot.

        Args:
            slot: Time slot label to update.
            node_id: Node whose rate changes.
            rate: New rate, a non-negative integer.

        Raises:
            InvalidArgumentError: If the rate is negative, above max_rate or
                not an integer.
            NodeNotFoundError: If the node is not part of the topology.
        """
        if isinstance(rate, bool) or not isinstance(rate, int) or rate < 0:
            raise InvalidArgumentError(f"Valid rate (>= 0) is required, got {rate!r}")
        if self.max_rate is not None and rate > self.max_rate:
            raise InvalidArgumentError(f"Rate {rate} exceeds the limit of {self.max_rate}")
        if node_id not in self.rates[slot]:
            raise NodeNotFoundError(node_id)
        self.rates[slot][node_id] = rate
