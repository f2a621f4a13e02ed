"""Routing algorithms for network simulation.

This module defines the Router interface and the hop-count shortest-path
router used to place every generated packet on a path.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional
import heapq
import networkx as nx

from telecom_sim.core.errors import NodeNotFoundError


class Router(ABC):
    """Abstract base class for routing algorithms."""

    def __init__(self, graph: nx.Graph) -> None:
        """
        Initialize the router.

        Args:
            graph: Undirected routing view of the topology.
        """
        self.name = "Base Router"
        self.graph = graph

    @abstractmethod
    def compute_path(self, source: str, destination: str) -> List[str]:
        """
        Compute a path between two nodes.

        Args:
            source: Source node ID.
            destination: Destination node ID.

        Returns:
            Node IDs from source to destination, or an empty list if the
            destination cannot be reached.
        """
        pass

    def _check_nodes(self, *node_ids: str) -> None:
        for node_id in node_ids:
            if node_id not in self.graph:
                raise NodeNotFoundError(node_id)

    def __repr__(self) -> str:
        return self.name


class DijkstraRouter(Router):
    """Shortest path by hop count using Dijkstra's algorithm.

    Every link weighs 1 regardless of its capacity, and each link is usable
    in both directions.
    """

    def __init__(self, graph: nx.Graph) -> None:
        super().__init__(graph)
        self.name = "Dijk"

    def compute_path(self, source: str, destination: str) -> List[str]:
        self._check_nodes(source, destination)

        distances: Dict[str, float] = {node: float("inf") for node in self.graph.nodes}
        previous: Dict[str, Optional[str]] = {node: None for node in self.graph.nodes}
        distances[source] = 0
        settled = set()
        # Priority queue holds tuples of (distance, node)
        queue = [(0, source)]

        while queue:
            distance, current = heapq.heappop(queue)
            if current in settled:
                continue
            settled.add(current)
            if current == destination:
                break
            for neighbour in self.graph.neighbors(current):
                if neighbour in settled:
                    continue
                new_distance = distance + 1
                if new_distance < distances[neighbour]:
                    distances[neighbour] = new_distance
                    previous[neighbour] = current
                    heapq.heappush(queue, (new_distance, neighbour))

        path: List[str] = []
        node: Optional[str] = destination
        while node is not None:
            path.append(node)
            node = previous[node]
        path.reverse()

        # The destination was never reached.
        if path[0] != source:
            return []
        return path

