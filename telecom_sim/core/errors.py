"""Exceptions raised by the simulation engine.

Administrative misuse is reported as a typed failure; nothing in the engine
is fatal. Unreachable packet draws are not errors and never surface here.
"""


class SimulationError(Exception):
    """Base class for all simulation errors."""


class NotFoundError(SimulationError, KeyError):
    """An update referenced a node or link that does not exist."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""


class NodeNotFoundError(NotFoundError):
    """Raised when a node id is not part of the topology."""

    def __init__(self, node_id: str) -> None:
        super().__init__(f"Node {node_id} not found")
        self.node_id = node_id


class LinkNotFoundError(NotFoundError):
    """Raised when no directed link matches the given endpoints."""

    def __init__(self, source: str, target: str) -> None:
        super().__init__(f"Link from {source} to {target} not found")
        self.source = source
        self.target = target


class InvalidArgumentError(SimulationError, ValueError):
    """An update carried a value outside its allowed range."""
