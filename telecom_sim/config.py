"""Configuration for the telecom traffic simulator.

A SimulationConfig carries everything the engine consumes from its
environment: the node set, the directed links with their capacities and the
ordered time slots with their per-node traffic rates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple
import json


class ConfigError(ValueError):
    """Raised when a configuration is structurally invalid."""


@dataclass(frozen=True)
class LinkSpec:
    """A directed link in the static topology."""

    source: str
    target: str
    capacity: int


@dataclass(frozen=True)
class SimulationConfig:
    """
    Static inputs of a simulation run.

    Time slots keep their insertion order; the first one is active after a
    reset and advancing stops at the last one.
    """

    nodes: Tuple[str, ...]
    links: Tuple[LinkSpec, ...]
    time_slots: Mapping[str, Mapping[str, int]]
    # Number of packets exposed by each statistics snapshot.
    history_limit: int = 20
    seed: Optional[int] = None
    # Seconds between automatic ticks while running.
    interval: float = 2.0
    # Ceiling for any single node's rate, in packets per tick.
    max_rate: int = 1000

    @property
    def slot_labels(self) -> Tuple[str, ...]:
        return tuple(self.time_slots)

    def validate(self) -> "SimulationConfig":
        if not self.nodes:
            raise ConfigError("At least one node is required")
        if len(set(self.nodes)) != len(self.nodes):
            raise ConfigError("Node ids must be unique")
        known = set(self.nodes)

        seen = set()
        for link in self.links:
            if link.source not in known or link.target not in known:
                raise ConfigError(
                    f"Link {link.source}-{link.target} references an unknown node"
                )
            if link.source == link.target:
                raise ConfigError(f"Link {link.source}-{link.target} is a self loop")
            if (link.source, link.target) in seen:
                raise ConfigError(f"Duplicate link {link.source}-{link.target}")
            seen.add((link.source, link.target))
            if not _is_int(link.capacity) or link.capacity <= 0:
                raise ConfigError(
                    f"Link {link.source}-{link.target} needs a positive integer capacity"
                )

        if not _is_int(self.max_rate) or self.max_rate <= 0:
            raise ConfigError("max_rate must be a positive integer")
        if not self.time_slots:
            raise ConfigError("At least one time slot is required")
        for label, rates in self.time_slots.items():
            for node_id, rate in rates.items():
                if node_id not in known:
                    raise ConfigError(f"Time slot {label} references unknown node {node_id}")
                if not _is_int(rate) or rate < 0:
                    raise ConfigError(
                        f"Time slot {label} needs a non-negative integer rate for {node_id}"
                    )
                if rate > self.max_rate:
                    raise ConfigError(
                        f"Time slot {label} rate for {node_id} exceeds {self.max_rate}"
                    )

        if not _is_int(self.history_limit) or self.history_limit < 0:
            raise ConfigError("history_limit must be a non-negative integer")
        if not _is_number(self.interval) or self.interval <= 0:
            raise ConfigError("interval must be a positive number")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": list(self.nodes),
            "links": [
                {"from": link.source, "to": link.target, "capacity": link.capacity}
                for link in self.links
            ],
            "timeSlots": {label: dict(rates) for label, rates in self.time_slots.items()},
            "historyLimit": self.history_limit,
            "seed": self.seed,
            "interval": self.interval,
            "maxRate": self.max_rate,
        }


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


DEFAULT_NODES: Tuple[str, ...] = ("A", "B", "C", "D", "E")

DEFAULT_LINKS: Tuple[LinkSpec, ...] = (
    LinkSpec("A", "B", 100),
    LinkSpec("A", "C", 80),
    LinkSpec("B", "D", 70),
    LinkSpec("C", "D", 90),
    LinkSpec("C", "E", 100),
    LinkSpec("D", "E", 60),
)

DEFAULT_TIME_SLOTS: Dict[str, Dict[str, int]] = {
    "08:00": {"A": 50, "B": 30, "C": 40, "D": 20, "E": 60},
    "12:00": {"A": 70, "B": 45, "C": 55, "D": 35, "E": 80},
    "18:00": {"A": 90, "B": 60, "C": 75, "D": 50, "E": 100},
    "22:00": {"A": 20, "B": 15, "C": 25, "D": 10, "E": 30},
}


def default_config(**overrides: Any) -> SimulationConfig:
    """Build the five-node reference network.

    Args:
        **overrides: Field values replacing the defaults.

    Returns:
        A validated configuration.
    """
    values: Dict[str, Any] = {
        "nodes": DEFAULT_NODES,
        "links": DEFAULT_LINKS,
        "time_slots": {label: dict(rates) for label, rates in DEFAULT_TIME_SLOTS.items()},
    }
    values.update(overrides)
    return SimulationConfig(**values).validate()


def config_from_dict(data: Mapping[str, Any]) -> SimulationConfig:
    """Build a configuration from its JSON representation.

    Missing sections fall back to the reference network.

    Args:
        data: Mapping with any of "nodes", "links", "timeSlots",
            "historyLimit", "seed", "interval" and "maxRate".

    Returns:
        A validated configuration.
    """
    try:
        nodes = tuple(str(node) for node in data.get("nodes", DEFAULT_NODES))
        if "links" in data:
            links = tuple(
                LinkSpec(str(link["from"]), str(link["to"]), link["capacity"])
                for link in data["links"]
            )
        else:
            links = DEFAULT_LINKS
        raw_slots = data.get("timeSlots", DEFAULT_TIME_SLOTS)
        time_slots = {
            str(label): {str(node): rate for node, rate in rates.items()}
            for label, rates in raw_slots.items()
        }
    except (KeyError, TypeError, AttributeError) as error:
        raise ConfigError(f"Malformed configuration: {error}") from error

    return SimulationConfig(
        nodes=nodes,
        links=links,
        time_slots=time_slots,
        history_limit=data.get("historyLimit", 20),
        seed=data.get("seed"),
        interval=data.get("interval", 2.0),
        max_rate=data.get("maxRate", 1000),
    ).validate()


def load_config(filename: str) -> SimulationConfig:
    """Load a configuration from a JSON file.

    Args:
        filename: Path to the JSON file.

    Returns:
        A validated configuration.
    """
    with open(filename) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as error:
            raise ConfigError(f"{filename} is not valid JSON: {error}") from error
    if not isinstance(data, dict):
        raise ConfigError(f"{filename} must contain a JSON object")
    return config_from_dict(data)
