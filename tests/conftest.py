from __future__ import annotations

from typing import Any, Iterable, List, Sequence

import pytest

from telecom_sim.config import LinkSpec, SimulationConfig, default_config
from telecom_sim.core.simulator import NetworkSimulator


class ScriptedRNG:
    """Random source that hands out a fixed sequence of destinations."""

    def __init__(self, picks: Iterable[Any]) -> None:
        self.picks: List[Any] = list(picks)
        self.calls = 0

    def choice(self, items: Sequence[Any]) -> Any:
        pick = self.picks[self.calls % len(self.picks)]
        self.calls += 1
        if pick not in items:
            raise AssertionError(f"{pick!r} is not a candidate in {list(items)!r}")
        return pick


@pytest.fixture
def simulator() -> NetworkSimulator:
    return NetworkSimulator(default_config(seed=7))


@pytest.fixture
def bottleneck_config() -> SimulationConfig:
    """X sends 5 packets per tick over a directed link that carries 3."""
    return SimulationConfig(
        nodes=("X", "Y"),
        links=(LinkSpec("X", "Y", 3),),
        time_slots={"00:00": {"X": 5, "Y": 0}},
    )


@pytest.fixture
def bottleneck(bottleneck_config: SimulationConfig) -> NetworkSimulator:
    return NetworkSimulator(bottleneck_config, rng=ScriptedRNG(["Y"]))
