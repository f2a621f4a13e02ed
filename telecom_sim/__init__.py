"""Telecom traffic simulator.

Synthetic per-time-slot traffic over a small fixed network, routed by
shortest path with per-link capacity limits and backlog queues.
"""

from telecom_sim.config import LinkSpec, SimulationConfig, default_config
from telecom_sim.core.simulator import NetworkSimulator

__all__ = [
    "LinkSpec",
    "SimulationConfig",
    "default_config",
    "NetworkSimulator",
]
