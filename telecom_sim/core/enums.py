"""Enumerations for network simulation.

This module defines enumerations used throughout the network simulator.
"""

from enum import Enum


class SimulationStatus(Enum):
    """Run state of a simulation.

    Attributes:
        STOPPED: Initial state, and the state after pause or reset.
        RUNNING: An external driver should invoke ticks on its schedule.
    """

    STOPPED = "stopped"
    RUNNING = "running"
