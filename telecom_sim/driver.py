"""Tick driver for network simulation.

The engine only knows discrete ticks. This module schedules them: a SimPy
process wakes up every ``interval`` of environment time and ticks the
simulator while it is running. With a logical ``simpy.Environment`` runs are
instantaneous and reproducible; with ``realtime_factor`` the environment is
a ``simpy.rt.RealtimeEnvironment`` paced against the wall clock, which is
what the HTTP service uses.
"""

import logging
import threading
from typing import Any, Generator, Optional

import simpy
import simpy.rt

from telecom_sim.core.simulator import NetworkSimulator

logger = logging.getLogger(__name__)


class TickDriver:
    """Invokes ``tick`` on a fixed schedule while the simulator runs.

    Attributes:
        simulator: Engine to drive.
        interval: Environment time between ticks.
        env: SimPy environment the schedule lives in.
        ticks_driven: Ticks this driver has executed.
    """

    def __init__(
        self,
        simulator: NetworkSimulator,
        interval: float = 1.0,
        env: Optional[simpy.Environment] = None,
        realtime_factor: Optional[float] = None,
    ) -> None:
        """Initialize the driver.

        Args:
            simulator: Engine to drive.
            interval: Environment time between ticks.
            env: Environment to schedule in. Created when omitted.
            realtime_factor: Wall-clock seconds per unit of environment
                time. Only used when env is omitted.
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.simulator = simulator
        self.interval = interval
        if env is None:
            if realtime_factor is not None:
                env = simpy.rt.RealtimeEnvironment(factor=realtime_factor, strict=False)
            else:
                env = simpy.Environment()
        self.env = env
        self.ticks_driven = 0
        self._stopped = False
        self._thread: Optional[threading.Thread] = None
        self.process = self.env.process(self._schedule())

    def _schedule(self) -> Generator[Any, Any, None]:
        while not self._stopped:
            yield self.env.timeout(self.interval)
            if self._stopped:
                break
            # Paused or reset simulations are skipped until started again.
            if self.simulator.is_running:
                self.simulator.tick()
                self.ticks_driven += 1

    def run(self, until: Optional[float] = None) -> None:
        """Advance the environment.

        Args:
            until: Environment time to stop at. Without it the driver runs
                until ``stop`` is called.
        """
        self.env.run(until=until)

    def stop(self) -> None:
        """End the schedule; a running ``run()`` returns after the next wake-up."""
        self._stopped = True

    def start_in_thread(self) -> threading.Thread:
        """Run the schedule in a daemon thread.

        Returns:
            The started thread.
        """
        if self._thread is not None and self._thread.is_alive():
            return self._thread
        self._thread = threading.Thread(target=self.run, name="tick-driver", daemon=True)
        self._thread.start()
        logger.info("Tick driver started with interval %.2f", self.interval)
        return self._thread
