"""Metrics utilities for network simulation.

This module provides functions for recording a run tick by tick and for
saving snapshots and run histories to JSON and CSV files.
"""

import os
import json
import csv
from typing import Any, Dict, List, Tuple
import numpy as np

from telecom_sim.core.simulator import NetworkSimulator
from telecom_sim.core.statistics import NetworkSnapshot

HISTORY_FIELDS = [
    "step",
    "time_slot",
    "generated",
    "transmitted",
    "unroutable",
    "packet_loss",
    "average_queue_size",
]


class RunRecorder:
    """Collects one summary row and per-link utilization per tick.

    Attach it to a simulator with ``RunRecorder.attach``; the history is
    cleared whenever the simulator resets.

    Attributes:
        rows: Summary rows in tick order.
        utilization: Utilization samples per "from-to" link key.
    """

    def __init__(self) -> None:
        self.rows: List[Dict[str, Any]] = []
        self.utilization: Dict[str, List[float]] = {}

    @classmethod
    def attach(cls, simulator: NetworkSimulator) -> "RunRecorder":
        recorder = cls()
        simulator.register_hook("tick_end", recorder.on_tick)
        simulator.register_hook("reset", recorder.on_reset)
        return recorder

    def on_tick(self, simulator: NetworkSimulator) -> None:
        self.record(simulator.get_stats())

    def on_reset(self, simulator: NetworkSimulator) -> None:
        self.rows.clear()
        self.utilization.clear()

    def record(self, snapshot: NetworkSnapshot) -> None:
        summary = snapshot.summary
        self.rows.append(
            {
                "step": snapshot.simulation_step,
                "time_slot": snapshot.current_time,
                "generated": summary.total_generated,
                "transmitted": summary.total_transmitted,
                "unroutable": summary.total_unroutable,
                "packet_loss": summary.packet_loss,
                "average_queue_size": summary.average_queue_size,
            }
        )
        for link in snapshot.links:
            key = f"{link.source}-{link.target}"
            self.utilization.setdefault(key, []).append(link.utilization)

    def series(self, field: str) -> np.ndarray:
        """One history column as an array.

        Args:
            field: Column name from HISTORY_FIELDS.

        Returns:
            The column values in tick order.
        """
        if field not in HISTORY_FIELDS:
            raise ValueError(f"Unknown history field: {field}")
        return np.array([row[field] for row in self.rows])


def link_utilization_summary(recorder: RunRecorder) -> Dict[str, Tuple[float, float]]:
    """Mean and peak utilization per link over a recorded run.

    Args:
        recorder: Recorder that observed the run.

    Returns:
        Dictionary mapping "from-to" to (mean, max) utilization percentages.
    """
    summary: Dict[str, Tuple[float, float]] = {}
    for key, samples in recorder.utilization.items():
        values = np.asarray(samples, dtype=float)
        if values.size == 0:
            continue
        summary[key] = (float(values.mean()), float(values.max()))
    return summary


def save_snapshot_to_json(
    snapshot: NetworkSnapshot, filename: str = "results/snapshot.json"
) -> None:
    """Save a statistics snapshot to a JSON file.

    Args:
        snapshot: Snapshot to save.
        filename: Output filename.
    """
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(filename, "w") as f:
        json.dump(snapshot.to_dict(), f, indent=2)


def save_history_to_csv(
    recorder: RunRecorder, filename: str = "results/history.csv"
) -> None:
    """Save the per-tick summary rows of a run to a CSV file.

    Args:
        recorder: Recorder that observed the run.
        filename: Output filename.
    """
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(filename, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=HISTORY_FIELDS)
        writer.writeheader()
        writer.writerows(recorder.rows)
