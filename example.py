#!/usr/bin/env python3
"""Example network simulation using the telecom_sim package.

This script walks the reference network through a day: it runs each time
slot for a few ticks, squeezes the D-E link to provoke congestion and saves
the resulting snapshots and plots.
"""

import os
from typing import List

from telecom_sim.config import default_config
from telecom_sim.core.simulator import NetworkSimulator
from telecom_sim.core.statistics import NetworkSnapshot
from telecom_sim.utils.metrics import RunRecorder, save_history_to_csv, save_snapshot_to_json
from telecom_sim.utils.visualization import (
    plot_link_utilizations,
    plot_run_history,
    save_network_visualization,
)


def run_day(
    simulator: NetworkSimulator, ticks_per_slot: int = 10
) -> List[NetworkSnapshot]:
    """Run every time slot in order.

    Args:
        simulator: Simulator to drive.
        ticks_per_slot: Ticks to run before advancing the slot.

    Returns:
        Snapshot taken at the end of each slot.
    """
    snapshots: List[NetworkSnapshot] = []
    for _ in simulator.config.slot_labels:
        snapshots.append(simulator.run(ticks_per_slot))
        simulator.advance_time_slot()
    return snapshots


def main() -> None:
    """Run the reference network with a bottleneck and save the results."""

    output_dir: str = "results"
    ticks_per_slot: int = 10

    simulator = NetworkSimulator(default_config(seed=42))
    recorder = RunRecorder.attach(simulator)

    simulator.start()
    # A narrow D-E link forces backlog on the busiest route into E.
    simulator.set_link_capacity("D", "E", 20)
    simulator.set_node_rate("E", 0)

    snapshots = run_day(simulator, ticks_per_slot)

    for snapshot in snapshots:
        summary = snapshot.summary
        congested = [f"{l.source}-{l.target}" for l in snapshot.links if l.congested]
        print(f"Slot ending at step {snapshot.simulation_step} ({snapshot.current_time}):")
        print(f"  Packet loss:    {summary.packet_loss:.2f}%")
        print(f"  Average queue:  {summary.average_queue_size:.2f}")
        print(f"  Congested:      {', '.join(congested) or 'none'}")

    final = simulator.get_stats()
    save_snapshot_to_json(final, os.path.join(output_dir, "example_snapshot.json"))
    save_history_to_csv(recorder, os.path.join(output_dir, "example_history.csv"))
    save_network_visualization(
        simulator, os.path.join(output_dir, "example_topology.png"), snapshot=final
    )
    plot_run_history(recorder, os.path.join(output_dir, "example_history.png"))
    plot_link_utilizations(recorder, os.path.join(output_dir, "example_links.png"))

    print(f"\nSimulation complete. Results saved to '{output_dir}' directory.")


if __name__ == "__main__":
    main()
