from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

from telecom_sim.core.simulator import NetworkSimulator
from telecom_sim.core.statistics import LinkView
from telecom_sim.utils.metrics import RunRecorder
from telecom_sim.utils.visualization import (
    link_color,
    plot_link_utilizations,
    plot_run_history,
    save_network_visualization,
)


def make_view(load: int, queue: int = 0) -> LinkView:
    return LinkView(
        source="A",
        target="B",
        capacity=100,
        current_load=load,
        utilization=float(load),
        queue_size=queue,
        congested=load >= 100 or queue > 0,
    )


def test_link_colors() -> None:
    assert link_color(make_view(10)) == "#6b7280"
    assert link_color(make_view(60)) == "#10b981"
    assert link_color(make_view(90)) == "#f59e0b"
    assert link_color(make_view(100)) == "#ef4444"
    assert link_color(make_view(10, queue=3)) == "#ef4444"


def test_plots_are_saved(tmp_path, simulator: NetworkSimulator) -> None:
    recorder = RunRecorder.attach(simulator)
    simulator.set_link_capacity("C", "E", 10)
    simulator.run(5)

    topology = tmp_path / "plots" / "topology.png"
    history = tmp_path / "plots" / "history.png"
    links = tmp_path / "plots" / "links.png"
    save_network_visualization(simulator, str(topology))
    plot_run_history(recorder, str(history))
    plot_link_utilizations(recorder, str(links))

    for path in (topology, history, links):
        assert path.exists()
        assert path.stat().st_size > 0
