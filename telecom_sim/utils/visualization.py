"""Visualization utilities for network simulation.

This module provides functions for visualizing simulation results,
including the loaded network topology, run history and link utilization.
"""

from typing import Dict, List, Optional, Tuple
import matplotlib.pyplot as plt
import networkx as nx
import numpy as np
import os

from telecom_sim.core.simulator import NetworkSimulator
from telecom_sim.core.statistics import LinkView, NetworkSnapshot
from telecom_sim.utils.metrics import RunRecorder, link_utilization_summary


def link_color(link: LinkView) -> str:
    """Colour for a link: red congested, then orange, green and grey by utilization."""
    if link.congested:
        return "#ef4444"
    if link.utilization > 80:
        return "#f59e0b"
    if link.utilization > 50:
        return "#10b981"
    return "#6b7280"


def _finish(fig: plt.Figure, filename: Optional[str], show: bool) -> None:
    if filename:
        directory = os.path.dirname(filename)
        if directory:
            os.makedirs(directory, exist_ok=True)
        fig.savefig(filename)
        plt.close(fig)
    elif show:
        plt.show()
    else:
        plt.close(fig)


def save_network_visualization(
    simulator: NetworkSimulator,
    filename: Optional[str] = None,
    snapshot: Optional[NetworkSnapshot] = None,
    figsize: Tuple[int, int] = (10, 8),
    show: bool = True,
) -> None:
    """Save network topology visualization to a file.

    Link width follows utilization and colour follows congestion, the way
    the web dashboard draws them.

    Args:
        simulator: NetworkSimulator instance.
        filename: Output filename, or None to show it immediately.
        snapshot: Snapshot to draw. Taken from the simulator when omitted.
        figsize: Figure size as (width, height) in inches.
        show: Whether to display the figure when no filename is given.
    """
    if snapshot is None:
        snapshot = simulator.get_stats()

    fig = plt.figure(figsize=figsize)

    graph = nx.DiGraph()
    graph.add_nodes_from(simulator.graph.nodes)
    for link in snapshot.links:
        graph.add_edge(link.source, link.target)
    pos = nx.circular_layout(graph)

    nx.draw_networkx_nodes(graph, pos, node_size=900, node_color="lightblue")
    nx.draw_networkx_labels(graph, pos, font_size=16)

    for link in snapshot.links:
        nx.draw_networkx_edges(
            graph,
            pos,
            edgelist=[(link.source, link.target)],
            width=max(2.0, link.utilization / 10),
            edge_color=link_color(link),
            arrows=True,
            arrowsize=20,
        )

    edge_labels: Dict[Tuple[str, str], str] = {}
    for link in snapshot.links:
        label = f"{link.current_load}/{link.capacity}"
        if link.queue_size > 0:
            label += f"\nQ:{link.queue_size}"
        edge_labels[(link.source, link.target)] = label
    nx.draw_networkx_edge_labels(
        graph,
        pos,
        edge_labels=edge_labels,
        font_size=10,
        rotate=False,
        bbox=dict(facecolor="white", edgecolor="none", alpha=0.7),
    )

    plt.title(f"Time {snapshot.current_time} - step {snapshot.simulation_step}")
    plt.axis("off")
    plt.tight_layout()

    _finish(fig, filename, show)


def plot_run_history(
    recorder: RunRecorder,
    filename: Optional[str] = None,
    show: bool = True,
) -> None:
    """Plot cumulative traffic and packet loss over a recorded run.

    Args:
        recorder: Recorder that observed the run.
        filename: Output filename, or None to show it immediately.
        show: Whether to display the figure when no filename is given.
    """
    fig, axes = plt.subplots(2, 1, figsize=(12, 8), sharex=True)

    steps = recorder.series("step")
    axes[0].plot(steps, recorder.series("generated"), label="Generated")
    axes[0].plot(steps, recorder.series("transmitted"), label="Transmitted")
    axes[0].plot(steps, recorder.series("unroutable"), label="Unroutable", linestyle="--")
    axes[0].set_ylabel("Packets")
    axes[0].set_title("Cumulative Traffic")
    axes[0].grid(True, linestyle="--", alpha=0.7)
    axes[0].legend()

    axes[1].plot(steps, recorder.series("packet_loss"), color="red", label="Packet loss (%)")
    axes[1].plot(
        steps, recorder.series("average_queue_size"), color="orange", label="Average queue"
    )
    axes[1].set_title("Loss and Backlog")
    axes[1].set_xlabel("Simulation Step")
    axes[1].grid(True, linestyle="--", alpha=0.7)
    axes[1].legend()

    plt.tight_layout()

    _finish(fig, filename, show)


def plot_link_utilizations(
    recorder: RunRecorder,
    filename: Optional[str] = None,
    show: bool = True,
) -> None:
    """Plot mean and peak utilization of every link over a recorded run.

    Args:
        recorder: Recorder that observed the run.
        filename: Output filename, or None to show it immediately.
        show: Whether to display the figure when no filename is given.
    """
    summary = link_utilization_summary(recorder)
    links: List[str] = list(summary)
    means = [summary[key][0] for key in links]
    peaks = [summary[key][1] for key in links]

    fig, ax = plt.subplots(figsize=(12, 5))
    x = np.arange(len(links))
    ax.bar(x - 0.2, means, width=0.4, label="Mean")
    ax.bar(x + 0.2, peaks, width=0.4, color="orange", label="Peak")
    ax.set_title("Link Utilization")
    ax.set_ylabel("Utilization (%)")
    ax.set_xlabel("Link")
    ax.set_xticks(x)
    ax.set_xticklabels(links, rotation=45)
    ax.set_ylim(0, 105)
    ax.legend()

    plt.tight_layout()

    _finish(fig, filename, show)
