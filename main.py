import os
import logging
import argparse
from dataclasses import replace
from typing import Optional

from telecom_sim.config import SimulationConfig, default_config, load_config
from telecom_sim.core.simulator import NetworkSimulator
from telecom_sim.driver import TickDriver
from telecom_sim.utils.metrics import (
    RunRecorder,
    link_utilization_summary,
    save_history_to_csv,
    save_snapshot_to_json,
)


def build_config(config_file: Optional[str], seed: Optional[int]) -> SimulationConfig:
    """Load the configuration file if given, otherwise the reference network"""
    if config_file:
        config = load_config(config_file)
        if seed is not None:
            config = replace(config, seed=seed)
        return config
    return default_config(seed=seed)


def run_batch(args: argparse.Namespace) -> None:
    """Run a fixed number of ticks and save the results"""
    config = build_config(args.config, args.seed)
    simulator = NetworkSimulator(config)
    recorder = RunRecorder.attach(simulator)

    print(f"Running {args.ticks} ticks starting at {simulator.current_time}...")
    snapshot = simulator.run(args.ticks, advance_every=args.advance_every)

    summary = snapshot.summary
    print(f"  Time slot:       {snapshot.current_time}")
    print(f"  Generated:       {summary.total_generated}")
    print(f"  Transmitted:     {summary.total_transmitted}")
    print(f"  Unroutable:      {summary.total_unroutable}")
    print(f"  Packet loss:     {summary.packet_loss:.2f}%")
    print(f"  Average queue:   {summary.average_queue_size:.2f}")
    for key, (mean, peak) in link_utilization_summary(recorder).items():
        print(f"  Link {key}: mean {mean:.1f}%, peak {peak:.1f}%")

    os.makedirs(args.output_dir, exist_ok=True)
    save_snapshot_to_json(snapshot, os.path.join(args.output_dir, "snapshot.json"))
    save_history_to_csv(recorder, os.path.join(args.output_dir, "history.csv"))

    if args.plot:
        from telecom_sim.utils.visualization import (
            plot_link_utilizations,
            plot_run_history,
            save_network_visualization,
        )

        save_network_visualization(
            simulator, os.path.join(args.output_dir, "topology.png"), snapshot=snapshot
        )
        plot_run_history(recorder, os.path.join(args.output_dir, "history.png"))
        plot_link_utilizations(recorder, os.path.join(args.output_dir, "link_utilizations.png"))

    print(f"\nSimulation complete. Results saved to '{args.output_dir}' directory.")


def serve(args: argparse.Namespace) -> None:
    """Serve the simulation over HTTP"""
    from telecom_sim.api.app import create_app

    config = build_config(args.config, args.seed)
    simulator = NetworkSimulator(config)
    driver = None
    if args.auto_tick:
        interval = args.interval if args.interval is not None else config.interval
        driver = TickDriver(simulator, interval=1.0, realtime_factor=interval)

    app = create_app(simulator, driver)
    app.run(host=args.host, port=args.port)


def main():
    """Main function to run the simulator"""
    parser = argparse.ArgumentParser(description="Telecom Traffic Simulator")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--config", help="JSON configuration file")
    parser.add_argument("--seed", type=int, help="Random seed for reproducibility")
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Run a fixed number of ticks")
    run_parser.add_argument("--ticks", type=int, default=30, help="Number of ticks")
    run_parser.add_argument(
        "--advance-every", type=int, help="Advance the time slot every N ticks"
    )
    run_parser.add_argument("--output-dir", default="results", help="Output directory")
    run_parser.add_argument("--plot", action="store_true", help="Save plots")

    serve_parser = subparsers.add_parser("serve", help="Serve the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=5000)
    serve_parser.add_argument(
        "--auto-tick", action="store_true", help="Tick automatically while running"
    )
    serve_parser.add_argument(
        "--interval", type=float, help="Seconds between automatic ticks"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "run":
        run_batch(args)
    elif args.command == "serve":
        serve(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
