from __future__ import annotations

import csv
import json

import numpy as np
import pytest

from telecom_sim.core.simulator import NetworkSimulator
from telecom_sim.utils.metrics import (
    HISTORY_FIELDS,
    RunRecorder,
    link_utilization_summary,
    save_history_to_csv,
    save_snapshot_to_json,
)


def test_recorder_collects_one_row_per_tick(bottleneck: NetworkSimulator) -> None:
    recorder = RunRecorder.attach(bottleneck)
    bottleneck.run(3)
    assert [row["step"] for row in recorder.rows] == [1, 2, 3]
    assert list(recorder.series("generated")) == [5, 10, 15]
    assert list(recorder.series("transmitted")) == [3, 8, 13]
    assert recorder.utilization == {"X-Y": [100.0, 100.0, 100.0]}
    with pytest.raises(ValueError):
        recorder.series("latency")


def test_recorder_clears_on_reset(bottleneck: NetworkSimulator) -> None:
    recorder = RunRecorder.attach(bottleneck)
    bottleneck.run(2)
    bottleneck.reset()
    assert recorder.rows == []
    assert recorder.utilization == {}


def test_link_utilization_summary(simulator: NetworkSimulator) -> None:
    recorder = RunRecorder.attach(simulator)
    simulator.run(4)
    summary = link_utilization_summary(recorder)
    assert set(summary) == {"A-B", "A-C", "B-D", "C-D", "C-E", "D-E"}
    for key, (mean, peak) in summary.items():
        assert 0.0 <= mean <= peak <= 100.0
        assert mean == pytest.approx(np.mean(recorder.utilization[key]))


def test_save_snapshot_to_json(tmp_path, bottleneck: NetworkSimulator) -> None:
    snapshot = bottleneck.run(1)
    filename = tmp_path / "out" / "snapshot.json"
    save_snapshot_to_json(snapshot, str(filename))
    data = json.loads(filename.read_text())
    assert data == snapshot.to_dict()
    assert data["summary"]["packetLoss"] == 40.0


def test_save_history_to_csv(tmp_path, bottleneck: NetworkSimulator) -> None:
    recorder = RunRecorder.attach(bottleneck)
    bottleneck.run(2)
    filename = tmp_path / "history.csv"
    save_history_to_csv(recorder, str(filename))
    with open(filename, newline="") as f:
        rows = list(csv.DictReader(f))
    assert list(rows[0]) == HISTORY_FIELDS
    assert [row["transmitted"] for row in rows] == ["3", "8"]
    assert rows[0]["time_slot"] == "00:00"
