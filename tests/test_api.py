from __future__ import annotations

import pytest

from telecom_sim.api import create_app
from telecom_sim.config import default_config
from telecom_sim.core.simulator import NetworkSimulator

BASE = "/api/simulate"


@pytest.fixture
def simulator() -> NetworkSimulator:
    return NetworkSimulator(default_config(seed=1))


@pytest.fixture
def client(simulator: NetworkSimulator):
    app = create_app(simulator)
    app.config["TESTING"] = True
    return app.test_client()


def test_stats(client) -> None:
    response = client.get(f"{BASE}/stats")
    assert response.status_code == 200
    body = response.get_json()
    assert body["success"]
    data = body["data"]
    assert data["currentTime"] == "08:00"
    assert data["simulationStep"] == 0
    assert data["isRunning"] is False
    assert len(data["nodes"]) == 5
    assert len(data["links"]) == 6
    assert data["packets"] == []
    assert set(data["summary"]) >= {
        "totalPacketsGenerated",
        "totalPacketsTransmitted",
        "packetLoss",
        "averageQueueSize",
    }
    assert set(data["links"][0]) == {
        "from",
        "to",
        "capacity",
        "currentLoad",
        "utilization",
        "queueSize",
        "congested",
    }


def test_tick_returns_fresh_stats(client) -> None:
    response = client.post(f"{BASE}/tick")
    assert response.status_code == 200
    body = response.get_json()
    assert body["message"] == "Simulation tick completed"
    assert body["data"]["simulationStep"] == 1
    assert body["data"]["summary"]["totalPacketsGenerated"] == 200
    packet = body["data"]["packets"][0]
    assert {"from", "to", "path", "hops", "transmitted", "tick"} <= set(packet)


def test_start_pause_reset(client) -> None:
    assert client.post(f"{BASE}/start").get_json()["message"] == "Simulation started"
    assert client.get(f"{BASE}/stats").get_json()["data"]["isRunning"] is True

    client.post(f"{BASE}/pause")
    assert client.get(f"{BASE}/stats").get_json()["data"]["isRunning"] is False

    client.post(f"{BASE}/tick")
    client.post(f"{BASE}/advance-time")
    response = client.post(f"{BASE}/reset")
    assert response.get_json()["message"] == "Simulation reset to initial state"
    data = client.get(f"{BASE}/stats").get_json()["data"]
    assert data["simulationStep"] == 0
    assert data["currentTime"] == "08:00"


def test_update_traffic_rate(client, simulator: NetworkSimulator) -> None:
    response = client.post(f"{BASE}/traffic/A", json={"rate": 0})
    assert response.status_code == 200
    assert response.get_json()["message"] == "Traffic rate updated for node A to 0 packets/second"
    assert simulator.traffic.rates_for("08:00")["A"] == 0

    response = client.post(f"{BASE}/traffic/B", json={"rate": "12"})
    assert response.status_code == 200
    assert simulator.traffic.rates_for("08:00")["B"] == 12


@pytest.mark.parametrize("body", [{"rate": -1}, {}, {"rate": "abc"}, {"rate": 2.5}, {"rate": True}])
def test_invalid_traffic_rate(client, body) -> None:
    response = client.post(f"{BASE}/traffic/A", json=body)
    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_traffic_rate_above_ceiling(client, simulator: NetworkSimulator) -> None:
    response = client.post(f"{BASE}/traffic/A", json={"rate": 1e9})
    assert response.status_code == 400
    assert response.get_json() == {
        "success": False,
        "error": "Rate 1000000000 exceeds the limit of 1000",
    }
    assert simulator.traffic.rates_for("08:00")["A"] == 50


def test_unknown_node(client) -> None:
    response = client.post(f"{BASE}/traffic/Q", json={"rate": 5})
    assert response.status_code == 404
    assert response.get_json() == {"success": False, "error": "Node Q not found"}


def test_update_link_capacity(client) -> None:
    response = client.post(f"{BASE}/link/A/B/capacity", json={"capacity": 40})
    assert response.status_code == 200
    links = client.get(f"{BASE}/topology").get_json()["data"]["links"]
    assert {"source": "A", "target": "B", "capacity": 40} in links


def test_invalid_link_capacity(client) -> None:
    assert client.post(f"{BASE}/link/A/B/capacity", json={"capacity": 0}).status_code == 400
    assert client.post(f"{BASE}/link/A/B/capacity", json={}).status_code == 400
    response = client.post(f"{BASE}/link/B/A/capacity", json={"capacity": 10})
    assert response.status_code == 404
    assert response.get_json()["error"] == "Link from B to A not found"


def test_advance_time(client) -> None:
    labels = []
    for _ in range(5):
        body = client.post(f"{BASE}/advance-time").get_json()
        labels.append(body["data"]["currentTime"])
    assert labels == ["12:00", "18:00", "22:00", "22:00", "22:00"]
    assert body["message"] == "Advanced to time slot: 22:00"


def test_topology(client) -> None:
    data = client.get(f"{BASE}/topology").get_json()["data"]
    assert data["nodes"][0] == {"id": "A", "label": "A"}
    assert len(data["links"]) == 6


def test_cors_headers(client) -> None:
    response = client.get(f"{BASE}/stats", headers={"Origin": "http://localhost:3000"})
    assert response.headers["Access-Control-Allow-Origin"] == "*"


def test_unexpected_errors_become_500(client, simulator: NetworkSimulator, monkeypatch) -> None:
    def broken() -> None:
        raise RuntimeError("boom")

    monkeypatch.setattr(simulator, "tick", broken)
    response = client.post(f"{BASE}/tick")
    assert response.status_code == 500
    assert response.get_json() == {"success": False, "error": "boom"}
