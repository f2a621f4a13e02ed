from __future__ import annotations

import json

import pytest

from telecom_sim.config import (
    ConfigError,
    LinkSpec,
    SimulationConfig,
    config_from_dict,
    default_config,
    load_config,
)


def test_default_config() -> None:
    config = default_config()
    assert config.nodes == ("A", "B", "C", "D", "E")
    assert len(config.links) == 6
    assert config.slot_labels == ("08:00", "12:00", "18:00", "22:00")
    assert dict(config.time_slots["08:00"]) == {"A": 50, "B": 30, "C": 40, "D": 20, "E": 60}
    assert config.seed is None


def test_default_config_overrides() -> None:
    config = default_config(seed=5, history_limit=3)
    assert (config.seed, config.history_limit) == (5, 3)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"nodes": ("A", "A")},
        {"nodes": ()},
        {"links": (LinkSpec("A", "Q", 10),)},
        {"links": (LinkSpec("A", "A", 10),)},
        {"links": (LinkSpec("A", "B", 0),)},
        {"links": (LinkSpec("A", "B", 10), LinkSpec("A", "B", 20))},
        {"time_slots": {}},
        {"time_slots": {"t": {"Q": 1}}},
        {"time_slots": {"t": {"A": -1}}},
        {"history_limit": -1},
        {"interval": 0},
        {"history_limit": 2.5},
        {"history_limit": "5"},
        {"interval": "2"},
        {"interval": True},
        {"max_rate": 0},
        {"max_rate": 3, "time_slots": {"t": {"A": 4}}},
    ],
)
def test_invalid_configs_are_rejected(kwargs) -> None:
    values = {
        "nodes": ("A", "B"),
        "links": (LinkSpec("A", "B", 10),),
        "time_slots": {"t": {"A": 1}},
    }
    values.update(kwargs)
    with pytest.raises(ConfigError):
        SimulationConfig(**values).validate()


def test_config_from_dict() -> None:
    config = config_from_dict(
        {
            "nodes": ["P", "Q"],
            "links": [{"from": "P", "to": "Q", "capacity": 4}],
            "timeSlots": {"night": {"P": 2}, "day": {"P": 6, "Q": 1}},
            "historyLimit": 5,
            "seed": 9,
        }
    )
    assert config.nodes == ("P", "Q")
    assert config.links == (LinkSpec("P", "Q", 4),)
    assert config.slot_labels == ("night", "day")
    assert (config.history_limit, config.seed, config.interval) == (5, 9, 2.0)


def test_config_from_dict_falls_back_to_reference_network() -> None:
    assert config_from_dict({"seed": 1}) == default_config(seed=1)


def test_malformed_link_is_a_config_error() -> None:
    with pytest.raises(ConfigError):
        config_from_dict({"links": [{"from": "A", "capacity": 4}]})


def test_load_config_round_trip(tmp_path) -> None:
    path = tmp_path / "network.json"
    path.write_text(json.dumps(default_config(seed=4).to_dict()))
    assert load_config(str(path)) == default_config(seed=4)


def test_load_config_rejects_bad_json(tmp_path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(ConfigError):
        load_config(str(path))
    path.write_text("[1, 2]")
    with pytest.raises(ConfigError):
        load_config(str(path))


@pytest.mark.parametrize(
    "data",
    [{"historyLimit": 2.5}, {"historyLimit": "5"}, {"interval": "fast"}, {"maxRate": 1.5}],
)
def test_config_from_dict_rejects_wrong_types(data) -> None:
    with pytest.raises(ConfigError):
        config_from_dict(data)
