from __future__ import annotations

from telecom_sim.core.link import Link, LinkKey


def test_consume_within_capacity() -> None:
    link = Link("A", "B", 2)
    assert link.consume_capacity()
    assert link.consume_capacity()
    assert link.load == 2
    assert link.queue_size == 0


def test_overflow_goes_to_queue() -> None:
    link = Link("A", "B", 2)
    link.consume_capacity()
    link.consume_capacity()
    assert not link.consume_capacity()
    assert link.load == 2
    assert link.queue_size == 1


def test_partial_overflow_caps_load_at_capacity() -> None:
    link = Link("A", "B", 5)
    assert link.consume_capacity(3)
    assert not link.consume_capacity(4)
    assert link.load == 5
    assert link.queue_size == 2


def test_backlog_drains_one_capacity_per_tick() -> None:
    link = Link("D", "E", 60)
    link.queue_size = 150
    released = []
    queues = []
    for _ in range(3):
        released.append(link.drain())
        queues.append(link.queue_size)
    assert released == [60, 60, 30]
    assert queues == [90, 30, 0]
    assert link.drain() == 0


def test_congestion_and_utilization() -> None:
    link = Link("A", "B", 4)
    link.consume_capacity(2)
    assert link.utilization() == 50.0
    assert not link.is_congested()

    link.consume_capacity(2)
    assert link.utilization() == 100.0
    assert link.is_congested()

    link.clear_load()
    link.queue_size = 1
    assert link.is_congested()


def test_link_key() -> None:
    link = Link("A", "B", 1)
    assert link.key == LinkKey("A", "B")
    assert str(link.key) == "A-B"
    assert link.key != LinkKey("B", "A")


def test_lowering_capacity_clamps_current_load() -> None:
    link = Link("A", "B", 10)
    link.consume_capacity(5)
    link.set_capacity(2)
    assert (link.load, link.capacity, link.queue_size) == (2, 2, 0)
    assert link.utilization() == 100.0
    link.set_capacity(8)
    assert link.load == 2
