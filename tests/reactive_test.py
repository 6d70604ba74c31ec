"""Tests for observable configuration values."""

from __future__ import annotations

from repoguard.reactive import MutableReference


def test_update() -> None:
    reference = MutableReference(1)
    seen: list[int] = []
    reference.subscribe(seen.append)
    reference.subscribe(lambda v: seen.append(v * 10))

    assert reference.get() == 1
    assert reference.update(2) == 2
    assert reference.get() == 2
    assert reference.map(lambda v: v + 1) == 3
    assert seen == [2, 20]


def test_subscriber_reads_new_value() -> None:
    reference = MutableReference("old")
    seen: list[str] = []
    reference.subscribe(lambda _: seen.append(reference.get()))

    reference.update("new")
    assert seen == ["new"]
