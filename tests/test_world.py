"""Tests for the entity arena and component queries."""

from dataclasses import dataclass

import pytest

from tick_lumina.filters import Not
from tick_lumina.types import DeadEntityError
from tick_lumina.world import World


@dataclass
class Position:
    x: float
    y: float


@dataclass
class Tag:
    pass


def test_spawn_with_components():
    world = World()
    eid = world.spawn(Position(1.0, 2.0), Tag())
    assert world.alive(eid)
    assert world.get(eid, Position) == Position(1.0, 2.0)
    assert world.has(eid, Tag)


def test_ids_are_sequential_and_not_reused():
    world = World()
    a = world.spawn()
    world.despawn(a)
    b = world.spawn()
    assert b == a + 1


def test_get_dead_entity_raises():
    world = World()
    eid = world.spawn(Position(0.0, 0.0))
    world.despawn(eid)
    with pytest.raises(DeadEntityError):
        world.get(eid, Position)


def test_get_missing_component_raises_key_error():
    world = World()
    eid = world.spawn()
    with pytest.raises(KeyError):
        world.get(eid, Position)


def test_try_get_returns_none_for_stale_ids():
    world = World()
    eid = world.spawn(Position(0.0, 0.0))
    assert world.try_get(eid, Tag) is None
    world.despawn(eid)
    assert world.try_get(eid, Position) is None
    assert world.try_get(999, Position) is None


def test_attach_to_dead_entity_raises():
    world = World()
    eid = world.spawn()
    world.despawn(eid)
    with pytest.raises(DeadEntityError):
        world.attach(eid, Tag())


def test_detach_is_idempotent():
    world = World()
    eid = world.spawn(Tag())
    world.detach(eid, Tag)
    world.detach(eid, Tag)
    assert not world.has(eid, Tag)


def test_query_with_not_filter():
    world = World()
    a = world.spawn(Position(0.0, 0.0))
    b = world.spawn(Position(1.0, 0.0), Tag())
    assert [eid for eid, _ in world.query(Position, Not(Tag))] == [a]
    assert [eid for eid, _ in world.query(Position, Tag)] == [b]


def test_query_tolerates_spawn_and_despawn_while_iterating():
    world = World()
    for i in range(3):
        world.spawn(Position(float(i), 0.0))
    seen = []
    for eid, (pos,) in world.query(Position):
        seen.append(eid)
        world.spawn(Position(pos.x + 10.0, 0.0))
        world.despawn(eid)
    assert seen == [0, 1, 2]
    assert world.count(Position) == 3


def test_query_without_components_yields_nothing():
    world = World()
    world.spawn(Tag())
    assert list(world.query()) == []
    assert list(world.query(Position)) == []


def test_clear_drops_everything():
    world = World()
    world.spawn(Position(0.0, 0.0))
    world.clear()
    assert world.entities() == frozenset()
    assert world.count(Position) == 0
