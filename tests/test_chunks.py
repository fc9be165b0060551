"""Tests for chunk bookkeeping and streaming."""
from __future__ import annotations

import random

from tick_lumina.chunks import ChunkMap, make_chunk_system
from tick_lumina.components import Lumina, Ship
from tick_lumina.engine import Engine
from tick_lumina.world import World


def test_chunk_of_floors_negative_positions():
    chunks = ChunkMap()
    assert chunks.chunk_of((0.0, 0.0)) == (0, 0)
    assert chunks.chunk_of((4999.9, 5000.0)) == (0, 1)
    assert chunks.chunk_of((-0.5, -5000.0)) == (-1, -1)
    assert chunks.chunk_of((-5000.1, 12000.0)) == (-2, 2)


def test_neighborhood_is_three_by_three():
    chunks = ChunkMap()
    block = chunks.neighborhood((2, -3))
    assert len(block) == 9
    assert set(block) == {(x, y) for x in (1, 2, 3) for y in (-4, -3, -2)}


def test_ensure_generates_once():
    world = World()
    chunks = ChunkMap()
    rng = random.Random(1)
    assert chunks.ensure(world, (0, 0), rng)
    first = world.count(Lumina)
    assert not chunks.ensure(world, (0, 0), rng)
    assert world.count(Lumina) == first
    assert len(chunks.nodes_in((0, 0))) == first


def test_generated_nodes_belong_to_their_chunk():
    world = World()
    chunks = ChunkMap()
    chunks.ensure(world, (-1, 0), random.Random(2))
    for nid in chunks.nodes_in((-1, 0)):
        node = world.get(nid, Lumina)
        assert node.chunk == (-1, 0)
        assert chunks.chunk_of(node.position) == (-1, 0)
        assert node.targets == []


def test_place_marks_chunk_created():
    world = World()
    chunks = ChunkMap()
    nid = chunks.place(world, (100.0, -100.0))
    assert chunks.created((0, -1))
    assert chunks.nodes_in((0, -1)) == [nid]
    assert list(chunks.nodes_around((0.0, 0.0))) == [nid]


def test_system_streams_around_ship():
    engine = Engine(tps=10, seed=3)
    chunks = ChunkMap()
    engine.add_system(make_chunk_system(chunks))
    ship_id = engine.world.spawn(Ship(position=(10.0, 10.0)))

    engine.step()
    assert chunks.coords() == frozenset(chunks.neighborhood((0, 0)))
    count = engine.world.count(Lumina)

    # Re-entering known chunks generates nothing.
    engine.run(5)
    assert len(chunks) == 9
    assert engine.world.count(Lumina) == count

    engine.world.get(ship_id, Ship).position = (6000.0, 0.0)
    engine.step()
    assert len(chunks) == 12
    assert {(2, -1), (2, 0), (2, 1)} <= chunks.coords()


def test_system_without_ship_is_noop():
    engine = Engine(seed=3)
    chunks = ChunkMap()
    engine.add_system(make_chunk_system(chunks))
    engine.step()
    assert len(chunks) == 0


def test_clear_forgets_chunks():
    chunks = ChunkMap()
    chunks.ensure(World(), (0, 0), random.Random(0))
    chunks.clear()
    assert not chunks.created((0, 0))
