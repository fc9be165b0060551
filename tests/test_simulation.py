"""Integration tests for the run lifecycle and the full tick order."""
from __future__ import annotations

import pytest

from tick_lumina.components import Cooldown, Lumina, Ship
from tick_lumina.config import FieldConfig, Scaling
from tick_lumina.ship import find_ship
from tick_lumina.simulation import Simulation
from tick_lumina.types import RunStateError
from tick_lumina.upgrades import Upgrade, Workshop


def _teleport(sim: Simulation, position: tuple[float, float]) -> None:
    assert sim.world is not None
    found = find_ship(sim.world)
    assert found is not None
    found[1].position = position


def _two_distinct_nodes(sim: Simulation) -> tuple[tuple[int, tuple[float, float]], ...]:
    """Two nodes far enough apart that sitting on one never attaches the other.

    If the ship already holds a node, that node comes first, so visiting
    the pair in order makes exactly one new link.
    """
    attach = sim.config.attach_distance
    held = sim.attachment
    nodes = [(nid, pos) for nid, pos, _ in sim.nodes()]
    firsts = [n for n in nodes if held is None or n[0] == held[0]]
    for a, pa in firsts:
        for b, pb in nodes:
            if b != a and abs(pa[0] - pb[0]) + abs(pa[1] - pb[1]) > 2 * attach:
                return (a, pa), (b, pb)
    raise AssertionError("field too sparse")


def test_start_run_spawns_charged_ship_and_streams_chunks():
    sim = Simulation(seed=1)
    sim.start_run()
    assert sim.running
    assert sim.energy == Scaling().max_battery
    sim.tick()
    assert len(sim.chunks) == 9
    assert sim.nodes()


def test_lifecycle_misuse_raises():
    sim = Simulation(seed=1)
    with pytest.raises(RunStateError):
        sim.tick()
    with pytest.raises(RunStateError):
        sim.end_run()
    sim.start_run()
    with pytest.raises(RunStateError):
        sim.start_run()
    sim.end_run()
    with pytest.raises(RunStateError):
        sim.pause()


@pytest.mark.parametrize("tps", [0, -30])
def test_bad_tick_rate_rejected_at_construction(tps):
    with pytest.raises(ValueError, match="tps"):
        Simulation(tps=tps)


def test_pause_makes_tick_a_noop():
    sim = Simulation(seed=2)
    sim.start_run()
    sim.tick()
    sim.pause()
    assert sim.paused
    assert sim.world is not None
    before = sim.ship_position
    sim.set_thrust((1.0, 0.0))
    for _ in range(10):
        sim.tick()
    assert sim.ship_position == before
    sim.resume()
    sim.tick()
    assert sim.ship_position != before


def test_attachment_change_links_nodes_same_tick():
    sim = Simulation(seed=3)
    sim.start_run()
    sim.tick()
    (a, pa), (b, pb) = _two_distinct_nodes(sim)

    _teleport(sim, pa)
    sim.tick()
    assert sim.attachment == (a, True)

    _teleport(sim, pb)
    sim.tick()
    assert sim.attachment == (b, True)
    assert sim.links == [(min(a, b), max(a, b))]
    assert sim.network_size == 2
    assert a in sim.nearby or b in sim.nearby


def test_end_run_reports_network_size_and_credits_workshop():
    workshop = Workshop()
    sim = Simulation(workshop=workshop, seed=4)
    sim.start_run()
    sim.tick()
    (_, pa), (_, pb) = _two_distinct_nodes(sim)
    for pos in (pa, pb):
        _teleport(sim, pos)
        sim.tick()
    summary = sim.end_run()
    assert summary.reason == "ended"
    assert summary.network_size == 2
    assert summary.ticks == 3
    assert workshop.currency == 2
    assert sim.last_summary == summary
    assert not sim.running


def test_depleted_ship_ends_run():
    workshop = Workshop(Scaling(max_battery=0.0))
    sim = Simulation(workshop=workshop, seed=5)
    sim.start_run()
    sim.tick()
    assert not sim.running
    assert sim.last_summary is not None
    assert sim.last_summary.reason == "depleted"
    assert sim.last_summary.energy == 0.0


def test_new_run_resets_field():
    sim = Simulation(seed=6)
    sim.start_run()
    sim.tick()
    world = sim.world
    assert world is not None
    (a, _), (b, _) = _two_distinct_nodes(sim)
    assert sim.graph.try_link(world, a, b)
    world.attach(a, Cooldown())
    sim.end_run()

    sim.start_run()
    assert sim.links == []
    assert sim.network_size == 0
    assert len(sim.chunks) == 0
    assert sim.world is not world
    assert sim.world is not None
    assert sim.world.count(Cooldown) == 0
    assert sim.world.count(Lumina) == 0


def test_upgrades_apply_to_next_run():
    workshop = Workshop(currency=100)
    assert workshop.buy(Upgrade.LINKS)
    sim = Simulation(workshop=workshop, seed=7)
    sim.start_run()
    assert sim.graph.max_links == 4


def test_long_flight_keeps_invariants():
    scaling = Scaling(generation_per_sec=5.0, lumina_resume_per_sec=1.0)
    sim = Simulation(FieldConfig(attach_distance=400.0), Workshop(scaling), tps=30, seed=8)
    sim.start_run()
    sim.set_thrust((1.0, 0.3))
    for i in range(900):
        if i == 300:
            sim.set_thrust((-0.5, -1.0))
        if i == 600:
            sim.set_thrust((0.0, 0.0), braking=True)
        sim.tick()
        assert 0.0 <= sim.energy <= scaling.max_energy
        if not sim.running:
            break
    world = sim.world
    assert world is not None
    for nid, (node,) in world.query(Lumina):
        assert len(node.targets) <= scaling.max_links
        assert len(set(node.targets)) == len(node.targets)
    if sim.network_size:
        assert len(sim.links) < sim.network_size
    assert all(isinstance(p, tuple) for p in sim.packets)


def test_views_before_any_run():
    sim = Simulation(seed=9)
    assert sim.energy == 0.0
    assert sim.attachment is None
    assert sim.nearby == frozenset()
    assert sim.packets == []
    assert sim.nodes() == []
    with pytest.raises(RunStateError):
        sim.set_thrust((1.0, 0.0))


def test_explicit_dt_ticks():
    sim = Simulation(seed=10)
    sim.start_run()
    sim.set_thrust((1.0, 0.0))
    sim.tick(0.5)
    assert sim.world is not None
    found = find_ship(sim.world)
    assert found is not None
    ship: Ship = found[1]
    assert ship.velocity == pytest.approx((250.0, 0.0))
