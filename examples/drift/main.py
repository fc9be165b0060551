"""Drift - headless autopilot over a lumina field.

A scripted pilot hops between unvisited nodes, linking them as it goes,
and keeps going until the ship runs dry. Between runs the network size is
spent in the workshop on the cheapest affordable upgrade.

Run:
    python examples/drift/main.py
    python examples/drift/main.py --runs 5 --seed 7 -v
"""
from __future__ import annotations

import argparse
import logging
import math

from tick_lumina import Simulation, Upgrade, Workshop, vec
from tick_lumina.types import NodeId, Vec2


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Drift - headless lumina autopilot")
    p.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    p.add_argument("--runs", type=int, default=3, help="Runs to fly (default: 3)")
    p.add_argument("--tps", type=int, default=30, help="Ticks per second (default: 30)")
    p.add_argument("--max-ticks", type=int, default=20000,
                   help="Give up on a run after this many ticks (default: 20000)")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p.parse_args()


def _pick_target(sim: Simulation, visited: set[NodeId]) -> tuple[NodeId, Vec2] | None:
    """Closest node not yet visited."""
    here = sim.ship_position
    best: tuple[NodeId, Vec2] | None = None
    best_d = math.inf
    for nid, pos, _ in sim.nodes():
        if nid in visited:
            continue
        d = vec.distance_sq(here, pos)
        if d < best_d:
            best, best_d = (nid, pos), d
    return best


def _steer(sim: Simulation, target: Vec2) -> None:
    """Thrust toward ``target``, braking once close enough to stop."""
    here = sim.ship_position
    offset = vec.sub(target, here)
    dist = vec.length(offset)
    speed = vec.length(sim.ship_velocity)
    stopping = speed * speed / (2.0 * sim.config.thrust_force)
    if dist <= stopping + sim.config.attach_distance * 0.5:
        sim.set_thrust(vec.ZERO, braking=True)
    else:
        sim.set_thrust(vec.normalize_or_zero(offset))


def fly(sim: Simulation, max_ticks: int) -> None:
    sim.start_run()
    visited: set[NodeId] = set()
    target: tuple[NodeId, Vec2] | None = None
    for _ in range(max_ticks):
        att = sim.attachment
        if att is not None and att[1]:
            visited.add(att[0])
            # Linger while packets are still coming home.
            if sim.packets and sim.energy > sim.workshop.scaling.max_battery * 0.2:
                sim.set_thrust(vec.ZERO, braking=True)
                sim.tick()
                if not sim.running:
                    return
                continue
        if target is None or target[0] in visited:
            target = _pick_target(sim, visited)
        if target is None:
            sim.set_thrust(vec.ZERO)
        else:
            _steer(sim, target[1])
        sim.tick()
        if not sim.running:
            return
    sim.end_run()


def shop(workshop: Workshop) -> None:
    while True:
        options = sorted(workshop.available(), key=workshop.cost)
        if not options or workshop.cost(options[0]) > workshop.currency:
            return
        workshop.buy(options[0])


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    workshop = Workshop()
    sim = Simulation(workshop=workshop, tps=args.tps, seed=args.seed)
    for run in range(1, args.runs + 1):
        fly(sim, args.max_ticks)
        summary = sim.last_summary
        assert summary is not None
        print(
            f"run {run}: {summary.reason} after {summary.ticks} ticks, "
            f"network {summary.network_size}, currency {workshop.currency}"
        )
        shop(workshop)
    levels = ", ".join(
        f"{u.value}={workshop.level(u)}" for u in Upgrade if workshop.level(u)
    )
    print(f"upgrades: {levels or 'none'}")


if __name__ == "__main__":
    main()
