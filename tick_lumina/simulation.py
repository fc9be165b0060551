"""Simulation - wires the systems together and owns the run lifecycle.

One tick runs, in order: ship, chunk streaming, proximity, links,
packet generation, packet travel, delivery, node recovery, depletion.
Attachment changes published by proximity are drained by the link phase
of the same tick, so a fresh link can generate packets right away.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from tick_lumina.activity import activity_of, make_resume_system
from tick_lumina.chunks import ChunkMap, make_chunk_system
from tick_lumina.components import Attachment, Lumina, Nearby, NodeActivity, Packet, Ship
from tick_lumina.config import FieldConfig, Scaling
from tick_lumina.energy import make_delivery_system, make_generation_system, make_packet_system
from tick_lumina.engine import Engine
from tick_lumina.graph import LinkGraph, make_link_system
from tick_lumina.proximity import make_proximity_system
from tick_lumina.ship import make_depletion_system, make_ship_system
from tick_lumina.signals import SignalBus
from tick_lumina.types import EntityId, NodeId, RunStateError, System, Vec2
from tick_lumina.upgrades import Workshop
from tick_lumina.world import World

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunSummary:
    """Reported when a run ends. ``reason`` is ``"depleted"`` or ``"ended"``."""

    network_size: int
    ticks: int
    energy: float
    reason: str


class Simulation:
    def __init__(
        self,
        config: FieldConfig | None = None,
        workshop: Workshop | None = None,
        tps: int = 60,
        seed: int | None = None,
    ) -> None:
        if tps <= 0:
            raise ValueError("tps must be positive")
        self._config = config if config is not None else FieldConfig()
        self._workshop = workshop if workshop is not None else Workshop()
        self._tps = tps
        self._rng = random.Random(seed)
        self._chunks = ChunkMap(self._config)
        self._graph = LinkGraph(self._workshop.scaling.max_links)
        self._engine: Engine | None = None
        self._ship_id: EntityId | None = None
        self._running = False
        self._paused = False
        self._summary: RunSummary | None = None

    # -- Lifecycle --

    def start_run(self) -> None:
        """Reset chunks, links and node state and spawn a fully charged ship."""
        if self._running:
            raise RunStateError("A run is already in progress")
        scaling = self._workshop.scaling
        self._chunks.clear()
        self._graph.clear()
        self._graph.max_links = scaling.max_links

        engine = Engine(tps=self._tps, seed=self._rng.getrandbits(64))
        for system in self._build_systems(scaling):
            engine.add_system(system)
        self._ship_id = engine.world.spawn(Ship(energy=scaling.max_battery))
        engine.start()

        self._engine = engine
        self._running = True
        self._paused = False
        self._summary = None
        logger.info("Run started (seed=%d, max_links=%d)", engine.seed, scaling.max_links)

    def _build_systems(self, scaling: Scaling) -> list[System]:
        bus = SignalBus()
        return [
            make_ship_system(self._config, scaling),
            make_chunk_system(self._chunks),
            make_proximity_system(self._chunks, bus, self._config),
            make_link_system(bus, self._graph),
            make_generation_system(scaling),
            make_packet_system(self._config, scaling),
            make_delivery_system(scaling),
            make_resume_system(scaling),
            make_depletion_system(),
        ]

    def tick(self, dt: float | None = None) -> None:
        """Advance one tick. A no-op while paused."""
        engine = self._require_run()
        if self._paused:
            return
        engine.step(dt)
        if engine.stop_requested:
            self._finish("depleted")

    def end_run(self) -> RunSummary:
        self._require_run()
        return self._finish("ended")

    def _finish(self, reason: str) -> RunSummary:
        engine = self._engine
        assert engine is not None
        engine.stop()
        summary = RunSummary(
            network_size=self._graph.network_size,
            ticks=engine.clock.tick_number,
            energy=self.energy,
            reason=reason,
        )
        self._workshop.credit(summary.network_size)
        self._running = False
        self._summary = summary
        logger.info(
            "Run %s after %d ticks: network size %d, energy %.1f",
            reason, summary.ticks, summary.network_size, summary.energy,
        )
        return summary

    def _require_run(self) -> Engine:
        if not self._running or self._engine is None:
            raise RunStateError("No run in progress")
        return self._engine

    def pause(self) -> None:
        self._require_run()
        self._paused = True

    def resume(self) -> None:
        self._require_run()
        self._paused = False

    # -- Control input --

    def set_thrust(self, direction: Vec2, braking: bool = False) -> None:
        ship = self._ship()
        if ship is None:
            raise RunStateError("No ship to steer")
        ship.thrust = direction
        ship.braking = braking

    # -- Read-only views --

    @property
    def running(self) -> bool:
        return self._running

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def last_summary(self) -> RunSummary | None:
        return self._summary

    @property
    def workshop(self) -> Workshop:
        return self._workshop

    @property
    def config(self) -> FieldConfig:
        return self._config

    @property
    def world(self) -> World | None:
        return self._engine.world if self._engine is not None else None

    @property
    def graph(self) -> LinkGraph:
        return self._graph

    @property
    def chunks(self) -> ChunkMap:
        return self._chunks

    def _ship(self) -> Ship | None:
        if self._engine is None or self._ship_id is None:
            return None
        return self._engine.world.try_get(self._ship_id, Ship)

    @property
    def ship_position(self) -> Vec2:
        ship = self._ship()
        return ship.position if ship is not None else (0.0, 0.0)

    @property
    def ship_velocity(self) -> Vec2:
        ship = self._ship()
        return ship.velocity if ship is not None else (0.0, 0.0)

    @property
    def energy(self) -> float:
        ship = self._ship()
        return ship.energy if ship is not None else 0.0

    @property
    def attachment(self) -> tuple[NodeId, bool] | None:
        if self._engine is None or self._ship_id is None:
            return None
        att = self._engine.world.try_get(self._ship_id, Attachment)
        if att is None:
            return None
        return att.node, att.in_range

    @property
    def links(self) -> list[tuple[NodeId, NodeId]]:
        return self._graph.links()

    @property
    def nearby(self) -> frozenset[NodeId]:
        if self._engine is None:
            return frozenset()
        return frozenset(eid for eid, _ in self._engine.world.query(Nearby))

    @property
    def packets(self) -> list[Vec2]:
        if self._engine is None:
            return []
        return [p.position for _, (p,) in self._engine.world.query(Packet)]

    @property
    def network_size(self) -> int:
        return self._graph.network_size

    def nodes(self) -> list[tuple[NodeId, Vec2, NodeActivity]]:
        if self._engine is None:
            return []
        world = self._engine.world
        return [
            (eid, node.position, activity_of(world, eid))
            for eid, (node,) in world.query(Lumina)
        ]
