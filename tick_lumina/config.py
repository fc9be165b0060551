"""Configuration dataclasses for the lumina field."""
from __future__ import annotations

import random
from dataclasses import dataclass


@dataclass(frozen=True)
class FieldConfig:
    """Fixed geometry and motion constants of a field.

    Attributes:
        chunk_size: Side length of a square chunk, in world units.
        cells_per_chunk: Cells along each chunk axis; each cell spawns at
            most one node.
        decay_rate: Exponential falloff of spawn probability per cell of
            distance from the origin.
        jitter: Maximum node offset from its cell centre, as a fraction
            of the cell size, on each axis.
        attach_distance: The ship attaches to the nearest node closer
            than this.
        nearby_distance: Nodes closer than this are tagged ``Nearby``.
        packet_speed: Packet travel speed in units per second.
        thrust_force: Ship acceleration at full thrust, and braking
            deceleration, in units per second squared.
        prune_returning: Drop returning packets with probability
            ``1 - propagation_probability`` at every hop.
    """

    chunk_size: float = 5000.0
    cells_per_chunk: int = 10
    decay_rate: float = 0.2
    jitter: float = 0.4
    attach_distance: float = 300.0
    nearby_distance: float = 1200.0
    packet_speed: float = 500.0
    thrust_force: float = 500.0
    prune_returning: bool = True

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if self.cells_per_chunk <= 0:
            raise ValueError("cells_per_chunk must be positive")
        if not 0.0 <= self.jitter <= 0.5:
            raise ValueError("jitter must be within [0, 0.5]")
        if self.packet_speed <= 0:
            raise ValueError("packet_speed must be positive")
        if self.attach_distance > self.nearby_distance:
            raise ValueError("attach_distance must not exceed nearby_distance")

    @property
    def cell_size(self) -> float:
        return self.chunk_size / self.cells_per_chunk


@dataclass(frozen=True)
class Scaling:
    """Tunables that upgrades rewrite between runs.

    Probabilities are clamped into ``[0, 1]`` when rolled, so an upgrade
    that overshoots never breaks a tick.

    Attributes:
        reflection_probability: Chance a packet bounces back the way it came.
        propagation_probability: Chance a packet continues along each
            other link, and survives each hop home.
        generation_per_sec: Per-link packet spawn rate at the attached node.
        max_links: Degree cap of every node.
        max_battery: Energy the ship keeps indefinitely.
        max_capacitor: Extra energy held above the battery; drains away.
        capacitor_drain_per_sec: Drain rate of the capacitor.
        energy_extraction: Energy gained per unit of packet travel.
        energy_per_force: Energy spent per second of full thrust.
        lumina_cooldown_per_generation: Chance a node cools down after a
            tick in which it generated.
        lumina_resume_per_sec: Rate at which cooled-down nodes recover.
    """

    reflection_probability: float = 0.5
    propagation_probability: float = 0.5
    generation_per_sec: float = 1.0
    max_links: int = 3
    max_battery: float = 1500.0
    max_capacitor: float = 1000.0
    capacitor_drain_per_sec: float = 1000.0
    energy_extraction: float = 0.1
    energy_per_force: float = 1.0
    lumina_cooldown_per_generation: float = 0.1
    lumina_resume_per_sec: float = 0.33

    def __post_init__(self) -> None:
        if self.max_links < 0:
            raise ValueError("max_links must not be negative")
        if self.max_battery < 0 or self.max_capacitor < 0:
            raise ValueError("energy capacities must not be negative")

    @property
    def max_energy(self) -> float:
        return self.max_battery + self.max_capacitor


def chance(rng: random.Random, probability: float) -> bool:
    """Roll ``probability``, clamped into ``[0, 1]``."""
    p = min(max(probability, 0.0), 1.0)
    return rng.random() < p
