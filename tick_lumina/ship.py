"""Ship kinematics, energy upkeep and depletion."""
from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from tick_lumina import vec
from tick_lumina.components import Ship
from tick_lumina.config import FieldConfig, Scaling
from tick_lumina.types import EntityId

if TYPE_CHECKING:
    from tick_lumina.types import TickContext
    from tick_lumina.world import World


def find_ship(world: World) -> tuple[EntityId, Ship] | None:
    """Return the first ship in ``world``, or None."""
    for eid, (ship,) in world.query(Ship):
        return eid, ship
    return None


def add_energy(ship: Ship, amount: float, scaling: Scaling) -> None:
    """Add ``amount`` (may be negative), clamped to ``[0, max_energy]``."""
    ship.energy = min(max(ship.energy + amount, 0.0), scaling.max_energy)


def make_ship_system(
    config: FieldConfig, scaling: Scaling,
) -> Callable[[World, TickContext], None]:
    """Semi-implicit Euler for the ship: thrust and brake, then position.

    Thrust and braking both cost ``energy_per_force`` per second at full
    power. Energy held above ``max_battery`` drains at
    ``capacitor_drain_per_sec``.
    """

    def ship_system(world: World, ctx: TickContext) -> None:
        dt = ctx.dt
        for _, (ship,) in world.query(Ship):
            thrust = vec.clamp_length(ship.thrust, 1.0)
            power = vec.length(thrust)
            spent = 0.0
            if power > 0.0 and ship.energy > 0.0:
                ship.velocity = vec.add(
                    ship.velocity, vec.scale(thrust, config.thrust_force * dt)
                )
                spent += power
            if ship.braking:
                speed = vec.length(ship.velocity)
                drop = config.thrust_force * dt
                if speed > drop:
                    ship.velocity = vec.scale(ship.velocity, (speed - drop) / speed)
                    spent += 1.0
                elif speed > 0.0:
                    ship.velocity = vec.ZERO
                    spent += speed / drop
            ship.position = vec.add(ship.position, vec.scale(ship.velocity, dt))

            energy = ship.energy - scaling.energy_per_force * spent * dt
            if energy > scaling.max_battery:
                energy = max(
                    scaling.max_battery, energy - scaling.capacitor_drain_per_sec * dt
                )
            ship.energy = energy
            add_energy(ship, 0.0, scaling)

    return ship_system


def make_depletion_system(
    on_depleted: Callable[[World, TickContext, EntityId], None] | None = None,
) -> Callable[[World, TickContext], None]:
    """Stop the engine once the ship has no energy left."""

    def depletion_system(world: World, ctx: TickContext) -> None:
        found = find_ship(world)
        if found is None:
            return
        eid, ship = found
        if ship.energy <= 0.0:
            if on_depleted is not None:
                on_depleted(world, ctx, eid)
            ctx.request_stop()

    return depletion_system
