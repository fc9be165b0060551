"""Energy packets: generation, travel, branching and delivery.

A packet travels from ``path[-1]`` to ``target``. On arrival a forward
packet splits into one child per surviving link of the arrival node: the
link it came along survives with ``reflection_probability`` (the child
heads home), every other link with ``propagation_probability``. A
returning packet retraces its path one hop at a time. Packets whose
route ends at a node get an :class:`Arrival`; the delivery phase pays
out the ones that ended at the ship's attached node and discards the
rest.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from tick_lumina import vec
from tick_lumina.activity import enter_cooldown
from tick_lumina.components import Arrival, Cooldown, Lumina, NodeActivity, Packet
from tick_lumina.config import FieldConfig, Scaling, chance
from tick_lumina.filters import Not
from tick_lumina.proximity import attached_node, current_attachment
from tick_lumina.ship import add_energy, find_ship
from tick_lumina.types import EntityId, NodeId

if TYPE_CHECKING:
    from tick_lumina.types import TickContext
    from tick_lumina.world import World

logger = logging.getLogger(__name__)

# Edges shorter than this count as zero length.
_EPSILON = 1e-6

_Transition = Callable[["World", "TickContext", NodeId, NodeActivity, NodeActivity], None]


def make_generation_system(
    scaling: Scaling, on_transition: _Transition | None = None,
) -> Callable[[World, TickContext], None]:
    """Spawn forward packets from the attached, in-range, active node.

    Each link rolls ``generation_per_sec * dt`` independently. A tick that
    generated anything then rolls ``lumina_cooldown_per_generation``.
    """

    def generation_system(world: World, ctx: TickContext) -> None:
        attachment = current_attachment(world)
        if attachment is None or not attachment.in_range:
            return
        nid = attachment.node
        node = world.try_get(nid, Lumina)
        if node is None or world.has(nid, Cooldown):
            return

        rate = scaling.generation_per_sec * ctx.dt
        generated = 0
        for target in list(node.targets):
            if not chance(ctx.random, rate):
                continue
            world.spawn(Packet(target=target, path=[nid], position=node.position))
            generated += 1

        if generated and chance(ctx.random, scaling.lumina_cooldown_per_generation):
            if enter_cooldown(world, nid) and on_transition is not None:
                on_transition(world, ctx, nid, NodeActivity.ACTIVE, NodeActivity.COOLDOWN)

    return generation_system


def make_packet_system(
    config: FieldConfig, scaling: Scaling,
) -> Callable[[World, TickContext], None]:
    """Move packets along their edges and resolve arrivals."""
    speed = config.packet_speed

    def _retrace(world: World, ctx: TickContext, eid: EntityId, packet: Packet) -> None:
        arrival = packet.target
        packet.path.pop()
        if packet.path and packet.path[-1] == arrival:
            packet.path.pop()
        if not packet.path:
            world.attach(eid, Arrival(node=arrival))
            return
        packet.target = packet.path.pop()
        packet.path.append(arrival)
        packet.t = 0.0
        if config.prune_returning and not chance(ctx.random, scaling.propagation_probability):
            world.despawn(eid)

    def _branch(
        world: World, ctx: TickContext, eid: EntityId, packet: Packet, node: Lumina,
    ) -> None:
        arrival = packet.target
        predecessor = packet.path[-1]
        child_path = packet.path + [arrival]
        for neighbor in node.targets:
            reflected = neighbor == predecessor
            if reflected:
                survives = chance(ctx.random, scaling.reflection_probability)
            else:
                survives = chance(ctx.random, scaling.propagation_probability)
            if survives:
                world.spawn(Packet(
                    target=neighbor,
                    path=list(child_path),
                    position=node.position,
                    returning=reflected,
                    distance=packet.distance,
                ))
        world.despawn(eid)

    def packet_system(world: World, ctx: TickContext) -> None:
        home = attached_node(world)
        for eid, (packet,) in world.query(Packet, Not(Arrival)):
            if not packet.path:
                world.despawn(eid)
                continue
            source = world.try_get(packet.path[-1], Lumina)
            dest = world.try_get(packet.target, Lumina)
            if source is None or dest is None:
                world.despawn(eid)
                continue

            length = vec.distance(source.position, dest.position)
            if length <= _EPSILON:
                packet.t = 1.0
            else:
                packet.t = min(max(packet.t + ctx.dt * speed / length, 0.0), 1.0)
            packet.position = vec.lerp(source.position, dest.position, packet.t)
            if packet.t < 1.0:
                continue

            packet.distance += length
            if packet.target == home:
                world.attach(eid, Arrival(node=packet.target))
            elif packet.returning:
                _retrace(world, ctx, eid, packet)
            else:
                _branch(world, ctx, eid, packet, dest)

    return packet_system


def make_delivery_system(
    scaling: Scaling,
    on_deliver: Callable[[World, TickContext, NodeId, float], None] | None = None,
) -> Callable[[World, TickContext], None]:
    """Pay out packets that finished at the attached node; drop the others."""

    def delivery_system(world: World, ctx: TickContext) -> None:
        found = find_ship(world)
        home = attached_node(world)
        for eid, (packet, arrival) in world.query(Packet, Arrival):
            if found is not None and home is not None and arrival.node == home:
                amount = packet.distance * scaling.energy_extraction
                add_energy(found[1], amount, scaling)
                if on_deliver is not None:
                    on_deliver(world, ctx, arrival.node, amount)
            world.despawn(eid)

    return delivery_system
