"""Nearby tagging and ship attachment."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from tick_lumina import vec
from tick_lumina.chunks import ChunkMap
from tick_lumina.components import Attachment, Lumina, Nearby
from tick_lumina.config import FieldConfig
from tick_lumina.ship import find_ship
from tick_lumina.signals import ATTACHMENT_CHANGED, SignalBus
from tick_lumina.types import EntityId, NodeId

if TYPE_CHECKING:
    from tick_lumina.types import TickContext
    from tick_lumina.world import World

logger = logging.getLogger(__name__)


def current_attachment(world: World) -> Attachment | None:
    found = find_ship(world)
    if found is None:
        return None
    return world.try_get(found[0], Attachment)


def attached_node(world: World, in_range_only: bool = True) -> NodeId | None:
    """Id of the node the ship is attached to, if any."""
    attachment = current_attachment(world)
    if attachment is None or (in_range_only and not attachment.in_range):
        return None
    return attachment.node


def update_attachment(
    world: World, ship_id: EntityId, candidate: NodeId | None, bus: SignalBus,
) -> None:
    """Apply one tick of attachment rules for ``candidate``.

    Switching nodes publishes ``attachment_changed``; the first attach and
    range changes on the same node do not. Losing every candidate keeps
    the last node attached with ``in_range`` cleared.
    """
    attachment = world.try_get(ship_id, Attachment)
    if candidate is None:
        if attachment is not None and attachment.in_range:
            attachment.in_range = False
        return
    if attachment is None:
        world.attach(ship_id, Attachment(node=candidate))
        logger.debug("Ship attached to %d", candidate)
        return
    if attachment.node != candidate:
        bus.publish(ATTACHMENT_CHANGED, source=attachment.node, target=candidate)
        logger.debug("Ship attachment %d -> %d", attachment.node, candidate)
        world.attach(ship_id, Attachment(node=candidate))
        return
    attachment.in_range = True


def make_proximity_system(
    chunks: ChunkMap, bus: SignalBus, config: FieldConfig | None = None,
) -> Callable[[World, TickContext], None]:
    """Tag nearby nodes and track the ship's attachment each tick.

    Only nodes in the 3x3 chunk block around the ship are scanned. On a
    tie for nearest node the first one scanned wins.
    """
    if config is None:
        config = chunks.config
    nearby_sq = config.nearby_distance * config.nearby_distance
    attach_sq = config.attach_distance * config.attach_distance

    def proximity_system(world: World, ctx: TickContext) -> None:
        found = find_ship(world)
        if found is None:
            return
        ship_id, ship = found

        in_radius: set[NodeId] = set()
        candidate: NodeId | None = None
        best = attach_sq
        for nid in chunks.nodes_around(ship.position):
            node = world.try_get(nid, Lumina)
            if node is None:
                continue
            dsq = vec.distance_sq(node.position, ship.position)
            if dsq < nearby_sq:
                in_radius.add(nid)
                if not world.has(nid, Nearby):
                    world.attach(nid, Nearby())
            if dsq < best:
                best = dsq
                candidate = nid

        for nid, _ in world.query(Nearby):
            if nid not in in_radius:
                world.detach(nid, Nearby)

        update_attachment(world, ship_id, candidate, bus)

    return proximity_system
