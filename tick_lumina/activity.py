"""Node activity: ``Active`` <-> ``Cooldown``."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from tick_lumina.components import Cooldown, Lumina, NodeActivity
from tick_lumina.config import Scaling, chance
from tick_lumina.proximity import attached_node
from tick_lumina.types import NodeId

if TYPE_CHECKING:
    from tick_lumina.types import TickContext
    from tick_lumina.world import World

logger = logging.getLogger(__name__)

_Transition = Callable[["World", "TickContext", NodeId, NodeActivity, NodeActivity], None]


def activity_of(world: World, node: NodeId) -> NodeActivity:
    if world.has(node, Cooldown):
        return NodeActivity.COOLDOWN
    return NodeActivity.ACTIVE


def enter_cooldown(world: World, node: NodeId) -> bool:
    """Put a live node into cooldown. False if it already was, or is gone."""
    if not world.has(node, Lumina) or world.has(node, Cooldown):
        return False
    world.attach(node, Cooldown())
    logger.debug("Node %d cooling down", node)
    return True


def make_resume_system(
    scaling: Scaling, on_transition: _Transition | None = None,
) -> Callable[[World, TickContext], None]:
    """Return cooled-down nodes to ``Active`` at ``lumina_resume_per_sec``.

    The node the ship is attached to never resumes, in range or not.
    """

    def resume_system(world: World, ctx: TickContext) -> None:
        held = attached_node(world, in_range_only=False)
        rate = scaling.lumina_resume_per_sec * ctx.dt
        for nid, _ in world.query(Cooldown):
            if nid == held:
                continue
            if chance(ctx.random, rate):
                world.detach(nid, Cooldown)
                logger.debug("Node %d resumed", nid)
                if on_transition is not None:
                    on_transition(
                        world, ctx, nid, NodeActivity.COOLDOWN, NodeActivity.ACTIVE
                    )

    return resume_system
