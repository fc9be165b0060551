"""Components for nodes, packets and the ship."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from tick_lumina.types import ChunkCoord, NodeId, Vec2


class NodeActivity(Enum):
    ACTIVE = "active"
    COOLDOWN = "cooldown"


@dataclass
class Lumina:
    """A stationary node. ``targets`` lists linked node ids in link order."""

    position: Vec2
    chunk: ChunkCoord
    targets: list[NodeId] = field(default_factory=list)


@dataclass
class Cooldown:
    """Marker: the node cannot generate packets."""


@dataclass
class Nearby:
    """Marker: the node is within the ship's detection radius."""


@dataclass
class Packet:
    """Energy in transit from ``path[-1]`` towards ``target``."""

    target: NodeId
    path: list[NodeId]
    position: Vec2
    t: float = 0.0
    returning: bool = False
    distance: float = 0.0


@dataclass
class Arrival:
    """A packet whose route has finished at ``node``, awaiting delivery."""

    node: NodeId


@dataclass
class Ship:
    """The agent. ``thrust`` is the control input; its length is capped at 1."""

    position: Vec2 = (0.0, 0.0)
    velocity: Vec2 = (0.0, 0.0)
    energy: float = 0.0
    thrust: Vec2 = (0.0, 0.0)
    braking: bool = False


@dataclass
class Attachment:
    """The ship's association with its nearest reachable node."""

    node: NodeId
    in_range: bool = True
