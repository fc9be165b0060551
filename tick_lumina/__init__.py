"""tick-lumina - a procedurally generated field of linked energy nodes."""

from tick_lumina.chunks import ChunkMap
from tick_lumina.components import (
    Arrival,
    Attachment,
    Cooldown,
    Lumina,
    Nearby,
    NodeActivity,
    Packet,
    Ship,
)
from tick_lumina.config import FieldConfig, Scaling
from tick_lumina.engine import Engine
from tick_lumina.graph import DisjointSet, LinkGraph
from tick_lumina.signals import SignalBus
from tick_lumina.simulation import RunSummary, Simulation
from tick_lumina.types import DeadEntityError, NodeId, RunStateError, TickContext
from tick_lumina.upgrades import Upgrade, Workshop
from tick_lumina.world import World
from tick_lumina.worldgen import NodeInit, generate_chunk

__all__ = [
    "Simulation",
    "RunSummary",
    "FieldConfig",
    "Scaling",
    "Engine",
    "World",
    "TickContext",
    "NodeId",
    "ChunkMap",
    "NodeInit",
    "generate_chunk",
    "DisjointSet",
    "LinkGraph",
    "SignalBus",
    "Lumina",
    "Cooldown",
    "Nearby",
    "NodeActivity",
    "Packet",
    "Arrival",
    "Ship",
    "Attachment",
    "Upgrade",
    "Workshop",
    "DeadEntityError",
    "RunStateError",
]
