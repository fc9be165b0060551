"""Node links: a disjoint set for connectivity plus a per-node degree cap."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Hashable, Iterator

from tick_lumina.components import Lumina
from tick_lumina.signals import ATTACHMENT_CHANGED, SignalBus
from tick_lumina.types import NodeId

if TYPE_CHECKING:
    from tick_lumina.types import TickContext
    from tick_lumina.world import World

logger = logging.getLogger(__name__)


class DisjointSet:
    """Union-find with union by rank and path compression.

    Elements are added lazily by :meth:`find` and :meth:`union`.
    """

    def __init__(self) -> None:
        self._parent: dict[Hashable, Hashable] = {}
        self._rank: dict[Hashable, int] = {}

    def add(self, item: Hashable) -> None:
        if item not in self._parent:
            self._parent[item] = item
            self._rank[item] = 0

    def find(self, item: Hashable) -> Hashable:
        self.add(item)
        root = item
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[item] != root:
            self._parent[item], item = root, self._parent[item]
        return root

    def union(self, a: Hashable, b: Hashable) -> bool:
        """Merge the sets of ``a`` and ``b``. False if already merged."""
        ra = self.find(a)
        rb = self.find(b)
        if ra == rb:
            return False
        if self._rank[ra] < self._rank[rb]:
            ra, rb = rb, ra
        self._parent[rb] = ra
        if self._rank[ra] == self._rank[rb]:
            self._rank[ra] += 1
        return True

    def connected(self, a: Hashable, b: Hashable) -> bool:
        if a not in self._parent or b not in self._parent:
            return a == b
        return self.find(a) == self.find(b)

    def clear(self) -> None:
        self._parent.clear()
        self._rank.clear()

    def __contains__(self, item: object) -> bool:
        return item in self._parent

    def __len__(self) -> int:
        return len(self._parent)


class LinkGraph:
    """Links between lumina nodes.

    Targets live on each node's :class:`Lumina` component; this object
    owns the connectivity structure and the set of nodes that ever took
    part in a link. Two nodes that are already connected, directly or
    through other nodes, are never linked again, so the links always
    form a forest.
    """

    def __init__(self, max_links: int) -> None:
        self.max_links = max_links
        self._sets = DisjointSet()
        self._links: set[tuple[NodeId, NodeId]] = set()
        self._network: set[NodeId] = set()

    def try_link(self, world: World, a: NodeId, b: NodeId) -> bool:
        """Link ``a`` and ``b``. Returns False and changes nothing when rejected."""
        if a == b:
            return False
        node_a = world.try_get(a, Lumina)
        node_b = world.try_get(b, Lumina)
        if node_a is None or node_b is None:
            return False
        if self._sets.connected(a, b):
            return False
        if len(node_a.targets) >= self.max_links or len(node_b.targets) >= self.max_links:
            return False

        self._sets.union(a, b)
        node_a.targets.append(b)
        node_b.targets.append(a)
        self._links.add((min(a, b), max(a, b)))
        self._network.add(a)
        self._network.add(b)
        logger.debug("Linked %d <-> %d (network size %d)", a, b, len(self._network))
        return True

    def connected(self, a: NodeId, b: NodeId) -> bool:
        return self._sets.connected(a, b)

    def linked(self, a: NodeId, b: NodeId) -> bool:
        return (min(a, b), max(a, b)) in self._links

    def links(self) -> list[tuple[NodeId, NodeId]]:
        return sorted(self._links)

    def __iter__(self) -> Iterator[tuple[NodeId, NodeId]]:
        return iter(self.links())

    def __len__(self) -> int:
        return len(self._links)

    @property
    def network_size(self) -> int:
        return len(self._network)

    def clear(self) -> None:
        self._sets.clear()
        self._links.clear()
        self._network.clear()


def make_link_system(
    bus: SignalBus, graph: LinkGraph,
    on_link: Callable[[World, NodeId, NodeId], None] | None = None,
) -> Callable[[World, TickContext], None]:
    """Drain ``bus`` and try to link the endpoints of every attachment change."""
    world_in_tick: World | None = None

    def _on_attachment_changed(signal_name: str, data: dict) -> None:
        if world_in_tick is None:
            return
        source, target = data["source"], data["target"]
        if graph.try_link(world_in_tick, source, target) and on_link is not None:
            on_link(world_in_tick, source, target)

    bus.subscribe(ATTACHMENT_CHANGED, _on_attachment_changed)

    def link_system(world: World, ctx: TickContext) -> None:
        nonlocal world_in_tick
        world_in_tick = world
        try:
            bus.flush()
        finally:
            world_in_tick = None

    return link_system
