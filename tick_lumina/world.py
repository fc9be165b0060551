"""World - entity arena and component storage with queries.

Nodes, packets and the ship are all entities. Anything that relates two
entities stores the other's integer id and looks it up here, so a node
id stays valid for as long as the node is alive and a stale id simply
stops resolving.
"""

from __future__ import annotations

from typing import Any, Generator, TypeVar, Union, cast

from tick_lumina.filters import Not
from tick_lumina.types import DeadEntityError, EntityId

T = TypeVar("T")

# Query arguments: plain component types or Not sentinels.
QueryArg = Union[type, Not]


class World:
    def __init__(self) -> None:
        self._components: dict[type, dict[int, Any]] = {}
        self._next_id: int = 0
        self._alive: set[int] = set()

    def spawn(self, *components: Any) -> EntityId:
        eid = self._next_id
        self._next_id += 1
        self._alive.add(eid)
        for component in components:
            self.attach(eid, component)
        return eid

    def despawn(self, entity_id: EntityId) -> None:
        self._alive.discard(entity_id)
        for store in self._components.values():
            store.pop(entity_id, None)

    def attach(self, entity_id: EntityId, component: Any) -> None:
        if entity_id not in self._alive:
            raise DeadEntityError(
                entity_id,
                f"Cannot attach {type(component).__name__} to dead entity {entity_id}",
            )
        self._components.setdefault(type(component), {})[entity_id] = component

    def detach(self, entity_id: EntityId, component_type: type) -> None:
        store = self._components.get(component_type)
        if store is not None:
            store.pop(entity_id, None)

    def get(self, entity_id: EntityId, component_type: type[T]) -> T:
        if entity_id not in self._alive:
            raise DeadEntityError(entity_id, f"Entity {entity_id} is not alive")
        store = self._components.get(component_type)
        if store is None or entity_id not in store:
            raise KeyError(
                f"Entity {entity_id} has no {component_type.__name__} component"
            )
        return cast(T, store[entity_id])

    def try_get(self, entity_id: EntityId, component_type: type[T]) -> T | None:
        """Like :meth:`get`, but ``None`` for dead entities or missing components."""
        if entity_id not in self._alive:
            return None
        store = self._components.get(component_type)
        if store is None:
            return None
        return cast("T | None", store.get(entity_id))

    def has(self, entity_id: EntityId, component_type: type) -> bool:
        if entity_id not in self._alive:
            return False
        store = self._components.get(component_type)
        return store is not None and entity_id in store

    def query(
        self, *args: QueryArg
    ) -> Generator[tuple[EntityId, tuple[Any, ...]], None, None]:
        required: list[type] = []
        excluded: list[type] = []
        for arg in args:
            if isinstance(arg, Not):
                excluded.append(arg.ctype)
            else:
                required.append(arg)
        if not required:
            return

        base_store = self._components.get(required[0])
        if base_store is None:
            return

        # Snapshot ids so systems may spawn and despawn while iterating.
        for eid in list(base_store):
            if eid not in self._alive:
                continue
            if any(eid in self._components.get(ctype, ()) for ctype in excluded):
                continue

            components: list[Any] = []
            for ctype in required:
                store = self._components.get(ctype)
                if store is None or eid not in store:
                    break
                components.append(store[eid])
            else:
                yield eid, tuple(components)

    def count(self, component_type: type) -> int:
        store = self._components.get(component_type)
        if store is None:
            return 0
        return sum(1 for eid in store if eid in self._alive)

    def entities(self) -> frozenset[EntityId]:
        return frozenset(self._alive)

    def alive(self, entity_id: EntityId) -> bool:
        return entity_id in self._alive

    def clear(self) -> None:
        """Drop every entity. Ids are not reused afterwards."""
        self._components.clear()
        self._alive.clear()
