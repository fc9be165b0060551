"""Upgrades bought between runs with network-size currency."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable

from tick_lumina.config import Scaling

logger = logging.getLogger(__name__)


class Upgrade(Enum):
    BATTERY = "battery"
    CAPACITOR = "capacitor"
    LINKS = "links"
    PROPAGATION = "propagation"
    REFLECTION = "reflection"
    EXTRACTION = "extraction"
    GENERATION = "generation"
    RECOVERY = "recovery"


@dataclass(frozen=True)
class UpgradeInfo:
    description: str
    base_cost: int
    max_level: int
    apply: Callable[[Scaling], Scaling]


_CATALOG: dict[Upgrade, UpgradeInfo] = {
    Upgrade.BATTERY: UpgradeInfo(
        "Battery +500", 10, 5,
        lambda s: replace(s, max_battery=s.max_battery + 500.0),
    ),
    Upgrade.CAPACITOR: UpgradeInfo(
        "Capacitor +500, drains 20% slower", 15, 5,
        lambda s: replace(
            s,
            max_capacitor=s.max_capacitor + 500.0,
            capacitor_drain_per_sec=s.capacitor_drain_per_sec * 0.8,
        ),
    ),
    Upgrade.LINKS: UpgradeInfo(
        "One more link per node", 25, 3,
        lambda s: replace(s, max_links=s.max_links + 1),
    ),
    Upgrade.PROPAGATION: UpgradeInfo(
        "Packets travel further", 20, 4,
        lambda s: replace(
            s, propagation_probability=min(s.propagation_probability + 0.1, 0.95)
        ),
    ),
    Upgrade.REFLECTION: UpgradeInfo(
        "Packets bounce back more often", 20, 4,
        lambda s: replace(
            s, reflection_probability=min(s.reflection_probability + 0.1, 0.95)
        ),
    ),
    Upgrade.EXTRACTION: UpgradeInfo(
        "Extract 50% more energy per packet", 30, 5,
        lambda s: replace(s, energy_extraction=s.energy_extraction * 1.5),
    ),
    Upgrade.GENERATION: UpgradeInfo(
        "Nodes emit packets faster", 15, 5,
        lambda s: replace(s, generation_per_sec=s.generation_per_sec + 0.5),
    ),
    Upgrade.RECOVERY: UpgradeInfo(
        "Nodes cool down less and recover sooner", 15, 3,
        lambda s: replace(
            s,
            lumina_cooldown_per_generation=s.lumina_cooldown_per_generation * 0.75,
            lumina_resume_per_sec=s.lumina_resume_per_sec * 1.5,
        ),
    ),
}


def info(upgrade: Upgrade) -> UpgradeInfo:
    return _CATALOG[upgrade]


def upgrade_cost(upgrade: Upgrade, level: int) -> int:
    """Price of the next level when ``level`` levels are already owned."""
    return _CATALOG[upgrade].base_cost * (level + 1)


class Workshop:
    """Currency, owned upgrade levels and the resulting scaling."""

    def __init__(self, scaling: Scaling | None = None, currency: int = 0) -> None:
        self._scaling = scaling if scaling is not None else Scaling()
        self._currency = currency
        self._levels: dict[Upgrade, int] = {}

    @property
    def scaling(self) -> Scaling:
        return self._scaling

    @property
    def currency(self) -> int:
        return self._currency

    def credit(self, amount: int) -> None:
        if amount < 0:
            raise ValueError("amount must not be negative")
        self._currency += amount

    def level(self, upgrade: Upgrade) -> int:
        return self._levels.get(upgrade, 0)

    def hidden(self, upgrade: Upgrade) -> bool:
        return self.level(upgrade) >= _CATALOG[upgrade].max_level

    def cost(self, upgrade: Upgrade) -> int:
        return upgrade_cost(upgrade, self.level(upgrade))

    def available(self) -> list[Upgrade]:
        return [u for u in Upgrade if not self.hidden(u)]

    def buy(self, upgrade: Upgrade) -> bool:
        if self.hidden(upgrade):
            return False
        price = self.cost(upgrade)
        if price > self._currency:
            return False
        self._currency -= price
        self._levels[upgrade] = self.level(upgrade) + 1
        self._scaling = _CATALOG[upgrade].apply(self._scaling)
        logger.info(
            "Bought %s level %d for %d", upgrade.value, self._levels[upgrade], price
        )
        return True

