"""Per-upgrade weights and weighted sampling without replacement."""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence

from arena.rarity.upgrades import Upgrade, UpgradeType

RESIST_TYPES = (
    UpgradeType.FIRE_RESIST,
    UpgradeType.COLD_RESIST,
    UpgradeType.LIGHTNING_RESIST,
    UpgradeType.POISON_RESIST,
)


def _default_weights() -> Dict[UpgradeType, float]:
    weights = {upgrade_type: 1.0 for upgrade_type in UpgradeType}
    for upgrade_type in RESIST_TYPES:
        weights[upgrade_type] = 0.5
    return weights


@dataclass
class UpgradeWeightTable:
    """Relative weight per upgrade type; ``<= 0`` disables the type."""

    weights: Dict[UpgradeType, float] = field(default_factory=_default_weights)

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> "UpgradeWeightTable":
        table = cls()
        for key, value in data.items():
            table.weights[UpgradeType.parse(key)] = float(value)
        return table

    def get(self, upgrade_type: UpgradeType) -> float:
        return self.weights.get(upgrade_type, 0.0)

    def set(self, upgrade_type: UpgradeType, weight: float) -> None:
        self.weights[upgrade_type] = max(0.0, float(weight))


class Candidate(NamedTuple):
    upgrade: Upgrade
    type: UpgradeType

    @classmethod
    def of(cls, upgrade: Upgrade) -> "Candidate":
        return cls(upgrade, upgrade.upgrade_type)


def as_candidates(upgrades: Iterable[Upgrade]) -> List[Candidate]:
    return [Candidate.of(upgrade) for upgrade in upgrades if upgrade is not None]


class UpgradeWeightProvider:
    """Weighted picks over candidates, never the same candidate twice."""

    def __init__(self, table: Optional[UpgradeWeightTable] = None) -> None:
        self.table = table or UpgradeWeightTable()

    def pick_weighted(
        self,
        candidates: Sequence[Candidate],
        picks: int,
        rng: random.Random,
    ) -> List[Upgrade]:
        bag = [c for c in candidates if c.upgrade is not None and self.table.get(c.type) > 0.0]
        picks = min(picks, len(bag))
        if picks <= 0:
            return []
        weights = [max(0.0, self.table.get(c.type)) for c in bag]
        total = sum(weights)
        if total <= 0.0:
            return []

        result: List[Upgrade] = []
        for _ in range(picks):
            roll = rng.random() * total
            chosen = len(weights) - 1
            for index, weight in enumerate(weights):
                roll -= weight
                if roll <= 0.0:
                    chosen = index
                    break
            result.append(bag[chosen].upgrade)
            total -= weights[chosen]
            del bag[chosen]
            del weights[chosen]
            if not bag or total <= 0.0:
                break
        return result


__all__ = [
    "Candidate",
    "RESIST_TYPES",
    "UpgradeWeightProvider",
    "UpgradeWeightTable",
    "as_candidates",
]
