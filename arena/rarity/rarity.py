"""Rarity values and the weighted rarity roll."""
from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict


class Rarity(Enum):
    COMMON = 0
    UNCOMMON = 1
    RARE = 2
    LEGENDARY = 3

    @property
    def label(self) -> str:
        return self.name.title()

    @property
    def max_rolls(self) -> int:
        return MAX_ROLLS[self]

    def next(self) -> "Rarity":
        """Return the next rarity up, saturating at legendary."""

        return Rarity(min(self.value + 1, Rarity.LEGENDARY.value))

    @classmethod
    def parse(cls, value: str) -> "Rarity":
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown rarity '{value}'") from None


MAX_ROLLS: Dict[Rarity, int] = {
    Rarity.COMMON: 1,
    Rarity.UNCOMMON: 2,
    Rarity.RARE: 4,
    Rarity.LEGENDARY: 5,
}

RARITY_COLORS: Dict[Rarity, str] = {
    Rarity.COMMON: "#B0B0B0",
    Rarity.UNCOMMON: "#3EC46D",
    Rarity.RARE: "#3AA0FF",
    Rarity.LEGENDARY: "#FFB347",
}


def max_rolls(rarity: Rarity) -> int:
    return MAX_ROLLS.get(rarity, 1)


def format_rarity(rarity: Rarity) -> str:
    return f"<color={RARITY_COLORS[rarity]}>{rarity.label}</color>"


@dataclass
class RarityWeights:
    """Relative odds of each rarity; negative weights count as zero."""

    common: float = 60.0
    uncommon: float = 25.0
    rare: float = 12.0
    legendary: float = 3.0

    @classmethod
    def from_dict(cls, data: Dict) -> "RarityWeights":
        defaults = cls()
        return cls(
            common=float(data.get("common", defaults.common)),
            uncommon=float(data.get("uncommon", defaults.uncommon)),
            rare=float(data.get("rare", defaults.rare)),
            legendary=float(data.get("legendary", defaults.legendary)),
        )

    def roll(self, rng: random.Random) -> Rarity:
        buckets = (
            (Rarity.COMMON, max(0.0, self.common)),
            (Rarity.UNCOMMON, max(0.0, self.uncommon)),
            (Rarity.RARE, max(0.0, self.rare)),
            (Rarity.LEGENDARY, max(0.0, self.legendary)),
        )
        total = sum(weight for _, weight in buckets)
        if total <= 0.0:
            return Rarity.COMMON
        roll = rng.random() * total
        for rarity, weight in buckets:
            if roll < weight:
                return rarity
            roll -= weight
        # Float drift can leave a sliver past the end; hand it to the last live bucket.
        return [rarity for rarity, weight in buckets if weight > 0.0][-1]


__all__ = [
    "MAX_ROLLS",
    "Rarity",
    "RarityWeights",
    "format_rarity",
    "max_rolls",
]
