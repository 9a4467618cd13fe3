"""Per-stat tiers and the multiplier curve that scales roll ranges."""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from pygame.math import Vector2

TIER_BEST = 1
TIER_WORST = 5
DEFAULT_TIER = 3

ROMAN = {1: "I", 2: "II", 3: "III", 4: "IV", 5: "V"}

IntRange = Tuple[int, int]


def roman(tier: int) -> str:
    return ROMAN[max(TIER_BEST, min(TIER_WORST, int(tier)))]


def clamp_tier(tier: int) -> int:
    return max(TIER_BEST, min(TIER_WORST, int(tier)))


def _round_half_away(value: float) -> int:
    if value >= 0.0:
        return int(value + 0.5)
    return -int(-value + 0.5)


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def evaluate_curve(keys: Sequence[Tuple[float, float]], x: float) -> float:
    """Piecewise-linear evaluation with the end keys held flat."""

    points = sorted(keys)
    if x <= points[0][0]:
        return points[0][1]
    if x >= points[-1][0]:
        return points[-1][1]
    for (x0, y0), (x1, y1) in zip(points, points[1:]):
        if x0 <= x <= x1:
            if x1 == x0:
                return y1
            return _lerp(y0, y1, (x - x0) / (x1 - x0))
    return points[-1][1]


@dataclass
class TierSystem:
    """Tier per stat family, 1 = strongest roll, 5 = weakest."""

    damage_percent: int = DEFAULT_TIER
    damage_flat: int = DEFAULT_TIER
    attack_speed: int = DEFAULT_TIER
    crit_chance: int = DEFAULT_TIER
    crit_multiplier: int = DEFAULT_TIER

    hp_flat: int = DEFAULT_TIER
    hp_percent: int = DEFAULT_TIER
    regen: int = DEFAULT_TIER
    armor: int = DEFAULT_TIER
    evasion: int = DEFAULT_TIER
    resist: int = DEFAULT_TIER

    knife_radius: int = DEFAULT_TIER
    knife_splash_radius: int = DEFAULT_TIER
    knife_lifesteal: int = DEFAULT_TIER
    knife_max_targets: int = DEFAULT_TIER

    shooter_lifetime: int = DEFAULT_TIER
    shooter_force: int = DEFAULT_TIER
    shooter_projectiles: int = DEFAULT_TIER
    shooter_accuracy: int = DEFAULT_TIER

    # X: 0 = worst tier .. 1 = best tier, Y: multiplier
    multiplier_curve: List[Tuple[float, float]] = field(default_factory=list)
    use_curve: bool = False
    min_mult: float = 0.5
    max_mult: float = 2.0

    @classmethod
    def from_dict(cls, data: Dict) -> "TierSystem":
        curve = [(float(x), float(y)) for x, y in data.get("curve", [])]
        return cls(
            multiplier_curve=curve,
            use_curve=bool(data.get("useCurve", False)),
            min_mult=float(data.get("minMult", 0.5)),
            max_mult=float(data.get("maxMult", 2.0)),
        )

    def roll_all(self, rng: random.Random) -> None:
        for name in TIER_FIELDS:
            setattr(self, name, rng.randint(TIER_BEST, TIER_WORST))

    def set_all(self, tier: int) -> None:
        tier = clamp_tier(tier)
        for name in TIER_FIELDS:
            setattr(self, name, tier)

    def snapshot(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in TIER_FIELDS}

    def improve(self, name: str, steps: int = 1) -> bool:
        """Move one tier toward the best tier; return whether it moved."""

        before = getattr(self, name)
        after = clamp_tier(before - max(1, steps))
        setattr(self, name, after)
        return after != before

    def mult(self, tier: int) -> float:
        tier = clamp_tier(tier)
        x = (TIER_WORST - tier) / float(TIER_WORST - TIER_BEST)
        if self.use_curve and self.multiplier_curve:
            return max(0.0, evaluate_curve(self.multiplier_curve, x))
        return _lerp(max(0.0, self.min_mult), max(0.0, self.max_mult), x)

    def scale(self, base_range: Vector2, tier: int) -> Vector2:
        return Vector2(base_range) * self.mult(tier)

    def scale_int(
        self,
        base_range: IntRange,
        tier: int,
        floor: Optional[int] = None,
    ) -> IntRange:
        m = self.mult(tier)
        low = _round_half_away(base_range[0] * m)
        high = _round_half_away(base_range[1] * m)
        if low > high:
            low, high = high, low
        if floor is not None:
            low = max(floor, low)
            high = max(floor, high)
        return low, high

    def scale_multiplier_like(self, base_range: Vector2, tier: int) -> Vector2:
        m = self.mult(tier)
        low = 1.0 + (base_range[0] - 1.0) * m
        high = 1.0 + (base_range[1] - 1.0) * m
        if low > high:
            low, high = high, low
        return Vector2(low, high)


TIER_FIELDS: Tuple[str, ...] = (
    "damage_percent",
    "damage_flat",
    "attack_speed",
    "crit_chance",
    "crit_multiplier",
    "hp_flat",
    "hp_percent",
    "regen",
    "armor",
    "evasion",
    "resist",
    "knife_radius",
    "knife_splash_radius",
    "knife_lifesteal",
    "knife_max_targets",
    "shooter_lifetime",
    "shooter_force",
    "shooter_projectiles",
    "shooter_accuracy",
)


__all__ = [
    "DEFAULT_TIER",
    "TIER_BEST",
    "TIER_FIELDS",
    "TIER_WORST",
    "TierSystem",
    "clamp_tier",
    "evaluate_curve",
    "roman",
]
