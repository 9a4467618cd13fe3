"""Authored base ranges for every upgrade family."""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Tuple

from pygame.math import Vector2


def _vec(low: float, high: float):
    return field(default_factory=lambda: Vector2(low, high))


@dataclass
class UpgradeRanges:
    """Base ``(min, max)`` per stat family before tier scaling.

    Float ranges are ``Vector2`` pairs; the integer families keep plain
    ``(int, int)`` tuples so that scaling can round each end on its own.
    ``*_mult`` ranges are multiplier-like and scale around 1.0.
    """

    # Shared
    damage_mult: Vector2 = _vec(1.10, 1.30)
    damage_flat_add: Tuple[int, int] = (3, 12)
    atk_speed_frac: Vector2 = _vec(0.10, 0.25)
    crit_chance_add: Vector2 = _vec(0.05, 0.20)
    crit_mult_add: Vector2 = _vec(0.25, 1.00)

    # Health / defense
    hp_flat_add: Tuple[int, int] = (15, 60)
    hp_mult: Vector2 = _vec(1.05, 1.25)
    regen_add: Vector2 = _vec(0.10, 1.50)
    armor_add: Vector2 = _vec(1.0, 6.0)
    evasion_add: Vector2 = _vec(2.0, 12.0)
    armor_mult: Vector2 = _vec(1.05, 1.25)
    evasion_mult: Vector2 = _vec(1.05, 1.25)
    resist_add: Vector2 = _vec(0.05, 0.20)

    # Knife only
    knife_radius_mult: Vector2 = _vec(1.10, 1.30)
    knife_splash_radius_mult: Vector2 = _vec(1.10, 1.30)
    knife_lifesteal_add: Vector2 = _vec(0.05, 0.20)
    knife_max_targets_add: Tuple[int, int] = (1, 3)

    # Shooter only
    shooter_lifetime_add: Vector2 = _vec(0.5, 2.0)
    shooter_force_add: Vector2 = _vec(1.0, 4.0)
    shooter_projectiles_add: Tuple[int, int] = (1, 2)
    shooter_spread_reduce_frac: Vector2 = _vec(0.10, 0.35)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UpgradeRanges":
        """Override defaults from ``{"field": [min, max]}`` entries.

        Unknown keys and malformed pairs raise ``ValueError``.
        """

        ranges = cls()
        known = {f.name: f for f in fields(cls)}
        for key, value in data.items():
            if key not in known:
                raise ValueError(f"Unknown range '{key}'")
            try:
                low, high = value
            except (TypeError, ValueError):
                raise ValueError(f"Range '{key}' must be a [min, max] pair") from None
            if isinstance(getattr(ranges, key), tuple):
                setattr(ranges, key, (int(low), int(high)))
            else:
                setattr(ranges, key, Vector2(float(low), float(high)))
        return ranges


__all__ = ["UpgradeRanges"]
