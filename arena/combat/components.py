"""Concrete weapon and health components that the rarity engine upgrades."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

RESIST_CAP = 0.95


@dataclass
class Knife:
    damage: int = 10
    crit_chance: float = 0.05
    crit_multiplier: float = 1.5
    lifesteal_percent: float = 0.0
    radius: float = 1.5
    splash_radius: float = 0.5
    max_targets_per_tick: int = 1
    extra_text: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "Knife":
        return cls(
            damage=int(data.get("damage", 10)),
            crit_chance=float(data.get("critChance", 0.05)),
            crit_multiplier=float(data.get("critMult", 1.5)),
            lifesteal_percent=float(data.get("lifesteal", 0.0)),
            radius=float(data.get("radius", 1.5)),
            splash_radius=float(data.get("splashRadius", 0.5)),
            max_targets_per_tick=int(data.get("maxTargets", 1)),
            extra_text=str(data.get("extraText", "")),
        )


@dataclass
class Shooter:
    damage: int = 8
    crit_chance: float = 0.05
    crit_multiplier: float = 1.5
    bullet_lifetime: float = 2.0
    shoot_force: float = 10.0
    projectile_count: int = 1
    spread_angle: float = 10.0
    extra_text: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "Shooter":
        return cls(
            damage=int(data.get("damage", 8)),
            crit_chance=float(data.get("critChance", 0.05)),
            crit_multiplier=float(data.get("critMult", 1.5)),
            bullet_lifetime=float(data.get("bulletLifetime", 2.0)),
            shoot_force=float(data.get("shootForce", 10.0)),
            projectile_count=int(data.get("projectiles", 1)),
            spread_angle=float(data.get("spread", 10.0)),
            extra_text=str(data.get("extraText", "")),
        )


@dataclass
class WeaponTick:
    """Attack timer; upgrades shorten ``interval`` and restart it while playing."""

    interval: float = 1.0
    elapsed: float = 0.0
    running: bool = False
    playing: bool = False
    restarts: int = 0

    @classmethod
    def from_dict(cls, data: Dict) -> "WeaponTick":
        return cls(interval=float(data.get("interval", 1.0)))

    def reset_and_start(self) -> None:
        self.elapsed = 0.0
        self.running = True
        self.restarts += 1


@dataclass
class Health:
    max_health: int = 100
    current_health: int = 100
    regen_rate: float = 0.0
    armor: float = 0.0
    evasion: float = 0.0
    fire_resist: float = 0.0
    cold_resist: float = 0.0
    lightning_resist: float = 0.0
    poison_resist: float = 0.0
    extra_text: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "Health":
        max_health = int(data.get("maxHealth", 100))
        resists = data.get("resists", {})
        return cls(
            max_health=max_health,
            current_health=int(data.get("currentHealth", max_health)),
            regen_rate=float(data.get("regen", 0.0)),
            armor=float(data.get("armor", 0.0)),
            evasion=float(data.get("evasion", 0.0)),
            fire_resist=_resist(resists, "fire"),
            cold_resist=_resist(resists, "cold"),
            lightning_resist=_resist(resists, "lightning"),
            poison_resist=_resist(resists, "poison"),
            extra_text=str(data.get("extraText", "")),
        )


def _resist(resists: Dict, element: str) -> float:
    return max(0.0, min(RESIST_CAP, float(resists.get(element, 0.0))))


__all__ = ["RESIST_CAP", "Health", "Knife", "Shooter", "WeaponTick"]
