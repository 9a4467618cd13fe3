"""Capability modules the rarity engine mutates.

Upgrades never see a concrete component. They talk to the narrow
protocols below, and a target opts into an upgrade family simply by
exposing the matching module on its :class:`ModuleSet`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from arena.combat.components import RESIST_CAP, Health, Knife, Shooter, WeaponTick


class DamageModule(Protocol):
    damage: int


class CritModule(Protocol):
    crit_chance: float
    crit_multiplier: float


class AttackSpeedModule(Protocol):
    interval: float

    def reset_and_start_if_playing(self) -> None:
        ...


class KnifeModule(Protocol):
    lifesteal_percent: float
    radius: float
    splash_radius: float
    max_targets_per_tick: int


class ShooterModule(Protocol):
    bullet_lifetime: float
    shoot_force: float
    projectile_count: int
    spread_angle: float


class HealthModule(Protocol):
    max_health: int
    regen_rate: float
    armor: float
    evasion: float
    fire_resist: float
    cold_resist: float
    lightning_resist: float
    poison_resist: float


class TextSink(Protocol):
    @property
    def text(self) -> str:
        ...

    def set_text(self, text: str) -> None:
        ...


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def _clamp_resist(value: float) -> float:
    return max(0.0, min(RESIST_CAP, value))


class KnifeAdapter:
    """Damage, crit, knife and text-sink modules over a :class:`Knife`."""

    def __init__(self, knife: Knife) -> None:
        self._k = knife

    @property
    def damage(self) -> int:
        return self._k.damage

    @damage.setter
    def damage(self, value: int) -> None:
        self._k.damage = int(value)

    @property
    def crit_chance(self) -> float:
        return self._k.crit_chance

    @crit_chance.setter
    def crit_chance(self, value: float) -> None:
        self._k.crit_chance = _clamp01(value)

    @property
    def crit_multiplier(self) -> float:
        return self._k.crit_multiplier

    @crit_multiplier.setter
    def crit_multiplier(self, value: float) -> None:
        self._k.crit_multiplier = value

    @property
    def lifesteal_percent(self) -> float:
        return self._k.lifesteal_percent

    @lifesteal_percent.setter
    def lifesteal_percent(self, value: float) -> None:
        self._k.lifesteal_percent = _clamp01(value)

    @property
    def radius(self) -> float:
        return self._k.radius

    @radius.setter
    def radius(self, value: float) -> None:
        self._k.radius = value

    @property
    def splash_radius(self) -> float:
        return self._k.splash_radius

    @splash_radius.setter
    def splash_radius(self, value: float) -> None:
        self._k.splash_radius = value

    @property
    def max_targets_per_tick(self) -> int:
        return self._k.max_targets_per_tick

    @max_targets_per_tick.setter
    def max_targets_per_tick(self, value: int) -> None:
        self._k.max_targets_per_tick = int(value)

    @property
    def text(self) -> str:
        return self._k.extra_text or ""

    def set_text(self, text: str) -> None:
        self._k.extra_text = text


class ShooterAdapter:
    """Damage, crit, shooter and text-sink modules over a :class:`Shooter`."""

    def __init__(self, shooter: Shooter) -> None:
        self._s = shooter

    @property
    def damage(self) -> int:
        return self._s.damage

    @damage.setter
    def damage(self, value: int) -> None:
        self._s.damage = int(value)

    @property
    def crit_chance(self) -> float:
        return self._s.crit_chance

    @crit_chance.setter
    def crit_chance(self, value: float) -> None:
        self._s.crit_chance = _clamp01(value)

    @property
    def crit_multiplier(self) -> float:
        return self._s.crit_multiplier

    @crit_multiplier.setter
    def crit_multiplier(self, value: float) -> None:
        self._s.crit_multiplier = value

    @property
    def bullet_lifetime(self) -> float:
        return self._s.bullet_lifetime

    @bullet_lifetime.setter
    def bullet_lifetime(self, value: float) -> None:
        self._s.bullet_lifetime = value

    @property
    def shoot_force(self) -> float:
        return self._s.shoot_force

    @shoot_force.setter
    def shoot_force(self, value: float) -> None:
        self._s.shoot_force = value

    @property
    def projectile_count(self) -> int:
        return self._s.projectile_count

    @projectile_count.setter
    def projectile_count(self, value: int) -> None:
        self._s.projectile_count = int(value)

    @property
    def spread_angle(self) -> float:
        return self._s.spread_angle

    @spread_angle.setter
    def spread_angle(self, value: float) -> None:
        self._s.spread_angle = max(0.0, value)

    @property
    def text(self) -> str:
        return self._s.extra_text or ""

    def set_text(self, text: str) -> None:
        self._s.extra_text = text


class TickAdapter:
    def __init__(self, tick: WeaponTick) -> None:
        self._t = tick

    @property
    def interval(self) -> float:
        return self._t.interval

    @interval.setter
    def interval(self, value: float) -> None:
        self._t.interval = value

    def reset_and_start_if_playing(self) -> None:
        if self._t.playing:
            self._t.reset_and_start()


class HealthAdapter:
    """Health module and text sink over a :class:`Health` component."""

    def __init__(self, health: Health) -> None:
        self._h = health

    @property
    def max_health(self) -> int:
        return self._h.max_health

    @max_health.setter
    def max_health(self, value: int) -> None:
        self._h.max_health = max(1, int(value))
        self._h.current_health = min(self._h.current_health, self._h.max_health)

    @property
    def regen_rate(self) -> float:
        return self._h.regen_rate

    @regen_rate.setter
    def regen_rate(self, value: float) -> None:
        self._h.regen_rate = max(0.0, value)

    @property
    def armor(self) -> float:
        return self._h.armor

    @armor.setter
    def armor(self, value: float) -> None:
        self._h.armor = max(0.0, value)

    @property
    def evasion(self) -> float:
        return self._h.evasion

    @evasion.setter
    def evasion(self, value: float) -> None:
        self._h.evasion = max(0.0, value)

    @property
    def fire_resist(self) -> float:
        return self._h.fire_resist

    @fire_resist.setter
    def fire_resist(self, value: float) -> None:
        self._h.fire_resist = _clamp_resist(value)

    @property
    def cold_resist(self) -> float:
        return self._h.cold_resist

    @cold_resist.setter
    def cold_resist(self, value: float) -> None:
        self._h.cold_resist = _clamp_resist(value)

    @property
    def lightning_resist(self) -> float:
        return self._h.lightning_resist

    @lightning_resist.setter
    def lightning_resist(self, value: float) -> None:
        self._h.lightning_resist = _clamp_resist(value)

    @property
    def poison_resist(self) -> float:
        return self._h.poison_resist

    @poison_resist.setter
    def poison_resist(self, value: float) -> None:
        self._h.poison_resist = _clamp_resist(value)

    @property
    def text(self) -> str:
        return self._h.extra_text or ""

    def set_text(self, text: str) -> None:
        self._h.extra_text = text


@dataclass
class ModuleSet:
    """Capability modules found on one target; ``None`` means unsupported."""

    damage: Optional[DamageModule] = None
    crit: Optional[CritModule] = None
    attack: Optional[AttackSpeedModule] = None
    knife: Optional[KnifeModule] = None
    shooter: Optional[ShooterModule] = None
    health: Optional[HealthModule] = None
    ui: Optional[TextSink] = None

    @classmethod
    def from_components(
        cls,
        knife: Optional[Knife] = None,
        shooter: Optional[Shooter] = None,
        tick: Optional[WeaponTick] = None,
        health: Optional[Health] = None,
    ) -> "ModuleSet":
        knife_adapter = KnifeAdapter(knife) if knife is not None else None
        shooter_adapter = ShooterAdapter(shooter) if shooter is not None else None
        health_adapter = HealthAdapter(health) if health is not None else None
        weapon = knife_adapter or shooter_adapter
        return cls(
            damage=weapon,
            crit=weapon,
            attack=TickAdapter(tick) if tick is not None else None,
            knife=knife_adapter,
            shooter=shooter_adapter,
            health=health_adapter,
            ui=knife_adapter or shooter_adapter or health_adapter,
        )

    def get(self, key: str):
        """Return the module registered under ``key`` or raise ``KeyError``."""

        module = getattr(self, key, None) if key in MODULE_KEYS else None
        if module is None:
            raise KeyError(f"Module '{key}' is not present")
        return module


MODULE_KEYS = ("damage", "crit", "attack", "knife", "shooter", "health", "ui")


__all__ = [
    "AttackSpeedModule",
    "CritModule",
    "DamageModule",
    "HealthAdapter",
    "HealthModule",
    "KnifeAdapter",
    "KnifeModule",
    "MODULE_KEYS",
    "ModuleSet",
    "ShooterAdapter",
    "ShooterModule",
    "TextSink",
    "TickAdapter",
]
