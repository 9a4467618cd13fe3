"""Upgrade variants, one per stat family.

Each variant reads its tier, scales its authored range, samples a value
with the context RNG, mutates one module stat through the reversal
engine and appends a one-line note. The returned :class:`StatDelta` is
the undo record.
"""
from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple, Type

from pygame.math import Vector2

from arena.combat.components import RESIST_CAP
from arena.rarity.modules import ModuleSet
from arena.rarity.ranges import UpgradeRanges
from arena.rarity.rarity import Rarity
from arena.rarity.reversal import StatDelta, read, shift
from arena.rarity.tiers import TierSystem, roman

ATTACK_INTERVAL_FLOOR = 0.05
CRIT_CHANCE_ODDS = 0.6
SHOOTER_LIFETIME_ODDS = 0.5


class UpgradeType(Enum):
    DAMAGE_FLAT = "damage_flat"
    DAMAGE_PERCENT_AS_FLAT = "damage_percent_as_flat"
    ATTACK_SPEED = "attack_speed"
    CRIT = "crit"
    HP_FLAT = "hp_flat"
    HP_PERCENT = "hp_percent"
    HP_REGEN = "hp_regen"
    ARMOR = "armor"
    EVASION = "evasion"
    ARMOR_PERCENT = "armor_percent"
    EVASION_PERCENT = "evasion_percent"
    FIRE_RESIST = "fire_resist"
    COLD_RESIST = "cold_resist"
    LIGHTNING_RESIST = "lightning_resist"
    POISON_RESIST = "poison_resist"
    KNIFE_LIFESTEAL = "knife_lifesteal"
    KNIFE_RADIUS = "knife_radius"
    KNIFE_SPLASH = "knife_splash"
    KNIFE_MAX_TARGETS = "knife_max_targets"
    SHOOTER_PROJECTILES = "shooter_projectiles"
    SHOOTER_RANGE = "shooter_range"
    SHOOTER_ACCURACY = "shooter_accuracy"

    @classmethod
    def parse(cls, value: str) -> "UpgradeType":
        key = str(value).strip()
        try:
            return cls[key.upper()]
        except KeyError:
            pass
        try:
            return cls(key.lower())
        except ValueError:
            raise ValueError(f"Unknown upgrade type '{value}'") from None


@dataclass
class WeaponContext:
    """Everything one roll needs; rebuilt for every operation."""

    rng: random.Random
    rarity: Rarity
    tiers: TierSystem
    ranges: UpgradeRanges
    modules: ModuleSet

    def has(self, module: str) -> bool:
        return getattr(self.modules, module, None) is not None


def _uniform(rng: random.Random, span: Vector2) -> float:
    return rng.uniform(span[0], span[1])


def _randint_within(rng: random.Random, low: float, high: float) -> int:
    """Integer draw that stays inside a float range when one exists."""

    first, last = math.ceil(low), math.floor(high)
    if first > last:
        return int(round(low))
    return rng.randint(first, last)


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def _pct(value: float) -> str:
    return f"{value * 100.0:.0f}"


class Upgrade:
    """Base class; subclasses set ``upgrade_type``, ``requires`` and ``label``."""

    upgrade_type: UpgradeType
    requires: Tuple[str, ...] = ()
    label: str = ""

    def is_applicable(self, ctx: WeaponContext) -> bool:
        return all(ctx.has(module) for module in self.requires)

    def apply(self, ctx: WeaponContext, notes: List[str]) -> StatDelta:
        raise NotImplementedError

    def describe_range(self, ctx: WeaponContext) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


# ----------------------------------------------------------------------
# Shared weapon upgrades
# ----------------------------------------------------------------------
class DamageFlatUpgrade(Upgrade):
    upgrade_type = UpgradeType.DAMAGE_FLAT
    requires = ("damage",)
    label = "Damage"

    def apply(self, ctx: WeaponContext, notes: List[str]) -> StatDelta:
        tier = ctx.tiers.damage_flat
        low, high = ctx.tiers.scale_int(ctx.ranges.damage_flat_add, tier, floor=0)
        add = ctx.rng.randint(low, high)
        delta = shift(ctx.modules, "damage", "damage", add, integer=True)
        notes.append(f"{delta.amount:+d} Damage (Tier {roman(tier)})")
        return delta

    def describe_range(self, ctx: WeaponContext) -> str:
        tier = ctx.tiers.damage_flat
        low, high = ctx.tiers.scale_int(ctx.ranges.damage_flat_add, tier, floor=0)
        return f"Damage: +{low}-{high} (Tier {roman(tier)})"


class PercentAsFlatUpgrade(Upgrade):
    """Multiplicative roll turned into a flat delta against the current value."""

    module = ""
    stat = ""
    range_name = ""
    tier_name = ""
    integer = False

    def apply(self, ctx: WeaponContext, notes: List[str]) -> StatDelta:
        tier = getattr(ctx.tiers, self.tier_name)
        span = ctx.tiers.scale_multiplier_like(getattr(ctx.ranges, self.range_name), tier)
        mult = _uniform(ctx.rng, span)
        base = read(ctx.modules, self.module, self.stat)
        add = base * (mult - 1.0)
        if self.integer:
            add = int(round(add))
        delta = shift(
            ctx.modules,
            self.module,
            self.stat,
            add,
            low=0.0,
            integer=self.integer,
        )
        notes.append(f"+{_pct(mult - 1.0)}% {self.label} (Tier {roman(tier)})")
        return delta

    def describe_range(self, ctx: WeaponContext) -> str:
        tier = getattr(ctx.tiers, self.tier_name)
        span = ctx.tiers.scale_multiplier_like(getattr(ctx.ranges, self.range_name), tier)
        return (
            f"{self.label}: +{_pct(span[0] - 1.0)}-{_pct(span[1] - 1.0)}% "
            f"(Tier {roman(tier)})"
        )


class DamagePercentAsFlatUpgrade(PercentAsFlatUpgrade):
    upgrade_type = UpgradeType.DAMAGE_PERCENT_AS_FLAT
    requires = ("damage",)
    label = "Damage"
    module = "damage"
    stat = "damage"
    range_name = "damage_mult"
    tier_name = "damage_percent"
    integer = True


class AttackSpeedUpgrade(Upgrade):
    upgrade_type = UpgradeType.ATTACK_SPEED
    requires = ("attack",)
    label = "Attack Speed"

    def apply(self, ctx: WeaponContext, notes: List[str]) -> StatDelta:
        tier = ctx.tiers.attack_speed
        frac = _clamp01(_uniform(ctx.rng, ctx.tiers.scale(ctx.ranges.atk_speed_frac, tier)))
        before = read(ctx.modules, "attack", "interval")
        delta = shift(
            ctx.modules,
            "attack",
            "interval",
            -before * frac,
            low=ATTACK_INTERVAL_FLOOR,
        )
        notes.append(f"+{_pct(frac)}% Attack Speed (Tier {roman(tier)})")
        return delta

    def describe_range(self, ctx: WeaponContext) -> str:
        tier = ctx.tiers.attack_speed
        span = ctx.tiers.scale(ctx.ranges.atk_speed_frac, tier)
        return f"Attack Speed: +{_pct(span[0])}-{_pct(span[1])}% (Tier {roman(tier)})"


class CritUpgrade(Upgrade):
    """Dual mode: crit chance (60%) or crit multiplier."""

    upgrade_type = UpgradeType.CRIT
    requires = ("crit",)
    label = "Crit"

    def apply(self, ctx: WeaponContext, notes: List[str]) -> StatDelta:
        if ctx.rng.random() < CRIT_CHANCE_ODDS:
            tier = ctx.tiers.crit_chance
            add = _clamp01(_uniform(ctx.rng, ctx.tiers.scale(ctx.ranges.crit_chance_add, tier)))
            delta = shift(
                ctx.modules,
                "crit",
                "crit_chance",
                add,
                low=0.0,
                high=1.0,
                clamp_before=True,
            )
            notes.append(f"+{_pct(delta.amount)}% Crit Chance (Tier {roman(tier)})")
            return delta
        tier = ctx.tiers.crit_multiplier
        add = _uniform(ctx.rng, ctx.tiers.scale(ctx.ranges.crit_mult_add, tier))
        delta = shift(ctx.modules, "crit", "crit_multiplier", add, low=1.0)
        notes.append(f"+{delta.amount:.2f} Crit Mult (Tier {roman(tier)})")
        return delta

    def describe_range(self, ctx: WeaponContext) -> str:
        chance_tier = ctx.tiers.crit_chance
        mult_tier = ctx.tiers.crit_multiplier
        chance = ctx.tiers.scale(ctx.ranges.crit_chance_add, chance_tier)
        mult = ctx.tiers.scale(ctx.ranges.crit_mult_add, mult_tier)
        return (
            f"Crit Chance: +{_pct(chance[0])}-{_pct(chance[1])}% (Tier {roman(chance_tier)}) / "
            f"Crit Mult: +{mult[0]:.2f}-{mult[1]:.2f} (Tier {roman(mult_tier)})"
        )


# ----------------------------------------------------------------------
# Health / defense
# ----------------------------------------------------------------------
class HpFlatUpgrade(Upgrade):
    upgrade_type = UpgradeType.HP_FLAT
    requires = ("health",)
    label = "Max Health"

    def _span(self, ctx: WeaponContext) -> Vector2:
        return ctx.tiers.scale(Vector2(ctx.ranges.hp_flat_add), ctx.tiers.hp_flat)

    def apply(self, ctx: WeaponContext, notes: List[str]) -> StatDelta:
        tier = ctx.tiers.hp_flat
        span = self._span(ctx)
        add = _randint_within(ctx.rng, span[0], span[1])
        delta = shift(ctx.modules, "health", "max_health", add, low=1, integer=True)
        notes.append(f"{delta.amount:+d} Max Health (Tier {roman(tier)})")
        return delta

    def describe_range(self, ctx: WeaponContext) -> str:
        span = self._span(ctx)
        return (
            f"Max Health: +{math.ceil(span[0])}-{math.floor(span[1])} "
            f"(Tier {roman(ctx.tiers.hp_flat)})"
        )


class HpPercentUpgrade(PercentAsFlatUpgrade):
    upgrade_type = UpgradeType.HP_PERCENT
    requires = ("health",)
    label = "Max Health"
    module = "health"
    stat = "max_health"
    range_name = "hp_mult"
    tier_name = "hp_percent"
    integer = True


class AdditiveUpgrade(Upgrade):
    """Plain float addition with a floor of zero."""

    module = ""
    stat = ""
    range_name = ""
    tier_name = ""
    fmt = ".1f"
    unit = ""

    def apply(self, ctx: WeaponContext, notes: List[str]) -> StatDelta:
        tier = getattr(ctx.tiers, self.tier_name)
        add = max(0.0, _uniform(ctx.rng, ctx.tiers.scale(getattr(ctx.ranges, self.range_name), tier)))
        delta = shift(ctx.modules, self.module, self.stat, add, low=0.0)
        notes.append(
            f"+{format(delta.amount, self.fmt)}{self.unit} {self.label} (Tier {roman(tier)})"
        )
        return delta

    def describe_range(self, ctx: WeaponContext) -> str:
        tier = getattr(ctx.tiers, self.tier_name)
        span = ctx.tiers.scale(getattr(ctx.ranges, self.range_name), tier)
        return (
            f"{self.label}: +{format(span[0], self.fmt)}-{format(span[1], self.fmt)}{self.unit} "
            f"(Tier {roman(tier)})"
        )


class HpRegenUpgrade(AdditiveUpgrade):
    upgrade_type = UpgradeType.HP_REGEN
    requires = ("health",)
    label = "HP Regen/s"
    module = "health"
    stat = "regen_rate"
    range_name = "regen_add"
    tier_name = "regen"
    fmt = ".2f"


class ArmorUpgrade(AdditiveUpgrade):
    upgrade_type = UpgradeType.ARMOR
    requires = ("health",)
    label = "Armor"
    module = "health"
    stat = "armor"
    range_name = "armor_add"
    tier_name = "armor"


class EvasionUpgrade(AdditiveUpgrade):
    upgrade_type = UpgradeType.EVASION
    requires = ("health",)
    label = "Evasion"
    module = "health"
    stat = "evasion"
    range_name = "evasion_add"
    tier_name = "evasion"


class ArmorPercentUpgrade(PercentAsFlatUpgrade):
    upgrade_type = UpgradeType.ARMOR_PERCENT
    requires = ("health",)
    label = "Armor"
    module = "health"
    stat = "armor"
    range_name = "armor_mult"
    tier_name = "armor"


class EvasionPercentUpgrade(PercentAsFlatUpgrade):
    upgrade_type = UpgradeType.EVASION_PERCENT
    requires = ("health",)
    label = "Evasion"
    module = "health"
    stat = "evasion"
    range_name = "evasion_mult"
    tier_name = "evasion"


class ClampedAddUpgrade(Upgrade):
    """Additive fraction clamped into ``[0, high]`` on both apply and undo."""

    module = ""
    stat = ""
    range_name = ""
    tier_name = ""
    high = 1.0

    def apply(self, ctx: WeaponContext, notes: List[str]) -> StatDelta:
        tier = getattr(ctx.tiers, self.tier_name)
        span = ctx.tiers.scale(getattr(ctx.ranges, self.range_name), tier)
        add = _clamp01(_uniform(ctx.rng, span))
        delta = shift(
            ctx.modules,
            self.module,
            self.stat,
            add,
            low=0.0,
            high=self.high,
            clamp_before=True,
        )
        notes.append(f"+{_pct(delta.amount)}% {self.label} (Tier {roman(tier)})")
        return delta

    def describe_range(self, ctx: WeaponContext) -> str:
        tier = getattr(ctx.tiers, self.tier_name)
        span = ctx.tiers.scale(getattr(ctx.ranges, self.range_name), tier)
        return f"{self.label}: +{_pct(span[0])}-{_pct(span[1])}% (Tier {roman(tier)})"


class ResistUpgrade(ClampedAddUpgrade):
    requires = ("health",)
    module = "health"
    range_name = "resist_add"
    tier_name = "resist"
    high = RESIST_CAP


class FireResistUpgrade(ResistUpgrade):
    upgrade_type = UpgradeType.FIRE_RESIST
    label = "Fire Resist"
    stat = "fire_resist"


class ColdResistUpgrade(ResistUpgrade):
    upgrade_type = UpgradeType.COLD_RESIST
    label = "Cold Resist"
    stat = "cold_resist"


class LightningResistUpgrade(ResistUpgrade):
    upgrade_type = UpgradeType.LIGHTNING_RESIST
    label = "Lightning Resist"
    stat = "lightning_resist"


class PoisonResistUpgrade(ResistUpgrade):
    upgrade_type = UpgradeType.POISON_RESIST
    label = "Poison Resist"
    stat = "poison_resist"


# ----------------------------------------------------------------------
# Knife
# ----------------------------------------------------------------------
class KnifeLifestealUpgrade(ClampedAddUpgrade):
    upgrade_type = UpgradeType.KNIFE_LIFESTEAL
    requires = ("knife",)
    label = "Lifesteal"
    module = "knife"
    stat = "lifesteal_percent"
    range_name = "knife_lifesteal_add"
    tier_name = "knife_lifesteal"


class KnifeRadiusUpgrade(PercentAsFlatUpgrade):
    upgrade_type = UpgradeType.KNIFE_RADIUS
    requires = ("knife",)
    label = "Range"
    module = "knife"
    stat = "radius"
    range_name = "knife_radius_mult"
    tier_name = "knife_radius"


class KnifeSplashUpgrade(PercentAsFlatUpgrade):
    upgrade_type = UpgradeType.KNIFE_SPLASH
    requires = ("knife",)
    label = "AOE"
    module = "knife"
    stat = "splash_radius"
    range_name = "knife_splash_radius_mult"
    tier_name = "knife_splash_radius"


class CountUpgrade(Upgrade):
    """Integer count bump of at least one."""

    module = ""
    stat = ""
    range_name = ""
    tier_name = ""

    def apply(self, ctx: WeaponContext, notes: List[str]) -> StatDelta:
        tier = getattr(ctx.tiers, self.tier_name)
        low, high = ctx.tiers.scale_int(getattr(ctx.ranges, self.range_name), tier, floor=1)
        add = max(1, ctx.rng.randint(low, high))
        delta = shift(ctx.modules, self.module, self.stat, add, low=1, integer=True)
        notes.append(f"{delta.amount:+d} {self.label} (Tier {roman(tier)})")
        return delta

    def describe_range(self, ctx: WeaponContext) -> str:
        tier = getattr(ctx.tiers, self.tier_name)
        low, high = ctx.tiers.scale_int(getattr(ctx.ranges, self.range_name), tier, floor=1)
        return f"{self.label}: +{low}-{high} (Tier {roman(tier)})"


class KnifeMaxTargetsUpgrade(CountUpgrade):
    upgrade_type = UpgradeType.KNIFE_MAX_TARGETS
    requires = ("knife",)
    label = "Max Targets"
    module = "knife"
    stat = "max_targets_per_tick"
    range_name = "knife_max_targets_add"
    tier_name = "knife_max_targets"


# ----------------------------------------------------------------------
# Shooter
# ----------------------------------------------------------------------
class ShooterProjectilesUpgrade(CountUpgrade):
    upgrade_type = UpgradeType.SHOOTER_PROJECTILES
    requires = ("shooter",)
    label = "Projectiles"
    module = "shooter"
    stat = "projectile_count"
    range_name = "shooter_projectiles_add"
    tier_name = "shooter_projectiles"


class ShooterRangeUpgrade(Upgrade):
    """Dual mode: projectile lifetime or projectile speed, 50/50."""

    upgrade_type = UpgradeType.SHOOTER_RANGE
    requires = ("shooter",)
    label = "Projectile Range"

    def apply(self, ctx: WeaponContext, notes: List[str]) -> StatDelta:
        if ctx.rng.random() < SHOOTER_LIFETIME_ODDS:
            tier = ctx.tiers.shooter_lifetime
            add = max(0.0, _uniform(ctx.rng, ctx.tiers.scale(ctx.ranges.shooter_lifetime_add, tier)))
            delta = shift(ctx.modules, "shooter", "bullet_lifetime", add, low=0.0)
            notes.append(f"+{delta.amount:.1f}s Projectile Lifetime (Tier {roman(tier)})")
            return delta
        tier = ctx.tiers.shooter_force
        add = max(0.0, _uniform(ctx.rng, ctx.tiers.scale(ctx.ranges.shooter_force_add, tier)))
        delta = shift(ctx.modules, "shooter", "shoot_force", add, low=0.0)
        notes.append(f"+{delta.amount:.1f} Projectile Speed (Tier {roman(tier)})")
        return delta

    def describe_range(self, ctx: WeaponContext) -> str:
        life_tier = ctx.tiers.shooter_lifetime
        force_tier = ctx.tiers.shooter_force
        life = ctx.tiers.scale(ctx.ranges.shooter_lifetime_add, life_tier)
        force = ctx.tiers.scale(ctx.ranges.shooter_force_add, force_tier)
        return (
            f"Projectile Lifetime: +{life[0]:.1f}-{life[1]:.1f}s (Tier {roman(life_tier)}) / "
            f"Projectile Speed: +{force[0]:.1f}-{force[1]:.1f} (Tier {roman(force_tier)})"
        )


class ShooterAccuracyUpgrade(Upgrade):
    upgrade_type = UpgradeType.SHOOTER_ACCURACY
    requires = ("shooter",)
    label = "Accuracy"

    def apply(self, ctx: WeaponContext, notes: List[str]) -> StatDelta:
        tier = ctx.tiers.shooter_accuracy
        frac = _clamp01(
            _uniform(ctx.rng, ctx.tiers.scale(ctx.ranges.shooter_spread_reduce_frac, tier))
        )
        before = read(ctx.modules, "shooter", "spread_angle")
        delta = shift(ctx.modules, "shooter", "spread_angle", -before * frac, low=0.0)
        notes.append(f"+{_pct(frac)}% Accuracy (Tier {roman(tier)})")
        return delta

    def describe_range(self, ctx: WeaponContext) -> str:
        tier = ctx.tiers.shooter_accuracy
        span = ctx.tiers.scale(ctx.ranges.shooter_spread_reduce_frac, tier)
        return f"Accuracy: +{_pct(span[0])}-{_pct(span[1])}% (Tier {roman(tier)})"


UPGRADE_CLASSES: Dict[UpgradeType, Type[Upgrade]] = {
    cls.upgrade_type: cls
    for cls in (
        DamageFlatUpgrade,
        DamagePercentAsFlatUpgrade,
        AttackSpeedUpgrade,
        CritUpgrade,
        HpFlatUpgrade,
        HpPercentUpgrade,
        HpRegenUpgrade,
        ArmorUpgrade,
        EvasionUpgrade,
        ArmorPercentUpgrade,
        EvasionPercentUpgrade,
        FireResistUpgrade,
        ColdResistUpgrade,
        LightningResistUpgrade,
        PoisonResistUpgrade,
        KnifeLifestealUpgrade,
        KnifeRadiusUpgrade,
        KnifeSplashUpgrade,
        KnifeMaxTargetsUpgrade,
        ShooterProjectilesUpgrade,
        ShooterRangeUpgrade,
        ShooterAccuracyUpgrade,
    )
}


def create_upgrade(upgrade_type: UpgradeType) -> Upgrade:
    return UPGRADE_CLASSES[upgrade_type]()


def build_candidates(
    ctx: WeaponContext,
    exclude: Optional[set] = None,
) -> List[Upgrade]:
    """Fresh upgrade per applicable type, in ``UpgradeType`` order."""

    exclude = exclude or set()
    upgrades: List[Upgrade] = []
    for upgrade_type in UpgradeType:
        if upgrade_type in exclude:
            continue
        upgrade = create_upgrade(upgrade_type)
        if upgrade.is_applicable(ctx):
            upgrades.append(upgrade)
    return upgrades


__all__ = [
    "UPGRADE_CLASSES",
    "Upgrade",
    "UpgradeType",
    "WeaponContext",
    "build_candidates",
    "create_upgrade",
]
