"""Rarity controller: rolls, applies, rerolls and undoes upgrades."""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Set

from arena.engine.logger import ChannelLogger, disabled_channel
from arena.rarity.modules import ModuleSet
from arena.rarity.ranges import UpgradeRanges
from arena.rarity.rarity import Rarity, RarityWeights, max_rolls
from arena.rarity.report import NO_UPGRADES, build_block, header_line, merge_into_sink, report_lines
from arena.rarity.reversal import StatDelta, revert
from arena.rarity.tiers import TIER_FIELDS, TierSystem
from arena.rarity.upgrades import (
    Upgrade,
    UpgradeType,
    WeaponContext,
    build_candidates,
    create_upgrade,
)
from arena.rarity.weights import UpgradeWeightProvider, as_candidates


@dataclass(frozen=True)
class AppliedUpgrade:
    """Ledger entry: what was applied, how to undo it, and its note."""

    upgrade: Upgrade
    undo: StatDelta
    note: str

    @property
    def type(self) -> UpgradeType:
        return self.upgrade.upgrade_type


def make_rng(seed: int = 0) -> random.Random:
    """Seed 0 means a fresh unseeded generator."""

    return random.Random() if seed == 0 else random.Random(seed)


class WeaponRarityController:
    """Owns one target's rarity, tiers and ledger of applied upgrades.

    Every operation runs to completion synchronously. The ledger is only
    ever touched here; callers must serialise operations per target.
    """

    def __init__(
        self,
        modules: ModuleSet,
        *,
        rarity: Rarity = Rarity.COMMON,
        weights: Optional[RarityWeights] = None,
        ranges: Optional[UpgradeRanges] = None,
        tiers: Optional[TierSystem] = None,
        weight_provider: Optional[UpgradeWeightProvider] = None,
        seed: int = 0,
        rng: Optional[random.Random] = None,
        logger: Optional[ChannelLogger] = None,
        upgrade_logger: Optional[ChannelLogger] = None,
        roll_on_create: bool = False,
        name: str = "weapon",
    ) -> None:
        self.modules = modules
        self.name = name
        self._rarity = rarity
        self.weights = weights or RarityWeights()
        self.ranges = ranges or UpgradeRanges()
        self.tiers = tiers or TierSystem()
        self.weight_provider = weight_provider
        self.rng = rng or make_rng(seed)
        self._log = logger or disabled_channel("rarity")
        self._upgrade_log = upgrade_logger or disabled_channel("upgrades")
        self._applied: List[AppliedUpgrade] = []
        if roll_on_create:
            self.reroll_rarity_and_stats()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def rarity(self) -> Rarity:
        return self._rarity

    @property
    def max_rolls(self) -> int:
        return max_rolls(self._rarity)

    @property
    def applied(self) -> Sequence[AppliedUpgrade]:
        return tuple(self._applied)

    @property
    def selected_upgrade_count(self) -> int:
        return len(self._applied)

    @property
    def selected_upgrade_notes(self) -> List[str]:
        return [entry.note for entry in self._applied]

    def applied_types(self) -> List[UpgradeType]:
        return [entry.type for entry in self._applied]

    def build_context(self) -> WeaponContext:
        return WeaponContext(
            rng=self.rng,
            rarity=self._rarity,
            tiers=self.tiers,
            ranges=self.ranges,
            modules=self.modules,
        )

    # ------------------------------------------------------------------
    # Full rerolls
    # ------------------------------------------------------------------
    def reroll_rarity_and_stats(self) -> None:
        self._rarity = self.weights.roll(self.rng)
        self._log.info("%s rolled rarity %s", self.name, self._rarity.label)
        self.reroll_stats()

    def reroll_stats(self) -> None:
        """Roll fresh tiers, undo everything, then apply a new random set."""

        self.tiers.roll_all(self.rng)
        self._undo_all()

        ctx = self.build_context()
        pool = build_candidates(ctx)
        rolls = self.rng.randint(1, self.max_rolls) if pool else 0
        picked = self._pick(pool, rolls)
        if not picked:
            # Zero-weight pools land here too.
            self._log.info("%s has no applicable upgrades", self.name)
            self._write_block([header_line(self._rarity), NO_UPGRADES])
            return

        for upgrade in picked:
            self._apply_and_record(ctx, upgrade)
        self._log.info(
            "%s rerolled %d/%d upgrades at %s",
            self.name,
            len(self._applied),
            rolls,
            self._rarity.label,
        )
        self._refresh()

    # ------------------------------------------------------------------
    # Single slot operations
    # ------------------------------------------------------------------
    def reroll_stat_at(self, index: int, reroll_tiers: bool = True) -> bool:
        """Re-apply the same upgrade type at ``index`` with new values."""

        if not self._valid_index(index):
            self._log.debug("%s reroll_stat_at(%s): no such slot", self.name, index)
            return False
        if reroll_tiers:
            self.tiers.roll_all(self.rng)
        self._replace_at(index, self._applied[index].upgrade)
        self._refresh()
        return True

    def reroll_random_stat(self) -> bool:
        if not self._applied:
            self._log.debug("%s has no stat to reroll", self.name)
            return False
        return self.reroll_stat_at(self.rng.randrange(len(self._applied)))

    def reroll_stat_into_another_at(self, index: int) -> bool:
        """Swap the slot at ``index`` to a type held by no other slot."""

        if not self._valid_index(index):
            self._log.debug("%s reroll_stat_into_another_at(%s): no such slot", self.name, index)
            return False

        self.tiers.roll_all(self.rng)
        ctx = self.build_context()
        occupied = self._types_except(index)
        occupied.add(self._applied[index].type)
        alternatives = build_candidates(ctx, exclude=occupied)
        picked = self._pick(alternatives, 1)
        if not picked:
            self._log.debug("%s has no alternative upgrade type", self.name)
            return False

        self._replace_at(index, picked[0], ctx)
        self._refresh()
        return True

    def reroll_random_stat_into_another(self) -> bool:
        if not self._applied:
            return False
        return self.reroll_stat_into_another_at(self.rng.randrange(len(self._applied)))

    def add_random_upgrade(self) -> bool:
        """Append a new upgrade type; at the rarity cap, replace one instead."""

        if len(self._applied) >= self.max_rolls:
            if not self._applied:
                return False
            return self.reroll_stat_into_another_at(self.rng.randrange(len(self._applied)))

        ctx = self.build_context()
        alternatives = build_candidates(ctx, exclude=set(self.applied_types()))
        picked = self._pick(alternatives, 1)
        if not picked:
            self._log.debug("%s has no upgrade type left to add", self.name)
            return False
        self._apply_and_record(ctx, picked[0])
        self._refresh()
        return True

    def remove_random_upgrade(self) -> bool:
        if not self._applied:
            return False
        index = self.rng.randrange(len(self._applied))
        entry = self._applied.pop(index)
        self._revert(entry)
        self._log.info("%s removed %s", self.name, entry.type.value)
        self._refresh()
        return True

    # ------------------------------------------------------------------
    # Rarity and tiers
    # ------------------------------------------------------------------
    def upgrade_rarity_keep_stats(self) -> bool:
        """Step rarity up once; applied upgrades are left as they are."""

        if self._rarity is Rarity.LEGENDARY:
            return False
        self._rarity = self._rarity.next()
        self._log.info("%s upgraded to %s", self.name, self._rarity.label)
        self._refresh()
        return True

    def randomize_random_tier(self, reapply: bool = True) -> bool:
        """Roll every tier, then refresh each slot's magnitude in place."""

        self.tiers.roll_all(self.rng)
        if reapply:
            ctx = self.build_context()
            for index, entry in enumerate(list(self._applied)):
                self._replace_at(index, entry.upgrade, ctx)
        self._refresh()
        return True

    def upgrade_random_tier(self, steps: int = 1, reroll_one_applied_stat: bool = True) -> bool:
        """Improve one random tier toward tier 1, optionally rerolling a slot."""

        name = TIER_FIELDS[self.rng.randrange(len(TIER_FIELDS))]
        if not self.tiers.improve(name, max(1, steps)):
            self._log.debug("%s tier %s already at best", self.name, name)
            return False
        if reroll_one_applied_stat and self._applied:
            self.reroll_stat_at(self.rng.randrange(len(self._applied)), reroll_tiers=False)
        return True

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    def report(self) -> str:
        return build_block(report_lines(self._rarity, self.selected_upgrade_notes))

    def rollable_ranges_summary(self) -> str:
        """One line per applicable upgrade with its range at the current tiers."""

        ctx = self.build_context()
        return "\n".join(upgrade.describe_range(ctx) for upgrade in build_candidates(ctx))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _pick(self, pool: List[Upgrade], count: int) -> List[Upgrade]:
        if self.weight_provider is not None:
            return self.weight_provider.pick_weighted(as_candidates(pool), count, self.rng)
        shuffled = list(pool)
        self.rng.shuffle(shuffled)
        return shuffled[: min(count, len(shuffled))]

    def _apply(self, ctx: WeaponContext, upgrade: Upgrade) -> AppliedUpgrade:
        notes: List[str] = []
        undo = upgrade.apply(ctx, notes)
        return AppliedUpgrade(upgrade, undo, "\n".join(notes).strip())

    def _apply_and_record(self, ctx: WeaponContext, upgrade: Upgrade) -> None:
        entry = self._apply(ctx, upgrade)
        self._applied.append(entry)
        self._upgrade_log.debug("%s applied %s: %s", self.name, entry.type.value, entry.note)

    def _revert(self, entry: AppliedUpgrade) -> None:
        revert(self.modules, entry.undo)
        self._upgrade_log.debug("%s undid %s (%s)", self.name, entry.type.value, entry.undo.amount)

    def _replace_at(
        self,
        index: int,
        upgrade: Upgrade,
        ctx: Optional[WeaponContext] = None,
    ) -> None:
        self._revert(self._applied[index])
        ctx = ctx or self.build_context()
        self._applied[index] = self._apply(ctx, create_upgrade(upgrade.upgrade_type))

    def _undo_all(self) -> None:
        for entry in reversed(self._applied):
            self._revert(entry)
        self._applied.clear()

    def _types_except(self, index: int) -> Set[UpgradeType]:
        return {entry.type for i, entry in enumerate(self._applied) if i != index}

    def _valid_index(self, index: int) -> bool:
        return 0 <= index < len(self._applied)

    def _refresh(self) -> None:
        self._write_block(report_lines(self._rarity, self.selected_upgrade_notes))
        attack = self.modules.attack
        if attack is not None:
            attack.reset_and_start_if_playing()

    def _write_block(self, lines: Sequence[str]) -> None:
        sink = self.modules.ui
        if sink is None:
            return
        sink.set_text(merge_into_sink(sink.text, build_block(lines)))


__all__ = ["AppliedUpgrade", "WeaponRarityController", "make_rng"]
