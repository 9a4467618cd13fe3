"""Rarity settings read from the ``rarity`` section of ``settings.json``."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from arena.engine.logger import ChannelLogger, disabled_channel
from arena.rarity.controller import WeaponRarityController
from arena.rarity.modules import ModuleSet
from arena.rarity.ranges import UpgradeRanges
from arena.rarity.rarity import Rarity, RarityWeights
from arena.rarity.tiers import TierSystem
from arena.rarity.weights import UpgradeWeightProvider, UpgradeWeightTable


class RarityConfigError(ValueError):
    """Raised when the rarity section holds an unusable value."""


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise RarityConfigError(f"'{key}' must be an object")
    return dict(value)


@dataclass
class RarityConfig:
    seed: int = 0
    weights: RarityWeights = field(default_factory=RarityWeights)
    tiers: Dict[str, Any] = field(default_factory=dict)
    ranges: UpgradeRanges = field(default_factory=UpgradeRanges)
    upgrade_weights: UpgradeWeightTable = field(default_factory=UpgradeWeightTable)
    weighted: bool = True
    roll_on_create: bool = True
    starting_rarity: Rarity = Rarity.COMMON

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RarityConfig":
        if not isinstance(data, dict):
            raise RarityConfigError("rarity settings must be an object")
        try:
            seed = int(data.get("seed", 0))
            weights = RarityWeights.from_dict(_section(data, "rarityWeights"))
            tiers = _section(data, "tiers")
            TierSystem.from_dict(tiers)
            ranges = UpgradeRanges.from_dict(_section(data, "ranges"))
            upgrade_weights = UpgradeWeightTable.from_dict(_section(data, "upgradeWeights"))
            starting = Rarity.parse(data.get("startingRarity", "common"))
        except (TypeError, ValueError) as exc:
            raise RarityConfigError(str(exc)) from exc
        if min(weights.common, weights.uncommon, weights.rare, weights.legendary) < 0.0:
            raise RarityConfigError("rarity weights must be non-negative")
        return cls(
            seed=seed,
            weights=weights,
            tiers=tiers,
            ranges=ranges,
            upgrade_weights=upgrade_weights,
            weighted=bool(data.get("weighted", True)),
            roll_on_create=bool(data.get("rollOnCreate", True)),
            starting_rarity=starting,
        )

    @classmethod
    def from_settings(
        cls,
        settings_path: Path,
        logger: Optional[ChannelLogger] = None,
    ) -> "RarityConfig":
        log = logger or disabled_channel("rarity")
        if not settings_path.exists():
            return cls()
        try:
            data = json.loads(settings_path.read_text())
        except json.JSONDecodeError:
            log.warning("Could not parse %s; using default rarity settings", settings_path)
            return cls()
        if not isinstance(data, dict) or "rarity" not in data:
            return cls()
        try:
            return cls.from_dict(data["rarity"])
        except RarityConfigError as exc:
            log.error("Invalid rarity settings in %s: %s", settings_path, exc)
            return cls()

    def build_controller(
        self,
        modules: ModuleSet,
        *,
        name: str = "weapon",
        seed: Optional[int] = None,
        logger: Optional[ChannelLogger] = None,
        upgrade_logger: Optional[ChannelLogger] = None,
    ) -> WeaponRarityController:
        """Controller with its own tiers and RNG; ranges and weights are shared."""

        provider = UpgradeWeightProvider(self.upgrade_weights) if self.weighted else None
        return WeaponRarityController(
            modules,
            rarity=self.starting_rarity,
            weights=self.weights,
            ranges=self.ranges,
            tiers=TierSystem.from_dict(self.tiers),
            weight_provider=provider,
            seed=self.seed if seed is None else seed,
            logger=logger,
            upgrade_logger=upgrade_logger,
            roll_on_create=self.roll_on_create,
            name=name,
        )


__all__ = ["RarityConfig", "RarityConfigError"]
