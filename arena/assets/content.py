"""Loadout data loading."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from arena.combat.components import Health, Knife, Shooter, WeaponTick
from arena.engine.logger import ChannelLogger, disabled_channel
from arena.rarity.modules import ModuleSet


@dataclass
class Loadout:
    """A fresh set of components for one upgradeable target."""

    knife: Optional[Knife] = None
    shooter: Optional[Shooter] = None
    tick: Optional[WeaponTick] = None
    health: Optional[Health] = None

    def modules(self) -> ModuleSet:
        return ModuleSet.from_components(
            knife=self.knife,
            shooter=self.shooter,
            tick=self.tick,
            health=self.health,
        )


@dataclass
class LoadoutData:
    id: str
    name: str
    kind: str
    components: Dict[str, Dict] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict) -> "LoadoutData":
        components = {
            key: dict(data[key])
            for key in ("knife", "shooter", "tick", "health")
            if isinstance(data.get(key), dict)
        }
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            kind=data.get("kind", "weapon"),
            components=components,
        )

    def instantiate(self) -> Loadout:
        parts = self.components
        return Loadout(
            knife=Knife.from_dict(parts["knife"]) if "knife" in parts else None,
            shooter=Shooter.from_dict(parts["shooter"]) if "shooter" in parts else None,
            tick=WeaponTick.from_dict(parts["tick"]) if "tick" in parts else None,
            health=Health.from_dict(parts["health"]) if "health" in parts else None,
        )


class LoadoutDatabase:
    def __init__(self, logger: Optional[ChannelLogger] = None) -> None:
        self.loadouts: Dict[str, LoadoutData] = {}
        self._log = logger or disabled_channel("content")

    def load_directory(self, directory: Path) -> None:
        if not directory.exists():
            return
        for path in sorted(directory.glob("*.json")):
            try:
                data = json.loads(path.read_text())
            except json.JSONDecodeError:
                self._log.warning("Skipping malformed loadout file %s", path.name)
                continue
            if isinstance(data, dict):
                data = [data]
            for entry in data:
                try:
                    loadout = LoadoutData.from_dict(entry)
                except (AttributeError, KeyError, TypeError, ValueError):
                    self._log.warning("Skipping malformed loadout entry in %s", path.name)
                    continue
                self.loadouts[loadout.id] = loadout
        self._log.info("Loaded %d loadouts from %s", len(self.loadouts), directory)

    def get(self, loadout_id: str) -> LoadoutData:
        return self.loadouts[loadout_id]

    def of_kind(self, kind: str) -> List[LoadoutData]:
        return [loadout for loadout in self.loadouts.values() if loadout.kind == kind]


class ContentManager:
    def __init__(self, root: Path, logger: Optional[ChannelLogger] = None) -> None:
        self.root = root
        self.loadouts = LoadoutDatabase(logger)

    def load(self) -> None:
        self.loadouts.load_directory(self.root / "data" / "loadouts")


__all__ = ["ContentManager", "Loadout", "LoadoutData", "LoadoutDatabase"]
