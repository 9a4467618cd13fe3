import json
from pathlib import Path

import pytest
from pygame.math import Vector2

from arena.combat.components import Knife, WeaponTick
from arena.rarity.config import RarityConfig, RarityConfigError
from arena.rarity.modules import ModuleSet
from arena.rarity.rarity import Rarity
from arena.rarity.upgrades import UpgradeType


def _modules():
    return ModuleSet.from_components(knife=Knife(), tick=WeaponTick())


def _write_settings(tmp_path, payload):
    path = tmp_path / "settings.json"
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload))
    return path


def test_defaults():
    config = RarityConfig.from_dict({})
    assert config.seed == 0
    assert config.weighted
    assert config.roll_on_create
    assert config.starting_rarity is Rarity.COMMON
    assert config.weights.common == 60.0


def test_from_dict_reads_every_section():
    config = RarityConfig.from_dict(
        {
            "seed": 12,
            "startingRarity": "rare",
            "weighted": False,
            "rollOnCreate": False,
            "rarityWeights": {"legendary": 40},
            "tiers": {"minMult": 1.0, "maxMult": 1.0},
            "ranges": {"damage_flat_add": [1, 2], "regen_add": [0.2, 0.4]},
            "upgradeWeights": {"crit": 0},
        }
    )
    assert config.seed == 12
    assert config.starting_rarity is Rarity.RARE
    assert not config.weighted
    assert config.weights.legendary == 40.0
    assert config.ranges.damage_flat_add == (1, 2)
    assert config.ranges.regen_add == Vector2(0.2, 0.4)
    assert config.upgrade_weights.get(UpgradeType.CRIT) == 0.0


@pytest.mark.parametrize(
    "section",
    [
        {"rarityWeights": {"common": -1}},
        {"startingRarity": "mythic"},
        {"ranges": {"laser_add": [1, 2]}},
        {"ranges": {"armor_add": 4}},
        {"upgradeWeights": {"laser": 1}},
        {"seed": "abc"},
        {"rarityWeights": [1, 2]},
        {"ranges": ["x"]},
        {"upgradeWeights": [1]},
        {"tiers": "steep"},
    ],
)
def test_invalid_sections_raise(section):
    with pytest.raises(RarityConfigError):
        RarityConfig.from_dict(section)


def test_from_settings_falls_back_to_defaults(tmp_path):
    assert RarityConfig.from_settings(tmp_path / "missing.json") == RarityConfig()
    assert RarityConfig.from_settings(_write_settings(tmp_path, "{not json")) == RarityConfig()
    bad = _write_settings(tmp_path, {"rarity": {"startingRarity": "mythic"}})
    assert RarityConfig.from_settings(bad) == RarityConfig()


@pytest.mark.parametrize("key, value", [("rarityWeights", [1, 2]), ("ranges", ["x"]), ("upgradeWeights", [1])])
def test_from_settings_falls_back_on_wrongly_shaped_sections(tmp_path, key, value):
    path = _write_settings(tmp_path, {"rarity": {key: value}})
    assert RarityConfig.from_settings(path) == RarityConfig()


def test_from_settings_reads_rarity_section(tmp_path):
    path = _write_settings(tmp_path, {"logLevel": "DEBUG", "rarity": {"seed": 3, "startingRarity": "uncommon"}})
    config = RarityConfig.from_settings(path)
    assert config.seed == 3
    assert config.starting_rarity is Rarity.UNCOMMON


def test_repository_settings_are_valid():
    path = Path(__file__).resolve().parents[1] / "settings.json"
    data = json.loads(path.read_text())
    config = RarityConfig.from_dict(data["rarity"])
    assert config.upgrade_weights.get(UpgradeType.FIRE_RESIST) == 0.5


def test_build_controller_shares_ranges_but_not_tiers():
    config = RarityConfig.from_dict({"rollOnCreate": False, "startingRarity": "rare", "seed": 5})
    first = config.build_controller(_modules(), name="a")
    second = config.build_controller(_modules(), name="b")
    assert first.ranges is second.ranges
    assert first.tiers is not second.tiers
    assert first.rng is not second.rng
    assert first.rarity is Rarity.RARE
    assert first.selected_upgrade_count == 0
    assert first.weight_provider is not None
    assert first.weight_provider.table is config.upgrade_weights


def test_build_controller_unweighted_and_rolled():
    config = RarityConfig.from_dict({"weighted": False, "seed": 8})
    controller = config.build_controller(_modules(), seed=9)
    assert controller.weight_provider is None
    assert controller.selected_upgrade_count >= 1


def test_tier_settings_reach_controller():
    config = RarityConfig.from_dict({"rollOnCreate": False, "tiers": {"minMult": 1.0, "maxMult": 1.0}})
    controller = config.build_controller(_modules())
    assert controller.tiers.mult(1) == 1.0
    assert controller.tiers.mult(5) == 1.0
