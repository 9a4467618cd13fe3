import random

import pytest

from arena.rarity.upgrades import UpgradeType, create_upgrade
from arena.rarity.weights import (
    RESIST_TYPES,
    Candidate,
    UpgradeWeightProvider,
    UpgradeWeightTable,
    as_candidates,
)


class ScriptedRandom(random.Random):
    def __init__(self, values, seed=1):
        super().__init__(seed)
        self._values = list(values)

    def random(self):
        if self._values:
            return self._values.pop(0)
        return super().random()


def _candidates(*types):
    return [Candidate.of(create_upgrade(upgrade_type)) for upgrade_type in types]


def _types(upgrades):
    return [upgrade.upgrade_type for upgrade in upgrades]


def test_default_table_halves_resists():
    table = UpgradeWeightTable()
    assert table.get(UpgradeType.DAMAGE_FLAT) == 1.0
    assert all(table.get(resist) == 0.5 for resist in RESIST_TYPES)


def test_from_dict_accepts_names_and_values():
    table = UpgradeWeightTable.from_dict({"CRIT": 3, "hp_flat": 0})
    assert table.get(UpgradeType.CRIT) == 3.0
    assert table.get(UpgradeType.HP_FLAT) == 0.0
    with pytest.raises(ValueError):
        UpgradeWeightTable.from_dict({"laser_eyes": 1})


def test_set_floors_negative_weights():
    table = UpgradeWeightTable()
    table.set(UpgradeType.ARMOR, -2)
    assert table.get(UpgradeType.ARMOR) == 0.0


def test_zero_weight_candidate_is_never_picked():
    table = UpgradeWeightTable()
    table.set(UpgradeType.DAMAGE_FLAT, 0.0)
    provider = UpgradeWeightProvider(table)
    pool = _candidates(UpgradeType.DAMAGE_FLAT, UpgradeType.CRIT, UpgradeType.ARMOR)
    for seed in range(100):
        picked = provider.pick_weighted(pool, 3, random.Random(seed))
        assert UpgradeType.DAMAGE_FLAT not in _types(picked)
        assert len(picked) == 2


def test_picks_are_unique_and_capped_at_pool_size():
    provider = UpgradeWeightProvider()
    pool = as_candidates(create_upgrade(upgrade_type) for upgrade_type in UpgradeType)
    picked = provider.pick_weighted(pool, 50, random.Random(9))
    assert len(picked) == len(pool)
    assert len(set(_types(picked))) == len(picked)


def test_all_zero_weights_return_nothing():
    table = UpgradeWeightTable({upgrade_type: 0.0 for upgrade_type in UpgradeType})
    provider = UpgradeWeightProvider(table)
    pool = _candidates(UpgradeType.CRIT, UpgradeType.ARMOR)
    assert provider.pick_weighted(pool, 2, random.Random(1)) == []


def test_empty_pool_or_no_picks_return_nothing():
    provider = UpgradeWeightProvider()
    assert provider.pick_weighted([], 3, random.Random(1)) == []
    assert provider.pick_weighted(_candidates(UpgradeType.CRIT), 0, random.Random(1)) == []


def test_pick_walks_cumulative_weights_and_removes_chosen():
    table = UpgradeWeightTable()
    table.set(UpgradeType.DAMAGE_FLAT, 1.0)
    table.set(UpgradeType.CRIT, 1.0)
    table.set(UpgradeType.ARMOR, 2.0)
    provider = UpgradeWeightProvider(table)
    pool = _candidates(UpgradeType.DAMAGE_FLAT, UpgradeType.CRIT, UpgradeType.ARMOR)
    # 0.9 * 4 lands in ARMOR; 0.1 * 2 then lands in DAMAGE_FLAT.
    picked = provider.pick_weighted(pool, 2, ScriptedRandom([0.9, 0.1]))
    assert _types(picked) == [UpgradeType.ARMOR, UpgradeType.DAMAGE_FLAT]


def test_heavier_weight_is_picked_more_often():
    table = UpgradeWeightTable()
    table.set(UpgradeType.CRIT, 9.0)
    table.set(UpgradeType.ARMOR, 1.0)
    provider = UpgradeWeightProvider(table)
    pool = _candidates(UpgradeType.CRIT, UpgradeType.ARMOR)
    rng = random.Random(21)
    crit = sum(
        1 for _ in range(500)
        if provider.pick_weighted(pool, 1, rng)[0].upgrade_type is UpgradeType.CRIT
    )
    assert crit > 350


def test_provider_without_table_uses_defaults():
    provider = UpgradeWeightProvider()
    assert provider.table.get(UpgradeType.FIRE_RESIST) == 0.5
    assert provider.table.get(UpgradeType.CRIT) == 1.0
