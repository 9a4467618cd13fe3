import random

import pytest

from arena.rarity.rarity import Rarity, RarityWeights, format_rarity, max_rolls


class ScriptedRandom(random.Random):
    """Returns queued ``random()`` values first, then seeded ones."""

    def __init__(self, values, seed=1):
        super().__init__(seed)
        self._values = list(values)

    def random(self):
        if self._values:
            return self._values.pop(0)
        return super().random()


@pytest.mark.parametrize(
    "rarity, expected",
    [
        (Rarity.COMMON, 1),
        (Rarity.UNCOMMON, 2),
        (Rarity.RARE, 4),
        (Rarity.LEGENDARY, 5),
    ],
)
def test_max_rolls_per_rarity(rarity, expected):
    assert max_rolls(rarity) == expected
    assert rarity.max_rolls == expected


def test_next_saturates_at_legendary():
    assert Rarity.COMMON.next() is Rarity.UNCOMMON
    assert Rarity.RARE.next() is Rarity.LEGENDARY
    assert Rarity.LEGENDARY.next() is Rarity.LEGENDARY


def test_parse_accepts_names_case_insensitively():
    assert Rarity.parse("rare") is Rarity.RARE
    assert Rarity.parse(" Legendary ") is Rarity.LEGENDARY
    with pytest.raises(ValueError):
        Rarity.parse("mythic")


def test_format_rarity_wraps_label_in_colour():
    text = format_rarity(Rarity.UNCOMMON)
    assert text.startswith("<color=#")
    assert "Uncommon" in text
    assert text.endswith("</color>")


def test_all_zero_weights_fall_back_to_common():
    weights = RarityWeights(0, 0, 0, 0)
    rng = random.Random(5)
    assert all(weights.roll(rng) is Rarity.COMMON for _ in range(20))


def test_negative_weights_count_as_zero():
    weights = RarityWeights(common=-5, uncommon=0, rare=1, legendary=0)
    rng = random.Random(5)
    assert all(weights.roll(rng) is Rarity.RARE for _ in range(20))


def test_zero_weight_rarity_never_rolled():
    weights = RarityWeights(common=1, uncommon=0, rare=1, legendary=0)
    rng = random.Random(11)
    rolled = {weights.roll(rng) for _ in range(200)}
    assert rolled == {Rarity.COMMON, Rarity.RARE}


@pytest.mark.parametrize(
    "draw, expected",
    [
        (0.0, Rarity.COMMON),
        (0.59, Rarity.COMMON),
        (0.65, Rarity.UNCOMMON),
        (0.96, Rarity.RARE),
        (0.99, Rarity.LEGENDARY),
    ],
)
def test_roll_buckets_follow_cumulative_weights(draw, expected):
    assert RarityWeights().roll(ScriptedRandom([draw])) is expected


def test_from_dict_keeps_missing_defaults():
    weights = RarityWeights.from_dict({"legendary": 50})
    assert weights.legendary == 50.0
    assert weights.common == 60.0
