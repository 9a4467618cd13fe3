from arena.combat.components import Knife, WeaponTick
from arena.rarity.controller import WeaponRarityController
from arena.rarity.modules import ModuleSet
from arena.rarity.rarity import Rarity
from arena.rarity.report import HEADER_TAG
from arena.ui.reroll_panel import ACTION_NAMES, RerollPanel


def _controller(name, seed=1):
    modules = ModuleSet.from_components(knife=Knife(), tick=WeaponTick())
    return WeaponRarityController(modules, rarity=Rarity.RARE, seed=seed, name=name)


def test_empty_panel_is_inert():
    panel = RerollPanel()
    assert panel.current_target() is None
    assert panel.index == -1
    assert not panel.run_action(0)
    assert panel.selected_name() == "<none>"
    assert panel.selected_text() == ""
    panel.select_next()
    assert panel.index == -1


def test_register_skips_duplicates_and_selects_first():
    first = _controller("first")
    panel = RerollPanel([first, first])
    assert panel.controllers == [first]
    assert panel.current_target() is first


def test_selection_wraps_both_ways():
    a, b, c = _controller("a"), _controller("b"), _controller("c")
    panel = RerollPanel([a, b, c])
    panel.select_prev()
    assert panel.current_target() is c
    panel.select_next()
    assert panel.current_target() is a
    panel.select_next()
    assert panel.selected_name() == "b"


def test_unregister_keeps_selection_valid():
    a, b = _controller("a"), _controller("b")
    panel = RerollPanel([a, b])
    panel.select_next()
    panel.unregister(b)
    assert panel.current_target() is a
    panel.unregister(a)
    assert panel.current_target() is None


def test_run_action_dispatches_to_selected_controller():
    panel = RerollPanel([_controller("blade")])
    assert panel.run_action(ACTION_NAMES.index("Reroll Stats"))
    assert panel.current_target().selected_upgrade_count >= 1
    assert HEADER_TAG in panel.selected_text()


def test_run_action_rejects_unknown_index():
    panel = RerollPanel([_controller("blade")])
    assert not panel.run_action(-1)
    assert not panel.run_action(len(ACTION_NAMES))


def test_run_action_reports_controller_failure():
    panel = RerollPanel([_controller("blade")])
    assert not panel.run_action(ACTION_NAMES.index("Remove Random Upgrade"))


def test_every_action_runs():
    panel = RerollPanel([_controller("blade", seed=4)])
    for action in range(len(ACTION_NAMES)):
        assert isinstance(panel.run_action(action), bool)


def test_overlay_shows_rarity_and_ranges():
    panel = RerollPanel([_controller("blade")])
    lines = panel.selected_text(overlay=True).splitlines()
    assert lines[0].startswith(HEADER_TAG)
    assert len(lines) == 1 + 8
