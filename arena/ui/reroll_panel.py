"""Selection model behind the weapon reroll buttons."""
from __future__ import annotations

from typing import Callable, Iterable, List, Optional

from arena.rarity.controller import WeaponRarityController
from arena.rarity.report import header_line

ACTION_NAMES = (
    "Reroll Rarity + Stats",
    "Reroll Stats",
    "Reroll Random Stat",
    "Reroll Into Another",
    "Randomize Tiers",
    "Upgrade Rarity",
    "Remove Random Upgrade",
    "Add Random Upgrade",
)


class RerollPanel:
    """Cycles through registered controllers and runs indexed actions.

    Controllers are handed in explicitly; nothing is discovered globally.
    """

    def __init__(self, controllers: Iterable[WeaponRarityController] = ()) -> None:
        self._controllers: List[WeaponRarityController] = []
        self._index = -1
        self.register_all(controllers)

    # ------------------------------------------------------------------
    # Registration / selection
    # ------------------------------------------------------------------
    def register(self, controller: WeaponRarityController) -> None:
        if controller in self._controllers:
            return
        self._controllers.append(controller)
        if self._index < 0:
            self._index = 0

    def register_all(self, controllers: Iterable[WeaponRarityController]) -> None:
        for controller in controllers:
            self.register(controller)

    def unregister(self, controller: WeaponRarityController) -> None:
        if controller not in self._controllers:
            return
        self._controllers.remove(controller)
        if not self._controllers:
            self._index = -1
        elif self._index >= len(self._controllers):
            self._index = 0

    @property
    def controllers(self) -> List[WeaponRarityController]:
        return list(self._controllers)

    @property
    def index(self) -> int:
        return self._index

    def current_target(self) -> Optional[WeaponRarityController]:
        if 0 <= self._index < len(self._controllers):
            return self._controllers[self._index]
        return None

    def select_prev(self) -> None:
        if not self._controllers:
            return
        self._index = (self._index - 1) % len(self._controllers)

    def select_next(self) -> None:
        if not self._controllers:
            return
        self._index = (self._index + 1) % len(self._controllers)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def _actions(self, target: WeaponRarityController) -> List[Callable[[], object]]:
        return [
            target.reroll_rarity_and_stats,
            target.reroll_stats,
            target.reroll_random_stat,
            target.reroll_random_stat_into_another,
            target.randomize_random_tier,
            target.upgrade_rarity_keep_stats,
            target.remove_random_upgrade,
            target.add_random_upgrade,
        ]

    def run_action(self, action: int) -> bool:
        """Run button ``action`` on the selected controller.

        Full rerolls always count as success; the rest report what the
        controller returned. Unknown actions or no selection return False.
        """

        target = self.current_target()
        if target is None or not 0 <= action < len(ACTION_NAMES):
            return False
        result = self._actions(target)[action]()
        return True if result is None else bool(result)

    # ------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------
    def selected_name(self) -> str:
        target = self.current_target()
        return target.name if target is not None else "<none>"

    def selected_text(self, overlay: bool = False) -> str:
        """Sink text of the selection, or the rarity and ranges overlay."""

        target = self.current_target()
        if target is None:
            return ""
        if overlay:
            ranges = target.rollable_ranges_summary()
            header = header_line(target.rarity)
            return f"{header}\n{ranges}" if ranges else header
        sink = target.modules.ui
        return sink.text if sink is not None else ""


__all__ = ["ACTION_NAMES", "RerollPanel"]
