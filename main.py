"""Entry point: roll every loadout once and walk through the reroll actions."""
from __future__ import annotations

from pathlib import Path
from typing import List

from arena.assets.content import ContentManager
from arena.engine.logger import init_logger
from arena.rarity.config import RarityConfig
from arena.rarity.controller import WeaponRarityController
from arena.ui.reroll_panel import ACTION_NAMES, RerollPanel

SETTINGS_PATH = Path("settings.json")
ASSETS_PATH = Path(__file__).resolve().parent / "arena" / "assets"


def build_controllers(content: ContentManager, config: RarityConfig, logger) -> List[WeaponRarityController]:
    controllers: List[WeaponRarityController] = []
    for offset, data in enumerate(sorted(content.loadouts.loadouts.values(), key=lambda d: d.id)):
        loadout = data.instantiate()
        # Distinct seeds keep reproducible runs without identical rolls per target.
        seed = config.seed + offset if config.seed else 0
        controllers.append(
            config.build_controller(
                loadout.modules(),
                name=data.name,
                seed=seed,
                logger=logger.channel("rarity"),
                upgrade_logger=logger.channel("upgrades"),
            )
        )
    return controllers


def main() -> None:
    logger = init_logger(SETTINGS_PATH)
    config = RarityConfig.from_settings(SETTINGS_PATH, logger.channel("rarity"))

    content = ContentManager(ASSETS_PATH, logger.channel("content"))
    content.load()

    panel = RerollPanel(build_controllers(content, config, logger))
    if panel.current_target() is None:
        print("No loadouts found.")
        return

    for _ in panel.controllers:
        print(f"== {panel.selected_name()}")
        print(panel.selected_text())
        print(panel.selected_text(overlay=True))
        for action, label in enumerate(ACTION_NAMES):
            ok = panel.run_action(action)
            print(f"-- {label}: {'ok' if ok else 'no change'}")
            print(panel.selected_text())
        panel.select_next()


if __name__ == "__main__":
    main()
