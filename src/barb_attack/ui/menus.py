"""Main, settings and history menus."""

from __future__ import annotations

from enum import StrEnum

from barb_attack.core.logging import get_logger
from barb_attack.engine.oracle import MenuChoice, Notice, ask_yes_no
from barb_attack.engine.service import CombatService
from barb_attack.ui.console import RichOracle, render_character, render_history

logger = get_logger(__name__)


class MainAction(StrEnum):
    START_TURN = "start_turn"
    QUICK_ATTACK = "quick_attack"
    QUICK_DAMAGE = "quick_damage"
    HISTORY = "history"
    SETTINGS = "settings"
    EXIT = "exit"


class SettingsAction(StrEnum):
    TOGGLE_HEROIC = "toggle_heroic"
    TOGGLE_ANIMATIONS = "toggle_animations"
    TOGGLE_ALWAYS_CRIT = "toggle_always_crit"
    TOGGLE_FORCE_HEROIC = "toggle_force_heroic"
    RESET_COMBAT = "reset_combat"
    LONG_REST = "long_rest"
    VIEW_CHARACTER = "view_character"
    ADVANCE_TURN = "advance_turn"
    BACK = "back"


def _on_off(value: bool) -> str:
    return "ON" if value else "OFF"


def main_menu_choices(service: CombatService) -> list[MenuChoice[MainAction]]:
    turn = service.resources.current_turn
    return [
        MenuChoice(f"Start Turn {turn}", MainAction.START_TURN),
        MenuChoice("Quick Attack Roll", MainAction.QUICK_ATTACK),
        MenuChoice("Quick Damage Roll", MainAction.QUICK_DAMAGE),
        MenuChoice(f"View Turn History ({service.history.count()} turns)", MainAction.HISTORY),
        MenuChoice("Settings", MainAction.SETTINGS),
        MenuChoice("Exit", MainAction.EXIT),
    ]


def run_main_menu(service: CombatService, oracle: RichOracle) -> None:
    """Loop on the main menu until the player exits.

    Raises:
        PromptInterruptedError: If a menu prompt is aborted.
    """
    while True:
        action = oracle.choose(f"{service.character.name} - Main Menu", main_menu_choices(service))
        logger.debug("Main menu action", action=action.value)

        if action is MainAction.START_TURN:
            service.turns.run()
        elif action is MainAction.QUICK_ATTACK:
            service.attack.resolve(auto_damage=False, label="Quick Attack Roll")
            oracle.pause()
        elif action is MainAction.QUICK_DAMAGE:
            oracle.show(Notice("Standalone Damage Roll", level="warning"))
            service.damage.roll_standalone()
            oracle.pause()
        elif action is MainAction.HISTORY:
            run_history_menu(service, oracle)
        elif action is MainAction.SETTINGS:
            run_settings_menu(service, oracle)
        else:
            return


def settings_menu_choices(service: CombatService) -> list[MenuChoice[SettingsAction]]:
    preferences = service.preferences
    heroic = "Available" if service.resources.heroic_inspiration else "Used"
    return [
        MenuChoice(f"Toggle Heroic Inspiration ({heroic})", SettingsAction.TOGGLE_HEROIC),
        MenuChoice(f"Toggle Animations ({_on_off(preferences.animations)})", SettingsAction.TOGGLE_ANIMATIONS),
        MenuChoice(f"Toggle Always Crit ({_on_off(preferences.always_crit)})", SettingsAction.TOGGLE_ALWAYS_CRIT),
        MenuChoice(
            f"Toggle Force Heroic Inspiration ({_on_off(preferences.force_heroic_inspiration)})",
            SettingsAction.TOGGLE_FORCE_HEROIC,
        ),
        MenuChoice("Reset Combat", SettingsAction.RESET_COMBAT),
        MenuChoice("Long Rest", SettingsAction.LONG_REST),
        MenuChoice("View Character Stats", SettingsAction.VIEW_CHARACTER),
        MenuChoice(f"Advance Turn (currently {service.resources.current_turn})", SettingsAction.ADVANCE_TURN),
        MenuChoice("Back", SettingsAction.BACK),
    ]


def run_settings_menu(service: CombatService, oracle: RichOracle) -> None:
    """Settings and session management."""
    while True:
        action = oracle.choose("Settings", settings_menu_choices(service))
        if action is SettingsAction.BACK:
            return
        apply_setting(service, oracle, action)


def apply_setting(service: CombatService, oracle: RichOracle, action: SettingsAction) -> None:
    """Run one settings menu entry."""
    preferences = service.preferences
    if action is SettingsAction.TOGGLE_HEROIC:
        available = service.resources.toggle_heroic_inspiration()
        oracle.show(Notice(f"Heroic Inspiration {'restored' if available else 'marked used'}.", level="success"))
    elif action is SettingsAction.TOGGLE_ANIMATIONS:
        enabled = preferences.toggle_animations()
        oracle.show(Notice(f"Animations {_on_off(enabled)}.", level="success"))
    elif action is SettingsAction.TOGGLE_ALWAYS_CRIT:
        preferences.set_always_crit(not preferences.always_crit)
        oracle.show(Notice(f"Always crit {_on_off(preferences.always_crit)}.", level="warning"))
    elif action is SettingsAction.TOGGLE_FORCE_HEROIC:
        preferences.set_force_heroic_inspiration(not preferences.force_heroic_inspiration)
        oracle.show(
            Notice(f"Force Heroic Inspiration {_on_off(preferences.force_heroic_inspiration)}.", level="warning")
        )
    elif action is SettingsAction.RESET_COMBAT:
        if ask_yes_no(oracle, "Reset combat (turn 1, rage ends, history cleared)?", default=False):
            service.reset_combat()
            oracle.show(Notice("Combat reset. Back to turn 1.", level="success"))
    elif action is SettingsAction.LONG_REST:
        if ask_yes_no(oracle, "Take a long rest (restore rages and Heroic Inspiration)?", default=False):
            service.long_rest()
            oracle.show(
                Notice(f"Long rest complete. Rages: {service.resources.rages_remaining}.", level="success")
            )
    elif action is SettingsAction.VIEW_CHARACTER:
        oracle.show(render_character(service.character, service.resources.state))
        oracle.pause()
    elif action is SettingsAction.ADVANCE_TURN:
        turn = service.advance_turn()
        oracle.show(Notice(f"Advanced to Turn {turn}. Turn-based features reset!", level="success"))


def run_history_menu(service: CombatService, oracle: RichOracle) -> None:
    """Show the turn history, offering to clear it."""
    oracle.show(render_history(service.history))
    choice = oracle.choose(
        "History options:",
        [MenuChoice("Back to Main Menu", "back"), MenuChoice("Clear History", "clear")],
    )
    if choice == "clear":
        service.history.clear()
        oracle.show(Notice("Turn history cleared!", level="warning"))


__all__ = [
    "MainAction",
    "SettingsAction",
    "main_menu_choices",
    "run_main_menu",
    "settings_menu_choices",
    "run_settings_menu",
    "apply_setting",
    "run_history_menu",
]
