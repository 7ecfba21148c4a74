"""Terminal rendering and prompts built on rich.

:class:`RichOracle` is the terminal implementation of the engine's oracle:
numbered option tables for choices, ``Confirm`` for yes/no questions and a
renderer per result type for everything the engine shows.
"""

from __future__ import annotations

import random
import time
from collections.abc import Sequence
from typing import Any, TypeVar

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt
from rich.table import Table
from rich.text import Text

from barb_attack.core.exceptions import PromptInterruptedError
from barb_attack.core.logging import get_logger
from barb_attack.engine.history import TurnAction, TurnHistory
from barb_attack.engine.oracle import MenuChoice, Notice, Rolling
from barb_attack.engine.preferences import Preferences
from barb_attack.engine.turn_manager import TurnStatus
from barb_attack.engine.wild_magic import SurgeTrigger
from barb_attack.models.character import Character
from barb_attack.models.enums import ActionType, AttackMode, Feature
from barb_attack.models.results import AttackRollResult, DamageRollResult
from barb_attack.models.session import SessionState

logger = get_logger(__name__)

T = TypeVar("T")

NOTICE_STYLES = {
    "info": "white",
    "success": "green",
    "warning": "yellow",
    "danger": "bold red",
    "magic": "bold magenta",
}

# Colour, icon and flavour line per surge damage type.
SURGE_DECORATIONS: dict[str, tuple[str, str, str]] = {
    "necrotic": ("bold green", "💀☠️", "dark energy swirls"),
    "force": ("bold blue", "⚡🌊", "magical energy pulses"),
    "radiant": ("bold yellow", "✨☀️", "divine light radiates"),
    "teleport": ("bold magenta", "🌀💫", "reality bends around you"),
    "protective": ("bold cyan", "🛡️✨", "shimmering barriers form"),
    "terrain": ("dim green", "🌿🌱", "nature responds to your rage"),
}

CRIT_PHRASES = (
    "⚡ DEVASTATING BLOW! ⚡",
    "🔥 MAXIMUM CARNAGE! 🔥",
    "💀 ENEMY ANNIHILATED! 💀",
    "⭐ LEGENDARY STRIKE! ⭐",
    "🗡️ PERFECT TECHNIQUE! 🗡️",
)

ACTION_ICONS = {
    ActionType.ATTACK: "⚔️",
    ActionType.DAMAGE: "💥",
    ActionType.BONUS_ACTION: "🎯",
}


class RichOracle:
    """Oracle that asks the player in the terminal.

    Animations (spinners, pauses, crit phrases) only run when the play
    settings enable them; what is rolled never depends on them.
    """

    def __init__(
        self,
        console: Console | None = None,
        preferences: Preferences | None = None,
        *,
        pause_seconds: float = 1.5,
    ) -> None:
        self.console = console or Console()
        self.preferences = preferences
        self.pause_seconds = pause_seconds

    @property
    def animations(self) -> bool:
        return self.preferences.animations if self.preferences else False

    # -------------------------------------------------------------------------
    # Prompts
    # -------------------------------------------------------------------------

    def choose(self, prompt: str, options: Sequence[MenuChoice[T]]) -> T:
        if not options:
            raise ValueError("No options to choose from")
        table = Table(title=prompt, pad_edge=False, show_header=False)
        table.add_column("#", style="cyan", no_wrap=True)
        table.add_column("Option", style="bold")
        for index, option in enumerate(options, start=1):
            table.add_row(str(index), option.label)
        self.console.print(table)

        choices = [str(index) for index in range(1, len(options) + 1)]
        try:
            answer = IntPrompt.ask("Choice", console=self.console, choices=choices, show_choices=False)
        except (KeyboardInterrupt, EOFError) as exc:
            raise PromptInterruptedError("Prompt interrupted", details={"prompt": prompt}) from exc
        return options[answer - 1].value

    def confirm(self, prompt: str, default: bool = False) -> bool:
        try:
            return Confirm.ask(prompt, console=self.console, default=default)
        except (KeyboardInterrupt, EOFError) as exc:
            raise PromptInterruptedError("Prompt interrupted", details={"prompt": prompt}) from exc

    def pause(self, prompt: str = "Press Enter to continue") -> None:
        try:
            self.console.input(f"[dim]{prompt}[/dim]")
        except (KeyboardInterrupt, EOFError) as exc:
            raise PromptInterruptedError("Prompt interrupted") from exc

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------

    def show(self, item: Any) -> None:
        if isinstance(item, Notice):
            self.console.print(Text(item.text, style=NOTICE_STYLES.get(item.level, "white")))
        elif isinstance(item, Rolling):
            self._show_rolling(item)
        elif isinstance(item, AttackRollResult):
            self.console.print(render_attack(item))
        elif isinstance(item, DamageRollResult):
            if item.critical:
                self._show_crit_banner()
            self.console.print(render_damage(item))
        elif isinstance(item, SurgeTrigger):
            self.console.print(render_surge(item))
        elif isinstance(item, TurnStatus):
            self.console.print(render_turn_status(item))
        else:
            self.console.print(item)

    def _show_rolling(self, item: Rolling) -> None:
        if self.animations:
            with self.console.status(f"🎲 {item.text} 🎲", spinner="dots"):
                time.sleep(self.pause_seconds)
        else:
            self.console.print(f"🎲 {item.text}")

    def _show_crit_banner(self) -> None:
        self.console.print("\n💥 CRITICAL HIT! 💥", style="bold red")
        if not self.animations:
            self.console.print("⚡ DEVASTATING BLOW! ⚡", style="bold red")
            return
        phrase = random.choice(CRIT_PHRASES)
        with self.console.status(phrase, spinner="star"):
            time.sleep(self.pause_seconds)
        self.console.rule(Text(phrase, style="bold red"), style="red")


# =============================================================================
# Renderers
# =============================================================================


def render_attack(result: AttackRollResult) -> Panel:
    """Panel for one attack roll."""
    body = Text()
    if result.is_critical:
        body.append("NATURAL 20!\n", style="bold red")
    elif result.is_fumble:
        body.append("Natural 1...\n", style="dim")
    body.append("Total: ", style="bold")
    body.append(str(result.total), style="bold green")
    body.append(f"\nRoll: {result.breakdown}")
    body.append(f"\nDice: {result.explanation}", style="dim")
    title = "Reckless Attack" if result.mode is AttackMode.ADVANTAGE else "Attack Roll"
    return Panel(body, title=title, border_style="red" if result.is_critical else "yellow")


def render_damage(result: DamageRollResult) -> Panel:
    """Panel for one damage roll, with supplemental dice listed separately."""
    body = Text()
    label = "CRITICAL WEAPON DAMAGE" if result.critical else "Weapon Damage"
    body.append(f"{label}: ", style="bold")
    body.append(str(result.weapon_total), style="bold red")
    for extra in result.additional_damage:
        body.append(f"\n+ {extra.amount} {extra.type} (d{extra.die})", style="magenta")
    if result.additional_damage:
        body.append(f"\nTotal: {result.total}", style="bold")
    body.append("\n\nFor manual rolling:", style="dim")
    body.append(f"\nDice: {result.breakdown}")
    body.append(f"\nBreakdown: {result.explanation}", style="dim")
    return Panel(body, title="Damage", border_style="red" if result.critical else "white")


def render_surge(trigger: SurgeTrigger) -> Panel:
    """Panel for a surge effect, decorated by its damage type."""
    effect = trigger.effect
    style, icon, flavour = SURGE_DECORATIONS.get(effect.damage_type, SURGE_DECORATIONS["force"])
    headings = {
        "surge": f"Wild Magic Roll: {effect.roll}",
        "current": "CURRENT WILD MAGIC EFFECT",
        "bonus_action": "Wild Magic Bonus Action",
    }

    body = Text()
    body.append(f"({flavour})\n\n", style="italic dim")
    body.append(effect.description, style=style)
    if trigger.save_dc is not None:
        body.append(f"\n\n💾 {effect.save_type} Save DC: {trigger.save_dc}", style="yellow")
    if trigger.text:
        body.append(f"\n{trigger.text}", style="bold")
    if effect.bonus_action_repeatable and trigger.occasion != "bonus_action":
        body.append("\n\n🔄 BONUS ACTION: Can repeat this effect each turn while raging!", style="bold blue")
    if trigger.occasion == "current":
        duration = "Until rage ends" if effect.duration == "rage" else "Instant"
        body.append(f"\n⏱️ Duration: {duration}", style="dim")
    return Panel(body, title=f"{icon} {headings[trigger.occasion]} {icon}", border_style=style)


def render_turn_status(status: TurnStatus) -> Panel:
    """Header shown above the turn menu."""
    remaining = status.max_attacks - status.attacks_used
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()
    attack_text = f"{remaining} remaining" if remaining > 0 else "Used"
    table.add_row("Attacks", f"{attack_text} ({status.attacks_used}/{status.max_attacks})")
    table.add_row("⭐ Bonus Action", "Used" if status.bonus_action_used else "Available")
    table.add_row("🔥 Rage", status.rage)
    if status.hew is not None:
        table.add_row("⚔️ GWM Hew", status.hew)
    table.add_row("✨ Wild Magic", "Active" if status.surge_active else "None")
    return Panel(table, title=f"⚔️ {status.character_name} - Turn {status.turn_number}", border_style="yellow")


def render_history(history: TurnHistory) -> Table | Text:
    """Turn history with per-turn damage totals, then any out-of-turn rolls."""
    if history.is_empty():
        return Text('📜 No turn history yet! Use "Start Turn" to begin tracking combat turns.', style="yellow")

    table = Table(title="📜 Combat Turn History", pad_edge=False)
    table.add_column("Turn", style="cyan", no_wrap=True)
    table.add_column("Action")
    table.add_column("Result", justify="right")
    for turn in history.turns:
        table.add_row(
            f"Turn {turn.turn_number} ({turn.started_at:%H:%M:%S})",
            "",
            Text(f"Total: {turn.total_damage} damage", style="bold red"),
        )
        for action in turn.actions:
            _add_action_rows(table, action)

    loose = history.out_of_turn
    if loose:
        loose_total = sum(action.damage for action in loose)
        table.add_row("Outside turns", "", Text(f"Total: {loose_total} damage", style="bold red"))
        for action in loose:
            _add_action_rows(table, action, show_turn=True)
    return table


def _add_action_rows(table: Table, action: TurnAction, *, show_turn: bool = False) -> None:
    label = f"(turn {action.turn_number})" if show_turn and action.turn_number is not None else ""
    table.add_row(label, f"{ACTION_ICONS[action.type]} {action.details}", action.result)
    for extra in action.additional_damage:
        table.add_row("", Text(f"   + {extra.type} (d{extra.die})", style="magenta"), str(extra.amount))
    if action.heroic_used is not None:
        heroic = action.heroic_used
        table.add_row(
            "",
            Text(f"   ✨ Heroic Inspiration on {heroic.source}", style="yellow"),
            f"{heroic.original_roll} -> {heroic.new_roll}",
        )


def render_character(character: Character, session: SessionState) -> Panel:
    """Character sheet summary for the settings menu."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()
    classes = ", ".join(
        f"{c.name} {c.level}" + (f" ({c.subclass})" if c.subclass else "") for c in character.classes
    )
    table.add_row("Classes", classes)
    table.add_row("Level", str(character.level))
    table.add_row("Proficiency", f"+{character.proficiency_bonus}")
    table.add_row("Weapon", f"{character.weapon.name} (d{character.weapon.die})")
    table.add_row("Attack modifier", f"{character.attack_modifier:+d}")
    table.add_row("Attacks per turn", str(character.max_attacks))
    table.add_row("Rage damage", f"+{character.rage_damage}")
    table.add_row("Rages", f"{session.rages_remaining}/{character.max_rages}")
    table.add_row("Heroic Inspiration", "Available" if session.heroic_inspiration else "Used")
    if character.damage_bonuses:
        table.add_row(
            "Damage bonuses",
            ", ".join(f"{value:+d} {name.replace('_', ' ')}" for name, value in character.damage_bonuses.items()),
        )
    for extra in character.additional_damage_dice.values():
        table.add_row("Extra damage", f"d{extra.die} {extra.description}")
    features = [feature.value.replace("_", " ").title() for feature in Feature if character.has_feature(feature)]
    table.add_row("Features", ", ".join(features) or "None")
    if character.class_features:
        table.add_row("Class features", ", ".join(character.class_features))
    return Panel(table, title=f"📊 {character.name}", border_style="cyan")


def render_welcome(character: Character, turn: int) -> Panel:
    """Startup banner."""
    lines = [
        f"Welcome back, {character.name}!",
        f"Level {character.level} {character.primary_class}",
    ]
    if character.primary_subclass:
        lines.append(f"Subclass: {character.primary_subclass}")
    lines.append(f"Turn {turn}")
    return Panel("\n".join(lines), title="⚔️ Barbarian Combat Assistant", border_style="red")


__all__ = [
    "RichOracle",
    "render_attack",
    "render_damage",
    "render_surge",
    "render_turn_status",
    "render_history",
    "render_character",
    "render_welcome",
]
