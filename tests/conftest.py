"""Pytest configuration and shared fixtures.

This module provides common fixtures for the combat assistant test suite:
a scripted die roller, a scripted oracle standing in for the terminal, an
in-memory session repository and a sample wild magic barbarian.
"""

from __future__ import annotations

import json
from collections import deque
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

import pytest

from barb_attack.core.exceptions import PersistenceError
from barb_attack.engine.dice import ATTACK_DIE, DiceRoller, DieOutcome
from barb_attack.engine.history import TurnHistory
from barb_attack.engine.oracle import MenuChoice, Notice
from barb_attack.engine.preferences import Preferences
from barb_attack.engine.resources import ResourceState, new_session
from barb_attack.engine.service import CombatService
from barb_attack.models.character import Character
from barb_attack.models.session import SessionState
from barb_attack.models.settings import PlaySettings


if TYPE_CHECKING:
    from collections.abc import Callable, Generator

T = TypeVar("T")


# =============================================================================
# Test Doubles
# =============================================================================


class ScriptedRoller(DiceRoller):
    """Die roller returning queued values in order.

    Every call is recorded as ``(sides, reroll_low, force_max)``. The
    forced natural 20 is honoured without consuming a queued value.
    """

    def __init__(self, values: Iterable[int] = ()) -> None:
        super().__init__()
        self.values: deque[int] = deque(values)
        self.calls: list[tuple[int, bool, bool]] = []

    def queue(self, *values: int) -> None:
        self.values.extend(values)

    def roll_detailed(
        self,
        sides: int,
        *,
        reroll_low: bool = False,
        force_max: bool = False,
    ) -> DieOutcome:
        self.calls.append((sides, reroll_low, force_max))
        if force_max and sides == ATTACK_DIE:
            return DieOutcome(value=sides, draws=(sides,), sides=sides, forced=True)
        if not self.values:
            raise AssertionError(f"ScriptedRoller ran out of values (d{sides})")
        value = self.values.popleft()
        assert 1 <= value <= sides, f"scripted {value} does not fit a d{sides}"
        return DieOutcome(value=value, draws=(value,), sides=sides)


class ScriptedOracle:
    """Oracle answering from queues and recording everything shown.

    Queued exceptions are raised instead of answered. An exhausted
    ``confirm`` queue answers with the prompt's default.
    """

    def __init__(self, choices: Iterable[Any] = (), confirms: Iterable[Any] = ()) -> None:
        self.choices: deque[Any] = deque(choices)
        self.confirms: deque[Any] = deque(confirms)
        self.shown: list[Any] = []
        self.prompts: list[str] = []
        self.menus: list[list[str]] = []
        self.pauses = 0

    def choose(self, prompt: str, options: Sequence[MenuChoice[T]]) -> T:
        self.prompts.append(prompt)
        self.menus.append([option.label for option in options])
        if not self.choices:
            raise AssertionError(f"No scripted choice for {prompt!r}")
        answer = self.choices.popleft()
        if isinstance(answer, BaseException):
            raise answer
        values = [option.value for option in options]
        assert answer in values, f"{answer!r} not offered for {prompt!r}: {values!r}"
        return answer

    def confirm(self, prompt: str, default: bool = False) -> bool:
        self.prompts.append(prompt)
        if not self.confirms:
            return default
        answer = self.confirms.popleft()
        if isinstance(answer, BaseException):
            raise answer
        return bool(answer)

    def show(self, item: Any) -> None:
        self.shown.append(item)

    def pause(self) -> None:
        self.pauses += 1

    def notices(self) -> list[str]:
        return [item.text for item in self.shown if isinstance(item, Notice)]

    def shown_of(self, kind: type[T]) -> list[T]:
        return [item for item in self.shown if isinstance(item, kind)]


class InMemoryRepository:
    """Repository keeping the last saved model in memory."""

    def __init__(self, initial: Any = None) -> None:
        self.data = initial
        self.saves = 0

    def load(self) -> Any:
        return self.data

    def save(self, data: Any) -> None:
        self.data = data
        self.saves += 1


class FailingRepository(InMemoryRepository):
    """Repository whose saves always fail."""

    def save(self, data: Any) -> None:
        raise PersistenceError("Disk full", path="session-data.json")


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from barb_attack.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def sample_character_data() -> dict[str, Any]:
    """Provide a level 5 wild magic barbarian with a d10 glaive.

    Returns:
        Dictionary matching ``character-config.json``.
    """
    return {
        "name": "Grukk",
        "classes": [{"name": "Barbarian", "level": 5, "subclass": "wild_magic"}],
        "weapon": {"name": "Glaive", "die": 10},
        "attack_modifiers": {"strength": 4, "proficiency": 3, "magic_weapon": 2},
        "base_stats": {"constitution_modifier": 3},
        "features": {
            "brutal_strike": {"enabled": True, "once_per_turn": True},
            "savage_attacks": {"enabled": True, "once_per_turn": True},
            "gwm": {"enabled": True, "once_per_turn": False},
        },
        "damage_bonuses": {"strength": 4},
    }


@pytest.fixture
def make_character(sample_character_data: dict[str, Any]) -> Callable[..., Character]:
    """Factory building the sample character with top-level overrides."""

    def _make(**overrides: Any) -> Character:
        return Character.model_validate({**sample_character_data, **overrides})

    return _make


@pytest.fixture
def character(make_character: Callable[..., Character]) -> Character:
    return make_character()


@pytest.fixture
def plain_character(make_character: Callable[..., Character]) -> Character:
    """A d10 barbarian with no optional features and no flat bonuses."""
    return make_character(
        classes=[{"name": "Barbarian", "level": 5}],
        features={},
        damage_bonuses={},
    )


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def roller() -> ScriptedRoller:
    return ScriptedRoller()


@pytest.fixture
def oracle() -> ScriptedOracle:
    return ScriptedOracle()


@pytest.fixture
def history() -> TurnHistory:
    return TurnHistory()


@pytest.fixture
def session_repository(character: Character) -> InMemoryRepository:
    return InMemoryRepository(new_session(character))


@pytest.fixture
def resources(session_repository: InMemoryRepository) -> ResourceState:
    return ResourceState(session_repository)


@pytest.fixture
def make_resources() -> Callable[..., ResourceState]:
    """Factory for resource state starting from a default session with changes applied."""

    def _make(**changes: Any) -> ResourceState:
        base = SessionState(rages_remaining=3).model_dump()
        return ResourceState(InMemoryRepository(SessionState.model_validate({**base, **changes})))

    return _make


@pytest.fixture
def failing_repository(character: Character) -> FailingRepository:
    return FailingRepository(new_session(character))


@pytest.fixture
def settings_repository() -> InMemoryRepository:
    return InMemoryRepository(PlaySettings(enable_crit_animations=False))


@pytest.fixture
def preferences(settings_repository: InMemoryRepository) -> Preferences:
    return Preferences(settings_repository)


@pytest.fixture
def service(
    character: Character,
    resources: ResourceState,
    preferences: Preferences,
    oracle: ScriptedOracle,
    roller: ScriptedRoller,
) -> CombatService:
    return CombatService(character, resources, preferences, oracle, roller=roller)


# =============================================================================
# Data Directory Fixtures
# =============================================================================


@pytest.fixture
def data_dir(tmp_path: Path, sample_character_data: dict[str, Any]) -> Path:
    """A data directory holding all three JSON files.

    Returns:
        Path to the directory.
    """
    directory = tmp_path / "config"
    directory.mkdir()
    (directory / "character-config.json").write_text(json.dumps(sample_character_data), encoding="utf-8")
    (directory / "session-data.json").write_text(
        json.dumps(
            {
                "current_turn": 1,
                "heroic_inspiration": True,
                "rage_active": False,
                "rages_remaining": 3,
                "brutal_strike_available": True,
                "savage_attacks_available": True,
                "current_wild_magic": None,
                "temp_effects": [],
            }
        ),
        encoding="utf-8",
    )
    (directory / "settings.json").write_text(
        json.dumps({"enable_crit_animations": False, "testing_mode": None}),
        encoding="utf-8",
    )
    return directory

