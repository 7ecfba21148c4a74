"""Combat service: wires the character, session, settings and resolvers.

The service owns one instance of every collaborator for the running
session and exposes the operations that touch several of them at once
(combat reset, long rest, manual turn advance).
"""

from __future__ import annotations

from barb_attack.core.config import RulesSettings, Settings
from barb_attack.core.exceptions import PersistenceError
from barb_attack.core.logging import bind_context, get_logger
from barb_attack.engine.attack import AttackResolver
from barb_attack.engine.bonus_actions import BonusActionDispatcher
from barb_attack.engine.damage import DamageResolver
from barb_attack.engine.dice import DiceRoller
from barb_attack.engine.history import TurnHistory
from barb_attack.engine.oracle import Oracle
from barb_attack.engine.preferences import Preferences
from barb_attack.engine.rage import RageManager
from barb_attack.engine.resources import ResourceState, new_session
from barb_attack.engine.turn_manager import TurnManager
from barb_attack.models.character import Character
from barb_attack.models.settings import PlaySettings
from barb_attack.storage.repositories import (
    CharacterRepository,
    Repository,
    SessionRepository,
    SettingsRepository,
)

logger = get_logger(__name__)


class CombatService:
    """Everything the menus need for one character's session.

    Attributes:
        character: The loaded character.
        resources: Session resource state.
        preferences: Play settings.
        history: Turn history.
        damage: Damage resolver.
        attack: Attack resolver.
        rage: Rage manager.
        bonus_actions: Bonus action dispatcher.
        turns: Turn lifecycle.
    """

    def __init__(
        self,
        character: Character,
        resources: ResourceState,
        preferences: Preferences,
        oracle: Oracle,
        *,
        roller: DiceRoller | None = None,
        rules: RulesSettings | None = None,
        history: TurnHistory | None = None,
    ) -> None:
        self.character = character
        self.resources = resources
        self.preferences = preferences
        self.oracle = oracle
        self.roller = roller or DiceRoller()
        self.rules = rules or RulesSettings()
        self.history = history or TurnHistory()

        self.damage = DamageResolver(
            character, resources, self.roller, oracle, self.history, rules=self.rules
        )
        self.attack = AttackResolver(
            character,
            resources,
            self.roller,
            oracle,
            self.history,
            self.damage,
            rules=self.rules,
            preferences=preferences,
        )
        self.rage = RageManager(character, resources, self.roller, oracle, rules=self.rules)
        self.bonus_actions = BonusActionDispatcher(
            character, resources, self.rage, self.attack, self.roller, oracle, self.history
        )
        self.turns = TurnManager(
            character, resources, self.attack, self.bonus_actions, self.rage, self.history, oracle
        )
        bind_context(character=character.name)

    def current_rage_damage(self) -> int:
        return self.resources.rage_damage_bonus(self.character)

    def reset_combat(self) -> None:
        """Start a fresh combat and clear the turn history."""
        self.resources.reset_combat()
        self.history.clear()
        logger.info("Combat reset")

    def long_rest(self) -> None:
        """Restore rages and heroic inspiration, then reset combat."""
        self.resources.long_rest(self.character)
        self.history.clear()
        logger.info("Long rest", rages=self.resources.rages_remaining)

    def advance_turn(self) -> int:
        """Advance the turn outside the turn menu, resetting once-per-turn features."""
        return self.resources.end_turn()


def build_service(
    settings: Settings,
    oracle: Oracle,
    *,
    roller: DiceRoller | None = None,
    fresh_session: bool = False,
    character_repository: Repository[Character] | None = None,
) -> CombatService:
    """Load the persisted files and build a :class:`CombatService`.

    Args:
        settings: Application settings (data directory and file names).
        oracle: Source of player decisions.
        roller: Optional die roller, e.g. seeded.
        fresh_session: Write a new session file from the character instead
            of loading the existing one. Missing play settings are created
            with defaults as well. A failed write is logged and the
            in-memory state is used.
        character_repository: Override for the character source.

    Returns:
        The wired service.

    Raises:
        ConfigurationError: If any required file is missing or malformed.
    """
    character = (character_repository or CharacterRepository(settings.character_path)).load()

    session_repo = SessionRepository(settings.session_path)
    settings_repo = SettingsRepository(settings.settings_path)

    settings_override: PlaySettings | None = None
    if fresh_session:
        session = new_session(character)
        try:
            session_repo.save(session)
            logger.info("New session written", path=str(settings.session_path))
        except PersistenceError as exc:
            logger.error("Failed to write new session", error=exc.message, **exc.details)
        if not settings_repo.exists():
            settings_override = PlaySettings()
            try:
                settings_repo.save(settings_override)
            except PersistenceError as exc:
                logger.error("Failed to write default settings", error=exc.message, **exc.details)
        resources = ResourceState(session_repo, session)
    else:
        resources = ResourceState(session_repo)

    preferences = Preferences(settings_repo, settings_override)

    logger.info(
        "Service built",
        character=character.name,
        level=character.level,
        turn=resources.current_turn,
    )
    return CombatService(
        character,
        resources,
        preferences,
        oracle,
        roller=roller,
        rules=settings.rules,
    )


__all__ = [
    "CombatService",
    "build_service",
]
