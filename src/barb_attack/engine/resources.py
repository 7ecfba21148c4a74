"""Per-session resource state: turns, rage, heroic inspiration, features.

Every mutation builds a new validated :class:`SessionState`, swaps it in and
saves it through the session repository. A transition either applies fully
or raises :class:`InvalidGameStateError` and leaves the old state in place.
Save failures are logged and the in-memory state stays authoritative.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from barb_attack.core.exceptions import InvalidGameStateError, PersistenceError
from barb_attack.core.logging import get_logger
from barb_attack.models.character import Character
from barb_attack.models.enums import Feature
from barb_attack.models.session import SessionState, SurgeEffect
from barb_attack.storage.repositories import Repository

logger = get_logger(__name__)

# Once-per-turn features and the session field tracking their availability.
_AVAILABILITY_FIELDS: dict[Feature, str] = {
    Feature.BRUTAL_STRIKE: "brutal_strike_available",
    Feature.SAVAGE_ATTACKS: "savage_attacks_available",
}


class ResourceState:
    """Mutable holder of the session state.

    Example:
        >>> resources = ResourceState(SessionRepository(path))
        >>> if resources.can_activate_rage(character):
        ...     resources.activate_rage()
    """

    def __init__(self, repository: Repository[SessionState], state: SessionState | None = None) -> None:
        """Initialize the holder.

        Args:
            repository: Where every committed state is saved.
            state: Initial state; loaded from the repository when omitted.
        """
        self._repository = repository
        self._state = state if state is not None else repository.load()

    @property
    def state(self) -> SessionState:
        return self._state

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def current_turn(self) -> int:
        return self._state.current_turn

    @property
    def rage_active(self) -> bool:
        return self._state.rage_active

    @property
    def rages_remaining(self) -> int:
        return self._state.rages_remaining

    @property
    def heroic_inspiration(self) -> bool:
        return self._state.heroic_inspiration

    @property
    def current_surge(self) -> SurgeEffect | None:
        return self._state.current_surge

    def rage_damage_bonus(self, character: Character) -> int:
        """Rage damage added to weapon damage while raging."""
        return character.rage_damage if self._state.rage_active else 0

    def can_activate_rage(self, character: Character) -> bool:
        return character.can_rage and self._state.rages_remaining > 0 and not self._state.rage_active

    def is_feature_available(self, character: Character, feature: Feature) -> bool:
        """Whether a feature can be used right now.

        A disabled feature is never available. An enabled feature that is not
        once-per-turn is always available.
        """
        if not character.has_feature(feature):
            return False
        field_name = _AVAILABILITY_FIELDS.get(feature)
        if field_name is None or not character.is_once_per_turn(feature):
            return True
        return bool(getattr(self._state, field_name))

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def _commit(self, event: str, **changes: Any) -> SessionState:
        """Validate and swap in a new state, then save it.

        Raises:
            InvalidGameStateError: If the new state violates an invariant.
        """
        data = {**self._state.model_dump(), **changes}
        try:
            new_state = SessionState.model_validate(data)
        except ValidationError as exc:
            raise InvalidGameStateError(
                f"Rejected session transition: {event}",
                current_state=event,
                details={"errors": exc.errors(include_url=False)},
            ) from exc

        self._state = new_state
        logger.info("Session state committed", transition=event, **_changes_for_log(changes))
        self._save()
        return new_state

    def _save(self) -> None:
        try:
            self._repository.save(self._state)
        except PersistenceError as exc:
            logger.error("Failed to save session", error=exc.message, **exc.details)

    def advance_turn(self) -> int:
        """Move to the next turn and return its number."""
        return self._commit("advance_turn", current_turn=self._state.current_turn + 1).current_turn

    def activate_rage(self, surge: SurgeEffect | None = None) -> None:
        """Spend one rage and start raging, storing the surge in the same commit.

        Raises:
            InvalidGameStateError: If rage is already active or none remain.
        """
        if self._state.rage_active:
            raise InvalidGameStateError("Rage is already active", current_state="rage_active")
        if self._state.rages_remaining <= 0:
            raise InvalidGameStateError("No rages remaining", current_state="rages_exhausted")
        self._commit(
            "activate_rage",
            rage_active=True,
            rages_remaining=self._state.rages_remaining - 1,
            current_surge=surge,
        )

    def end_rage(self) -> None:
        """Stop raging; the active surge ends with it."""
        self._commit("end_rage", rage_active=False, current_surge=None)

    def set_surge(self, surge: SurgeEffect | None) -> None:
        """Replace the active surge effect.

        Raises:
            InvalidGameStateError: If a surge is set while not raging.
        """
        self._commit("set_surge", current_surge=surge)

    def use_heroic_inspiration(self) -> None:
        self._commit("use_heroic_inspiration", heroic_inspiration=False)

    def restore_heroic_inspiration(self) -> None:
        self._commit("restore_heroic_inspiration", heroic_inspiration=True)

    def toggle_heroic_inspiration(self) -> bool:
        """Flip heroic inspiration and return the new value."""
        return self._commit(
            "toggle_heroic_inspiration",
            heroic_inspiration=not self._state.heroic_inspiration,
        ).heroic_inspiration

    def use_feature(self, character: Character, feature: Feature) -> None:
        """Mark a once-per-turn feature as used; no-op for other features."""
        field_name = _AVAILABILITY_FIELDS.get(feature)
        if field_name is None or not character.is_once_per_turn(feature):
            return
        self._commit(f"use_{feature.value}", **{field_name: False})

    def reset_turn_features(self) -> None:
        """Make every once-per-turn feature available again."""
        self._commit("reset_turn_features", **{name: True for name in _AVAILABILITY_FIELDS.values()})

    def end_turn(self) -> int:
        """Advance the turn and reset once-per-turn features in one commit."""
        changes: dict[str, Any] = {name: True for name in _AVAILABILITY_FIELDS.values()}
        changes["current_turn"] = self._state.current_turn + 1
        return self._commit("end_turn", **changes).current_turn

    def reset_combat(self) -> None:
        """Start a new combat: turn 1, no rage, no surge, features available."""
        changes: dict[str, Any] = {name: True for name in _AVAILABILITY_FIELDS.values()}
        self._commit(
            "reset_combat",
            current_turn=1,
            rage_active=False,
            current_surge=None,
            temp_effects=[],
            **changes,
        )

    def restore_rages(self, total: int) -> None:
        self._commit("restore_rages", rages_remaining=total)

    def long_rest(self, character: Character) -> None:
        """Restore rages and heroic inspiration, then reset combat."""
        self._commit(
            "long_rest",
            rages_remaining=character.max_rages,
            heroic_inspiration=True,
        )
        self.reset_combat()


def _changes_for_log(changes: dict[str, Any]) -> dict[str, Any]:
    """Flatten transition changes into log-friendly values."""
    flattened: dict[str, Any] = {}
    for key, value in changes.items():
        if isinstance(value, SurgeEffect):
            flattened[key] = value.roll
        elif isinstance(value, list):
            flattened[key] = len(value)
        else:
            flattened[key] = value
    return flattened


def new_session(character: Character) -> SessionState:
    """Fresh session for a character: turn 1, inspiration and full rages."""
    return SessionState(
        current_turn=1,
        heroic_inspiration=True,
        rage_active=False,
        rages_remaining=character.max_rages,
    )


__all__ = [
    "ResourceState",
    "new_session",
]
