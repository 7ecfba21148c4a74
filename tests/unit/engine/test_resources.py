"""Tests for session resource state transitions."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import MagicMock

import pytest

from barb_attack.core.exceptions import InvalidGameStateError
from barb_attack.engine import resources as resources_module
from barb_attack.engine.resources import ResourceState, new_session
from barb_attack.engine.wild_magic import surge_for_roll
from barb_attack.models.character import Character
from barb_attack.models.enums import Feature


class TestReadAccess:
    """Tests for derived resource queries."""

    def test_loads_from_repository(self, session_repository, character: Character) -> None:
        """Test the initial state comes from the repository when not given."""
        resources = ResourceState(session_repository)
        assert resources.state == new_session(character)
        assert resources.rages_remaining == 3

    def test_rage_damage_only_while_raging(self, character: Character, make_resources) -> None:
        """Test rage damage applies only while rage is active."""
        assert make_resources().rage_damage_bonus(character) == 0
        assert make_resources(rage_active=True).rage_damage_bonus(character) == 2

    def test_can_activate_rage(self, character: Character, make_resources) -> None:
        """Test rage needs uses left and no active rage."""
        assert make_resources().can_activate_rage(character)
        assert not make_resources(rages_remaining=0).can_activate_rage(character)
        assert not make_resources(rage_active=True).can_activate_rage(character)

    def test_disabled_feature_unavailable(self, plain_character: Character, resources: ResourceState) -> None:
        """Test a feature the character lacks is never available."""
        assert not resources.is_feature_available(plain_character, Feature.BRUTAL_STRIKE)

    def test_unlimited_feature_always_available(self, character: Character, resources: ResourceState) -> None:
        """Test a feature without a per-turn limit stays available."""
        assert resources.is_feature_available(character, Feature.GREAT_WEAPON_MASTER)


class TestTurnFeatures:
    """Tests for once-per-turn feature tracking."""

    def test_use_then_end_turn(self, character: Character, resources: ResourceState) -> None:
        """Test a used feature comes back after the turn ends and not before."""
        resources.use_feature(character, Feature.BRUTAL_STRIKE)
        assert not resources.is_feature_available(character, Feature.BRUTAL_STRIKE)
        assert resources.is_feature_available(character, Feature.SAVAGE_ATTACKS)

        resources.advance_turn()
        assert not resources.is_feature_available(character, Feature.BRUTAL_STRIKE)

        new_turn = resources.end_turn()
        assert new_turn == 3
        assert resources.is_feature_available(character, Feature.BRUTAL_STRIKE)

    def test_end_turn_increments_by_one(self, character: Character, resources: ResourceState) -> None:
        """Test ending a turn resets Brutal Strike and advances exactly one turn."""
        resources.use_feature(character, Feature.BRUTAL_STRIKE)
        before = resources.current_turn

        resources.end_turn()

        assert resources.state.brutal_strike_available is True
        assert resources.current_turn == before + 1

    def test_use_unlimited_feature_is_noop(self, make_character, resources: ResourceState, session_repository) -> None:
        """Test using a feature without a per-turn limit changes nothing."""
        character = make_character(features={"brutal_strike": {"enabled": True, "once_per_turn": False}})
        saves = session_repository.saves

        resources.use_feature(character, Feature.BRUTAL_STRIKE)

        assert resources.state.brutal_strike_available is True
        assert session_repository.saves == saves

    def test_reset_turn_features(self, character: Character, make_resources) -> None:
        """Test features are reset without touching the turn counter."""
        resources = make_resources(brutal_strike_available=False, savage_attacks_available=False, current_turn=4)

        resources.reset_turn_features()

        assert resources.is_feature_available(character, Feature.BRUTAL_STRIKE)
        assert resources.is_feature_available(character, Feature.SAVAGE_ATTACKS)
        assert resources.current_turn == 4


class TestRage:
    """Tests for rage transitions."""

    def test_rages_decrease_by_one(self, resources: ResourceState) -> None:
        """Test each activation spends exactly one rage until none remain."""
        for expected in (2, 1, 0):
            resources.activate_rage()
            assert resources.rages_remaining == expected
            resources.end_rage()

        with pytest.raises(InvalidGameStateError):
            resources.activate_rage()
        assert resources.rages_remaining == 0
        assert not resources.rage_active

    def test_already_raging(self, resources: ResourceState) -> None:
        """Test rage cannot be activated twice."""
        resources.activate_rage()
        with pytest.raises(InvalidGameStateError):
            resources.activate_rage()
        assert resources.rages_remaining == 2

    def test_surge_stored_with_rage(self, resources: ResourceState) -> None:
        """Test the surge is committed together with the rage."""
        resources.activate_rage(surge_for_roll(2))
        assert resources.current_surge is not None
        assert resources.current_surge.roll == 2

    def test_end_rage_clears_surge(self, resources: ResourceState) -> None:
        """Test the surge ends with the rage."""
        resources.activate_rage(surge_for_roll(3))
        resources.end_rage()
        assert resources.current_surge is None
        assert not resources.rage_active


class TestAtomicTransitions:
    """Tests for rejected transitions and saving."""

    def test_surge_without_rage_rejected(self, resources: ResourceState, session_repository) -> None:
        """Test an invalid transition leaves the state and file untouched."""
        before = resources.state
        saves = session_repository.saves

        with pytest.raises(InvalidGameStateError) as exc_info:
            resources.set_surge(surge_for_roll(4))

        assert resources.state is before
        assert session_repository.saves == saves
        assert exc_info.value.details["current_state"] == "set_surge"

    def test_every_commit_saved(self, resources: ResourceState, session_repository) -> None:
        """Test each transition writes the new state."""
        resources.advance_turn()
        resources.use_heroic_inspiration()

        assert session_repository.saves == 2
        assert session_repository.data.current_turn == 2
        assert session_repository.data.heroic_inspiration is False

    def test_save_failure_logged(self, failing_repository, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a failed save is logged and the in-memory state kept."""
        spy = MagicMock()
        monkeypatch.setattr(resources_module, "logger", spy)
        resources = ResourceState(failing_repository)

        assert resources.advance_turn() == 2

        assert resources.current_turn == 2
        spy.error.assert_called_once()
        assert spy.error.call_args.args[0] == "Failed to save session"


class TestSessionManagement:
    """Tests for heroic inspiration, combat reset and long rest."""

    def test_toggle_heroic(self, resources: ResourceState) -> None:
        """Test toggling returns the new value."""
        assert resources.toggle_heroic_inspiration() is False
        assert resources.toggle_heroic_inspiration() is True

    def test_restore_heroic(self, make_resources) -> None:
        resources = make_resources(heroic_inspiration=False)
        resources.restore_heroic_inspiration()
        assert resources.heroic_inspiration

    def test_reset_combat(self, character: Character, make_resources: Callable[..., ResourceState]) -> None:
        """Test a combat reset ends rage and returns to turn 1 without restoring rages."""
        resources = make_resources(
            current_turn=7,
            rage_active=True,
            rages_remaining=1,
            current_surge=surge_for_roll(5),
            brutal_strike_available=False,
            temp_effects=[{"name": "Bless"}],
        )

        resources.reset_combat()

        state = resources.state
        assert state.current_turn == 1
        assert not state.rage_active
        assert state.current_surge is None
        assert state.brutal_strike_available
        assert state.temp_effects == []
        assert state.rages_remaining == 1

    def test_long_rest(self, character: Character, make_resources) -> None:
        """Test a long rest restores rages and inspiration and resets combat."""
        resources = make_resources(rages_remaining=0, heroic_inspiration=False, current_turn=5)

        resources.long_rest(character)

        assert resources.rages_remaining == character.max_rages
        assert resources.heroic_inspiration
        assert resources.current_turn == 1

    def test_restore_rages(self, make_resources) -> None:
        resources = make_resources(rages_remaining=0)
        resources.restore_rages(4)
        assert resources.rages_remaining == 4

    def test_new_session(self, character: Character) -> None:
        """Test a fresh session has full rages and inspiration."""
        state = new_session(character)
        assert state.current_turn == 1
        assert state.heroic_inspiration
        assert state.rages_remaining == 3
