"""Tests for the session and play settings models."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from barb_attack.engine.wild_magic import surge_for_roll
from barb_attack.models.enums import SurgeCategory
from barb_attack.models.session import SessionState, SurgeEffect, TempEffect
from barb_attack.models.settings import PlaySettings, TestingMode


class TestSessionState:
    """Tests for SessionState validation and serialization."""

    def test_defaults(self) -> None:
        """Test a bare session starts at turn 1 with features available."""
        state = SessionState()
        assert state.current_turn == 1
        assert state.heroic_inspiration is True
        assert state.rage_active is False
        assert state.brutal_strike_available is True
        assert state.savage_attacks_available is True
        assert state.current_surge is None

    def test_surge_requires_rage(self) -> None:
        """Test a surge effect cannot exist outside rage."""
        with pytest.raises(ValidationError):
            SessionState(rage_active=False, current_surge=surge_for_roll(2))

    def test_surge_while_raging(self) -> None:
        """Test a surge effect is accepted while raging."""
        state = SessionState(rage_active=True, rages_remaining=2, current_surge=surge_for_roll(2))
        assert state.current_surge is not None
        assert state.current_surge.roll == 2

    @pytest.mark.parametrize(
        "changes",
        [{"current_turn": 0}, {"rages_remaining": -1}, {"unknown": True}],
    )
    def test_invalid_values(self, changes: dict[str, object]) -> None:
        """Test out-of-range counters and unknown keys are rejected."""
        with pytest.raises(ValidationError):
            SessionState.model_validate(changes)

    def test_file_keys(self) -> None:
        """Test the active surge is read and written as current_wild_magic."""
        state = SessionState.model_validate(
            {
                "rage_active": True,
                "rages_remaining": 1,
                "current_wild_magic": {
                    "roll": 5,
                    "description": "When hit by an attack, attacker takes 1d6 force damage.",
                    "effect_type": "defensive",
                },
            }
        )
        assert state.current_surge is not None
        assert state.current_surge.category is SurgeCategory.DEFENSIVE

        saved = json.loads(state.model_dump_json(by_alias=True))
        assert saved["current_wild_magic"]["effect_type"] == "defensive"
        assert "current_surge" not in saved

    def test_temp_effects(self) -> None:
        """Test temporary effects round through the session."""
        state = SessionState(temp_effects=[TempEffect(name="Bless", duration="encounter")])
        assert state.temp_effects[0].effect_type == "modifier"


class TestSurgeEffect:
    """Tests for SurgeEffect bounds."""

    def test_roll_out_of_table(self) -> None:
        """Test the surge roll must be 1-8."""
        with pytest.raises(ValidationError):
            SurgeEffect(roll=9, description="x", category=SurgeCategory.UTILITY)


class TestPlaySettings:
    """Tests for PlaySettings."""

    def test_no_testing_mode(self) -> None:
        """Test absent testing mode means normal play."""
        settings = PlaySettings()
        assert settings.enable_crit_animations is True
        assert settings.always_crit is False
        assert settings.force_heroic_inspiration is False

    def test_testing_mode_flags(self) -> None:
        """Test testing overrides are exposed as properties."""
        settings = PlaySettings(testing_mode=TestingMode(always_crit=True))
        assert settings.always_crit is True
        assert settings.force_heroic_inspiration is False
