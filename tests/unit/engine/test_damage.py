"""Tests for damage resolution."""

from __future__ import annotations

from collections.abc import Callable
from itertools import product

import pytest

from barb_attack.core.config import RulesSettings
from barb_attack.core.exceptions import PromptInterruptedError
from barb_attack.engine.damage import DamageResolver, modifier_labels
from barb_attack.engine.history import TurnHistory
from barb_attack.engine.oracle import Rolling
from barb_attack.engine.resources import ResourceState
from barb_attack.models.character import Character
from barb_attack.models.enums import AttackMode
from barb_attack.models.results import AttackRollResult, DamageRollResult


def _attack(mode: AttackMode = AttackMode.NORMAL, d20: int = 15) -> AttackRollResult:
    return AttackRollResult(
        rolls=[d20],
        d20_roll=d20,
        modifier=9,
        total=d20 + 9,
        is_critical=d20 == 20,
        mode=mode,
    )


@pytest.fixture
def no_heroic(make_resources: Callable[..., ResourceState]) -> ResourceState:
    return make_resources(heroic_inspiration=False)


@pytest.fixture
def make_resolver(roller, oracle, history) -> Callable[..., DamageResolver]:
    """Factory wiring a resolver around the scripted roller and oracle."""

    def _make(character: Character, resources: ResourceState) -> DamageResolver:
        return DamageResolver(character, resources, roller, oracle, history)

    return _make


class TestComputeDamage:
    """Tests for the weapon dice and flat terms."""

    def test_single_die_no_bonuses(self, plain_character, no_heroic, roller, make_resolver) -> None:
        """Test a plain hit is one weapon die."""
        roller.queue(6)

        result = make_resolver(plain_character, no_heroic).compute_damage()

        assert result.weapon_total == 6
        assert result.breakdown == "d10(6)"
        assert result.explanation == "1d10 Glaive damage"
        assert result.total == 6

    def test_flat_bonuses_summed(self, make_character, no_heroic, roller, make_resolver) -> None:
        """Test named flat bonuses are added once and listed by name."""
        character = make_character(features={}, damage_bonuses={"strength": 5, "magic": 4, "dueling": 3})
        roller.queue(7)

        result = make_resolver(character, no_heroic).compute_damage()

        assert result.weapon_total == 19
        assert result.breakdown == "d10(7) + 12"
        assert result.explanation == "1d10 Glaive damage + 5 strength + 4 magic + 3 dueling"

    def test_critical_rolls_two_dice(self, plain_character, no_heroic, roller, make_resolver) -> None:
        """Test a critical rolls the weapon die twice and sums the two."""
        roller.queue(3, 8)

        result = make_resolver(plain_character, no_heroic).compute_damage(critical=True)

        assert result.weapon_total == 11
        assert result.breakdown == "d10(3) + d10(8)"
        assert "2d10" in result.explanation
        assert result.critical
        assert roller.calls == [(10, False, False), (10, False, False)]

    def test_flat_bonuses_not_doubled_on_critical(self, character, no_heroic, roller, make_resolver) -> None:
        """Test a critical doubles dice only."""
        roller.queue(5, 5)

        result = make_resolver(character, no_heroic).compute_damage(critical=True)

        assert result.weapon_total == 14

    def test_negative_total_floored(self, make_character, no_heroic, roller, make_resolver) -> None:
        """Test penalties cannot push the weapon total below zero."""
        character = make_character(features={}, damage_bonuses={"cursed": -5})
        roller.queue(2)

        result = make_resolver(character, no_heroic).compute_damage()

        assert result.weapon_total == 0
        assert result.breakdown == "d10(2) - 5"

    def test_raging_keeps_flat_bonuses(self, make_character, make_resources, roller, make_resolver) -> None:
        """Test raging does not change the flat sum of the character's bonuses."""
        character = make_character(features={}, damage_bonuses={"strength": 4, "magic": 8})
        resources = make_resources(heroic_inspiration=False, rage_active=True)
        roller.queue(6)

        result = make_resolver(character, resources).compute_damage()

        assert result.weapon_total == 18
        assert result.breakdown == "d10(6) + 12"
        assert not result.flags.rage

    def test_rage_bonus_when_enabled(self, character, make_resources, roller, oracle, history) -> None:
        """Test rage damage is added while raging when the rules ask for it."""
        resources = make_resources(heroic_inspiration=False, rage_active=True)
        resolver = DamageResolver(
            character, resources, roller, oracle, history, rules=RulesSettings(add_rage_damage=True)
        )
        roller.queue(5)

        result = resolver.compute_damage()

        assert result.weapon_total == 11
        assert result.breakdown == "d10(5) + 6"
        assert result.explanation.endswith("+ 2 rage")
        assert result.flags.rage

    def test_supplemental_dice_separate(self, make_character, no_heroic, roller, make_resolver) -> None:
        """Test supplemental dice are reported apart from the weapon total."""
        character = make_character(additional_damage_dice={"flame": {"die": 6, "description": "fire"}})
        roller.queue(5, 4)

        result = make_resolver(character, no_heroic).compute_damage()

        assert result.weapon_total == 9
        assert [(extra.type, extra.amount, extra.die) for extra in result.additional_damage] == [("fire", 4, 6)]
        assert result.total == 13

    def test_great_weapon_fighting_rerolls_low(self, make_character, no_heroic, roller, make_resolver) -> None:
        """Test weapon dice use the reroll-low policy with Great Weapon Fighting."""
        character = make_character(features={"great_weapon_fighting": {"enabled": True}})
        roller.queue(6)

        result = make_resolver(character, no_heroic).compute_damage()

        assert roller.calls == [(10, True, False)]
        assert result.flags.reroll_low


class TestSavageAttacks:
    """Tests for reroll-and-keep-higher."""

    def test_reroll_beats_original(self, character, no_heroic, roller, make_resolver) -> None:
        """Test the higher reroll is kept and both values are shown."""
        roller.queue(3, 7)

        result = make_resolver(character, no_heroic).compute_damage(use_reroll_keep_higher=True)

        assert result.breakdown == "d10(7) + 4"
        assert result.weapon_total == 11
        assert "Savage Attacks (7 > 3)" in result.explanation
        assert not no_heroic.state.savage_attacks_available

    def test_reroll_did_not_help(self, plain_character, no_heroic, roller, make_resolver) -> None:
        """Test the original is kept when the reroll is not higher."""
        roller.queue(8, 5)

        result = make_resolver(plain_character, no_heroic).compute_damage(use_reroll_keep_higher=True)

        assert result.weapon_total == 8
        assert "didn't help (5 ≤ 8)" in result.explanation

    def test_critical_compares_pairs(self, plain_character, no_heroic, roller, make_resolver) -> None:
        """Test a critical rerolls both dice and keeps the higher pair."""
        roller.queue(2, 3, 6, 6)

        result = make_resolver(plain_character, no_heroic).compute_damage(
            critical=True, use_reroll_keep_higher=True
        )

        assert result.weapon_total == 12
        assert result.breakdown == "d10(6) + d10(6)"
        assert "(6+6=12 > 2+3=5)" in result.explanation

    def test_keep_higher_never_decreases(self, plain_character, no_heroic, roller, make_resolver) -> None:
        """Test the kept die is never below the original for any pair of rolls."""
        resolver = make_resolver(plain_character, no_heroic)
        for original, reroll in product(range(1, 11), repeat=2):
            roller.queue(original, reroll)
            result = resolver.compute_damage(use_reroll_keep_higher=True)
            assert result.weapon_total == max(original, reroll)


class TestBrutalStrike:
    """Tests for the bonus damage die."""

    def test_bonus_die_added(self, character, no_heroic, roller, make_resolver) -> None:
        """Test the bonus die is rolled after the weapon and consumed."""
        roller.queue(6, 4)

        result = make_resolver(character, no_heroic).compute_damage(use_bonus_die=True)

        assert result.weapon_total == 14
        assert result.breakdown == "d10(6) + d10(4) + 4"
        assert result.explanation == "1d10 Glaive damage + 1d10 Brutal Strike + 4 strength"
        assert result.flags.bonus_die
        assert not no_heroic.state.brutal_strike_available


class TestHeroicInspiration:
    """Tests for the Heroic Inspiration reroll."""

    def test_accepted_reroll(self, plain_character, resources, roller, oracle, make_resolver) -> None:
        """Test accepting rerolls the lowest die and spends inspiration."""
        roller.queue(2, 9)

        result = make_resolver(plain_character, resources).compute_damage()

        assert result.weapon_total == 9
        assert result.heroic_used is not None
        assert result.heroic_used.delta == 7
        assert result.heroic_used.source == "Glaive damage"
        assert "2→9" in result.explanation
        assert resources.heroic_inspiration is False
        assert "Use Heroic Inspiration to reroll the 2?" in oracle.prompts

    def test_single_use(self, plain_character, resources, roller, oracle, make_resolver) -> None:
        """Test inspiration is not offered again once spent."""
        resolver = make_resolver(plain_character, resources)
        roller.queue(2, 9)
        resolver.compute_damage()
        prompts_before = len(oracle.prompts)

        roller.queue(1)
        result = resolver.compute_damage()

        assert result.weapon_total == 1
        assert result.heroic_used is None
        assert len(oracle.prompts) == prompts_before

    def test_declined(self, plain_character, resources, roller, oracle, make_resolver) -> None:
        """Test declining keeps the roll and the inspiration."""
        oracle.confirms.append(False)
        roller.queue(3)

        result = make_resolver(plain_character, resources).compute_damage()

        assert result.weapon_total == 3
        assert result.heroic_used is None
        assert resources.heroic_inspiration is True

    def test_interrupted_prompt_declines(self, plain_character, resources, roller, oracle, make_resolver) -> None:
        """Test an aborted prompt counts as declining."""
        oracle.confirms.append(PromptInterruptedError("aborted"))
        roller.queue(1)

        result = make_resolver(plain_character, resources).compute_damage()

        assert result.weapon_total == 1
        assert resources.heroic_inspiration is True

    def test_not_offered_above_threshold(self, plain_character, resources, roller, oracle, make_resolver) -> None:
        """Test no offer when every die is above 4."""
        roller.queue(5)

        make_resolver(plain_character, resources).compute_damage()

        assert oracle.prompts == []

    def test_lowest_of_all_terms(self, character, resources, roller, make_resolver) -> None:
        """Test the offer sees the bonus die too."""
        roller.queue(6, 2, 8)

        result = make_resolver(character, resources).compute_damage(use_bonus_die=True)

        assert result.heroic_used is not None
        assert result.heroic_used.source == "Brutal Strike"
        assert result.breakdown == "d10(6) + d10(8) + 4"
        assert result.weapon_total == 18

    def test_reroll_has_no_low_reroll(self, make_character, resources, roller, make_resolver) -> None:
        """Test the inspiration reroll is a plain die even with Great Weapon Fighting."""
        character = make_character(features={"great_weapon_fighting": {"enabled": True}})
        roller.queue(1, 7)

        make_resolver(character, resources).compute_damage()

        assert roller.calls == [(10, True, False), (10, False, False)]


class TestInteractiveDamage:
    """Tests for the prompts around a damage roll."""

    def test_after_normal_hit(self, character, no_heroic, roller, oracle, history: TurnHistory, make_resolver) -> None:
        """Test a normal hit offers Brutal Strike and Savage Attacks and records the damage."""
        history.start_turn(1)
        oracle.confirms.extend([False, False])
        roller.queue(7)

        result = make_resolver(character, no_heroic).roll_after_hit(_attack())

        assert result.weapon_total == 11
        assert oracle.prompts == [
            "Brutal Strike (1d10 extra damage, once per turn)?",
            "Savage Attacks (reroll weapon dice, keep higher, once per turn)?",
        ]
        assert oracle.shown_of(Rolling)
        assert oracle.shown_of(DamageRollResult) == [result]
        action = history.current.actions[-1]
        assert action.damage == 11
        assert action.details == "d10(7) + 4"

    def test_quick_roll_recorded_outside_turn(
        self, make_character, resources, roller, oracle, history: TurnHistory, make_resolver
    ) -> None:
        """Test a standalone roll lands in the out-of-turn history with its extras."""
        character = make_character(
            features={},
            damage_bonuses={},
            additional_damage_dice={"flame": {"die": 6, "description": "fire"}},
        )
        oracle.confirms.extend([False, True])
        roller.queue(2, 9, 4)

        result = make_resolver(character, resources).roll_standalone()

        assert result.total == 13
        (action,) = history.out_of_turn
        assert action.damage == 13
        assert action.turn_number == 1
        assert [(extra.type, extra.amount) for extra in action.additional_damage] == [("fire", 4)]
        assert action.heroic_used == result.heroic_used
        assert action.heroic_used.original_roll == 2

    def test_advantage_hit_skips_brutal(self, character, no_heroic, roller, oracle, make_resolver) -> None:
        """Test Brutal Strike is not offered after an advantage roll."""
        oracle.confirms.append(False)
        roller.queue(7)

        make_resolver(character, no_heroic).roll_after_hit(_attack(AttackMode.ADVANTAGE))

        assert oracle.prompts == ["Savage Attacks (reroll weapon dice, keep higher, once per turn)?"]

    def test_brutal_strike_attack_adds_die(self, character, no_heroic, roller, oracle, history, make_resolver) -> None:
        """Test a forgo-advantage hit adds the bonus die without asking."""
        history.start_turn(1)
        oracle.confirms.append(False)
        roller.queue(5, 3)

        result = make_resolver(character, no_heroic).roll_after_hit(_attack(AttackMode.FORGO_ADVANTAGE))

        assert result.weapon_total == 12
        assert "BRUTAL STRIKE - Extra 1d10 damage!" in oracle.notices()
        assert history.current.actions[-1].details == "d10(5) + d10(3) + 4 (brutal)"

    def test_critical_hit(self, character, no_heroic, roller, oracle, make_resolver) -> None:
        """Test a natural 20 doubles the weapon dice."""
        oracle.confirms.extend([False, False])
        roller.queue(9, 10)

        result = make_resolver(character, no_heroic).roll_after_hit(_attack(d20=20))

        assert result.critical
        assert result.weapon_total == 23
        assert "CRITICAL HIT - Double weapon dice!" in oracle.notices()

    def test_used_features_not_offered(self, character, make_resources, roller, oracle, make_resolver) -> None:
        """Test spent once-per-turn features are skipped."""
        resources = make_resources(
            heroic_inspiration=False,
            brutal_strike_available=False,
            savage_attacks_available=False,
        )
        roller.queue(4)

        make_resolver(character, resources).roll_after_hit(_attack())

        assert oracle.prompts == []

    def test_standalone(self, character, no_heroic, roller, oracle, make_resolver) -> None:
        """Test the quick damage roll asks for a critical and the features."""
        oracle.confirms.extend([True, True, False])
        roller.queue(4, 6, 5)

        result = make_resolver(character, no_heroic).roll_standalone()

        assert "Heroic Inspiration: Used" in oracle.notices()
        assert oracle.prompts[0] == "Critical Hit (double weapon dice)?"
        assert result.critical
        assert result.flags.bonus_die
        assert result.weapon_total == 19
        assert modifier_labels(result) == "critical, brutal"
