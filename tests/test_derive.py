import pytest

from md_importer.derive import (
    DEFAULT_PROFICIENCY,
    ability_modifier,
    infer_proficiency,
    proficiency_bonus,
    proficiency_from_cr,
    saving_throw_bonus,
    skill_proficiency_multiple,
)
from md_importer.models import Ability, AttackData, ChallengeRating, DamagePart


def _attack(name: str, to_hit, bonus) -> Ability:
    damage = [DamagePart(formula="1d8 + @mod", damage_type="slashing", bonus=bonus)]
    return Ability(name=name, description="", attack=AttackData(damage=damage, to_hit=to_hit))


@pytest.mark.parametrize("score,expected", [(20, 5), (11, 0), (10, 0), (7, -2), (1, -5), (30, 10)])
def test_ability_modifier(score, expected):
    assert ability_modifier(score) == expected


@pytest.mark.parametrize("cr,expected", [
    (0, 2), (0.125, 2), (0.25, 2), (1, 2), (4, 2), (5, 3), (8, 3), (9, 4), (17, 6), (30, 9),
])
def test_proficiency_from_cr(cr, expected):
    assert proficiency_from_cr(cr) == expected


def test_infer_proficiency_from_first_attack():
    abilities = {
        "Keen Smell": Ability(name="Keen Smell", description="", attack=AttackData()),
        "Greatsword": _attack("Greatsword", 7, 4),
        "Javelin": _attack("Javelin", 9, 4),
    }
    assert infer_proficiency(abilities) == 3


def test_infer_proficiency_skips_zero_bonus():
    abilities = {"Slam": _attack("Slam", 3, 0), "Claw": _attack("Claw", 5, 3)}
    assert infer_proficiency(abilities) == 2


def test_infer_proficiency_none_without_attacks():
    assert infer_proficiency({}) is None


class TestProficiencyBonus:
    def test_challenge_wins(self):
        challenge = ChallengeRating(cr=17, xp=18000)
        assert proficiency_bonus(challenge, {"Bite": _attack("Bite", 7, 4)}) == 6

    def test_inferred_when_no_challenge(self):
        assert proficiency_bonus(None, {"Bite": _attack("Bite", 7, 4)}) == 3

    def test_non_positive_inference_falls_back(self):
        assert proficiency_bonus(None, {"Bite": _attack("Bite", 2, 4)}) == DEFAULT_PROFICIENCY

    def test_default(self):
        assert proficiency_bonus(None, {}) == 2


def test_saving_throw_bonus():
    assert saving_throw_bonus(10, True, 6) == 6
    assert saving_throw_bonus(10, False, 6) == 0
    assert saving_throw_bonus(8, True, 2) == 1


@pytest.mark.parametrize("bonus,proficiency,expected", [
    (13, 6, 2), (6, 6, 1), (6, 3, 2), (3, 6, 0), (20, 3, 2), (-1, 2, 0), (-5, 2, 0), (4, 0, 0),
])
def test_skill_proficiency_multiple(bonus, proficiency, expected):
    assert skill_proficiency_multiple(bonus, proficiency) == expected
