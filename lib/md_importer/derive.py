"""Derived numbers: ability modifiers, proficiency bonus, save totals."""
from __future__ import annotations

import math
from typing import Mapping, Optional, Union

from md_importer.models import Ability, ChallengeRating

DEFAULT_PROFICIENCY = 2


def ability_modifier(score: int) -> int:
    """20 → 5, 11 → 0, 7 → -2."""
    return (score - 10) // 2


def proficiency_from_cr(cr: Union[int, float]) -> int:
    return max(math.floor((cr - 1) / 4) + 2, 2)


def infer_proficiency(abilities: Mapping[str, Ability]) -> Optional[int]:
    """Proficiency from the first attack that prints both a to-hit and a flat
    damage bonus. To-hit includes proficiency, the damage bonus does not.
    """
    for ability in abilities.values():
        attack = ability.attack
        if attack is None or attack.to_hit is None or not attack.damage:
            continue
        bonus = attack.damage[0].bonus
        if bonus:
            return attack.to_hit - bonus
    return None


def proficiency_bonus(
    challenge: Optional[ChallengeRating], abilities: Mapping[str, Ability]
) -> int:
    if challenge is not None:
        return proficiency_from_cr(challenge.cr)
    inferred = infer_proficiency(abilities)
    if inferred is not None and inferred > 0:
        return inferred
    return DEFAULT_PROFICIENCY


def saving_throw_bonus(score: int, proficient: bool, proficiency: int) -> int:
    modifier = ability_modifier(score)
    return modifier + proficiency if proficient else modifier


def skill_proficiency_multiple(bonus: int, proficiency: int) -> int:
    """0 = not proficient, 1 = proficient, 2 = expertise.

    The printed total already includes the ability modifier, so plain
    truncating division is only an approximation. Unlike a bare division the
    result is clamped to 0..2: a large modifier can push the quotient past 2
    and a negative total below 0, and the actor schema only accepts 0, 1 or 2.
    """
    if proficiency <= 0:
        return 0
    return max(0, min(2, int(bonus / proficiency)))
