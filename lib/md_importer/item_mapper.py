"""
Turns parsed abilities and legendary actions into owned item records.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from md_importer.derive import ability_modifier
from md_importer.models import Ability, AttackData, AttackRange, CreatureStats
from md_importer.schema import (
    Activation,
    ItemRecord,
    ItemSave,
    RangeField,
    TargetField,
)


def get_attack_ability(attack: Optional[AttackData], stats: CreatureStats) -> Optional[str]:
    """The ability whose modifier equals the first damage entry's flat bonus."""
    if attack is None or not attack.damage:
        return None
    bonus = attack.damage[0].bonus
    if bonus is None:
        return None
    for code, score in stats.as_dict().items():
        if ability_modifier(score) == bonus:
            return code
    return None


def get_activation(ability: Ability) -> Activation:
    if ability.cost:
        return Activation(type="legendary", cost=ability.cost)
    attack = ability.attack
    if attack is not None and (attack.damage or attack.save):
        return Activation(type="action", cost=1)
    return Activation()


def get_action_type(ability: Ability, is_weapon: bool) -> Optional[str]:
    attack = ability.attack
    if attack is None:
        return None
    if is_weapon:
        description = ability.description.lower()
        melee = "melee" in description
        if not melee and ("ranged weapon attack" in description or attack.range.double):
            return "rwak"
        return "mwak"
    if attack.save is not None:
        return "save"
    return None


def build_range_target(attack_range: Optional[AttackRange]) -> Tuple[RangeField, Optional[TargetField]]:
    """Shaped areas become a self range plus a target; otherwise prefer the
    short/long pair over a single distance.
    """
    if attack_range is None:
        return RangeField(), None
    single, double = attack_range.single, attack_range.double
    if single is not None and single.shape:
        target = TargetField(value=single.value, units=single.units, type=single.shape)
        return RangeField(value=None, long=None, units="self"), target
    if double is not None:
        return RangeField(value=double.short, long=double.long, units=double.units), None
    if single is not None:
        return RangeField(value=single.value, long=None, units=single.units), None
    return RangeField(), None


def build_item(ability: Ability, stats: CreatureStats) -> ItemRecord:
    attack = ability.attack
    attack_ability = get_attack_ability(attack, stats)
    is_weapon = attack_ability is not None
    range_field, target = build_range_target(attack.range if attack else None)

    save = None
    if attack is not None and attack.save is not None:
        save = ItemSave(ability=attack.save.ability, dc=attack.save.dc)

    return ItemRecord(
        name=ability.name,
        type="weapon" if is_weapon else "feat",
        description=ability.description,
        activation=get_activation(ability),
        ability=attack_ability,
        action_type=get_action_type(ability, is_weapon),
        damage_parts=[(part.formula, part.damage_type) for part in attack.damage] if attack else [],
        save=save,
        range=range_field,
        target=target,
    )


def build_items(abilities: Iterable[Ability], stats: CreatureStats) -> List[ItemRecord]:
    return [build_item(ability, stats) for ability in abilities]
