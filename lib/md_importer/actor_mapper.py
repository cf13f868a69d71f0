"""
Builds the npc actor record from a parsed CreatureModel.

Every builder takes model fragments and returns a schema dataclass; missing
fragments fall back to the schema defaults.
"""
from __future__ import annotations

import re
from typing import Dict, Iterable, Mapping, Optional, Tuple

from md_importer.derive import (
    ability_modifier,
    saving_throw_bonus,
    skill_proficiency_multiple,
)
from md_importer.models import (
    CreatureModel,
    CreatureStats,
    HitPoints,
    SensesBlock,
    Speed,
)
from md_importer.schema import (
    AbilityScoreData,
    ActorData,
    ActorRecord,
    AttributesData,
    Counter,
    DetailsData,
    HitPointsData,
    MovementData,
    SensesData,
    TraitSplit,
    TraitsData,
)
from md_importer.vocab import (
    CONDITIONS,
    DAMAGE_TYPES,
    DEFAULT_SIZE_CODE,
    EMPTY_MARKERS,
    LANGUAGES,
    SIZE_CODES,
    SKILL_CODES,
)

_SIZE_NAMES = {code: name for name, code in SIZE_CODES.items()}


# ── Standard / custom split ─────────────────────────────────────────

def split_vocabulary(raw: Optional[str], vocabulary: Iterable[str]) -> TraitSplit:
    """Split 'fire, poison; nonmagical attacks' into known values and the rest.

    Known tokens are matched case-insensitively and stored lower-case;
    unknown tokens keep their text and are joined with ';'.
    """
    if not raw:
        return TraitSplit()
    known = set(vocabulary)
    standard: list[str] = []
    custom: list[str] = []
    for token in re.split(r'[;,]', raw):
        token = token.strip()
        if token.lower() in EMPTY_MARKERS:
            continue
        if token.lower() in known:
            if token.lower() not in standard:
                standard.append(token.lower())
        else:
            custom.append(token)
    return TraitSplit(value=standard, custom=";".join(custom))


def split_damage_modifiers(modifiers: Optional[Mapping[str, str]]) -> Dict[str, TraitSplit]:
    vocabulary = DAMAGE_TYPES | CONDITIONS
    result = {code: TraitSplit() for code in ("di", "dr", "dv", "ci")}
    for code, raw in (modifiers or {}).items():
        result[code] = split_vocabulary(raw, vocabulary)
    return result


def split_languages(languages: Optional[str]) -> TraitSplit:
    return split_vocabulary(languages, LANGUAGES)


# ── Sections ────────────────────────────────────────────────────────

def build_abilities(
    stats: CreatureStats, saves: Optional[Mapping[str, int]], proficiency: int
) -> Dict[str, AbilityScoreData]:
    abilities = {}
    for code, score in stats.as_dict().items():
        proficient = bool(saves and code in saves)
        abilities[code] = AbilityScoreData(
            value=score,
            proficient=1 if proficient else 0,
            prof=proficiency if proficient else 0,
            mod=ability_modifier(score),
            save=saving_throw_bonus(score, proficient, proficiency),
        )
    return abilities


def build_skills(skills: Optional[Mapping[str, int]], proficiency: int) -> Dict[str, int]:
    result = {}
    for name, bonus in (skills or {}).items():
        code = SKILL_CODES.get(name.lower())
        if code is None:
            print(f"[Mapper] Unknown skill '{name}' skipped.")
            continue
        result[code] = skill_proficiency_multiple(bonus, proficiency)
    return result


def build_hit_points(hit_points: Optional[HitPoints]) -> HitPointsData:
    if hit_points is None:
        return HitPointsData()
    return HitPointsData(
        value=hit_points.value, max=hit_points.value, formula=hit_points.formula
    )


def build_movement(speed: Optional[Speed]) -> MovementData:
    if speed is None:
        return MovementData()
    return MovementData(
        walk=speed.walk,
        burrow=speed.burrow,
        climb=speed.climb,
        fly=speed.fly,
        swim=speed.swim,
        hover=speed.hover,
        units=speed.units,
    )


def build_senses(senses: Optional[SensesBlock]) -> SensesData:
    if senses is None:
        return SensesData()
    return SensesData(
        blindsight=senses.blindsight,
        darkvision=senses.darkvision,
        tremorsense=senses.tremorsense,
        truesight=senses.truesight,
        special=senses.special,
        units=senses.units,
    )


def build_attributes(creature: CreatureModel) -> AttributesData:
    spellcasting = creature.spellcasting
    return AttributesData(
        ac=creature.armor.value if creature.armor else 10,
        hp=build_hit_points(creature.hit_points),
        movement=build_movement(creature.speed),
        senses=build_senses(creature.senses),
        prof=creature.proficiency,
        spellcasting=spellcasting.ability if spellcasting else None,
    )


def build_details(creature: CreatureModel) -> DetailsData:
    details = DetailsData()
    sta = creature.size_type_alignment
    if sta is not None:
        details.alignment = sta.alignment
        details.type = sta.creature_type
        details.subtype = sta.subtype
    if creature.challenge is not None:
        details.cr = creature.challenge.cr
        details.xp = creature.challenge.xp
    if creature.spellcasting is not None:
        details.spell_level = creature.spellcasting.level
    return details


def build_traits(creature: CreatureModel) -> TraitsData:
    sta = creature.size_type_alignment
    size = SIZE_CODES.get(sta.size, DEFAULT_SIZE_CODE) if sta else DEFAULT_SIZE_CODE
    modifiers = split_damage_modifiers(creature.damage_modifiers)
    return TraitsData(
        size=size,
        di=modifiers["di"],
        dr=modifiers["dr"],
        dv=modifiers["dv"],
        ci=modifiers["ci"],
        languages=split_languages(creature.languages),
    )


def build_spell_slots(slots: Mapping[int, int]) -> Dict[str, Counter]:
    return {f"spell{level}": Counter(value=count, max=count) for level, count in slots.items()}


def _counter(value: Optional[int]) -> Counter:
    return Counter(value=value or 0, max=value or 0)


# ── Actor ───────────────────────────────────────────────────────────

def build_actor(creature: CreatureModel) -> ActorRecord:
    """Assemble the full npc actor record."""
    data = ActorData(
        abilities=build_abilities(creature.stats, creature.saving_throws, creature.proficiency),
        attributes=build_attributes(creature),
        details=build_details(creature),
        traits=build_traits(creature),
        skills=build_skills(creature.skills, creature.proficiency),
        legact=_counter(creature.legendary_action_count),
        legres=_counter(creature.legendary_resistance_count),
        spells=build_spell_slots(creature.spell_slots),
    )
    return ActorRecord(name=creature.name, data=data)


def read_back_size_type_alignment(actor: ActorRecord) -> Tuple[Optional[str], str, str]:
    """(size name, type, alignment) as stored on a built actor."""
    return (
        _SIZE_NAMES.get(actor.data.traits.size),
        actor.data.details.type,
        actor.data.details.alignment,
    )
