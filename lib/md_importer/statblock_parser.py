"""
Statblock parser for Tetra-Cube style markdown stat blocks.

Each ``get_*`` extractor owns one fact and reads it straight from the full
text, so they can run in any order. A missing line gives ``None``, never an
exception. ``parse_statblock`` runs all of them and assembles a
``CreatureModel``.
"""

import re
from typing import Dict, Optional, Union

from md_importer.block_parser import (
    get_abilities,
    get_legendary_actions,
    get_spells,
)
from md_importer.derive import proficiency_bonus
from md_importer.exceptions import MalformedStatblockError
from md_importer.models import (
    ArmorClass,
    ChallengeRating,
    CreatureModel,
    CreatureStats,
    HitPoints,
    SensesBlock,
    SizeTypeAlignment,
    Speed,
)
from md_importer.vocab import (
    DAMAGE_MODIFIER_CODES,
    FRACTIONAL_CR,
    SPECIAL_MOVEMENT,
    VISION_TYPES,
)


# ── Text normalization ──────────────────────────────────────────────

_LIGATURES = {
    "ﬁ": "fi",
    "ﬂ": "fl",
    "ﬃ": "ffi",
    "ﬄ": "ffl",
}


def _normalize(text: str) -> str:
    for lig, repl in _LIGATURES.items():
        text = text.replace(lig, repl)
    text = text.replace("\r\n", "\n")
    text = text.replace("’", "'").replace("‘", "'")
    return text


def _signed(value: str) -> int:
    """'+5' → 5, '- 2' → -2, '−1' → -1 (typographic minus)."""
    return int(value.replace("−", "-").replace(" ", ""))


_SIGNED = r'[+\-−]\s*\d+'


# ── Header ──────────────────────────────────────────────────────────

def get_creature_name(text: str) -> Optional[str]:
    m = re.search(r'^>\s*##(?!#)\s*(.+?)\s*$', _normalize(text), re.MULTILINE)
    if not m:
        return None
    return m.group(1)


_SIZE_LINE_RE = re.compile(
    r'^>\s*\*([A-Za-z]+)\s+([^,(*]+?)(?:\s*\(([^)]*)\))?\s*,\s*([^*]+?)\s*\*\s*$',
    re.MULTILINE,
)


def get_size_type_alignment(text: str) -> Optional[SizeTypeAlignment]:
    """'>*Small humanoid (goblinoid), neutral evil*' → size, type, alignment."""
    m = _SIZE_LINE_RE.search(_normalize(text))
    if not m:
        return None
    return SizeTypeAlignment(
        size=m.group(1).capitalize(),
        creature_type=m.group(2).strip(),
        alignment=m.group(4).strip(),
        subtype=m.group(3).strip() if m.group(3) else None,
    )


# ── Core attribute lines ────────────────────────────────────────────

def get_armor_class(text: str) -> Optional[ArmorClass]:
    m = re.search(r'\*\*Armor Class\*\*\s+(\d+)[ \t]*(.*)', _normalize(text))
    if not m:
        return None
    source = m.group(2).strip()
    return ArmorClass(value=int(m.group(1)), source=source or None)


def get_hit_points(text: str) -> Optional[HitPoints]:
    m = re.search(r'\*\*Hit Points\*\*\s+(\d+)(?:\s*\(([^)]*)\))?', _normalize(text))
    if not m:
        return None
    formula = m.group(2).strip() if m.group(2) else None
    return HitPoints(value=int(m.group(1)), formula=formula)


def get_speed(text: str) -> Optional[Speed]:
    """Split '40 ft., climb 40 ft., fly 80 ft. (hover)' into walk + modes."""
    m = re.search(r'\*\*Speed\*\*\s+(\d+)\s*ft\.?,?[ \t]*(.*)', _normalize(text))
    if not m:
        return None
    special = m.group(2)
    modes = {mode: 0 for mode in SPECIAL_MOVEMENT}
    for mode_m in re.finditer(r'(\w+)\s+(\d+)', special):
        mode = mode_m.group(1).lower()
        if mode in modes:
            modes[mode] = int(mode_m.group(2))
    return Speed(
        walk=int(m.group(1)),
        hover="hover" in special.lower(),
        **modes,
    )


def get_creature_stats(text: str) -> Optional[CreatureStats]:
    """Read the six scores from the '|8 (-1)|14 (+2)|...' table row.

    Returns None unless all six scores are present.
    """
    scores = re.findall(
        rf'\|\s*(\d+)\s*\(\s*(?:{_SIGNED}|0)\s*\)', _normalize(text)
    )
    if len(scores) < 6:
        return None
    return CreatureStats(*(int(s) for s in scores[:6]))


# ── Proficiency lines ───────────────────────────────────────────────

def get_saving_throws(text: str) -> Optional[Dict[str, int]]:
    """'Dex +5, Con +9' → {'dex': 5, 'con': 9}."""
    m = re.search(r'\*\*Saving Throws\*\*\s+(.*)', _normalize(text))
    if not m:
        return None
    saves = {}
    for save in re.finditer(rf'([A-Za-z]{{3}})[A-Za-z]*\s*({_SIGNED})', m.group(1)):
        saves[save.group(1).lower()] = _signed(save.group(2))
    return saves


def get_skills(text: str) -> Optional[Dict[str, int]]:
    """'Perception +6, Sleight of Hand +4' → {'Perception': 6, 'Sleight of Hand': 4}."""
    m = re.search(r'\*\*Skills\*\*\s+(.*)', _normalize(text))
    if not m:
        return None
    skills = {}
    for part in m.group(1).split(","):
        skill = re.match(rf"\s*([A-Za-z][A-Za-z' ]*?)\s*({_SIGNED})", part)
        if skill:
            skills[skill.group(1)] = _signed(skill.group(2))
    return skills


def get_damage_modifiers(text: str) -> Optional[Dict[str, str]]:
    """Raw text of each resistance/immunity line keyed by trait code."""
    modifiers = {}
    for m in re.finditer(
        r'\*\*(Damage (?:Resistances|Vulnerabilities|Immunities)|Condition Immunities)\*\*\s+(.*)',
        _normalize(text),
    ):
        modifiers[DAMAGE_MODIFIER_CODES[m.group(1)]] = m.group(2).strip()
    return modifiers or None


def get_senses(text: str) -> Optional[SensesBlock]:
    m = re.search(
        r'\*\*Senses\*\*[ \t]*(.*?)(?:,\s*)?passive Perception\s+(\d+)',
        _normalize(text),
    )
    if not m:
        return None
    vision = {name: 0 for name in VISION_TYPES}
    special = []
    for part in m.group(1).split(","):
        part = part.strip()
        if not part:
            continue
        sense = re.match(r'(\w+)\s+(\d+)', part)
        if sense and sense.group(1).lower() in vision:
            vision[sense.group(1).lower()] = int(sense.group(2))
        else:
            special.append(part)
    return SensesBlock(
        passive_perception=int(m.group(2)),
        special=", ".join(special),
        **vision,
    )


def get_languages(text: str) -> Optional[str]:
    m = re.search(r'\*\*Languages\*\*[ \t]*(.*)', _normalize(text))
    if not m:
        return None
    return m.group(1).strip()


# ── Challenge ───────────────────────────────────────────────────────

def parse_cr_value(value: str) -> Optional[Union[int, float]]:
    """'1/4' → 0.25, '17' → 17. Unknown fractions give None."""
    value = value.strip()
    if value in FRACTIONAL_CR:
        return FRACTIONAL_CR[value]
    if value.isdigit():
        return int(value)
    return None


def get_challenge(text: str) -> Optional[ChallengeRating]:
    """'17 (18,000 XP)' → CR 17, XP 18000. '0 (0 or 10 XP)' keeps the last XP figure."""
    m = re.search(
        r'\*\*Challenge\*\*\s+(\d+/\d+|\d+)\s*\(((?:[\d,]+\s+or\s+)?[\d,]+)\s*XP\)',
        _normalize(text),
    )
    if not m:
        return None
    cr = parse_cr_value(m.group(1))
    if cr is None:
        return None
    xp = m.group(2).split()[-1]
    return ChallengeRating(cr=cr, xp=int(xp.replace(",", "")))


# ── Resources ───────────────────────────────────────────────────────

def get_spell_slots(text: str) -> Dict[int, int]:
    """'1st level (4 slots)' → {1: 4}."""
    slots = {}
    for m in re.finditer(r'(\d+)(?:st|nd|rd|th) level \((\d+) slots?\)', _normalize(text)):
        slots[int(m.group(1))] = int(m.group(2))
    return slots


def get_legendary_action_count(text: str) -> Optional[int]:
    m = re.search(
        r'^>.*can take (\d+) legendary actions', _normalize(text), re.MULTILINE | re.IGNORECASE
    )
    return int(m.group(1)) if m else None


def get_legendary_resistance_count(text: str) -> Optional[int]:
    m = re.search(r'Legendary Resistance \((\d+)/Day\)', _normalize(text), re.IGNORECASE)
    return int(m.group(1)) if m else None


# ── Main parser ─────────────────────────────────────────────────────

def parse_statblock(text: str) -> CreatureModel:
    """Parse a markdown stat block into a CreatureModel.

    Raises MalformedStatblockError when the name or the ability score table
    cannot be found, since nothing sensible can be built without them.
    """
    text = _normalize(text)

    name = get_creature_name(text)
    stats = get_creature_stats(text)
    missing = []
    if not name:
        missing.append("name")
    if stats is None:
        missing.append("ability scores")
    if missing:
        raise MalformedStatblockError(missing)

    abilities = get_abilities(text)
    challenge = get_challenge(text)

    return CreatureModel(
        name=name,
        stats=stats,
        size_type_alignment=get_size_type_alignment(text),
        armor=get_armor_class(text),
        hit_points=get_hit_points(text),
        speed=get_speed(text),
        saving_throws=get_saving_throws(text),
        skills=get_skills(text),
        damage_modifiers=get_damage_modifiers(text),
        senses=get_senses(text),
        languages=get_languages(text),
        challenge=challenge,
        abilities=abilities,
        legendary_actions=get_legendary_actions(text),
        legendary_action_count=get_legendary_action_count(text),
        legendary_resistance_count=get_legendary_resistance_count(text),
        spells=get_spells(text),
        spell_slots=get_spell_slots(text),
        proficiency=proficiency_bonus(challenge, abilities),
    )


# ── Validation ──────────────────────────────────────────────────────

def validate_creature(creature: CreatureModel) -> list[str]:
    """Return list of warning strings for missing or suspect fields."""
    warnings = []

    if creature.size_type_alignment is None:
        warnings.append("Size is empty — check that the size/type/alignment line was parsed")
    if creature.armor is None:
        warnings.append("Armor Class line not found")
    if creature.hit_points is None or creature.hit_points.value == 0:
        warnings.append("Hit points missing or 0 — may indicate a parsing error")
    if creature.speed is None:
        warnings.append("Speed line not found")
    if creature.challenge is None:
        warnings.append("Challenge line not found — proficiency was inferred")
    if creature.senses is None:
        warnings.append("Senses line not found")

    scores = creature.stats.as_dict()
    if all(v == 10 for v in scores.values()):
        warnings.append("All ability scores are 10 — may indicate parsing failed")

    return warnings
