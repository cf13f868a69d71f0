"""
Block parsers for the free-text parts of a stat block: traits, actions,
legendary actions and spell lists, plus the attack sub-parser they share.
"""

import re
from typing import Dict, List, Optional

from md_importer.models import (
    Ability,
    AttackData,
    AttackRange,
    DamagePart,
    DoubleRange,
    SaveData,
    SingleRange,
    SpellcastingData,
)
from md_importer.vocab import ABILITY_CODES, AREA_SHAPES

SPELLCASTING_HEADERS = ("Spellcasting", "Innate Spellcasting")


def _clear_text(text: str) -> str:
    return text.replace("_", "").strip()


def _signed(value: str) -> int:
    return int(value.replace("−", "-").replace(" ", ""))


# ── Attack sub-parser ───────────────────────────────────────────────

_DAMAGE_RE = re.compile(r'\((\d+d\d+)(?:\s*([+\-−])\s*(\d+))?\)\s+(\w+) damage')
_SINGLE_RANGE_RE = re.compile(
    rf'(?<![\d/])(\d+)[ -](?:ft|feet|foot)\b\.?(?:-radius)?(?: ({"|".join(AREA_SHAPES)})\b)?'
)
_DOUBLE_RANGE_RE = re.compile(r'(\d+)/(\d+) (\w+)')
_SAVE_RE = re.compile(rf'DC (\d+) ({"|".join(ABILITY_CODES)})')
_TO_HIT_RE = re.compile(r'([+\-−] ?\d+) to hit')


def get_attack_damage(text: str) -> List[DamagePart]:
    """Every '(2d6 + 4) slashing damage' as a DamagePart, in order.

    The formula keeps the dice and swaps the flat bonus for '@mod'.
    """
    parts = []
    for m in _DAMAGE_RE.finditer(text):
        dice, sign, amount, damage_type = m.groups()
        bonus = None
        formula = dice
        if amount is not None:
            bonus = _signed(sign + amount)
            formula = f"{dice} + @mod"
        parts.append(DamagePart(formula=formula, damage_type=damage_type.lower(), bonus=bonus))
    return parts


def get_attack_range(text: str) -> AttackRange:
    single = None
    m = _SINGLE_RANGE_RE.search(text)
    if m:
        single = SingleRange(value=int(m.group(1)), units="ft", shape=m.group(2))

    double = None
    m = _DOUBLE_RANGE_RE.search(text)
    if m:
        double = DoubleRange(short=int(m.group(1)), long=int(m.group(2)), units="ft")

    return AttackRange(single=single, double=double)


def get_attack_save(text: str) -> Optional[SaveData]:
    m = _SAVE_RE.search(text)
    if not m:
        return None
    return SaveData(dc=int(m.group(1)), ability=ABILITY_CODES[m.group(2)])


def get_attack_hit(text: str) -> Optional[int]:
    m = _TO_HIT_RE.search(text)
    return _signed(m.group(1)) if m else None


def get_attack(text: str) -> AttackData:
    return AttackData(
        damage=get_attack_damage(text),
        range=get_attack_range(text),
        save=get_attack_save(text),
        to_hit=get_attack_hit(text),
    )


# ── Spellcasting ────────────────────────────────────────────────────

def get_spellcasting_stats(text: str) -> SpellcastingData:
    """Caster level and casting ability from a Spellcasting trait."""
    level = re.search(r'(\d+)\w{1,2}-level spellcaster', text)
    ability = re.search(r'spell ?casting ability is (\w+)', text, re.IGNORECASE)
    save_dc = re.search(r'spell save DC (\d+)', text, re.IGNORECASE)
    attack = re.search(r'([+\-−]\d+) to hit with spell attacks', text, re.IGNORECASE)
    return SpellcastingData(
        level=int(level.group(1)) if level else 0,
        ability=ABILITY_CODES.get(ability.group(1).capitalize()) if ability else None,
        save_dc=int(save_dc.group(1)) if save_dc else None,
        attack_bonus=_signed(attack.group(1)) if attack else None,
    )


# ── Traits and actions ──────────────────────────────────────────────

_ABILITY_RE = re.compile(r'\*\*\*(.*?)\.\*\*\*[ \t]*(.*)')
_CONTINUATION_RE = re.compile(r'(?:&nbsp;)+\*\*(.*?)\.\*\*[ \t]*(.*)')


def _store(abilities: Dict[str, Ability], ability: Ability) -> None:
    if ability.name in abilities:
        # Last write wins; a sub-header may be meant to replace or to extend
        print(f"[Parser] Duplicate ability '{ability.name}', keeping the later entry.")
    abilities[ability.name] = ability


def get_abilities(text: str) -> Dict[str, Ability]:
    """Traits, actions and reactions keyed by name, in stat-block order.

    '***Name.*** prose' headers are read first, then '&nbsp;**Name.** prose'
    sub-headers. Spellcasting headers get SpellcastingData instead of an
    attack.
    """
    abilities: Dict[str, Ability] = {}

    for m in _ABILITY_RE.finditer(text):
        name, body = m.group(1).strip(), m.group(2)
        if name in SPELLCASTING_HEADERS:
            ability = Ability(
                name=name,
                description=_clear_text(body),
                spellcasting=get_spellcasting_stats(body),
            )
        else:
            ability = Ability(name=name, description=_clear_text(body), attack=get_attack(body))
        _store(abilities, ability)

    for m in _CONTINUATION_RE.finditer(text):
        name, body = m.group(1).strip(), m.group(2)
        _store(abilities, Ability(name=name, description=_clear_text(body), attack=get_attack(body)))

    return abilities


_LEGENDARY_RE = re.compile(
    r'^>\s*\*\*(?!\*)(.*?)(?: \(Costs (\d+) Actions\))?\.\*\*[ \t]*(.*)', re.MULTILINE
)


def get_legendary_actions(text: str) -> Dict[str, Ability]:
    """'> **Wing Attack (Costs 2 Actions).** ...' entries; cost defaults to 1."""
    actions: Dict[str, Ability] = {}
    for m in _LEGENDARY_RE.finditer(text):
        name, cost, body = m.group(1).strip(), m.group(2), m.group(3)
        actions[name] = Ability(
            name=name,
            description=_clear_text(body),
            attack=get_attack(body),
            cost=int(cost) if cost else 1,
        )
    return actions


# ── Spell lists ─────────────────────────────────────────────────────

def _split_spell_list(text: str) -> list[str]:
    """Split a comma-separated spell list, preserving parenthetical notes.

    Commas inside parentheses are not treated as delimiters, so entries like
    'fireball (level 3, cold damage)' remain intact as a single item.
    """
    spells: list[str] = []
    current: list[str] = []
    depth = 0

    for ch in text + ",":
        if ch == '(':
            depth += 1
        elif ch == ')':
            depth = max(0, depth - 1)
        elif ch == ',' and depth == 0:
            part = re.sub(r'[*_†]+', '', ''.join(current)).strip().rstrip('.')
            if part:
                spells.append(part)
            current = []
            continue
        current.append(ch)

    return spells


def get_spells(text: str) -> Dict[str, List[str]]:
    """Spell names grouped by 'Cantrips', '1'..'9', 'atWill' and 'N/day'."""
    spells: Dict[str, List[str]] = {}

    for m in re.finditer(r'(Cantrips|(\d+)\w{1,2} level) \(.*?\): _(.*?)_', text):
        spells[m.group(2) or m.group(1)] = _split_spell_list(m.group(3))

    m = re.search(r'At will: _(.*?)_', text, re.IGNORECASE)
    if m:
        spells["atWill"] = _split_spell_list(m.group(1))

    for m in re.finditer(r'(\d+/day)(?: each)?: _(.*?)_', text, re.IGNORECASE):
        spells[m.group(1).lower()] = _split_spell_list(m.group(2))

    return spells
