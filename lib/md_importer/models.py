"""
Normalized creature model produced by the stat-block parser.

Every fragment is a frozen dataclass. Extractors return a fully populated
fragment or None, never a half-filled object.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union


@dataclass(frozen=True)
class CreatureStats:
    strength: int = 0
    dexterity: int = 0
    constitution: int = 0
    intelligence: int = 0
    wisdom: int = 0
    charisma: int = 0

    def as_dict(self) -> Dict[str, int]:
        """Scores keyed by ability abbreviation, in stat-block order."""
        return {
            "str": self.strength,
            "dex": self.dexterity,
            "con": self.constitution,
            "int": self.intelligence,
            "wis": self.wisdom,
            "cha": self.charisma,
        }


@dataclass(frozen=True)
class SizeTypeAlignment:
    size: str
    creature_type: str
    alignment: str
    subtype: Optional[str] = None


@dataclass(frozen=True)
class ArmorClass:
    value: int
    source: Optional[str] = None


@dataclass(frozen=True)
class HitPoints:
    value: int
    formula: Optional[str] = None


@dataclass(frozen=True)
class Speed:
    walk: int
    burrow: int = 0
    climb: int = 0
    fly: int = 0
    swim: int = 0
    hover: bool = False
    units: str = "ft"


@dataclass(frozen=True)
class SensesBlock:
    passive_perception: int
    blindsight: int = 0
    darkvision: int = 0
    tremorsense: int = 0
    truesight: int = 0
    special: str = ""
    units: str = "ft"


@dataclass(frozen=True)
class ChallengeRating:
    cr: Union[int, float]
    xp: int


# ── Attack data ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class DamagePart:
    formula: str
    damage_type: str
    bonus: Optional[int] = None


@dataclass(frozen=True)
class SingleRange:
    value: int
    units: str = "ft"
    shape: Optional[str] = None


@dataclass(frozen=True)
class DoubleRange:
    short: int
    long: int
    units: str = "ft"


@dataclass(frozen=True)
class AttackRange:
    single: Optional[SingleRange] = None
    double: Optional[DoubleRange] = None


@dataclass(frozen=True)
class SaveData:
    dc: int
    ability: str


@dataclass(frozen=True)
class AttackData:
    damage: List[DamagePart] = field(default_factory=list)
    range: AttackRange = field(default_factory=AttackRange)
    save: Optional[SaveData] = None
    to_hit: Optional[int] = None


@dataclass(frozen=True)
class SpellcastingData:
    level: int = 0
    ability: Optional[str] = None
    save_dc: Optional[int] = None
    attack_bonus: Optional[int] = None


@dataclass(frozen=True)
class Ability:
    """A named trait, attack, or spellcasting summary.

    Exactly one of ``attack`` / ``spellcasting`` is set. ``cost`` is only
    set for legendary actions.
    """
    name: str
    description: str
    attack: Optional[AttackData] = None
    spellcasting: Optional[SpellcastingData] = None
    cost: Optional[int] = None

    @property
    def is_spellcasting(self) -> bool:
        return self.spellcasting is not None


# ── Root aggregate ──────────────────────────────────────────────────

@dataclass
class CreatureModel:
    name: str
    stats: CreatureStats
    size_type_alignment: Optional[SizeTypeAlignment] = None
    armor: Optional[ArmorClass] = None
    hit_points: Optional[HitPoints] = None
    speed: Optional[Speed] = None
    saving_throws: Optional[Dict[str, int]] = None
    skills: Optional[Dict[str, int]] = None
    damage_modifiers: Optional[Dict[str, str]] = None
    senses: Optional[SensesBlock] = None
    languages: Optional[str] = None
    challenge: Optional[ChallengeRating] = None
    abilities: Dict[str, Ability] = field(default_factory=dict)
    legendary_actions: Dict[str, Ability] = field(default_factory=dict)
    legendary_action_count: Optional[int] = None
    legendary_resistance_count: Optional[int] = None
    spells: Dict[str, List[str]] = field(default_factory=dict)
    spell_slots: Dict[int, int] = field(default_factory=dict)
    proficiency: int = 2

    @property
    def spellcasting(self) -> Optional[SpellcastingData]:
        for name in ("Spellcasting", "Innate Spellcasting"):
            ability = self.abilities.get(name)
            if ability is not None and ability.spellcasting is not None:
                return ability.spellcasting
        return None
