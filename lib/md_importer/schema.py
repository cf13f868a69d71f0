"""
Target schemas: the npc actor record and its owned item records.

Each record is a plain dataclass; ``to_dict`` renders the JSON shape the
document store expects.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union


# ── Actor ───────────────────────────────────────────────────────────

@dataclass
class AbilityScoreData:
    value: int
    proficient: int
    prof: int
    mod: int
    save: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "proficient": self.proficient,
            "prof": self.prof,
            "mod": self.mod,
            "save": self.save,
        }


@dataclass
class TraitSplit:
    """Standard vocabulary values plus a ';'-joined custom remainder."""
    value: List[str] = field(default_factory=list)
    custom: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"value": list(self.value), "custom": self.custom}


@dataclass
class Counter:
    value: int = 0
    max: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"value": self.value, "max": self.max}


@dataclass
class HitPointsData:
    value: int = 0
    max: int = 0
    formula: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "max": self.max, "formula": self.formula}


@dataclass
class MovementData:
    walk: int = 0
    burrow: int = 0
    climb: int = 0
    fly: int = 0
    swim: int = 0
    hover: bool = False
    units: str = "ft"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "walk": self.walk,
            "burrow": self.burrow,
            "climb": self.climb,
            "fly": self.fly,
            "swim": self.swim,
            "hover": self.hover,
            "units": self.units,
        }


@dataclass
class SensesData:
    blindsight: int = 0
    darkvision: int = 0
    tremorsense: int = 0
    truesight: int = 0
    special: str = ""
    units: str = "ft"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "blindsight": self.blindsight,
            "darkvision": self.darkvision,
            "tremorsense": self.tremorsense,
            "truesight": self.truesight,
            "special": self.special,
            "units": self.units,
        }


@dataclass
class AttributesData:
    ac: int
    hp: HitPointsData
    movement: MovementData
    senses: SensesData
    prof: int
    spellcasting: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ac": {"value": self.ac},
            "hp": self.hp.to_dict(),
            "movement": self.movement.to_dict(),
            "senses": self.senses.to_dict(),
            "prof": self.prof,
            "spellcasting": self.spellcasting,
        }


@dataclass
class DetailsData:
    alignment: str = ""
    type: str = ""
    subtype: Optional[str] = None
    cr: Union[int, float, None] = None
    xp: int = 0
    spell_level: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "alignment": self.alignment,
            "type": self.type,
            "subtype": self.subtype,
            "cr": self.cr,
            "xp": {"value": self.xp},
            "spellLevel": self.spell_level,
        }


@dataclass
class TraitsData:
    size: str
    di: TraitSplit = field(default_factory=TraitSplit)
    dr: TraitSplit = field(default_factory=TraitSplit)
    dv: TraitSplit = field(default_factory=TraitSplit)
    ci: TraitSplit = field(default_factory=TraitSplit)
    languages: TraitSplit = field(default_factory=TraitSplit)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "size": self.size,
            "di": self.di.to_dict(),
            "dr": self.dr.to_dict(),
            "dv": self.dv.to_dict(),
            "ci": self.ci.to_dict(),
            "languages": self.languages.to_dict(),
        }


@dataclass
class ActorData:
    abilities: Dict[str, AbilityScoreData]
    attributes: AttributesData
    details: DetailsData
    traits: TraitsData
    skills: Dict[str, int]
    legact: Counter = field(default_factory=Counter)
    legres: Counter = field(default_factory=Counter)
    spells: Dict[str, Counter] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "abilities": {k: v.to_dict() for k, v in self.abilities.items()},
            "attributes": self.attributes.to_dict(),
            "details": self.details.to_dict(),
            "traits": self.traits.to_dict(),
            "skills": {k: {"value": v} for k, v in self.skills.items()},
            "resources": {
                "legact": self.legact.to_dict(),
                "legres": self.legres.to_dict(),
            },
            "spells": {k: v.to_dict() for k, v in self.spells.items()},
        }


@dataclass
class ActorRecord:
    name: str
    data: ActorData
    type: str = "npc"
    img: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "img": self.img,
            "data": self.data.to_dict(),
            "items": [],
            "flags": {},
        }


# ── Items ───────────────────────────────────────────────────────────

@dataclass
class Activation:
    type: str = ""
    cost: int = 0
    condition: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "cost": self.cost, "condition": self.condition}


@dataclass
class RangeField:
    value: Optional[int] = None
    long: Optional[int] = None
    units: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "long": self.long, "units": self.units}


@dataclass
class TargetField:
    value: int
    units: str
    type: str

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "units": self.units, "type": self.type}


@dataclass
class ItemSave:
    ability: str
    dc: int
    scaling: str = "flat"

    def to_dict(self) -> Dict[str, Any]:
        return {"ability": self.ability, "dc": self.dc, "scaling": self.scaling}


@dataclass
class ItemRecord:
    name: str
    type: str
    description: str
    activation: Activation
    ability: Optional[str] = None
    action_type: Optional[str] = None
    damage_parts: List[Tuple[str, str]] = field(default_factory=list)
    save: Optional[ItemSave] = None
    range: RangeField = field(default_factory=RangeField)
    target: Optional[TargetField] = None
    equipped: bool = True

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "description": {"value": self.description},
            "activation": self.activation.to_dict(),
            "ability": self.ability,
            "actionType": self.action_type,
            "damage": {"parts": [list(part) for part in self.damage_parts]},
            "save": self.save.to_dict() if self.save else None,
            "range": self.range.to_dict(),
            "equipped": self.equipped,
        }
        if self.target is not None:
            data["target"] = self.target.to_dict()
        return {"name": self.name, "type": self.type, "data": data}
