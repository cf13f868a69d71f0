"""
Closed vocabularies shared by the parser and the schema mappers.

Everything here is read-only lookup data. Keys on the text side are the
spellings used by stat blocks; values are the short codes the actor schema
expects.
"""

ABILITY_CODES = {
    "Strength": "str",
    "Dexterity": "dex",
    "Constitution": "con",
    "Intelligence": "int",
    "Wisdom": "wis",
    "Charisma": "cha",
}

ABILITY_ABBREVIATIONS = list(ABILITY_CODES.values())

SKILL_CODES = {
    "acrobatics": "acr",
    "animal handling": "ani",
    "arcana": "arc",
    "athletics": "ath",
    "deception": "dec",
    "history": "his",
    "insight": "ins",
    "intimidation": "itm",
    "investigation": "inv",
    "medicine": "med",
    "nature": "nat",
    "perception": "prc",
    "performance": "prf",
    "persuasion": "per",
    "religion": "rel",
    "sleight of hand": "slt",
    "stealth": "ste",
    "survival": "sur",
}

SIZE_CODES = {
    "Tiny": "tiny",
    "Small": "sm",
    "Medium": "med",
    "Large": "lg",
    "Huge": "huge",
    "Gargantuan": "grg",
}

DEFAULT_SIZE_CODE = "med"

# Stat-block line label -> actor trait key
DAMAGE_MODIFIER_CODES = {
    "Damage Immunities": "di",
    "Damage Resistances": "dr",
    "Damage Vulnerabilities": "dv",
    "Condition Immunities": "ci",
}

DAMAGE_TYPES = frozenset({
    "acid", "bludgeoning", "cold", "fire", "force", "lightning", "necrotic",
    "piercing", "poison", "psychic", "radiant", "slashing", "thunder",
})

CONDITIONS = frozenset({
    "blinded", "charmed", "deafened", "diseased", "exhaustion", "frightened",
    "grappled", "incapacitated", "invisible", "paralyzed", "petrified",
    "poisoned", "prone", "restrained", "stunned", "unconscious",
})

LANGUAGES = frozenset({
    "aarakocra", "abyssal", "aquan", "auran", "celestial", "common",
    "deep speech", "draconic", "druidic", "dwarvish", "elvish", "giant",
    "gith", "gnoll", "gnomish", "goblin", "halfling", "ignan", "infernal",
    "orc", "primordial", "sylvan", "terran", "cant", "undercommon",
})

VISION_TYPES = ("blindsight", "darkvision", "tremorsense", "truesight")

SPECIAL_MOVEMENT = ("burrow", "climb", "fly", "swim")

AREA_SHAPES = ("cone", "line", "cube", "sphere")

# Fractional challenge ratings printed by the dialect
FRACTIONAL_CR = {
    "1/8": 0.125,
    "1/4": 0.25,
    "1/2": 0.5,
}

# Values that mean "nothing here" on a list line
EMPTY_MARKERS = {"", "none", "—", "-", "--"}
