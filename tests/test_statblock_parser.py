"""Tests for lib/md_importer/statblock_parser.py"""

import os
import pytest
from md_importer.exceptions import MalformedStatblockError
from md_importer.statblock_parser import (
    get_armor_class,
    get_challenge,
    get_creature_name,
    get_creature_stats,
    get_damage_modifiers,
    get_hit_points,
    get_languages,
    get_legendary_action_count,
    get_legendary_resistance_count,
    get_saving_throws,
    get_senses,
    get_size_type_alignment,
    get_skills,
    get_speed,
    get_spell_slots,
    parse_cr_value,
    parse_statblock,
    validate_creature,
)

FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures")


def _load_fixture(name: str) -> str:
    with open(os.path.join(FIXTURES, name), encoding="utf-8") as f:
        return f.read()


# ── Single-line extractors ──────────────────────────────────────────

class TestLineExtractors:
    def test_armor_class_with_source(self):
        ac = get_armor_class("> - **Armor Class** 15 (natural armor)")
        assert ac.value == 15
        assert ac.source == "(natural armor)"

    def test_armor_class_without_source(self):
        ac = get_armor_class("> - **Armor Class** 12")
        assert ac.value == 12
        assert ac.source is None

    def test_challenge_fraction(self):
        challenge = get_challenge("> - **Challenge** 1/4 (50 XP)")
        assert challenge.cr == 0.25
        assert challenge.xp == 50

    def test_challenge_thousands_separator(self):
        challenge = get_challenge("> - **Challenge** 17 (18,000 XP)")
        assert challenge.cr == 17
        assert challenge.xp == 18000

    def test_challenge_alternative_xp(self):
        challenge = get_challenge("> - **Challenge** 0 (0 or 10 XP)")
        assert challenge.cr == 0
        assert challenge.xp == 10

    def test_challenge_unknown_fraction_is_absent(self):
        assert get_challenge("> - **Challenge** 1/3 (10 XP)") is None

    @pytest.mark.parametrize("value,expected", [
        ("1/8", 0.125), ("1/4", 0.25), ("1/2", 0.5), ("0", 0), ("30", 30), ("2/3", None),
    ])
    def test_parse_cr_value(self, value, expected):
        assert parse_cr_value(value) == expected

    def test_speed_special_modes_and_hover(self):
        speed = get_speed("> - **Speed** 10 ft., fly 60 ft. (hover), swim 30 ft.")
        assert speed.walk == 10
        assert speed.fly == 60
        assert speed.swim == 30
        assert speed.burrow == 0
        assert speed.climb == 0
        assert speed.hover is True

    def test_speed_defaults(self):
        speed = get_speed("> - **Speed** 30 ft.")
        assert (speed.burrow, speed.climb, speed.fly, speed.swim) == (0, 0, 0, 0)
        assert speed.hover is False
        assert speed.units == "ft"

    def test_saving_throws_negative_and_long_names(self):
        saves = get_saving_throws("> - **Saving Throws** Dexterity +5, Str -1")
        assert saves == {"dex": 5, "str": -1}

    def test_skills_keep_multiword_names(self):
        skills = get_skills("> - **Skills** Sleight of Hand +4, Animal Handling +2")
        assert skills == {"Sleight of Hand": 4, "Animal Handling": 2}

    def test_senses_special_remainder(self):
        senses = get_senses(
            "> - **Senses** blindsight 30 ft. (blind beyond this radius), passive Perception 10"
        )
        assert senses.blindsight == 30
        assert senses.darkvision == 0
        assert senses.passive_perception == 10

    def test_senses_unknown_sense_goes_to_special(self):
        senses = get_senses("> - **Senses** echolocation, passive Perception 12")
        assert senses.special == "echolocation"

    def test_damage_modifiers_keyed_by_code(self):
        text = (
            "> - **Damage Resistances** cold; bludgeoning from nonmagical attacks\n"
            "> - **Condition Immunities** charmed, poisoned\n"
        )
        assert get_damage_modifiers(text) == {
            "dr": "cold; bludgeoning from nonmagical attacks",
            "ci": "charmed, poisoned",
        }

    def test_size_line_split(self):
        sta = get_size_type_alignment(">*Medium swarm of Tiny beasts, unaligned*")
        assert sta.size == "Medium"
        assert sta.creature_type == "swarm of Tiny beasts"
        assert sta.alignment == "unaligned"
        assert sta.subtype is None

    def test_stats_require_all_six(self):
        assert get_creature_stats(">|10 (+0)|12 (+1)|") is None

    def test_stats_typographic_minus(self):
        stats = get_creature_stats(">|8 (−1)|14 (+2)|10 (0)|10 (+0)|8 (−1)|8 (−1)|")
        assert stats.strength == 8
        assert stats.constitution == 10

    @pytest.mark.parametrize("extractor", [
        get_armor_class, get_hit_points, get_speed, get_creature_stats, get_saving_throws,
        get_skills, get_damage_modifiers, get_senses, get_languages, get_challenge,
        get_creature_name, get_size_type_alignment, get_legendary_action_count,
        get_legendary_resistance_count,
    ])
    def test_missing_line_is_absent(self, extractor):
        assert extractor("> nothing to see here") is None


# ── Goblin ──────────────────────────────────────────────────────────

class TestParseGoblin:
    @pytest.fixture(autouse=True)
    def setup(self):
        self.text = _load_fixture("goblin.md")
        self.creature = parse_statblock(self.text)

    def test_name(self):
        assert self.creature.name == "Goblin"

    def test_size_type_alignment(self):
        sta = self.creature.size_type_alignment
        assert sta.size == "Small"
        assert sta.creature_type == "humanoid"
        assert sta.subtype == "goblinoid"
        assert sta.alignment == "neutral evil"

    def test_ac(self):
        assert self.creature.armor.value == 15
        assert self.creature.armor.source == "(leather armor, shield)"

    def test_hp(self):
        assert self.creature.hit_points.value == 7
        assert self.creature.hit_points.formula == "2d6"

    def test_ability_scores(self):
        assert self.creature.stats.as_dict() == {
            "str": 8, "dex": 14, "con": 10, "int": 10, "wis": 8, "cha": 8,
        }

    def test_no_saving_throws_line(self):
        assert self.creature.saving_throws is None

    def test_skills(self):
        assert self.creature.skills == {"Stealth": 6}

    def test_senses(self):
        assert self.creature.senses.darkvision == 60
        assert self.creature.senses.passive_perception == 9

    def test_languages(self):
        assert self.creature.languages == "Common, Goblin"

    def test_cr_and_proficiency(self):
        assert self.creature.challenge.cr == 0.25
        assert self.creature.challenge.xp == 50
        assert self.creature.proficiency == 2

    def test_abilities(self):
        assert list(self.creature.abilities) == ["Nimble Escape", "Scimitar", "Shortbow"]

    def test_no_legendary(self):
        assert self.creature.legendary_actions == {}
        assert self.creature.legendary_action_count is None

    def test_no_spells(self):
        assert self.creature.spells == {}
        assert self.creature.spell_slots == {}


# ── Adult Red Dragon ────────────────────────────────────────────────

class TestParseDragon:
    @pytest.fixture(autouse=True)
    def setup(self):
        self.text = _load_fixture("adult_red_dragon.md")
        self.creature = parse_statblock(self.text)

    def test_speed(self):
        assert self.creature.speed.walk == 40
        assert self.creature.speed.climb == 40
        assert self.creature.speed.fly == 80
        assert self.creature.speed.hover is False

    def test_saving_throws(self):
        assert self.creature.saving_throws == {"dex": 6, "con": 13, "wis": 7, "cha": 11}

    def test_damage_immunities(self):
        assert self.creature.damage_modifiers == {"di": "fire"}

    def test_senses(self):
        senses = self.creature.senses
        assert senses.blindsight == 60
        assert senses.darkvision == 120
        assert senses.passive_perception == 23

    def test_challenge(self):
        assert self.creature.challenge.cr == 17
        assert self.creature.challenge.xp == 18000
        assert self.creature.proficiency == 6

    def test_legendary_counters(self):
        assert get_legendary_action_count(self.text) == 3
        assert get_legendary_resistance_count(self.text) == 3
        assert self.creature.legendary_action_count == 3
        assert self.creature.legendary_resistance_count == 3

    def test_legendary_actions(self):
        assert list(self.creature.legendary_actions) == ["Detect", "Tail Attack", "Wing Attack"]

    def test_valid(self):
        assert validate_creature(self.creature) == []


# ── Mage ────────────────────────────────────────────────────────────

class TestParseMage:
    @pytest.fixture(autouse=True)
    def setup(self):
        self.text = _load_fixture("mage.md")
        self.creature = parse_statblock(self.text)

    def test_subtype(self):
        assert self.creature.size_type_alignment.subtype == "any race"
        assert self.creature.size_type_alignment.alignment == "any alignment"

    def test_spell_slots(self):
        assert get_spell_slots(self.text) == {1: 4, 2: 3, 3: 3, 4: 3, 5: 1}

    def test_spellcasting(self):
        spellcasting = self.creature.spellcasting
        assert spellcasting.level == 9
        assert spellcasting.ability == "int"
        assert spellcasting.save_dc == 14
        assert spellcasting.attack_bonus == 6

    def test_passive_only_senses(self):
        assert self.creature.senses.passive_perception == 11
        assert self.creature.senses.darkvision == 0

    def test_proficiency_from_cr(self):
        assert self.creature.proficiency == 3


# ── Malformed input ─────────────────────────────────────────────────

class TestMalformed:
    def test_missing_name_and_stats(self):
        with pytest.raises(MalformedStatblockError) as exc:
            parse_statblock("just some prose about a goblin")
        assert exc.value.missing == ["name", "ability scores"]

    def test_missing_stats_only(self):
        with pytest.raises(MalformedStatblockError) as exc:
            parse_statblock("> ## Goblin\n>*Small humanoid, neutral evil*\n")
        assert exc.value.missing == ["ability scores"]

    def test_proficiency_inferred_without_challenge(self):
        text = _load_fixture("goblin.md").replace("> - **Challenge** 1/4 (50 XP)\n", "")
        creature = parse_statblock(text)
        assert creature.challenge is None
        # Scimitar: +4 to hit, (1d6 + 2)
        assert creature.proficiency == 2
        assert any("Challenge" in w for w in validate_creature(creature))
