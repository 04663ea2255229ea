"""Tests for the 5etools spell decoder."""

import logging

import pytest

from spellscribe.base import SpellDecodeError
from spellscribe.fivetools.decoder import (
    decode_affects_creature_type,
    decode_area_tags,
    decode_components,
    decode_condition_inflict,
    decode_damage_inflict,
    decode_distance,
    decode_duration,
    decode_duration_type,
    decode_durations,
    decode_entries,
    decode_entry,
    decode_meta,
    decode_misc_tags,
    decode_permanent_end,
    decode_range,
    decode_saving_throw,
    decode_scaling_level_dice,
    decode_school,
    decode_spell,
    decode_spell_attack,
    decode_time,
    decode_time_unit,
    decode_times,
)
from spellscribe.fivetools.schema import (
    ABILITY_MAP,
    AREA_TAG_MAP,
    CONDITION_MAP,
    CREATURE_TYPE_MAP,
    DAMAGE_TYPE_MAP,
    MISC_TAG_MAP,
    SCHOOL_ABBREVIATIONS,
    SPELL_ATTACK_MAP,
)
from spellscribe.models import (
    ConeSpellRange,
    CubeSpellRange,
    EntriesSpellEntry,
    HemisphereSpellRange,
    InsetSpellEntry,
    InstantSpellDuration,
    LineSpellRange,
    ListSpellEntry,
    PermanentSpellDuration,
    PermanentSpellEnd,
    PointSpellRange,
    RadiusSpellRange,
    SpecialSpellDuration,
    SpecialSpellRange,
    SpellComponentsWithNoMaterial,
    SpellComponentsWithObjectMaterial,
    SpellComponentsWithStringMaterial,
    SpellRangeDistanceFeet,
    SpellRangeDistanceMile,
    SpellRangeDistanceSelf,
    SpellRangeDistanceSight,
    SpellRangeDistanceTouch,
    SpellRangeDistanceUnlimited,
    SpellSchool,
    SpellTimeUnit,
    SphereSpellRange,
    StringSpellEntry,
    TableSpellEntry,
    TimedSpellDuration,
    TimedSpellDurationType,
)


# ============================================================================
# Enum vocabularies
# ============================================================================

class TestSchool:
    """Test school letter decoding."""

    @pytest.mark.parametrize("code,expected", [
        ("A", "ABJURATION"),
        ("C", "CONJURATION"),
        ("D", "DIVINATION"),
        ("E", "ENCHANTMENT"),
        ("V", "EVOCATION"),
        ("I", "ILLUSION"),
        ("N", "NECROMANCY"),
        ("T", "TRANSMUTATION"),
    ])
    def test_decode_school(self, code, expected):
        """Every school letter maps to its long-form tag."""
        assert decode_school(code).value == expected

    def test_table_covers_every_school(self):
        """The lookup table and the enum have the same members."""
        assert set(SCHOOL_ABBREVIATIONS.values()) == set(SpellSchool)

    @pytest.mark.parametrize("code", ["v", "X", "Evocation", "", None, 3])
    def test_decode_school_invalid(self, code):
        """No case folding, no defaults."""
        with pytest.raises(SpellDecodeError) as exc_info:
            decode_school(code)
        assert exc_info.value.field == "school"
        assert exc_info.value.value == code


class TestTimeUnit:
    """Test casting time unit decoding."""

    @pytest.mark.parametrize("code,expected", [
        ("action", SpellTimeUnit.ACTION),
        ("bonus", SpellTimeUnit.BONUS),
        ("reaction", SpellTimeUnit.REACTION),
        ("minute", SpellTimeUnit.MINUTE),
        ("hour", SpellTimeUnit.HOUR),
    ])
    def test_decode_time_unit(self, code, expected):
        assert decode_time_unit(code) == expected

    @pytest.mark.parametrize("code", ["Action", "round", "bonus action"])
    def test_decode_time_unit_invalid(self, code):
        with pytest.raises(SpellDecodeError, match="Invalid time unit"):
            decode_time_unit(code)


class TestCodeTables:
    """Test the tag array decoders against their full vocabularies."""

    @pytest.mark.parametrize("decoder,table", [
        (decode_damage_inflict, DAMAGE_TYPE_MAP),
        (decode_spell_attack, SPELL_ATTACK_MAP),
        (decode_condition_inflict, CONDITION_MAP),
        (decode_saving_throw, ABILITY_MAP),
        (decode_affects_creature_type, CREATURE_TYPE_MAP),
        (decode_misc_tags, MISC_TAG_MAP),
        (decode_area_tags, AREA_TAG_MAP),
    ])
    def test_full_vocabulary(self, decoder, table):
        """Decoding every code in a table yields the table's tags in order."""
        codes = list(table)
        assert decoder(codes) == [table[c] for c in codes]

    @pytest.mark.parametrize("decoder,bad", [
        (decode_damage_inflict, "Fire"),
        (decode_spell_attack, "S"),
        (decode_condition_inflict, "asleep"),
        (decode_saving_throw, "str"),
        (decode_affects_creature_type, "swarm"),
        (decode_misc_tags, "hl"),
        (decode_area_tags, "X"),
    ])
    def test_unknown_code_fails(self, decoder, bad):
        with pytest.raises(SpellDecodeError) as exc_info:
            decoder([bad])
        assert exc_info.value.value == bad
        assert exc_info.value.field.endswith("[0]")

    def test_absent_stays_none(self):
        """A missing array is not the same as an empty one."""
        assert decode_damage_inflict(None) is None
        assert decode_damage_inflict([]) == []

    def test_misc_tag_examples(self):
        tags = decode_misc_tags(["THP", "LGTS", "LGT", "AAD"])
        assert [t.value for t in tags] == [
            "GRANTS_TEMPORARY_HIT_POINTS",
            "CREATES_SUNLIGHT",
            "CREATES_LIGHT",
            "ADDITIONAL_ATTACK_DAMAGE",
        ]

    def test_area_tag_examples(self):
        tags = decode_area_tags(["C", "N", "R", "Q"])
        assert [t.value for t in tags] == ["CUBE", "CONE", "CIRCLE", "SQUARE"]

    def test_not_a_list(self):
        with pytest.raises(SpellDecodeError, match="Expected a list"):
            decode_damage_inflict("fire")


# ============================================================================
# Casting time
# ============================================================================

class TestTime:
    """Test casting time decoding."""

    def test_decode_time(self):
        time = decode_time({"number": 1, "unit": "reaction"})
        assert time.number == 1
        assert time.unit == SpellTimeUnit.REACTION

    def test_order_preserved(self):
        """Times keep their source order and are never deduplicated."""
        times = decode_times([
            {"number": 1, "unit": "action"},
            {"number": 1, "unit": "reaction"},
            {"number": 1, "unit": "action"},
        ])
        assert [t.unit for t in times] == [
            SpellTimeUnit.ACTION,
            SpellTimeUnit.REACTION,
            SpellTimeUnit.ACTION,
        ]

    def test_empty_times_rejected(self):
        with pytest.raises(SpellDecodeError, match="at least one casting time"):
            decode_times([])

    def test_missing_number(self):
        with pytest.raises(SpellDecodeError) as exc_info:
            decode_times([{"unit": "action"}])
        assert exc_info.value.field == "time[0].number"


# ============================================================================
# Range
# ============================================================================

class TestRange:
    """Test range and distance decoding."""

    @pytest.mark.parametrize("range_type,cls", [
        ("point", PointSpellRange),
        ("radius", RadiusSpellRange),
        ("sphere", SphereSpellRange),
        ("cone", ConeSpellRange),
        ("line", LineSpellRange),
        ("hemisphere", HemisphereSpellRange),
        ("cube", CubeSpellRange),
    ])
    def test_shapes_wrap_distance(self, range_type, cls):
        result = decode_range({"type": range_type, "distance": {"type": "feet", "amount": 30}})
        assert isinstance(result, cls)
        assert result.distance == SpellRangeDistanceFeet(amount=30)

    def test_special_range(self):
        assert decode_range({"type": "special"}) == SpecialSpellRange()

    def test_invalid_range_type(self):
        with pytest.raises(SpellDecodeError) as exc_info:
            decode_range({"type": "cylinder", "distance": {"type": "feet", "amount": 10}})
        assert exc_info.value.field == "range.type"

    def test_shape_needs_distance(self):
        with pytest.raises(SpellDecodeError, match="range.distance"):
            decode_range({"type": "point"})

    @pytest.mark.parametrize("distance,expected", [
        ({"type": "feet", "amount": 60}, SpellRangeDistanceFeet(amount=60)),
        ({"type": "miles", "amount": 1}, SpellRangeDistanceMile(amount=1)),
        ({"type": "self"}, SpellRangeDistanceSelf()),
        ({"type": "touch"}, SpellRangeDistanceTouch()),
        ({"type": "sight"}, SpellRangeDistanceSight()),
        ({"type": "unlimited"}, SpellRangeDistanceUnlimited()),
    ])
    def test_distances(self, distance, expected):
        result = decode_distance(distance)
        assert type(result) is type(expected)
        assert result == expected

    def test_invalid_distance_type(self):
        """The 5etools code is "miles"; "mile" is not accepted."""
        with pytest.raises(SpellDecodeError, match="Invalid distance type"):
            decode_distance({"type": "mile", "amount": 1})

    def test_measured_distance_needs_amount(self):
        with pytest.raises(SpellDecodeError) as exc_info:
            decode_distance({"type": "feet"})
        assert exc_info.value.field == "range.distance.amount"


# ============================================================================
# Components
# ============================================================================

class TestComponents:
    """Test the three-way components branch."""

    def test_no_material(self):
        result = decode_components({"v": True, "s": True})
        assert result == SpellComponentsWithNoMaterial(verbal=True, somatic=True)

    def test_missing_flags_are_false(self):
        result = decode_components({"s": True})
        assert result.verbal is False
        assert result.somatic is True

    def test_string_material(self):
        result = decode_components({"v": True, "m": "a bit of fleece"})
        assert isinstance(result, SpellComponentsWithStringMaterial)
        assert result.material == "a bit of fleece"
        assert result.somatic is False

    def test_object_material(self):
        """Cost and consume are preserved exactly."""
        result = decode_components({
            "v": True,
            "s": True,
            "m": {"text": "ruby dust", "cost": 50, "consume": True},
        })
        assert isinstance(result, SpellComponentsWithObjectMaterial)
        assert result.material.text == "ruby dust"
        assert result.material.cost == 50
        assert isinstance(result.material.cost, int)
        assert result.material.consume is True

    def test_object_material_without_cost(self):
        result = decode_components({"m": {"text": "a feather"}})
        assert result.material.cost is None
        assert result.material.consume is None

    def test_optional_consume(self):
        result = decode_components({"m": {"text": "a diamond", "cost": 300, "consume": "optional"}})
        assert result.material.consume == "optional"

    def test_negative_cost_rejected(self):
        with pytest.raises(SpellDecodeError) as exc_info:
            decode_components({"m": {"text": "gold", "cost": -5}})
        assert exc_info.value.field == "components.m.cost"

    def test_non_numeric_cost_rejected(self):
        with pytest.raises(SpellDecodeError, match="Expected a number"):
            decode_components({"m": {"text": "gold", "cost": "50gp"}})

    def test_invalid_consume_rejected(self):
        with pytest.raises(SpellDecodeError, match="consume"):
            decode_components({"m": {"text": "gold", "consume": "sometimes"}})

    def test_invalid_material_type(self):
        with pytest.raises(SpellDecodeError, match="Invalid material type"):
            decode_components({"v": True, "m": 12})

    def test_non_bool_flag(self):
        with pytest.raises(SpellDecodeError) as exc_info:
            decode_components({"v": "yes"})
        assert exc_info.value.field == "components.v"


# ============================================================================
# Duration
# ============================================================================

class TestDuration:
    """Test duration decoding."""

    def test_instant(self):
        assert decode_duration({"type": "instant"}) == InstantSpellDuration()

    def test_special(self):
        assert decode_duration({"type": "special"}) == SpecialSpellDuration()

    def test_timed(self):
        result = decode_duration({
            "type": "timed",
            "duration": {"type": "hour", "amount": 8},
            "concentration": True,
        })
        assert result == TimedSpellDuration(
            type=TimedSpellDurationType.HOUR, amount=8, concentration=True
        )

    def test_timed_without_concentration(self):
        result = decode_duration({"type": "timed", "duration": {"type": "round", "amount": 1}})
        assert result.concentration is False

    @pytest.mark.parametrize("code", ["minute", "hour", "day", "round"])
    def test_duration_types(self, code):
        assert decode_duration_type(code).value == code.upper()

    def test_invalid_duration_unit(self):
        with pytest.raises(SpellDecodeError, match="Invalid duration type"):
            decode_duration({"type": "timed", "duration": {"type": "week", "amount": 1}})

    def test_permanent(self):
        result = decode_duration({"type": "permanent", "ends": ["dispel", "trigger"]})
        assert isinstance(result, PermanentSpellDuration)
        assert result.ends == [PermanentSpellEnd.DISPEL, PermanentSpellEnd.TRIGGER]

    def test_permanent_needs_ends(self):
        with pytest.raises(SpellDecodeError, match="at least one end"):
            decode_duration({"type": "permanent", "ends": []})

    def test_permanent_duplicate_ends(self):
        with pytest.raises(SpellDecodeError, match="Duplicate"):
            decode_duration({"type": "permanent", "ends": ["dispel", "dispel"]})

    def test_invalid_end(self):
        with pytest.raises(SpellDecodeError, match="Invalid end"):
            decode_permanent_end("timeout")

    def test_invalid_duration_type(self):
        with pytest.raises(SpellDecodeError) as exc_info:
            decode_durations([{"type": "instant"}, {"type": "forever"}])
        assert exc_info.value.field == "duration[1].type"

    def test_empty_durations_rejected(self):
        with pytest.raises(SpellDecodeError):
            decode_durations([])


# ============================================================================
# Meta
# ============================================================================

class TestMeta:
    """Test meta decoding and its tolerance for unknown keys."""

    def test_absent(self):
        assert decode_meta(None) is None

    def test_ritual(self):
        assert decode_meta({"ritual": True}).ritual is True

    def test_unknown_keys_logged(self, caplog):
        """Unknown keys are reported but do not abort decoding."""
        log = logging.getLogger("spellscribe.test")
        with caplog.at_level(logging.WARNING, logger="spellscribe.test"):
            meta = decode_meta({"ritual": True, "technomagic": True}, log)

        assert meta.ritual is True
        assert "Unknown meta key: technomagic" in caplog.text

    def test_missing_ritual_is_false(self):
        assert decode_meta({}).ritual is False


# ============================================================================
# Entries
# ============================================================================

class TestEntries:
    """Test entry block decoding."""

    def test_string(self):
        assert decode_entry("Hello") == StringSpellEntry(value="Hello")

    def test_named_block(self):
        result = decode_entry({"type": "entries", "name": "At Higher Levels", "entries": ["More."]})
        assert isinstance(result, EntriesSpellEntry)
        assert result.name == "At Higher Levels"
        assert result.entries == ["More."]

    def test_nested_blocks_decoded(self):
        result = decode_entry({
            "type": "entries",
            "name": "Options",
            "entries": ["Pick one:", {"type": "list", "items": ["A", "B"]}],
        })
        assert result.entries[0] == "Pick one:"
        assert result.entries[1] == ListSpellEntry(items=["A", "B"])

    def test_table(self):
        result = decode_entry({
            "type": "table",
            "caption": "Wild Magic",
            "colLabels": ["d8", "Effect"],
            "colStyles": ["col-2 text-center", "col-10"],
            "rows": [["1", "Fire"], ["2", "Ice"]],
        })
        assert isinstance(result, TableSpellEntry)
        assert result.col_labels == ["d8", "Effect"]
        assert result.rows == [["1", "Fire"], ["2", "Ice"]]

    def test_table_without_caption(self):
        result = decode_entry({"type": "table", "rows": []})
        assert result.caption is None
        assert result.col_labels is None

    def test_inset(self):
        result = decode_entry({
            "type": "inset",
            "source": "XGE",
            "page": 12,
            "name": "Sidebar",
            "entries": ["Text."],
        })
        assert result == InsetSpellEntry(source="XGE", page=12, name="Sidebar", entries=["Text."])

    def test_unknown_type(self):
        with pytest.raises(SpellDecodeError, match="Invalid entry type"):
            decode_entry({"type": "quote", "entries": []})

    def test_unknown_nested_type_reports_path(self):
        with pytest.raises(SpellDecodeError) as exc_info:
            decode_entries(["ok", {"type": "entries", "entries": [{"type": "image"}]}])
        assert exc_info.value.field == "entries[1].entries[0].type"

    def test_absent_entries(self):
        assert decode_entries(None) is None


# ============================================================================
# Scaling dice
# ============================================================================

class TestScalingLevelDice:
    """Test object-or-array scaling dice normalization."""

    def test_single_object_becomes_list(self):
        result = decode_scaling_level_dice({
            "label": "fire damage",
            "scaling": {"1": "1d10", "5": "2d10"},
        })
        assert len(result) == 1
        assert result[0].label == "fire damage"
        assert result[0].scaling == {1: "1d10", 5: "2d10"}

    def test_array_keeps_order(self):
        result = decode_scaling_level_dice([
            {"label": "acid damage", "scaling": {"1": "1d6"}},
            {"label": "poison damage", "scaling": {"1": "1d4"}},
        ])
        assert [r.label for r in result] == ["acid damage", "poison damage"]

    def test_keys_are_integers(self):
        result = decode_scaling_level_dice({"label": "x", "scaling": {"11": "3d8"}})
        assert list(result[0].scaling) == [11]

    def test_non_integer_level(self):
        with pytest.raises(SpellDecodeError, match="Invalid scaling level"):
            decode_scaling_level_dice({"label": "x", "scaling": {"fifth": "2d8"}})

    @pytest.mark.parametrize("level", ["01", " 5", "5 ", "+5", "-5", "5_0", "1.0", "٥", ""])
    def test_non_canonical_level(self, level):
        """Only plain decimal level keys are accepted."""
        with pytest.raises(SpellDecodeError) as exc_info:
            decode_scaling_level_dice({"label": "x", "scaling": {level: "2d8"}})
        assert exc_info.value.value == level

    def test_keys_cannot_collapse(self):
        """Two spellings of one level never overwrite each other."""
        with pytest.raises(SpellDecodeError, match="'01'"):
            decode_scaling_level_dice({"label": "x", "scaling": {"1": "1d6", "01": "9d9"}})

    def test_level_zero(self):
        result = decode_scaling_level_dice({"label": "x", "scaling": {"0": "1d4"}})
        assert result[0].scaling == {0: "1d4"}

    def test_invalid_shape(self):
        with pytest.raises(SpellDecodeError):
            decode_scaling_level_dice("1d10")

    def test_absent(self):
        assert decode_scaling_level_dice(None) is None


# ============================================================================
# Spell
# ============================================================================

class TestDecodeSpell:
    """Test decoding a full spell record."""

    def test_fireball(self, fireball_raw):
        spell = decode_spell(fireball_raw)

        assert spell.name == "Fireball"
        assert spell.school == SpellSchool.EVOCATION
        assert isinstance(spell.range, PointSpellRange)
        assert spell.range.distance == SpellRangeDistanceFeet(amount=150)
        assert isinstance(spell.components, SpellComponentsWithStringMaterial)
        assert spell.duration == [InstantSpellDuration()]
        assert spell.srd is False
        assert spell.basic_rules is False
        assert spell.entries_higher_level is None

    def test_id_factory_used(self, fireball_raw):
        spell = decode_spell(fireball_raw, id_factory=lambda raw: f"id-{raw['name']}")
        assert spell.id == "id-Fireball"

    def test_srd_alias_counts_as_srd(self, fireball_raw):
        fireball_raw["srd"] = "Fire Ball"
        assert decode_spell(fireball_raw).srd is True

    def test_error_names_spell(self, fireball_raw):
        """Decode errors carry the spell's display name."""
        fireball_raw["school"] = "Q"
        with pytest.raises(SpellDecodeError) as exc_info:
            decode_spell(fireball_raw)

        assert exc_info.value.spell_name == "Fireball"
        assert "Fireball" in str(exc_info.value)
        assert "Invalid school" in str(exc_info.value)

    @pytest.mark.parametrize("missing", ["source", "level", "school", "time", "range", "components", "duration"])
    def test_required_fields(self, fireball_raw, missing):
        del fireball_raw[missing]
        with pytest.raises(SpellDecodeError) as exc_info:
            decode_spell(fireball_raw)
        assert exc_info.value.field == missing

    @pytest.mark.parametrize("level", [-1, 10, "3"])
    def test_invalid_level(self, fireball_raw, level):
        fireball_raw["level"] = level
        with pytest.raises(SpellDecodeError):
            decode_spell(fireball_raw)

    def test_missing_name(self, fireball_raw):
        del fireball_raw["name"]
        with pytest.raises(SpellDecodeError, match="name"):
            decode_spell(fireball_raw)

    def test_sample_file_decodes(self, sample_spells):
        spells = [decode_spell(raw) for raw in sample_spells]
        assert [s.name for s in spells] == ["Fireball", "Fire Bolt", "Melf's Minute Meteors"]
