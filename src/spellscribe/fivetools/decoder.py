"""
Decoder functions for translating 5etools spell JSON into spellscribe models.

One public function per variant family takes the raw (weakly typed)
sub-object and returns the decoded model. Short codes are looked up in the
closed tables of :mod:`.schema`; anything outside a table, and any missing
or malformed required field, raises :class:`SpellDecodeError`. The only
tolerated unknown input is extra keys in a spell's ``meta`` object, which
are logged and skipped.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Any

from pydantic import ValidationError

from ..base import SpellDecodeError
from ..identity import SpellIdFactory, random_spell_id
from ..models import (
    Ability,
    AreaTag,
    Condition,
    CreatureType,
    DamageType,
    EntriesSpellEntry,
    InsetSpellEntry,
    InstantSpellDuration,
    ListSpellEntry,
    MaterialSpellComponent,
    MiscTag,
    PermanentSpellDuration,
    PermanentSpellEnd,
    SpecialSpellDuration,
    SpecialSpellRange,
    Spell,
    SpellAttack,
    SpellComponents,
    SpellComponentsWithNoMaterial,
    SpellComponentsWithObjectMaterial,
    SpellComponentsWithStringMaterial,
    SpellDuration,
    SpellEntry,
    SpellMeta,
    SpellRange,
    SpellRangeDistance,
    SpellScalingLevelDice,
    SpellSchool,
    SpellTime,
    SpellTimeUnit,
    StringSpellEntry,
    TableSpellEntry,
    TimedSpellDuration,
    TimedSpellDurationType,
)
from .schema import (
    ABILITY_MAP,
    AREA_TAG_MAP,
    CONDITION_MAP,
    CREATURE_TYPE_MAP,
    DAMAGE_TYPE_MAP,
    DURATION_TYPE_MAP,
    FIXED_DISTANCE_MAP,
    MEASURED_DISTANCE_MAP,
    META_RITUAL_KEY,
    MISC_TAG_MAP,
    PERMANENT_END_MAP,
    RANGE_SHAPE_MAP,
    SCHOOL_ABBREVIATIONS,
    SPELL_ATTACK_MAP,
    TIME_UNIT_MAP,
)

logger = logging.getLogger("spellscribe")

# Canonical decimal levels only, so no two keys can name the same level
_SCALING_LEVEL_PATTERN = re.compile(r"0|[1-9][0-9]*")


# =============================================================================
# Shape helpers
# =============================================================================

def _expect_object(value: Any, field: str) -> dict:
    if not isinstance(value, dict):
        raise SpellDecodeError(
            field, value, f"Expected an object for {field}, got {type(value).__name__}"
        )
    return value


def _expect_list(value: Any, field: str) -> list:
    if not isinstance(value, list):
        raise SpellDecodeError(
            field, value, f"Expected a list for {field}, got {type(value).__name__}"
        )
    return value


def _require(data: dict, key: str, field: str) -> Any:
    """Return ``data[key]`` or raise a decode error naming ``field``."""
    if key not in data or data[key] is None:
        raise SpellDecodeError(field, None, f"Missing required field: {field}")
    return data[key]


def _expect_str(value: Any, field: str) -> str:
    if not isinstance(value, str):
        raise SpellDecodeError(field, value, f"Expected text for {field}, got {type(value).__name__}")
    return value


def _optional_str(value: Any, field: str) -> str | None:
    return None if value is None else _expect_str(value, field)


def _expect_int(value: Any, field: str) -> int:
    # bool is an int subclass; a flag is never a valid count
    if isinstance(value, bool) or not isinstance(value, int):
        raise SpellDecodeError(field, value, f"Expected an integer for {field}, got {value!r}")
    return value


def _expect_number(value: Any, field: str) -> int | float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SpellDecodeError(field, value, f"Expected a number for {field}, got {value!r}")
    return value


def _expect_bool(value: Any, field: str) -> bool:
    """Decode an optional flag; absent means False."""
    if value is None:
        return False
    if not isinstance(value, bool):
        raise SpellDecodeError(field, value, f"Expected true/false for {field}, got {value!r}")
    return value


def _lookup(table: dict[str, Enum], code: Any, field: str, label: str) -> Any:
    """Exact lookup of a short code in a closed table."""
    if not isinstance(code, str) or code not in table:
        raise SpellDecodeError(field, code, f"Invalid {label}: {code!r}")
    return table[code]


def _decode_codes(
    codes: list[str] | None,
    table: dict[str, Enum],
    field: str,
    label: str,
) -> list | None:
    """Decode an optional array of short codes, keeping order."""
    if codes is None:
        return None
    return [
        _lookup(table, code, f"{field}[{i}]", label)
        for i, code in enumerate(_expect_list(codes, field))
    ]


# =============================================================================
# School and casting time
# =============================================================================

def decode_school(school: str) -> SpellSchool:
    """Decode a single-letter school code (e.g., "V" -> EVOCATION)."""
    return _lookup(SCHOOL_ABBREVIATIONS, school, "school", "school")


def decode_time_unit(unit: str, field: str = "time.unit") -> SpellTimeUnit:
    return _lookup(TIME_UNIT_MAP, unit, field, "time unit")


def decode_time(time: dict, field: str = "time") -> SpellTime:
    """Decode one casting time entry, e.g. ``{"number": 1, "unit": "action"}``."""
    time = _expect_object(time, field)
    unit = decode_time_unit(_require(time, "unit", f"{field}.unit"), f"{field}.unit")
    number = _expect_int(_require(time, "number", f"{field}.number"), f"{field}.number")
    return SpellTime(number=number, unit=unit)


def decode_times(times: list[dict]) -> list[SpellTime]:
    """Decode the casting time list, preserving order and duplicates."""
    times = _expect_list(times, "time")
    if not times:
        raise SpellDecodeError("time", times, "A spell needs at least one casting time")
    return [decode_time(t, f"time[{i}]") for i, t in enumerate(times)]


# =============================================================================
# Range
# =============================================================================

def decode_distance(distance: dict, field: str = "range.distance") -> SpellRangeDistance:
    """Decode a range distance object.

    ``feet`` and ``miles`` carry an ``amount``; ``self``, ``touch``,
    ``sight`` and ``unlimited`` carry nothing.
    """
    distance = _expect_object(distance, field)
    dist_type = _require(distance, "type", f"{field}.type")

    if isinstance(dist_type, str) and dist_type in MEASURED_DISTANCE_MAP:
        amount = _expect_number(_require(distance, "amount", f"{field}.amount"), f"{field}.amount")
        return MEASURED_DISTANCE_MAP[dist_type](amount=amount)
    if isinstance(dist_type, str) and dist_type in FIXED_DISTANCE_MAP:
        return FIXED_DISTANCE_MAP[dist_type]()
    raise SpellDecodeError(f"{field}.type", dist_type, f"Invalid distance type: {dist_type!r}")


def decode_range(range_data: dict) -> SpellRange:
    """Decode a spell range object into one of the range shapes."""
    range_data = _expect_object(range_data, "range")
    range_type = _require(range_data, "type", "range.type")

    if range_type == "special":
        return SpecialSpellRange()
    if isinstance(range_type, str) and range_type in RANGE_SHAPE_MAP:
        distance = decode_distance(_require(range_data, "distance", "range.distance"))
        return RANGE_SHAPE_MAP[range_type](distance=distance)
    raise SpellDecodeError("range.type", range_type, f"Invalid range type: {range_type!r}")


# =============================================================================
# Components
# =============================================================================

def _decode_material(material: dict) -> MaterialSpellComponent:
    text = _expect_str(_require(material, "text", "components.m.text"), "components.m.text")

    cost = material.get("cost")
    if cost is not None:
        cost = _expect_number(cost, "components.m.cost")
        if cost < 0:
            raise SpellDecodeError("components.m.cost", cost, f"Material cost cannot be negative: {cost}")

    consume = material.get("consume")
    if consume is not None and not isinstance(consume, bool) and consume != "optional":
        raise SpellDecodeError("components.m.consume", consume, f"Invalid material consume: {consume!r}")

    return MaterialSpellComponent(text=text, cost=cost, consume=consume)


def decode_components(components: dict) -> SpellComponents:
    """Decode the ``components`` object.

    The variant is chosen by the shape of ``m``: absent means no material,
    a string is a free-text material, an object is a structured material
    with optional cost and consumption.
    """
    components = _expect_object(components, "components")
    verbal = _expect_bool(components.get("v"), "components.v")
    somatic = _expect_bool(components.get("s"), "components.s")
    material = components.get("m")

    if material is None or material is False:
        return SpellComponentsWithNoMaterial(verbal=verbal, somatic=somatic)
    if isinstance(material, str):
        return SpellComponentsWithStringMaterial(verbal=verbal, somatic=somatic, material=material)
    if isinstance(material, dict):
        return SpellComponentsWithObjectMaterial(
            verbal=verbal,
            somatic=somatic,
            material=_decode_material(material),
        )
    raise SpellDecodeError(
        "components.m", material, f"Invalid material type: {type(material).__name__}"
    )


# =============================================================================
# Duration
# =============================================================================

def decode_duration_type(duration_type: str, field: str = "duration.duration.type") -> TimedSpellDurationType:
    return _lookup(DURATION_TYPE_MAP, duration_type, field, "duration type")


def decode_permanent_end(end: str, field: str = "duration.ends") -> PermanentSpellEnd:
    return _lookup(PERMANENT_END_MAP, end, field, "end")


def decode_duration(duration: dict, field: str = "duration") -> SpellDuration:
    """Decode one duration entry."""
    duration = _expect_object(duration, field)
    d_type = _require(duration, "type", f"{field}.type")

    if d_type == "instant":
        return InstantSpellDuration()
    elif d_type == "timed":
        inner = _expect_object(
            _require(duration, "duration", f"{field}.duration"), f"{field}.duration"
        )
        return TimedSpellDuration(
            type=decode_duration_type(
                _require(inner, "type", f"{field}.duration.type"), f"{field}.duration.type"
            ),
            amount=_expect_int(
                _require(inner, "amount", f"{field}.duration.amount"), f"{field}.duration.amount"
            ),
            concentration=_expect_bool(duration.get("concentration"), f"{field}.concentration"),
        )
    elif d_type == "permanent":
        raw_ends = _expect_list(_require(duration, "ends", f"{field}.ends"), f"{field}.ends")
        if not raw_ends:
            raise SpellDecodeError(f"{field}.ends", raw_ends, "A permanent duration needs at least one end")
        ends = [decode_permanent_end(e, f"{field}.ends[{i}]") for i, e in enumerate(raw_ends)]
        if len(set(ends)) != len(ends):
            raise SpellDecodeError(f"{field}.ends", raw_ends, f"Duplicate permanent duration ends: {raw_ends}")
        return PermanentSpellDuration(ends=ends)
    elif d_type == "special":
        return SpecialSpellDuration()
    raise SpellDecodeError(f"{field}.type", d_type, f"Invalid duration type: {d_type!r}")


def decode_durations(durations: list[dict]) -> list[SpellDuration]:
    durations = _expect_list(durations, "duration")
    if not durations:
        raise SpellDecodeError("duration", durations, "A spell needs at least one duration")
    return [decode_duration(d, f"duration[{i}]") for i, d in enumerate(durations)]


# =============================================================================
# Meta
# =============================================================================

def decode_meta(meta: dict | None, log: logging.Logger | None = None) -> SpellMeta | None:
    """Decode the optional ``meta`` object.

    Only ``ritual`` is carried over. Other keys are reported on ``log``
    and otherwise ignored.
    """
    if meta is None:
        return None
    log = log or logger
    meta = _expect_object(meta, "meta")
    for key in meta:
        if key != META_RITUAL_KEY:
            log.warning(f"Unknown meta key: {key}")
    return SpellMeta(ritual=_expect_bool(meta.get(META_RITUAL_KEY), "meta.ritual"))


# =============================================================================
# Entries
# =============================================================================

def _decode_lines(lines: Any, field: str) -> list[str | SpellEntry]:
    """Decode the body of a block: strings stay strings, objects become entries."""
    result: list[str | SpellEntry] = []
    for i, line in enumerate(_expect_list(lines, field)):
        if isinstance(line, str):
            result.append(line)
        else:
            result.append(decode_entry(line, f"{field}[{i}]"))
    return result


def _optional_str_list(value: Any, field: str) -> list[str] | None:
    if value is None:
        return None
    return [_expect_str(v, f"{field}[{i}]") for i, v in enumerate(_expect_list(value, field))]


def decode_entry(entry: str | dict, field: str = "entries") -> SpellEntry:
    """Decode one entry: a plain paragraph or a typed block."""
    if isinstance(entry, str):
        return StringSpellEntry(value=entry)

    entry = _expect_object(entry, field)
    entry_type = _require(entry, "type", f"{field}.type")

    if entry_type == "entries":
        return EntriesSpellEntry(
            name=_optional_str(entry.get("name"), f"{field}.name"),
            entries=_decode_lines(_require(entry, "entries", f"{field}.entries"), f"{field}.entries"),
        )
    elif entry_type == "table":
        rows = _expect_list(_require(entry, "rows", f"{field}.rows"), f"{field}.rows")
        return TableSpellEntry(
            caption=_optional_str(entry.get("caption"), f"{field}.caption"),
            col_labels=_optional_str_list(entry.get("colLabels"), f"{field}.colLabels"),
            col_styles=_optional_str_list(entry.get("colStyles"), f"{field}.colStyles"),
            rows=[_expect_list(row, f"{field}.rows[{i}]") for i, row in enumerate(rows)],
        )
    elif entry_type == "list":
        return ListSpellEntry(
            items=_decode_lines(_require(entry, "items", f"{field}.items"), f"{field}.items"),
        )
    elif entry_type == "inset":
        page = entry.get("page")
        return InsetSpellEntry(
            source=_optional_str(entry.get("source"), f"{field}.source"),
            page=None if page is None else _expect_int(page, f"{field}.page"),
            name=_optional_str(entry.get("name"), f"{field}.name"),
            entries=_decode_lines(_require(entry, "entries", f"{field}.entries"), f"{field}.entries"),
        )
    raise SpellDecodeError(f"{field}.type", entry_type, f"Invalid entry type: {entry_type!r}")


def decode_entries(entries: list | None, field: str = "entries") -> list[SpellEntry] | None:
    """Decode an optional entries array; absent stays ``None``."""
    if entries is None:
        return None
    return [decode_entry(e, f"{field}[{i}]") for i, e in enumerate(_expect_list(entries, field))]


# =============================================================================
# Scaling dice
# =============================================================================

def _decode_scaling_entry(data: Any, field: str) -> SpellScalingLevelDice:
    data = _expect_object(data, field)
    label = _expect_str(_require(data, "label", f"{field}.label"), f"{field}.label")
    raw_scaling = _expect_object(_require(data, "scaling", f"{field}.scaling"), f"{field}.scaling")

    scaling: dict[int, str] = {}
    for level, dice in raw_scaling.items():
        if not isinstance(level, str) or not _SCALING_LEVEL_PATTERN.fullmatch(level):
            raise SpellDecodeError(
                f"{field}.scaling", level, f"Invalid scaling level: {level!r}"
            )
        scaling[int(level)] = _expect_str(dice, f"{field}.scaling.{level}")

    return SpellScalingLevelDice(label=label, scaling=scaling)


def decode_scaling_level_dice(scaling_level_dice: dict | list | None) -> list[SpellScalingLevelDice] | None:
    """Decode ``scalingLevelDice``, which 5etools gives as an object or an array.

    Both shapes normalize to a list of one or more entries, with level
    keys converted from strings to integers.
    """
    if scaling_level_dice is None:
        return None
    if isinstance(scaling_level_dice, dict):
        return [_decode_scaling_entry(scaling_level_dice, "scalingLevelDice")]
    if isinstance(scaling_level_dice, list):
        if not scaling_level_dice:
            raise SpellDecodeError(
                "scalingLevelDice", scaling_level_dice, "Scaling level dice list is empty"
            )
        return [
            _decode_scaling_entry(sld, f"scalingLevelDice[{i}]")
            for i, sld in enumerate(scaling_level_dice)
        ]
    raise SpellDecodeError(
        "scalingLevelDice", scaling_level_dice, f"Invalid scaling level dice: {scaling_level_dice!r}"
    )


# =============================================================================
# Tag arrays
# =============================================================================

def decode_damage_inflict(damage_inflict: list[str] | None) -> list[DamageType] | None:
    return _decode_codes(damage_inflict, DAMAGE_TYPE_MAP, "damageInflict", "damage type")


def decode_spell_attack(spell_attack: list[str] | None) -> list[SpellAttack] | None:
    return _decode_codes(spell_attack, SPELL_ATTACK_MAP, "spellAttack", "spell attack")


def decode_condition_inflict(condition_inflict: list[str] | None) -> list[Condition] | None:
    return _decode_codes(condition_inflict, CONDITION_MAP, "conditionInflict", "condition")


def decode_saving_throw(saving_throw: list[str] | None) -> list[Ability] | None:
    return _decode_codes(saving_throw, ABILITY_MAP, "savingThrow", "ability")


def decode_affects_creature_type(affects_creature_type: list[str] | None) -> list[CreatureType] | None:
    return _decode_codes(
        affects_creature_type, CREATURE_TYPE_MAP, "affectsCreatureType", "creature type"
    )


def decode_misc_tags(misc_tags: list[str] | None) -> list[MiscTag] | None:
    return _decode_codes(misc_tags, MISC_TAG_MAP, "miscTags", "misc tag")


def decode_area_tags(area_tags: list[str] | None) -> list[AreaTag] | None:
    return _decode_codes(area_tags, AREA_TAG_MAP, "areaTags", "area tag")


# =============================================================================
# Spell
# =============================================================================

def _decode_flag(value: Any, field: str) -> bool:
    """Decode the ``srd``/``basicRules`` availability flags.

    5etools sets ``srd`` to a string when the SRD publishes the spell
    under another name; that still means the spell is in the SRD.
    """
    if isinstance(value, str):
        return True
    return _expect_bool(value, field)


def _decode_level(value: Any) -> int:
    level = _expect_int(value, "level")
    if not 0 <= level <= 9:
        raise SpellDecodeError("level", level, f"Invalid spell level: {level}")
    return level


def decode_spell(
    raw: dict,
    id_factory: SpellIdFactory = random_spell_id,
    log: logging.Logger | None = None,
) -> Spell:
    """Decode one 5etools spell record.

    Args:
        raw: A single entry of the file's ``spell`` array.
        id_factory: Produces the spell's id from the raw record.
        log: Sink for non-fatal notices (unknown meta keys).

    Returns:
        The decoded Spell.

    Raises:
        SpellDecodeError: On the first field that cannot be decoded. The
            error carries the spell's display name.
    """
    raw = _expect_object(raw, "spell")
    name = _expect_str(_require(raw, "name", "name"), "name")

    try:
        page = raw.get("page")
        return Spell(
            id=id_factory(raw),
            name=name,
            source=_expect_str(_require(raw, "source", "source"), "source"),
            page=None if page is None else _expect_int(page, "page"),
            srd=_decode_flag(raw.get("srd"), "srd"),
            basic_rules=_decode_flag(raw.get("basicRules"), "basicRules"),
            level=_decode_level(_require(raw, "level", "level")),
            school=decode_school(_require(raw, "school", "school")),
            time=decode_times(_require(raw, "time", "time")),
            range=decode_range(_require(raw, "range", "range")),
            components=decode_components(_require(raw, "components", "components")),
            duration=decode_durations(_require(raw, "duration", "duration")),
            meta=decode_meta(raw.get("meta"), log),
            entries=decode_entries(raw.get("entries")),
            entries_higher_level=decode_entries(raw.get("entriesHigherLevel"), "entriesHigherLevel"),
            scaling_level_dice=decode_scaling_level_dice(raw.get("scalingLevelDice")),
            damage_inflict=decode_damage_inflict(raw.get("damageInflict")),
            spell_attack=decode_spell_attack(raw.get("spellAttack")),
            condition_inflict=decode_condition_inflict(raw.get("conditionInflict")),
            saving_throw=decode_saving_throw(raw.get("savingThrow")),
            affects_creature_type=decode_affects_creature_type(raw.get("affectsCreatureType")),
            misc_tags=decode_misc_tags(raw.get("miscTags")),
            area_tags=decode_area_tags(raw.get("areaTags")),
        )
    except SpellDecodeError as e:
        raise e.for_spell(name)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "spell"
        raise SpellDecodeError(field, first.get("input"), first["msg"], spell_name=name) from e


__all__ = [
    "decode_school",
    "decode_time_unit",
    "decode_time",
    "decode_times",
    "decode_distance",
    "decode_range",
    "decode_components",
    "decode_duration_type",
    "decode_permanent_end",
    "decode_duration",
    "decode_durations",
    "decode_meta",
    "decode_entry",
    "decode_entries",
    "decode_scaling_level_dice",
    "decode_damage_inflict",
    "decode_spell_attack",
    "decode_condition_inflict",
    "decode_saving_throw",
    "decode_affects_creature_type",
    "decode_misc_tags",
    "decode_area_tags",
    "decode_spell",
]
