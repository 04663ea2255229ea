"""
5etools spell schema constants and lookup tables.

These map the short codes used in 5etools spell JSON to spellscribe
enums. Every table is closed: a code missing here is a decode error.
"""

from ..models import (
    Ability,
    AreaTag,
    Condition,
    ConeSpellRange,
    CreatureType,
    CubeSpellRange,
    DamageType,
    HemisphereSpellRange,
    LineSpellRange,
    MiscTag,
    PermanentSpellEnd,
    PointSpellRange,
    RadiusSpellRange,
    SpellAttack,
    SpellRangeDistanceFeet,
    SpellRangeDistanceMile,
    SpellRangeDistanceSelf,
    SpellRangeDistanceSight,
    SpellRangeDistanceTouch,
    SpellRangeDistanceUnlimited,
    SpellSchool,
    SpellTimeUnit,
    SphereSpellRange,
    TaggedModel,
    TimedSpellDurationType,
)

# Top-level key holding the spell list in a 5etools spell file
SPELL_DATA_KEY = "spell"

# ---------------------------------------------------------------------------
# School letters
# ---------------------------------------------------------------------------

SCHOOL_ABBREVIATIONS: dict[str, SpellSchool] = {
    "A": SpellSchool.ABJURATION,
    "C": SpellSchool.CONJURATION,
    "D": SpellSchool.DIVINATION,
    "E": SpellSchool.ENCHANTMENT,
    "V": SpellSchool.EVOCATION,
    "I": SpellSchool.ILLUSION,
    "N": SpellSchool.NECROMANCY,
    "T": SpellSchool.TRANSMUTATION,
}

# ---------------------------------------------------------------------------
# Casting time and duration units
# ---------------------------------------------------------------------------

TIME_UNIT_MAP: dict[str, SpellTimeUnit] = {
    "action": SpellTimeUnit.ACTION,
    "bonus": SpellTimeUnit.BONUS,
    "reaction": SpellTimeUnit.REACTION,
    "minute": SpellTimeUnit.MINUTE,
    "hour": SpellTimeUnit.HOUR,
}

DURATION_TYPE_MAP: dict[str, TimedSpellDurationType] = {
    "minute": TimedSpellDurationType.MINUTE,
    "hour": TimedSpellDurationType.HOUR,
    "day": TimedSpellDurationType.DAY,
    "round": TimedSpellDurationType.ROUND,
}

PERMANENT_END_MAP: dict[str, PermanentSpellEnd] = {
    "dispel": PermanentSpellEnd.DISPEL,
    "trigger": PermanentSpellEnd.TRIGGER,
}

# ---------------------------------------------------------------------------
# Range shapes and distances
# ---------------------------------------------------------------------------

# Shapes wrapping a distance; "special" carries none and is handled apart
RANGE_SHAPE_MAP: dict[str, type[TaggedModel]] = {
    "point": PointSpellRange,
    "radius": RadiusSpellRange,
    "sphere": SphereSpellRange,
    "cone": ConeSpellRange,
    "line": LineSpellRange,
    "hemisphere": HemisphereSpellRange,
    "cube": CubeSpellRange,
}

# Distances that carry an amount
MEASURED_DISTANCE_MAP: dict[str, type[TaggedModel]] = {
    "feet": SpellRangeDistanceFeet,
    "miles": SpellRangeDistanceMile,
}

FIXED_DISTANCE_MAP: dict[str, type[TaggedModel]] = {
    "self": SpellRangeDistanceSelf,
    "touch": SpellRangeDistanceTouch,
    "sight": SpellRangeDistanceSight,
    "unlimited": SpellRangeDistanceUnlimited,
}

# ---------------------------------------------------------------------------
# Tag arrays
# ---------------------------------------------------------------------------

SPELL_ATTACK_MAP: dict[str, SpellAttack] = {
    "R": SpellAttack.RANGED,
    "M": SpellAttack.MELEE,
}

DAMAGE_TYPE_MAP: dict[str, DamageType] = {
    "acid": DamageType.ACID,
    "bludgeoning": DamageType.BLUDGEONING,
    "cold": DamageType.COLD,
    "fire": DamageType.FIRE,
    "force": DamageType.FORCE,
    "lightning": DamageType.LIGHTNING,
    "necrotic": DamageType.NECROTIC,
    "piercing": DamageType.PIERCING,
    "poison": DamageType.POISON,
    "psychic": DamageType.PSYCHIC,
    "radiant": DamageType.RADIANT,
    "slashing": DamageType.SLASHING,
    "thunder": DamageType.THUNDER,
}

CONDITION_MAP: dict[str, Condition] = {
    "blinded": Condition.BLINDED,
    "charmed": Condition.CHARMED,
    "deafened": Condition.DEAFENED,
    "exhaustion": Condition.EXHAUSTION,
    "frightened": Condition.FRIGHTENED,
    "grappled": Condition.GRAPPLED,
    "incapacitated": Condition.INCAPACITATED,
    "invisible": Condition.INVISIBLE,
    "paralyzed": Condition.PARALYZED,
    "petrified": Condition.PETRIFIED,
    "poisoned": Condition.POISONED,
    "prone": Condition.PRONE,
    "restrained": Condition.RESTRAINED,
    "stunned": Condition.STUNNED,
    "unconscious": Condition.UNCONSCIOUS,
}

ABILITY_MAP: dict[str, Ability] = {
    "strength": Ability.STRENGTH,
    "dexterity": Ability.DEXTERITY,
    "constitution": Ability.CONSTITUTION,
    "intelligence": Ability.INTELLIGENCE,
    "wisdom": Ability.WISDOM,
    "charisma": Ability.CHARISMA,
}

CREATURE_TYPE_MAP: dict[str, CreatureType] = {
    "aberration": CreatureType.ABERRATION,
    "beast": CreatureType.BEAST,
    "celestial": CreatureType.CELESTIAL,
    "construct": CreatureType.CONSTRUCT,
    "dragon": CreatureType.DRAGON,
    "elemental": CreatureType.ELEMENTAL,
    "fey": CreatureType.FEY,
    "fiend": CreatureType.FIEND,
    "giant": CreatureType.GIANT,
    "humanoid": CreatureType.HUMANOID,
    "monstrosity": CreatureType.MONSTROSITY,
    "ooze": CreatureType.OOZE,
    "plant": CreatureType.PLANT,
    "undead": CreatureType.UNDEAD,
}

MISC_TAG_MAP: dict[str, MiscTag] = {
    "HL": MiscTag.HEALING,
    "THP": MiscTag.GRANTS_TEMPORARY_HIT_POINTS,
    "SGT": MiscTag.REQUIRES_SIGHT,
    "PRM": MiscTag.PERMANENT_EFFECTS,
    "SCL": MiscTag.SCALING_EFFECTS,
    "SMN": MiscTag.SUMMONS_CREATURE,
    "MAC": MiscTag.MODIFIES_AC,
    "TP": MiscTag.TELEPORTATION,
    "FMV": MiscTag.FORCED_MOVEMENT,
    "RO": MiscTag.ROLLABLE_EFFECTS,
    "LGTS": MiscTag.CREATES_SUNLIGHT,
    "LGT": MiscTag.CREATES_LIGHT,
    "UBA": MiscTag.USES_BONUS_ACTION,
    "PS": MiscTag.PLANE_SHIFTING,
    "OBS": MiscTag.OBSCURES_VISION,
    "DFT": MiscTag.DIFFICULT_TERRAIN,
    "AAD": MiscTag.ADDITIONAL_ATTACK_DAMAGE,
    "OBJ": MiscTag.AFFECTS_OBJECTS,
}

AREA_TAG_MAP: dict[str, AreaTag] = {
    "ST": AreaTag.SINGLE_TARGET,
    "MT": AreaTag.MULTIPLE_TARGETS,
    "C": AreaTag.CUBE,
    "N": AreaTag.CONE,
    "Y": AreaTag.CYLINDER,
    "S": AreaTag.SPHERE,
    "R": AreaTag.CIRCLE,
    "Q": AreaTag.SQUARE,
    "L": AreaTag.LINE,
    "H": AreaTag.HEMISPHERE,
    "W": AreaTag.WALL,
}

# Only key of a spell's "meta" object that is carried over
META_RITUAL_KEY = "ritual"
