"""
Data models for converted spells.

Every semantic shape a 5etools spell sub-field can take is modelled as one
frozen pydantic class. Classes belonging to the same family (ranges,
distances, components, durations, entries) form a closed union; each class
carries a ``TAG`` naming its variant so the serialized output is
self-describing.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar, Literal, Union

from pydantic import BaseModel, Field, field_validator

from .serializer import to_tagged_tree


# =============================================================================
# Enums
# =============================================================================

class SpellSchool(str, Enum):
    """Schools of magic."""
    ABJURATION = "ABJURATION"
    CONJURATION = "CONJURATION"
    DIVINATION = "DIVINATION"
    ENCHANTMENT = "ENCHANTMENT"
    EVOCATION = "EVOCATION"
    ILLUSION = "ILLUSION"
    NECROMANCY = "NECROMANCY"
    TRANSMUTATION = "TRANSMUTATION"


class SpellTimeUnit(str, Enum):
    """Units a casting time is measured in."""
    ACTION = "ACTION"
    BONUS = "BONUS"
    REACTION = "REACTION"
    MINUTE = "MINUTE"
    HOUR = "HOUR"


class TimedSpellDurationType(str, Enum):
    """Units a timed duration is measured in."""
    MINUTE = "MINUTE"
    HOUR = "HOUR"
    DAY = "DAY"
    ROUND = "ROUND"


class PermanentSpellEnd(str, Enum):
    """Ways a permanent spell can end."""
    DISPEL = "DISPEL"
    TRIGGER = "TRIGGER"


class DamageType(str, Enum):
    ACID = "ACID"
    BLUDGEONING = "BLUDGEONING"
    COLD = "COLD"
    FIRE = "FIRE"
    FORCE = "FORCE"
    LIGHTNING = "LIGHTNING"
    NECROTIC = "NECROTIC"
    PIERCING = "PIERCING"
    POISON = "POISON"
    PSYCHIC = "PSYCHIC"
    RADIANT = "RADIANT"
    SLASHING = "SLASHING"
    THUNDER = "THUNDER"


class SpellAttack(str, Enum):
    RANGED = "RANGED"
    MELEE = "MELEE"


class Condition(str, Enum):
    BLINDED = "BLINDED"
    CHARMED = "CHARMED"
    DEAFENED = "DEAFENED"
    EXHAUSTION = "EXHAUSTION"
    FRIGHTENED = "FRIGHTENED"
    GRAPPLED = "GRAPPLED"
    INCAPACITATED = "INCAPACITATED"
    INVISIBLE = "INVISIBLE"
    PARALYZED = "PARALYZED"
    PETRIFIED = "PETRIFIED"
    POISONED = "POISONED"
    PRONE = "PRONE"
    RESTRAINED = "RESTRAINED"
    STUNNED = "STUNNED"
    UNCONSCIOUS = "UNCONSCIOUS"


class Ability(str, Enum):
    STRENGTH = "STRENGTH"
    DEXTERITY = "DEXTERITY"
    CONSTITUTION = "CONSTITUTION"
    INTELLIGENCE = "INTELLIGENCE"
    WISDOM = "WISDOM"
    CHARISMA = "CHARISMA"


class CreatureType(str, Enum):
    ABERRATION = "ABERRATION"
    BEAST = "BEAST"
    CELESTIAL = "CELESTIAL"
    CONSTRUCT = "CONSTRUCT"
    DRAGON = "DRAGON"
    ELEMENTAL = "ELEMENTAL"
    FEY = "FEY"
    FIEND = "FIEND"
    GIANT = "GIANT"
    HUMANOID = "HUMANOID"
    MONSTROSITY = "MONSTROSITY"
    OOZE = "OOZE"
    PLANT = "PLANT"
    UNDEAD = "UNDEAD"


class MiscTag(str, Enum):
    """Miscellaneous spell traits tagged by 5etools."""
    HEALING = "HEALING"
    GRANTS_TEMPORARY_HIT_POINTS = "GRANTS_TEMPORARY_HIT_POINTS"
    REQUIRES_SIGHT = "REQUIRES_SIGHT"
    PERMANENT_EFFECTS = "PERMANENT_EFFECTS"
    SCALING_EFFECTS = "SCALING_EFFECTS"
    SUMMONS_CREATURE = "SUMMONS_CREATURE"
    MODIFIES_AC = "MODIFIES_AC"
    TELEPORTATION = "TELEPORTATION"
    FORCED_MOVEMENT = "FORCED_MOVEMENT"
    ROLLABLE_EFFECTS = "ROLLABLE_EFFECTS"
    CREATES_SUNLIGHT = "CREATES_SUNLIGHT"
    CREATES_LIGHT = "CREATES_LIGHT"
    USES_BONUS_ACTION = "USES_BONUS_ACTION"
    PLANE_SHIFTING = "PLANE_SHIFTING"
    OBSCURES_VISION = "OBSCURES_VISION"
    DIFFICULT_TERRAIN = "DIFFICULT_TERRAIN"
    ADDITIONAL_ATTACK_DAMAGE = "ADDITIONAL_ATTACK_DAMAGE"
    AFFECTS_OBJECTS = "AFFECTS_OBJECTS"


class AreaTag(str, Enum):
    """Shape of the area a spell affects."""
    SINGLE_TARGET = "SINGLE_TARGET"
    MULTIPLE_TARGETS = "MULTIPLE_TARGETS"
    CIRCLE = "CIRCLE"
    CONE = "CONE"
    CUBE = "CUBE"
    CYLINDER = "CYLINDER"
    HEMISPHERE = "HEMISPHERE"
    LINE = "LINE"
    SPHERE = "SPHERE"
    SQUARE = "SQUARE"
    WALL = "WALL"


# =============================================================================
# Base Model
# =============================================================================

class TaggedModel(BaseModel):
    """Base class for every value that renders to a tagged tree.

    Instances are immutable once built.
    """
    model_config = {"frozen": True}

    TAG: ClassVar[str]

    def to_tagged_tree(self) -> dict[str, Any]:
        """Render this value as a dict headed by its variant tag."""
        return to_tagged_tree(self)


# =============================================================================
# Casting Time
# =============================================================================

class SpellTime(TaggedModel):
    TAG: ClassVar[str] = "SpellTime"

    number: int = Field(description="How many units the casting takes")
    unit: SpellTimeUnit


# =============================================================================
# Range
# =============================================================================

class SpellRangeDistanceFeet(TaggedModel):
    TAG: ClassVar[str] = "SpellRangeDistanceFeet"

    amount: int | float


class SpellRangeDistanceMile(TaggedModel):
    TAG: ClassVar[str] = "SpellRangeDistanceMile"

    amount: int | float


class SpellRangeDistanceSelf(TaggedModel):
    TAG: ClassVar[str] = "SpellRangeDistanceSelf"


class SpellRangeDistanceTouch(TaggedModel):
    TAG: ClassVar[str] = "SpellRangeDistanceTouch"


class SpellRangeDistanceSight(TaggedModel):
    TAG: ClassVar[str] = "SpellRangeDistanceSight"


class SpellRangeDistanceUnlimited(TaggedModel):
    TAG: ClassVar[str] = "SpellRangeDistanceUnlimited"


SpellRangeDistance = Union[
    SpellRangeDistanceFeet,
    SpellRangeDistanceMile,
    SpellRangeDistanceSelf,
    SpellRangeDistanceTouch,
    SpellRangeDistanceSight,
    SpellRangeDistanceUnlimited,
]


class PointSpellRange(TaggedModel):
    TAG: ClassVar[str] = "PointSpellRange"

    distance: SpellRangeDistance


class RadiusSpellRange(TaggedModel):
    TAG: ClassVar[str] = "RadiusSpellRange"

    distance: SpellRangeDistance


class SphereSpellRange(TaggedModel):
    TAG: ClassVar[str] = "SphereSpellRange"

    distance: SpellRangeDistance


class ConeSpellRange(TaggedModel):
    TAG: ClassVar[str] = "ConeSpellRange"

    distance: SpellRangeDistance


class LineSpellRange(TaggedModel):
    TAG: ClassVar[str] = "LineSpellRange"

    distance: SpellRangeDistance


class HemisphereSpellRange(TaggedModel):
    TAG: ClassVar[str] = "HemisphereSpellRange"

    distance: SpellRangeDistance


class CubeSpellRange(TaggedModel):
    TAG: ClassVar[str] = "CubeSpellRange"

    distance: SpellRangeDistance


class SpecialSpellRange(TaggedModel):
    TAG: ClassVar[str] = "SpecialSpellRange"


SpellRange = Union[
    PointSpellRange,
    RadiusSpellRange,
    SphereSpellRange,
    ConeSpellRange,
    LineSpellRange,
    HemisphereSpellRange,
    CubeSpellRange,
    SpecialSpellRange,
]


# =============================================================================
# Components
# =============================================================================

class MaterialSpellComponent(TaggedModel):
    """Structured material component with an optional gold-piece cost."""
    TAG: ClassVar[str] = "MaterialSpellComponent"

    text: str
    cost: int | float | None = Field(default=None, description="Cost of the material, if any")
    consume: bool | Literal["optional"] | None = Field(
        default=None,
        description="Whether casting consumes the material ('optional' when the caster chooses)",
    )

    @field_validator("cost")
    @classmethod
    def cost_not_negative(cls, v: int | float | None) -> int | float | None:
        if v is not None and v < 0:
            raise ValueError(f"Material cost cannot be negative: {v}")
        return v


class SpellComponentsWithNoMaterial(TaggedModel):
    TAG: ClassVar[str] = "SpellComponentsWithNoMaterial"

    verbal: bool
    somatic: bool


class SpellComponentsWithStringMaterial(TaggedModel):
    TAG: ClassVar[str] = "SpellComponentsWithStringMaterial"

    verbal: bool
    somatic: bool
    material: str


class SpellComponentsWithObjectMaterial(TaggedModel):
    TAG: ClassVar[str] = "SpellComponentsWithObjectMaterial"

    verbal: bool
    somatic: bool
    material: MaterialSpellComponent


SpellComponents = Union[
    SpellComponentsWithNoMaterial,
    SpellComponentsWithStringMaterial,
    SpellComponentsWithObjectMaterial,
]


# =============================================================================
# Duration
# =============================================================================

class InstantSpellDuration(TaggedModel):
    TAG: ClassVar[str] = "InstantSpellDuration"


class TimedSpellDuration(TaggedModel):
    TAG: ClassVar[str] = "TimedSpellDuration"

    type: TimedSpellDurationType
    amount: int
    concentration: bool = False


class PermanentSpellDuration(TaggedModel):
    TAG: ClassVar[str] = "PermanentSpellDuration"

    ends: list[PermanentSpellEnd] = Field(min_length=1, description="Ways the effect can end")

    @field_validator("ends")
    @classmethod
    def ends_unique(cls, v: list[PermanentSpellEnd]) -> list[PermanentSpellEnd]:
        if len(set(v)) != len(v):
            raise ValueError(f"Duplicate permanent duration ends: {v}")
        return v


class SpecialSpellDuration(TaggedModel):
    TAG: ClassVar[str] = "SpecialSpellDuration"


SpellDuration = Union[
    InstantSpellDuration,
    TimedSpellDuration,
    PermanentSpellDuration,
    SpecialSpellDuration,
]


# =============================================================================
# Meta
# =============================================================================

class SpellMeta(TaggedModel):
    TAG: ClassVar[str] = "SpellMeta"

    ritual: bool = False


# =============================================================================
# Entries
# =============================================================================

class StringSpellEntry(TaggedModel):
    """A top-level paragraph of plain text."""
    TAG: ClassVar[str] = "StringSpellEntry"

    value: str


class EntriesSpellEntry(TaggedModel):
    """A named block of paragraphs."""
    TAG: ClassVar[str] = "EntriesSpellEntry"

    name: str | None = None
    entries: list[Union[str, "SpellEntry"]] = Field(default_factory=list)


class TableSpellEntry(TaggedModel):
    TAG: ClassVar[str] = "TableSpellEntry"

    caption: str | None = None
    col_labels: list[str] | None = Field(default=None, serialization_alias="col-labels")
    col_styles: list[str] | None = Field(default=None, serialization_alias="col-styles")
    rows: list[list[Any]] = Field(default_factory=list, description="Rows of cells, kept verbatim")


class ListSpellEntry(TaggedModel):
    TAG: ClassVar[str] = "ListSpellEntry"

    items: list[Union[str, "SpellEntry"]] = Field(default_factory=list)


class InsetSpellEntry(TaggedModel):
    """A sidebar box quoting another book."""
    TAG: ClassVar[str] = "InsetSpellEntry"

    source: str | None = None
    page: int | None = None
    name: str | None = None
    entries: list[Union[str, "SpellEntry"]] = Field(default_factory=list)


SpellEntry = Union[
    StringSpellEntry,
    EntriesSpellEntry,
    TableSpellEntry,
    ListSpellEntry,
    InsetSpellEntry,
]

EntriesSpellEntry.model_rebuild()
ListSpellEntry.model_rebuild()
InsetSpellEntry.model_rebuild()


# =============================================================================
# Scaling
# =============================================================================

class SpellScalingLevelDice(TaggedModel):
    """Damage dice that grow with character or slot level."""
    TAG: ClassVar[str] = "SpellScalingLevelDice"

    label: str
    scaling: dict[int, str] = Field(description="Level -> dice expression (e.g., {5: '2d10'})")


# =============================================================================
# Spell
# =============================================================================

class Spell(TaggedModel):
    """A fully decoded spell.

    Optional fields are ``None`` when the source record omits them, which
    keeps them out of the rendered tree. An empty list is kept as-is.
    """
    TAG: ClassVar[str] = "Spell"

    id: str = Field(description="Generated UUIDv4, unique per spell")
    name: str
    source: str
    page: int | None = None
    srd: bool = False
    basic_rules: bool = Field(default=False, serialization_alias="basic-rules")
    level: int = Field(ge=0, le=9)
    school: SpellSchool
    time: list[SpellTime] = Field(min_length=1)
    range: SpellRange
    components: SpellComponents
    duration: list[SpellDuration] = Field(min_length=1)
    meta: SpellMeta | None = None
    entries: list[SpellEntry] | None = None
    entries_higher_level: list[SpellEntry] | None = Field(
        default=None, serialization_alias="entries-higher-level"
    )
    scaling_level_dice: list[SpellScalingLevelDice] | None = Field(
        default=None, serialization_alias="scaling-level-dice"
    )
    damage_inflict: list[DamageType] | None = Field(default=None, serialization_alias="damage-inflict")
    spell_attack: list[SpellAttack] | None = Field(default=None, serialization_alias="spell-attack")
    condition_inflict: list[Condition] | None = Field(
        default=None, serialization_alias="condition-inflict"
    )
    saving_throw: list[Ability] | None = Field(default=None, serialization_alias="saving-throw")
    affects_creature_type: list[CreatureType] | None = Field(
        default=None, serialization_alias="affects-creature-type"
    )
    misc_tags: list[MiscTag] | None = Field(default=None, serialization_alias="misc-tags")
    area_tags: list[AreaTag] | None = Field(default=None, serialization_alias="area-tags")


__all__ = [
    "SpellSchool",
    "SpellTimeUnit",
    "TimedSpellDurationType",
    "PermanentSpellEnd",
    "DamageType",
    "SpellAttack",
    "Condition",
    "Ability",
    "CreatureType",
    "MiscTag",
    "AreaTag",
    "TaggedModel",
    "SpellTime",
    "SpellRangeDistanceFeet",
    "SpellRangeDistanceMile",
    "SpellRangeDistanceSelf",
    "SpellRangeDistanceTouch",
    "SpellRangeDistanceSight",
    "SpellRangeDistanceUnlimited",
    "SpellRangeDistance",
    "PointSpellRange",
    "RadiusSpellRange",
    "SphereSpellRange",
    "ConeSpellRange",
    "LineSpellRange",
    "HemisphereSpellRange",
    "CubeSpellRange",
    "SpecialSpellRange",
    "SpellRange",
    "MaterialSpellComponent",
    "SpellComponentsWithNoMaterial",
    "SpellComponentsWithStringMaterial",
    "SpellComponentsWithObjectMaterial",
    "SpellComponents",
    "InstantSpellDuration",
    "TimedSpellDuration",
    "PermanentSpellDuration",
    "SpecialSpellDuration",
    "SpellDuration",
    "SpellMeta",
    "StringSpellEntry",
    "EntriesSpellEntry",
    "TableSpellEntry",
    "ListSpellEntry",
    "InsetSpellEntry",
    "SpellEntry",
    "SpellScalingLevelDice",
    "Spell",
]
