"""
spellscribe - convert 5etools spell data into self-describing YAML.

This package provides:
- Data models for every shape a spell's ranges, components, durations and
  entries can take, each rendering to a tagged tree
- A strict decoder from 5etools spell JSON to those models
- A batch converter writing one YAML file per spell
"""

from .base import (
    ConversionReport,
    SpellDecodeError,
    SpellFileError,
    SpellscribeError,
    SpellSerializationError,
    SpellWriteError,
)
from .converter import convert_file, convert_spells
from .fivetools import decode_spell, read_spell_file
from .models import Spell
from .serializer import to_tagged_tree

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Pipeline
    "convert_file",
    "convert_spells",
    "decode_spell",
    "read_spell_file",
    "to_tagged_tree",
    # Models
    "Spell",
    "ConversionReport",
    # Errors
    "SpellscribeError",
    "SpellDecodeError",
    "SpellSerializationError",
    "SpellWriteError",
    "SpellFileError",
]
