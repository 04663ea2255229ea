"""
5etools spell support.

Currently supports:
- Reading 5etools spell files (``spells-*.json``)
- Decoding spell records into spellscribe models
"""

from .decoder import decode_spell
from .reader import read_spell_file

__all__ = [
    "decode_spell",
    "read_spell_file",
]
