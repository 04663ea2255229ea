"""
Read 5etools spell files from disk.
"""

from __future__ import annotations

import json
from pathlib import Path

from ..base import SpellFileError
from .schema import SPELL_DATA_KEY


def read_spell_file(file_path: str | Path) -> list[dict]:
    """
    Read and validate a local 5etools spell JSON file.

    Args:
        file_path: Path to a file such as ``spells-phb.json``

    Returns:
        The raw spell records, in file order

    Raises:
        SpellFileError: If the file is missing, is not valid JSON, or has
            no ``spell`` array
    """
    path = Path(file_path)

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise SpellFileError(
            f"Spell file not found: {file_path}"
        ) from None
    except json.JSONDecodeError as e:
        raise SpellFileError(
            f"Invalid JSON in spell file: {e}"
        ) from None
    except UnicodeDecodeError as e:
        raise SpellFileError(
            f"Spell file is not valid UTF-8: {e}"
        ) from None
    except OSError as e:
        raise SpellFileError(
            f"Could not read spell file {file_path}: {e}"
        ) from None

    if not isinstance(data, dict):
        raise SpellFileError("Invalid 5etools spell file: expected a JSON object at the top level")

    spells = data.get(SPELL_DATA_KEY)
    if not isinstance(spells, list):
        raise SpellFileError(
            f"Invalid 5etools spell file: missing '{SPELL_DATA_KEY}' array"
        )

    return spells


__all__ = [
    "read_spell_file",
]
