"""
YAML rendering and file output for converted spells.
"""

import re
from pathlib import Path
from typing import Any

import yaml

from .base import SpellWriteError

DEFAULT_EXTENSION = "yml"

# Everything outside [A-Za-z0-9._-] becomes "_"
_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def sanitize_file_name(name: str) -> str:
    """Make a spell name safe for use as a file name.

    Example:
        >>> sanitize_file_name("Melf's Minute Meteors")
        'Melf_s_Minute_Meteors'
    """
    return _UNSAFE_FILENAME_CHARS.sub("_", name)


def spell_file_path(spell_name: str, output_dir: Path, extension: str = DEFAULT_EXTENSION) -> Path:
    """Path of the file a spell is written to.

    Two spells whose names sanitize to the same string share a path; the
    later one overwrites the earlier.
    """
    return Path(output_dir) / f"{sanitize_file_name(spell_name)}.{extension}"


def render_spell_yaml(tree: dict[str, Any]) -> str:
    """Render a spell's tagged tree as a YAML document under a ``spell`` key.

    Keys keep their tree order; nested mappings and lists use block style.
    """
    return yaml.safe_dump(
        {"spell": tree},
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
    )


def write_spell_file(path: Path, text: str, spell_name: str) -> None:
    """Write rendered YAML to ``path``.

    Raises:
        SpellWriteError: If the file cannot be written.
    """
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise SpellWriteError(spell_name, str(path), str(e)) from e


__all__ = [
    "DEFAULT_EXTENSION",
    "sanitize_file_name",
    "spell_file_path",
    "render_spell_yaml",
    "write_spell_file",
]
