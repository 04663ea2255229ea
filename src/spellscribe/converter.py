"""
Batch conversion of 5etools spell files into tagged YAML files.

The pipeline runs in two passes: every record is decoded first, then each
decoded spell is serialized, rendered and written. By default the first
failure aborts the batch (after logging the spell's name and the error);
with ``keep_going`` failures are collected in the report instead. Either
way a spell that failed is never written.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .base import (
    ConversionFailure,
    ConversionReport,
    ConvertedSpell,
    SpellDecodeError,
    SpellSerializationError,
    SpellWriteError,
)
from .config import ConverterSettings
from .fivetools.decoder import decode_spell
from .fivetools.reader import read_spell_file
from .identity import SpellIdFactory, get_id_factory, random_spell_id
from .models import Spell
from .writer import DEFAULT_EXTENSION, render_spell_yaml, spell_file_path, write_spell_file

logger = logging.getLogger("spellscribe")


def _raw_name(raw: object) -> str:
    if isinstance(raw, dict) and isinstance(raw.get("name"), str):
        return raw["name"]
    return "unknown"


def decode_all(
    raw_spells: list[dict],
    report: ConversionReport,
    id_factory: SpellIdFactory = random_spell_id,
    keep_going: bool = False,
    log: logging.Logger | None = None,
) -> list[Spell]:
    """Decode every raw record, in order.

    Raises:
        SpellDecodeError: On the first failing record unless ``keep_going``.
    """
    log = log or logger
    spells: list[Spell] = []
    for raw in raw_spells:
        name = _raw_name(raw)
        log.info(f"Parsing {name}...")
        try:
            spells.append(decode_spell(raw, id_factory=id_factory, log=log))
        except SpellDecodeError as e:
            log.error(f"Error parsing spell {name}: {e.reason}")
            if not keep_going:
                raise
            report.failures.append(ConversionFailure(spell_name=name, stage="decode", message=str(e)))
    return spells


def write_spell(
    spell: Spell,
    output_dir: Path,
    extension: str = DEFAULT_EXTENSION,
    log: logging.Logger | None = None,
) -> Path:
    """Serialize one spell and write it to ``output_dir``.

    Returns:
        Path of the written file.

    Raises:
        SpellSerializationError: If the spell cannot be rendered.
        SpellWriteError: If the file cannot be written.
    """
    log = log or logger

    log.info(f"Serializing {spell.name}...")
    try:
        text = render_spell_yaml(spell.to_tagged_tree())
    except SpellSerializationError as e:
        raise SpellSerializationError(str(e), spell_name=spell.name) from e

    path = spell_file_path(spell.name, output_dir, extension)
    log.info(f"Writing {spell.name} to {path}...")
    write_spell_file(path, text, spell.name)
    return path


def convert_spells(
    raw_spells: list[dict],
    output_dir: str | Path,
    id_factory: SpellIdFactory = random_spell_id,
    keep_going: bool = False,
    extension: str = DEFAULT_EXTENSION,
    input_path: str = "<memory>",
    log: logging.Logger | None = None,
) -> ConversionReport:
    """Convert raw 5etools spell records and write one file per spell.

    Args:
        raw_spells: Records from a 5etools ``spell`` array.
        output_dir: Existing directory to write into.
        id_factory: Produces each spell's id.
        keep_going: Record failures and continue instead of re-raising.
        extension: File extension of written files.
        input_path: Shown in the report.
        log: Sink for progress and error messages.

    Returns:
        ConversionReport listing written spells and failures.
    """
    log = log or logger
    output_dir = Path(output_dir)
    report = ConversionReport(input_path=str(input_path), output_dir=str(output_dir))

    spells = decode_all(raw_spells, report, id_factory=id_factory, keep_going=keep_going, log=log)

    for spell in spells:
        try:
            path = write_spell(spell, output_dir, extension, log=log)
        except SpellSerializationError as e:
            log.error(f"Error serializing spell: {e}")
            if not keep_going:
                raise
            report.failures.append(
                ConversionFailure(spell_name=spell.name, stage="serialize", message=str(e))
            )
            continue
        except SpellWriteError as e:
            log.error(f"Error writing spell: {e}")
            if not keep_going:
                raise
            report.failures.append(
                ConversionFailure(spell_name=spell.name, stage="write", message=str(e))
            )
            continue
        report.converted.append(ConvertedSpell(name=spell.name, id=spell.id, path=str(path)))

    log.info("Done!")
    return report


def convert_file(
    input_path: str | Path,
    output_dir: str | Path,
    settings: ConverterSettings | None = None,
    log: logging.Logger | None = None,
) -> ConversionReport:
    """Read a 5etools spell file and convert every spell in it.

    Raises:
        SpellFileError: If the input file cannot be read.
    """
    settings = settings or ConverterSettings()
    raw_spells = read_spell_file(input_path)
    return convert_spells(
        raw_spells,
        output_dir,
        id_factory=get_id_factory(settings.stable_ids),
        keep_going=settings.keep_going,
        extension=settings.output_extension,
        input_path=str(input_path),
        log=log,
    )


__all__ = [
    "decode_all",
    "write_spell",
    "convert_spells",
    "convert_file",
]
