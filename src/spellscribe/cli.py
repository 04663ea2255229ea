"""
Command line entry point for converting 5etools spell files.

Usage:
    spellscribe spells-phb.json -o out/
    spellscribe            # prompts for the input file and output directory

Paths given at the prompt may be wrapped in single or double quotes (as
produced by dragging a file onto a terminal); surrounding whitespace and
one pair of quotes are stripped.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable

from pydantic import ValidationError

from .base import SpellFileError, SpellscribeError
from .config import load_settings
from .converter import convert_file

logger = logging.getLogger("spellscribe")

INPUT_PROMPT = "5etools JSON file: "
OUTPUT_PROMPT = "Output directory: "


def clean_path_answer(text: str) -> str:
    """Strip whitespace and one pair of matching surrounding quotes."""
    cleaned = text.strip()
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in ("'", '"'):
        cleaned = cleaned[1:-1]
    return cleaned


def prompt_for_path(
    prompt: str,
    is_valid: Callable[[Path], bool],
    error_message: str,
    ask: Callable[[str], str] | None = None,
) -> Path:
    """Ask for a path until the answer passes ``is_valid``.

    Raises:
        EOFError: If input ends before a valid answer is given.
    """
    ask = ask or input
    while True:
        path = Path(clean_path_answer(ask(prompt)))
        if is_valid(path):
            return path
        print(error_message)


def _resolve_paths(args: argparse.Namespace) -> tuple[Path, Path]:
    """Use the given paths, prompting for any that are missing or invalid."""
    input_path = args.input
    if input_path is None or not input_path.exists():
        if input_path is not None:
            print("Invalid file path.")
        input_path = prompt_for_path(INPUT_PROMPT, Path.exists, "Invalid file path.")

    output_dir = args.output
    if output_dir is None or not output_dir.is_dir():
        if output_dir is not None:
            print("Invalid output directory.")
        output_dir = prompt_for_path(OUTPUT_PROMPT, Path.is_dir, "Invalid output directory.")

    return input_path, output_dir


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Convert 5etools spell JSON into tagged YAML files, one per spell",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Convert a file into out/
  spellscribe data/spells/spells-phb.json -o out/

  # Keep converting after a bad spell, with ids that survive re-runs
  spellscribe spells-xge.json -o out/ --keep-going --stable-ids

  # Prompt for both paths
  spellscribe
        """,
    )

    parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        help="5etools spell JSON file (prompted for when omitted)"
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        help="Existing output directory (prompted for when omitted)"
    )
    parser.add_argument(
        "--keep-going",
        action="store_true",
        default=None,
        help="Report failed spells at the end instead of aborting on the first one"
    )
    parser.add_argument(
        "--stable-ids",
        action="store_true",
        default=None,
        help="Derive spell ids from source, name and page (same ids on every run)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the spellscribe command."""
    args = parse_args(argv)

    try:
        settings = load_settings()
    except ValidationError as e:
        logging.basicConfig(format="%(message)s")
        logger.error(f"Invalid SPELLSCRIBE_* setting: {e}")
        return 2
    overrides = {
        "keep_going": args.keep_going,
        "stable_ids": args.stable_ids,
        "log_level": "DEBUG" if args.verbose else None,
    }
    settings = settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})

    logging.basicConfig(
        level=settings.log_level,
        format="%(message)s",
    )

    try:
        input_path, output_dir = _resolve_paths(args)
    except EOFError:
        logger.error("No path given, exiting.")
        return 2

    try:
        report = convert_file(input_path, output_dir, settings=settings)
    except SpellFileError as e:
        logger.error(str(e))
        return 2
    except SpellscribeError:
        # Already logged with the spell's name by the converter
        return 1

    if report.failures:
        print(report.format())
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
