"""
Exceptions and report models for the spell conversion pipeline.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, computed_field


class SpellscribeError(Exception):
    """Base exception for all spellscribe errors.

    Attributes:
        message: Human-readable error message
        details: Additional error context
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class SpellDecodeError(SpellscribeError):
    """Raised when a 5etools spell field cannot be decoded.

    Covers values outside a closed vocabulary as well as missing or
    malformed required fields. Fatal to the spell being decoded.

    Attributes:
        field: Source field that failed (e.g., "school", "range.distance.type")
        value: The offending raw value
        spell_name: Display name of the spell, once known
    """

    def __init__(
        self,
        field: str,
        value: Any,
        message: str | None = None,
        spell_name: str | None = None,
    ):
        self.field = field
        self.value = value
        self.reason = message or f"Invalid {field}: {value!r}"
        self.spell_name = spell_name
        super().__init__(
            self._compose(),
            details={"field": field, "value": value},
        )

    def _compose(self) -> str:
        if self.spell_name:
            return f"{self.spell_name}: {self.reason}"
        return self.reason

    def for_spell(self, spell_name: str) -> SpellDecodeError:
        """Attach the spell's display name and return self for re-raising."""
        self.spell_name = spell_name
        self.message = self._compose()
        self.args = (self.message,)
        return self


class SpellSerializationError(SpellscribeError):
    """Raised when a decoded spell cannot be turned into a tagged tree."""

    def __init__(self, message: str, spell_name: str | None = None):
        self.spell_name = spell_name
        super().__init__(f"{spell_name}: {message}" if spell_name else message)


class SpellWriteError(SpellscribeError):
    """Raised when a converted spell cannot be written to disk."""

    def __init__(self, spell_name: str, path: str, message: str):
        self.spell_name = spell_name
        self.path = path
        super().__init__(
            f"Could not write {spell_name} to {path}: {message}",
            details={"path": path},
        )


class SpellFileError(SpellscribeError):
    """Raised when a 5etools spell file cannot be read.

    Provides a user-facing message explaining what went wrong.
    """


# =============================================================================
# Conversion Report
# =============================================================================

class ConvertedSpell(BaseModel):
    """A spell that was written successfully."""

    name: str = Field(description="Spell display name")
    id: str = Field(description="Generated spell id")
    path: str = Field(description="Path of the written file")


class ConversionFailure(BaseModel):
    """A spell that could not be converted."""

    spell_name: str = Field(description="Display name of the spell, or 'unknown'")
    stage: str = Field(description='Pipeline stage: "decode", "serialize" or "write"')
    message: str = Field(description="Error message")


class ConversionReport(BaseModel):
    """Outcome of converting one 5etools spell file."""

    input_path: str = Field(description="File the spells were read from")
    output_dir: str = Field(description="Directory the spell files were written to")
    converted: list[ConvertedSpell] = Field(default_factory=list)
    failures: list[ConversionFailure] = Field(default_factory=list)

    @computed_field
    @property
    def status(self) -> str:
        """Either "success", "success_with_failures" or "failed"."""
        if self.failures and not self.converted:
            return "failed"
        if self.failures:
            return "success_with_failures"
        return "success"

    def format(self) -> str:
        """Format the report as a readable text block."""
        lines: list[str] = []

        lines.append(f"Spell Conversion Report - {self.input_path}")
        lines.append(f"Status: {self.status.upper().replace('_', ' ')}")
        lines.append(f"Output: {self.output_dir}")
        lines.append("")

        lines.append(f"Converted: {len(self.converted)} spells")
        if self.failures:
            lines.append(f"Failed ({len(self.failures)}):")
            for failure in self.failures:
                lines.append(f"  - {failure.spell_name} [{failure.stage}]: {failure.message}")

        return "\n".join(lines).rstrip()


__all__ = [
    "SpellscribeError",
    "SpellDecodeError",
    "SpellSerializationError",
    "SpellWriteError",
    "SpellFileError",
    "ConvertedSpell",
    "ConversionFailure",
    "ConversionReport",
]
