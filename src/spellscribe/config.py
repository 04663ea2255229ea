"""
Configuration for spell conversion runs.
"""

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger("spellscribe")

ENV_PREFIX = "SPELLSCRIBE_"


class ConverterSettings(BaseModel):
    """Settings controlling a conversion run.

    Values come from ``SPELLSCRIBE_*`` environment variables (optionally
    through a ``.env`` file); command line flags override them.
    """

    output_extension: str = Field(
        default="yml",
        min_length=1,
        description="Extension of the written spell files, without the dot"
    )
    keep_going: bool = Field(
        default=False,
        description="Record failed spells and continue instead of aborting the batch"
    )
    stable_ids: bool = Field(
        default=False,
        description="Derive spell ids from source, name and page instead of generating random ones"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level name (DEBUG, INFO, WARNING, ERROR)"
    )

    @field_validator("output_extension")
    @classmethod
    def strip_leading_dot(cls, v: str) -> str:
        return v.lstrip(".")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


def load_settings(use_dotenv: bool = True) -> ConverterSettings:
    """Build settings from the environment.

    Args:
        use_dotenv: Load a ``.env`` file from the working directory first.

    Returns:
        ConverterSettings with environment overrides applied.
    """
    if use_dotenv and not load_dotenv():
        logger.debug("No .env file found, using process environment only")

    values: dict[str, str] = {}
    for name in ConverterSettings.model_fields:
        env_value = os.getenv(f"{ENV_PREFIX}{name.upper()}")
        if env_value is not None:
            values[name] = env_value

    return ConverterSettings(**values)


__all__ = [
    "ConverterSettings",
    "load_settings",
]
