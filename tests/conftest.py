"""
Pytest configuration and fixtures for spellscribe tests.
"""

import json
import sys
from pathlib import Path

import pytest

# Add src directory to Python path to allow importing spellscribe
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_spell_file() -> Path:
    """Path to a small 5etools spell file."""
    return FIXTURES_DIR / "spells_sample.json"


@pytest.fixture
def sample_spells(sample_spell_file):
    """Raw spell records from the sample file."""
    with open(sample_spell_file, encoding="utf-8") as f:
        return json.load(f)["spell"]


@pytest.fixture
def fireball_raw():
    """Minimal Fireball record."""
    return {
        "name": "Fireball",
        "source": "PHB",
        "page": 241,
        "school": "V",
        "level": 3,
        "range": {"type": "point", "distance": {"type": "feet", "amount": 150}},
        "components": {"v": True, "s": True, "m": "a tiny ball of bat guano and sulfur"},
        "duration": [{"type": "instant"}],
        "time": [{"number": 1, "unit": "action"}],
    }
