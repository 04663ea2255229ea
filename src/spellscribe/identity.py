"""
Spell id generation.

5etools records have no durable primary key, so each converted spell gets
a synthesized UUIDv4-shaped id. The random factory gives fresh ids on every
run; the stable factory derives the id from source, name and page so that
re-converting the same file reproduces the same ids.
"""

import hashlib
import uuid
from typing import Any, Callable

SpellIdFactory = Callable[[dict[str, Any]], str]


def random_spell_id(raw: dict[str, Any]) -> str:
    """Return a fresh random UUIDv4 string, ignoring the record."""
    return str(uuid.uuid4())


def stable_spell_id(raw: dict[str, Any]) -> str:
    """Return a UUIDv4-shaped id derived from the record's identity fields.

    The same ``source``, ``name`` and ``page`` always yield the same id.
    """
    key = f"{raw.get('source', '')}|{raw.get('name', '')}|{raw.get('page', '')}"
    digest = hashlib.sha256(key.encode("utf-8")).digest()
    return str(uuid.UUID(bytes=digest[:16], version=4))


def get_id_factory(stable: bool) -> SpellIdFactory:
    return stable_spell_id if stable else random_spell_id


__all__ = [
    "SpellIdFactory",
    "random_spell_id",
    "stable_spell_id",
    "get_id_factory",
]
