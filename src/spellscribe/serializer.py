"""
Tagged-tree serialization for spell models.

This is the single place where model values become plain dicts. Every
model renders as a dict whose first key, ``==``, holds the model's ``TAG``;
the remaining keys are its fields in declaration order, under their
serialization alias (``basic-rules``, ``col-labels``...) when one is set.
Fields holding ``None`` are left out.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel

from .base import SpellSerializationError


TAG_KEY = "=="

_SCALARS = (str, int, float, bool)


def to_tagged_tree(value: BaseModel) -> dict[str, Any]:
    """Render a model as a tagged dict.

    Args:
        value: Any model exposing a ``TAG`` class variable.

    Returns:
        Dict headed by ``{"==": TAG}`` followed by the serialized fields.

    Raises:
        SpellSerializationError: If the model has no tag or holds a value
            that has no tree representation.
    """
    model_cls = type(value)
    tag = getattr(model_cls, "TAG", None)
    if not tag:
        raise SpellSerializationError(f"{model_cls.__name__} has no variant tag")

    tree: dict[str, Any] = {TAG_KEY: tag}
    for name, field in model_cls.model_fields.items():
        item = getattr(value, name)
        if item is None:
            continue
        tree[field.serialization_alias or name] = _to_node(item)
    return tree


def _to_node(item: Any) -> Any:
    """Serialize one field value."""
    if isinstance(item, BaseModel):
        return to_tagged_tree(item)
    if isinstance(item, Enum):
        return item.value
    if item is None or isinstance(item, _SCALARS):
        return item
    if isinstance(item, (list, tuple)):
        return [_to_node(i) for i in item]
    if isinstance(item, dict):
        return {k: _to_node(v) for k, v in item.items()}
    raise SpellSerializationError(f"Cannot serialize value of type {type(item).__name__}: {item!r}")


__all__ = [
    "TAG_KEY",
    "to_tagged_tree",
]
