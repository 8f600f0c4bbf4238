"""Document serialization: JSON-compatible dicts for compiled documents.

Two shapes:
- Plain (``to_dict(doc)``): fields only, ``None`` fields omitted. The shape
  consumers of the compiler output expect, e.g.
  ``{"text": "", "styling": [{"kind": "f", "min": 0, "max": 0, ...}]}``
- Typed (``to_dict(doc, typed=True)``, always used by ``to_json``): adds a
  ``_type`` discriminator to every value so ``from_dict``/``from_json`` can
  rebuild the frozen dataclasses.

Example:
    from versicle import parse
    from versicle.serialization import to_json, from_json

    doc = parse("\\\\c 1 \\\\p \\\\v 1 In the beginning")
    assert from_json(to_json(doc)) == doc

Thread Safety:
    All functions are pure.

"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from typing import Any

from versicle.markers import LevelRange, Marker
from versicle.nodes import (
    ChapterBlock,
    CharacterBlock,
    Document,
    NoteBlock,
    NoteVerseBlock,
    ParagraphBlock,
    ParserError,
    ReferenceBlock,
    StyleBlock,
    TableCellBlock,
    VerseBlock,
    VirtualBlock,
)
from versicle.refs import BibleRef, BibleRefRange

# Registry of type names to classes for deserialization
_VALUE_TYPES: dict[str, type] = {
    cls.__name__: cls
    for cls in (
        Document,
        ParserError,
        Marker,
        LevelRange,
        BibleRef,
        BibleRefRange,
        StyleBlock,
        ParagraphBlock,
        CharacterBlock,
        TableCellBlock,
        VerseBlock,
        ChapterBlock,
        ReferenceBlock,
        NoteVerseBlock,
        VirtualBlock,
        NoteBlock,
    )
}


def to_dict(value: Any, *, typed: bool = False) -> dict[str, Any]:
    """Convert a Document (or any block, marker or error) to a dict.

    Args:
        value: A Versicle dataclass value.
        typed: Add ``_type`` discriminators for ``from_dict``.

    Returns:
        Dict of the value's fields; ``None`` fields are omitted.

    """
    result: dict[str, Any] = {"_type": type(value).__name__} if typed else {}

    for f in fields(value):
        field_value = getattr(value, f.name)
        if field_value is None:
            continue
        result[f.name] = _serialize_value(field_value, typed)

    return result


def _serialize_value(value: Any, typed: bool) -> Any:
    """Serialize a single field value."""
    if is_dataclass(value) and not isinstance(value, type):
        return to_dict(value, typed=typed)
    if isinstance(value, tuple):
        return [_serialize_value(item, typed) for item in value]
    if isinstance(value, Mapping):
        return {str(k): _serialize_value(v, typed) for k, v in value.items()}
    # Primitives: str, int, bool
    return value


def from_dict(data: Mapping[str, Any]) -> Any:
    """Reconstruct a typed value from a dict produced by ``to_dict(..., typed=True)``.

    Raises:
        ValueError: If ``_type`` is missing or unknown.

    """
    type_name = data.get("_type")
    if type_name is None:
        msg = "Missing '_type' field in serialized value"
        raise ValueError(msg)

    value_cls = _VALUE_TYPES.get(type_name)
    if value_cls is None:
        msg = f"Unknown value type: {type_name!r}"
        raise ValueError(msg)

    kwargs: dict[str, Any] = {}
    for f in fields(value_cls):
        if f.name not in data:
            continue
        kwargs[f.name] = _deserialize_value(data[f.name])

    return value_cls(**kwargs)


def _deserialize_value(value: Any) -> Any:
    """Deserialize a single field value."""
    if isinstance(value, dict):
        if "_type" in value:
            return from_dict(value)
        # Attribute mapping
        return {k: _deserialize_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return tuple(_deserialize_value(item) for item in value)
    return value


def to_json(doc: Document, *, indent: int | None = None) -> str:
    """Serialize a Document to a JSON string.

    Output is typed and deterministic (sorted keys).

    Args:
        doc: Document to serialize.
        indent: JSON indentation level (None for compact).

    """
    return json.dumps(to_dict(doc, typed=True), sort_keys=True, indent=indent, ensure_ascii=False)


def from_json(data: str) -> Document:
    """Deserialize a Document from a JSON string produced by ``to_json``.

    Raises:
        ValueError: If the JSON doesn't represent a Document.

    """
    raw = json.loads(data)
    value = from_dict(raw)
    if not isinstance(value, Document):
        msg = f"Expected Document, got {type(value).__name__}"
        raise ValueError(msg)
    return value
