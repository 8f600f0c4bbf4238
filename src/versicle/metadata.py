"""Per-marker metadata consumed by the lexer and compiler.

The metadata maps each marker kind to the paragraph/character/note style type
USFM assigns it, the markers it may occur under, and whether its text is
publishable. It is normally produced offline from a USFM ``.sty`` file by a
separate tool and handed to Versicle as a mapping; ``MarkerMetadata.default()``
provides a built-in table for USFM 3 so no such file is required.

The lexer uses the style type to decide whitespace significance; the body
compiler uses it to categorize kinds it has no explicit rule for.

Thread Safety:
All types here are frozen; the underlying mapping is read-only.

"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any


class StyleType(Enum):
    """USFM style type of a marker."""

    # Paragraph markers end with the next paragraph marker
    PARAGRAPH = "paragraph"
    # Character markers occur in pairs, marking a span within a paragraph
    CHARACTER = "character"
    # Note markers occur in pairs around footnote/cross-reference content
    NOTE = "note"


@dataclass(frozen=True, slots=True)
class MarkerMeta:
    """Metadata for one marker kind.

    Attributes:
        style_type: Paragraph, character or note
        occurs_under: Kinds this marker may appear within
        publishable: True if the marker's text is part of the printed text

    """

    style_type: StyleType
    occurs_under: frozenset[str] = frozenset()
    publishable: bool = True


# =============================================================================
# Built-in USFM 3 table
# =============================================================================

_IDENTIFICATION = frozenset({"id", "ide", "sts", "rem", "h", "toc", "toca", "usfm"})

_PARAGRAPH_KINDS = frozenset(
    {
        # introductions
        "imt", "imte", "is", "ip", "ipi", "im", "imi", "ipq", "imq", "ipr",
        "iq", "ib", "ili", "iot", "io", "iex", "ie",
        # titles, headings, labels
        "mt", "mte", "ms", "mr", "s", "sr", "r", "d", "sp",
        # chapters
        "c", "cl", "cp", "cd",
        # paragraphs
        "p", "m", "po", "pr", "cls", "pmo", "pm", "pmc", "pmr", "pi", "mi",
        "nb", "pc", "ph", "lit", "b", "pb",
        # poetry
        "q", "qr", "qc", "qa", "qm", "qd",
        # lists and tables
        "lh", "li", "lf", "lim", "tr",
    }
)  # fmt: skip

_CHARACTER_KINDS = frozenset(
    {
        # chapter and verse
        "v", "ca", "va", "vp",
        # footnote content
        "fr", "fq", "fqa", "fk", "fl", "fw", "fp", "ft", "fv", "fdc", "fm",
        # cross reference content
        "xo", "xk", "xq", "xt", "xta", "xop", "xot", "xnt", "xdc", "rq",
        # special text
        "add", "bk", "dc", "k", "nd", "ord", "pn", "png", "addpn", "qt",
        "sig", "sls", "tl", "wj", "qs", "qac", "iqt", "ior", "lik", "liv",
        "litl",
        # character styling
        "em", "bd", "it", "bdit", "no", "sc", "sup",
        # word level
        "w", "wg", "wh", "wa", "rb", "pro", "fig", "ndx", "jmp", "ref",
        # table cells
        "th", "thr", "thc", "tc", "tcr", "tcc",
    }
)  # fmt: skip

_NOTE_KINDS = frozenset({"f", "fe", "ef", "x", "ex"})

_UNPUBLISHABLE = _IDENTIFICATION | {"fig", "ndx", "pb"}


def _builtin_entries() -> dict[str, MarkerMeta]:
    entries: dict[str, MarkerMeta] = {}
    for kinds, style_type in (
        (_IDENTIFICATION | _PARAGRAPH_KINDS, StyleType.PARAGRAPH),
        (_CHARACTER_KINDS, StyleType.CHARACTER),
        (_NOTE_KINDS, StyleType.NOTE),
    ):
        for kind in kinds:
            entries[kind] = MarkerMeta(
                style_type=style_type,
                publishable=kind not in _UNPUBLISHABLE,
            )
    return entries


# =============================================================================
# Metadata mapping
# =============================================================================


@dataclass(frozen=True, slots=True)
class MarkerMetadata(Mapping[str, MarkerMeta]):
    """Read-only mapping of marker kind to MarkerMeta.

    Usage:
            >>> meta = MarkerMetadata.default()
            >>> meta["p"].style_type
        <StyleType.PARAGRAPH: 'paragraph'>
            >>> meta.is_significant("v")
        True

    """

    entries: Mapping[str, MarkerMeta] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def __getitem__(self, kind: str) -> MarkerMeta:
        return self.entries[kind]

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def style_type(self, kind: str) -> StyleType | None:
        """Style type of *kind*, or None if the kind is unknown."""
        meta = self.entries.get(kind)
        return meta.style_type if meta is not None else None

    def is_significant(self, kind: str) -> bool:
        """True if whitespace before an opening *kind* marker is structural.

        Paragraph and verse boundaries are structurally meaningful, so the
        whitespace in front of them is not folded into the preceding text.
        """
        return kind == "v" or self.style_type(kind) is StyleType.PARAGRAPH

    def merged(self, other: Mapping[str, MarkerMeta]) -> MarkerMetadata:
        """Return new metadata with *other*'s entries overriding these."""
        return MarkerMetadata({**self.entries, **other})

    @classmethod
    def default(cls) -> MarkerMetadata:
        """Built-in metadata for USFM 3 markers."""
        return cls(_builtin_entries())

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, Any]]) -> MarkerMetadata:
        """Create metadata from the structure written by the ``.sty`` converter.

        Args:
            data: ``{kind: {"style_type": "paragraph", "occurs_under": [...],
                "publishable": true}}``. Missing fields take MarkerMeta defaults.

        Raises:
            ValueError: If a style_type is not paragraph, character or note.

        Example:
            >>> meta = MarkerMetadata.from_dict({"zx": {"style_type": "character"}})
            >>> meta.style_type("zx")
            <StyleType.CHARACTER: 'character'>

        """
        entries: dict[str, MarkerMeta] = {}
        for kind, raw in data.items():
            try:
                style_type = StyleType(str(raw.get("style_type", "paragraph")).lower())
            except ValueError:
                msg = f"Unknown style_type for marker {kind!r}: {raw.get('style_type')!r}"
                raise ValueError(msg) from None
            entries[kind] = MarkerMeta(
                style_type=style_type,
                occurs_under=frozenset(raw.get("occurs_under", ())),
                publishable=bool(raw.get("publishable", True)),
            )
        return cls(entries)

    @classmethod
    def from_json(cls, data: str) -> MarkerMetadata:
        """Create metadata from a JSON string (see from_dict)."""
        return cls.from_dict(json.loads(data))
