"""Marker records and per-kind lexical tables.

A Marker is one backslash-prefixed tag occurrence plus its modifiers (level,
nesting, closing), inline data and trailing free text.

Thread Safety:
Marker and LevelRange are frozen. The tables are module-level constants.

"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class LevelRange:
    """A level given as a range, e.g. ``\\tc1-3`` for a cell spanning columns 1 to 3."""

    start: int
    end: int

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


Level = int | LevelRange


@dataclass(frozen=True, slots=True)
class Marker:
    """A lexed marker occurrence.

    Attributes:
        kind: Marker identifier without backslash, "+", level or "*", e.g. "mt"
        level: Level suffix (``\\mt2`` -> 2, ``\\tc1-2`` -> LevelRange(1, 2));
            None when absent (which USFM treats as level 1)
        nested: True for ``\\+kind`` markers, nested inside the open span
            rather than implicitly closing it
        closing: True for ``\\kind*`` markers
        data: Fixed-format value following the marker, e.g. "1" for ``\\c 1``
        text: Free text following the marker up to the next marker
        attributes: Word-level attributes after "|", e.g. {"lemma": "grace"}
        offset: Source offset of the backslash (not compared)

    """

    kind: str
    level: Level | None = None
    nested: bool = False
    closing: bool = False
    data: str | None = None
    text: str | None = None
    attributes: Mapping[str, str] | None = None
    offset: int = field(default=-1, compare=False, repr=False)

    @property
    def tag(self) -> str:
        """The marker as written in USFM, e.g. ``\\+nd*``."""
        level = "" if self.level is None else str(self.level)
        return f"\\{'+' if self.nested else ''}{self.kind}{level}{'*' if self.closing else ''}"


# =============================================================================
# Marker grammar
# =============================================================================

# \ [+] kind [level | level-level] [*]
MARKER_RE = re.compile(r"\\(\+)?([a-z]+)(?:(\d+)(?:-(\d+))?)?(\*)?")

# Cheap kind extraction for lookahead (whitespace significance)
MARKER_KIND_RE = re.compile(r"\\\+?([a-z]+)")


# =============================================================================
# Inline data
# =============================================================================

# Patterns are anchored at the first data word; only "ide" may run past it.
_INT = re.compile(r"[0-9]+")
_VERSE = re.compile(r"[0-9]+(?:-[0-9]+)?")
# chapter:verse, optionally a verse range and a trailing ":" (e.g. "12:3-4:")
_CHAPTER_VERSE = re.compile(r"\d+[:.v]\d+(?:-\d+)?:?")
_CALLER = re.compile(r"[+\-a-zA-Z0-9]")

MARKER_DATA_PATTERNS: dict[str, re.Pattern[str]] = {
    "c": _INT,
    "ca": _INT,
    "sts": _INT,
    # Usually a single verse; inconsistent versifications combine verses (28-29)
    "v": _VERSE,
    "fv": _VERSE,
    "fr": _CHAPTER_VERSE,
    "xo": _CHAPTER_VERSE,
    "id": re.compile(r"[A-Za-z1-9]{3}"),
    # Encoding name, e.g. "UTF-8" or "Custom (FONT.TTF)"
    "ide": re.compile(r"Custom \([^)\\|\n]*\)|[A-Za-z0-9-]+"),
    # "+" generated caller, "-" no caller, otherwise a literal caller
    "f": _CALLER,
    "fe": _CALLER,
    "ef": _CALLER,
    "x": _CALLER,
    "ex": _CALLER,
}

# Attribute key used for keyless attribute values, e.g. \w gracious|grace
DEFAULT_ATTRIBUTES: dict[str, str] = {
    "w": "lemma",
    "rb": "gloss",
    "xt": "link-href",
    "jmp": "link-href",
    "ref": "loc",
}


def get_data_pattern(kind: str, closing: bool = False) -> re.Pattern[str] | None:
    """Get the pattern for the inline data following a marker kind.

    Closing markers never carry data.
    """
    if closing:
        return None
    return MARKER_DATA_PATTERNS.get(kind)


def get_default_attribute(kind: str) -> str | None:
    """Get the attribute key that keyless attribute values of *kind* map to."""
    return DEFAULT_ATTRIBUTES.get(kind)
