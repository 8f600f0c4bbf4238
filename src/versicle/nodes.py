"""Typed document values for Versicle.

A compiled Document is a flat text buffer plus style blocks: interval
annotations over the buffer keyed by gap indices (gap 0 is before the first
character, so a block spanning [0, 1) decorates exactly the first character).

All values are frozen dataclasses with slots for:
- Immutability: Safe sharing across threads once compiled
- Memory efficiency: __slots__ reduces memory footprint
- Pattern matching: match statements work naturally

Block Hierarchy:
StyleBlock (base: min, max, kind)
├── ParagraphBlock     p, m, q1, s2, li1, ... (level = indent/heading level)
├── CharacterBlock     w, nd, add, fig, ... (level, attributes)
├── TableCellBlock     th/tc variants (column, align)
├── VerseBlock         v (ref)
├── ChapterBlock       c (chapter)
├── ReferenceBlock     fr, xo inside notes (ref)
├── NoteVerseBlock     fv inside footnotes (verse)
├── VirtualBlock       list, list_items, table wrappers (no text of their own)
└── NoteBlock          f, fe, ef, x, ex (embedded sub-document)

"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal

from versicle.markers import Level, Marker
from versicle.refs import Ref

# =============================================================================
# Style blocks
# =============================================================================


@dataclass(frozen=True, slots=True)
class StyleBlock:
    """Base class for all style blocks.

    Attributes:
        min: Start gap index into the owning text buffer
        max: End gap index; ``min <= max <= len(text)``
        kind: Marker kind that produced the block, or a virtual kind

    """

    min: int
    max: int
    kind: str


@dataclass(frozen=True, slots=True)
class ParagraphBlock(StyleBlock):
    """Paragraph, poetry line, heading or list entry.

    ``level`` is the marker's level suffix (indent for q/pi/li, heading level
    for s/mt), or None when the marker had none.

    """

    level: Level | None = None


@dataclass(frozen=True, slots=True)
class CharacterBlock(StyleBlock):
    """Character-level span, e.g. ``\\nd LORD\\nd*`` or ``\\w grace|lemma="x"\\w*``."""

    level: Level | None = None
    attributes: Mapping[str, str] | None = None


@dataclass(frozen=True, slots=True)
class TableCellBlock(StyleBlock):
    """Table header or body cell.

    ``column`` may be a range for a cell spanning several columns
    (``\\tc1-3``).

    """

    column: Level | None = None
    align: Literal["start", "center", "end"] = "start"


@dataclass(frozen=True, slots=True)
class VerseBlock(StyleBlock):
    """Text of one verse (or a combined verse range)."""

    ref: Ref


@dataclass(frozen=True, slots=True)
class ChapterBlock(StyleBlock):
    """Extent of one chapter.

    ``alt`` is the alternate chapter number given by ``\\ca``, if any.
    """

    chapter: int
    alt: int | None = None


@dataclass(frozen=True, slots=True)
class ReferenceBlock(StyleBlock):
    """Origin reference of a footnote (``\\fr``) or cross reference (``\\xo``)."""

    ref: Ref | None = None


@dataclass(frozen=True, slots=True)
class NoteVerseBlock(StyleBlock):
    """Verse number inside a footnote (``\\fv``)."""

    verse: Level | None = None


@dataclass(frozen=True, slots=True)
class VirtualBlock(StyleBlock):
    """Synthesized wrapper over a contiguous list or table.

    Contributes no text of its own; lets consumers locate a whole structure
    without re-deriving it from its rows or entries.

    """

    is_virtual: bool = True


@dataclass(frozen=True, slots=True)
class NoteBlock(StyleBlock):
    """Footnote or cross reference, anchored zero-width in the parent text.

    ``text`` and ``styling`` form the note's own sub-document; gap indices
    in ``styling`` refer to ``text``, not to the parent buffer.

    """

    caller: str
    text: str
    styling: tuple[StyleBlock, ...] = ()


# =============================================================================
# Document
# =============================================================================


@dataclass(frozen=True, slots=True)
class ParserError:
    """Non-fatal diagnostic tied to the offending marker."""

    marker: Marker
    message: str

    def __str__(self) -> str:
        return f"{self.marker.tag}: {self.message}"


@dataclass(frozen=True, slots=True)
class Document:
    """A compiled USFM document.

    Attributes:
        text: Flat text buffer
        styling: Style blocks in deterministic order (see sort_style_blocks)
        errors: Data errors met while compiling; the document is best-effort
            when non-empty

    """

    text: str
    styling: tuple[StyleBlock, ...] = ()
    errors: tuple[ParserError, ...] = ()

    @property
    def success(self) -> bool:
        """True if the document compiled without errors."""
        return not self.errors

    def blocks(self, kind: str) -> tuple[StyleBlock, ...]:
        """Top-level style blocks of the given kind, in document order."""
        return tuple(b for b in self.styling if b.kind == kind)

    def slice(self, block: StyleBlock) -> str:
        """Text covered by *block*."""
        return self.text[block.min : block.max]
