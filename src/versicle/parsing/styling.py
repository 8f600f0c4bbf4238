"""Style-block utilities: ordering, the open-block set, and character spans.

StyleBuilder owns the text accumulator and every open block. Blocks are
opened as frozen values with a placeholder ``max`` and finalized with
``dataclasses.replace`` when they close, so nothing outside the builder ever
sees a half-built block.

Invariant: at most one open block per category at any time.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import replace

from versicle.markers import Marker
from versicle.nodes import CharacterBlock, ParserError, StyleBlock
from versicle.utils.logger import get_logger

logger = get_logger(__name__)

PushError = Callable[[Marker, str], None]

CHARACTER_PREFIX = "char:"


def style_block_sort_key(block: StyleBlock) -> tuple[int, int, str]:
    """Ascending min, then wider spans first, then kind (for determinism only)."""
    return (block.min, -block.max, block.kind)


def sort_style_blocks(blocks: Iterable[StyleBlock]) -> list[StyleBlock]:
    """Return *blocks* in deterministic order. Idempotent."""
    return sorted(blocks, key=style_block_sort_key)


class StyleBuilder:
    """Accumulates text and style blocks for one (sub-)document.

    Usage:
        >>> builder = StyleBuilder()
        >>> builder.open("paragraph", ParagraphBlock(0, 0, "p"))
        >>> builder.append("Hello")
        >>> builder.finish()
        ('Hello', (ParagraphBlock(min=0, max=5, kind='p', level=None),))

    """

    __slots__ = ("_parts", "_length", "_styling", "_open", "errors")

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._length = 0
        self._styling: list[StyleBlock] = []
        # category -> open block (max not yet final)
        self._open: dict[str, StyleBlock] = {}
        self.errors: list[ParserError] = []

    # =========================================================================
    # Text
    # =========================================================================

    @property
    def length(self) -> int:
        """Current text length, i.e. the gap index at the end of the text."""
        return self._length

    @property
    def text(self) -> str:
        return "".join(self._parts)

    def append(self, text: str | None) -> None:
        if text:
            self._parts.append(text)
            self._length += len(text)

    # =========================================================================
    # Blocks
    # =========================================================================

    def open(self, category: str, block: StyleBlock) -> None:
        """Open *block* in *category*, first closing the block already open there."""
        self.close(category)
        self._open[category] = block

    def close(self, category: str) -> bool:
        """Finalize the open block in *category* at the current text length.

        Returns:
            False if nothing was open in that category.
        """
        block = self._open.pop(category, None)
        if block is None:
            return False
        self._styling.append(replace(block, max=self._length))
        return True

    def update(self, category: str, block: StyleBlock) -> None:
        """Swap the block open in *category* for *block*; it stays open."""
        self._open[category] = block

    def close_all_of(self, categories: Iterable[str]) -> None:
        for category in categories:
            self.close(category)

    def close_characters(self) -> None:
        """Close every open character span."""
        self.close_all_of([c for c in self._open if c.startswith(CHARACTER_PREFIX)])

    def close_all(self) -> None:
        """Close every open block; not an error at end of a (sub-)document."""
        for category in list(self._open):
            self.close(category)

    def is_open(self, category: str) -> bool:
        return category in self._open

    def current(self, category: str) -> StyleBlock | None:
        """The block open in *category*, if any."""
        return self._open.get(category)

    @property
    def open_categories(self) -> frozenset[str]:
        return frozenset(self._open)

    def add(self, block: StyleBlock) -> None:
        """Add an already finished block, e.g. a note anchor."""
        self._styling.append(block)

    def push_error(self, marker: Marker, message: str) -> None:
        logger.debug("%s at offset %d: %s", marker.tag, marker.offset, message)
        self.errors.append(ParserError(marker, message))

    def finish(self) -> tuple[str, tuple[StyleBlock, ...]]:
        """Close all open blocks and return the text and sorted styling."""
        self.close_all()
        return self.text, tuple(sort_style_blocks(self._styling))


def apply_character_marker(builder: StyleBuilder, marker: Marker, push_error: PushError) -> None:
    """Open or close a character span for *marker*.

    A non-nested opener implicitly closes every open span; a nested one
    (``\\+nd``) opens inside them. The span starts before the marker's text.
    A closing marker ends the span of its kind and its text follows the span.
    """
    category = CHARACTER_PREFIX + marker.kind
    if marker.closing:
        if not builder.close(category):
            push_error(marker, f"Closing marker without an open \\{marker.kind} span")
        builder.append(marker.text)
        return

    if not marker.nested:
        builder.close_characters()
    start = builder.length
    builder.open(
        category,
        CharacterBlock(
            min=start,
            max=start,
            kind=marker.kind,
            level=marker.level,
            attributes=marker.attributes,
        ),
    )
    builder.append(marker.text)
