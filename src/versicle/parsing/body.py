"""Body compiler: folds a marker stream into text plus style blocks.

State machine over the marker sequence. Each marker is classified
(versicle.parsing.categories) and dispatched with a single match; paragraph
level markers share categories so that mutually exclusive markers close one
another, character spans nest by kind, and notes are delegated to the
footnote/cross-reference sub-compilers.

Thread Safety:
BodyCompiler holds only its immutable config. Each compile() call builds its
own private state, so one compiler can be shared.

"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace

from versicle.config import DEFAULT_CONFIG, ParseConfig
from versicle.markers import Marker
from versicle.nodes import (
    ChapterBlock,
    Document,
    ParagraphBlock,
    StyleBlock,
    TableCellBlock,
    VerseBlock,
    VirtualBlock,
)
from versicle.parsing.categories import (
    CELL_ALIGNMENT,
    CHAPTER,
    CLASS_CATEGORIES,
    LIST,
    LIST_ENTRY,
    LIST_ITEMS,
    PARAGRAPH_LEVEL,
    TABLE,
    TABLE_CELL,
    TABLE_ROW,
    VERSE,
    MarkerClass,
    classify,
)
from versicle.parsing.notes import parse_cross_reference, parse_footnote
from versicle.parsing.styling import StyleBuilder, apply_character_marker
from versicle.refs import verse_ref
from versicle.utils.logger import get_logger

logger = get_logger(__name__)

_LIST_ITEM_KINDS = frozenset({"li", "lim"})


class BodyCompiler:
    """Compiles markers into a Document.

    Usage:
            >>> from versicle.lexer import lex
            >>> doc = BodyCompiler().compile(lex("\\\\p\\\\v 1 Hello"), book="GEN", chapter=1)
            >>> doc.text
        'Hello'

    """

    __slots__ = ("_config",)

    def __init__(self, config: ParseConfig | None = None) -> None:
        self._config = config or DEFAULT_CONFIG

    def compile(
        self,
        markers: Iterable[Marker],
        *,
        book: str | None = None,
        chapter: int | None = None,
    ) -> Document:
        """Compile *markers* into a Document.

        Args:
            markers: Marker sequence (consumed once)
            book: Book id used for references until an ``\\id`` marker
            chapter: Chapter number until the first ``\\c`` marker

        Returns:
            Document with all blocks closed and sorted; data errors are
            collected on ``errors``, never raised.
        """
        compilation = _Compilation(self._config, book, chapter)
        return compilation.run(list(markers))


class _Compilation:
    """Per-call compiler state."""

    __slots__ = ("_metadata", "_builder", "_book", "_chapter")

    def __init__(self, config: ParseConfig, book: str | None, chapter: int | None) -> None:
        self._metadata = config.metadata
        self._builder = StyleBuilder()
        self._book = book
        self._chapter = chapter

    def run(self, markers: Sequence[Marker]) -> Document:
        index = 0
        while index < len(markers):
            index = self._compile_marker(markers, index)

        builder = self._builder
        text, styling = builder.finish()
        logger.debug(
            "Compiled %d markers: %d chars, %d blocks, %d errors",
            len(markers),
            len(text),
            len(styling),
            len(builder.errors),
        )
        return Document(text=text, styling=styling, errors=tuple(builder.errors))

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _compile_marker(self, markers: Sequence[Marker], index: int) -> int:
        """Compile ``markers[index]``; returns the index of the next marker."""
        marker = markers[index]
        builder = self._builder
        cls = classify(marker.kind, self._metadata)

        if marker.closing and cls not in (MarkerClass.CHARACTER, MarkerClass.UNKNOWN):
            builder.push_error(marker, "Closing marker without an open span")
            builder.append(marker.text)
            return index + 1

        match cls:
            case MarkerClass.PARAGRAPH | MarkerClass.POETRY | MarkerClass.HEADING:
                self._end_paragraph()
                builder.close_all_of((LIST, LIST_ITEMS, TABLE))
                self._open_paragraph(CLASS_CATEGORIES[cls], marker)

            case MarkerClass.LIST_ENTRY:
                self._end_paragraph()
                builder.close(TABLE)
                self._open_virtual(LIST)
                if marker.kind in _LIST_ITEM_KINDS:
                    self._open_virtual(LIST_ITEMS)
                else:
                    builder.close(LIST_ITEMS)
                self._open_paragraph(LIST_ENTRY, marker)

            case MarkerClass.TABLE_ROW:
                self._end_paragraph()
                builder.close_all_of((LIST, LIST_ITEMS))
                self._open_virtual(TABLE)
                start = builder.length
                builder.open(TABLE_ROW, StyleBlock(min=start, max=start, kind=marker.kind))
                builder.append(marker.text)

            case MarkerClass.TABLE_CELL:
                self._table_cell(marker)

            case MarkerClass.CHARACTER:
                if marker.kind == "ca" and not marker.closing:
                    self._alternate_chapter(marker)
                apply_character_marker(builder, marker, builder.push_error)

            case MarkerClass.VERSE:
                self._verse_marker(marker)

            case MarkerClass.CHAPTER:
                self._chapter_marker(marker)

            case MarkerClass.FOOTNOTE | MarkerClass.CROSS_REFERENCE:
                compile_note = parse_footnote if cls is MarkerClass.FOOTNOTE else parse_cross_reference
                next_index, note, trailing = compile_note(
                    markers,
                    index,
                    book=self._book,
                    metadata=self._metadata,
                    push_error=builder.push_error,
                )
                at = builder.length
                builder.add(replace(note, min=at, max=at))
                builder.append(trailing)
                return next_index

            case MarkerClass.IDENTIFICATION:
                if marker.kind == "id":
                    if marker.data is None:
                        builder.push_error(marker, "Book identification marker is missing its book id")
                    else:
                        self._book = marker.data
                logger.debug("Skipping identification marker %s", marker.tag)

            case MarkerClass.UNKNOWN:
                builder.push_error(marker, f"Unknown or out-of-context marker kind: {marker.kind}")

        return index + 1

    # =========================================================================
    # Handlers
    # =========================================================================

    def _end_paragraph(self) -> None:
        """Close every paragraph-level block and open character span."""
        self._builder.close_characters()
        self._builder.close_all_of(PARAGRAPH_LEVEL)

    def _open_paragraph(self, category: str, marker: Marker) -> None:
        builder = self._builder
        start = builder.length
        builder.open(
            category,
            ParagraphBlock(min=start, max=start, kind=marker.kind, level=marker.level),
        )
        builder.append(marker.text)

    def _open_virtual(self, category: str) -> None:
        """Open the virtual wrapper *category* unless it is already open."""
        if not self._builder.is_open(category):
            start = self._builder.length
            self._builder.open(category, VirtualBlock(min=start, max=start, kind=category))

    def _table_cell(self, marker: Marker) -> None:
        builder = self._builder
        if not builder.is_open(TABLE_ROW):
            builder.push_error(marker, "Table cell outside of a table row")
        builder.close_characters()
        start = builder.length
        builder.open(
            TABLE_CELL,
            TableCellBlock(
                min=start,
                max=start,
                kind=marker.kind,
                column=marker.level,
                align=CELL_ALIGNMENT[marker.kind],  # type: ignore[arg-type]
            ),
        )
        builder.append(marker.text)

    def _verse_marker(self, marker: Marker) -> None:
        builder = self._builder
        builder.close(VERSE)

        if self._chapter is None:
            # Reported once; later verses share chapter 0
            builder.push_error(marker, "Verse marker found before any chapter marker")
            self._chapter = 0
        chapter = self._chapter

        ref = verse_ref(self._book, chapter, marker.data) if marker.data is not None else None
        if ref is None:
            builder.push_error(marker, f"Verse marker has no usable verse number: {marker.data!r}")
        else:
            start = builder.length
            builder.open(VERSE, VerseBlock(min=start, max=start, kind="v", ref=ref))
        builder.append(marker.text)

    def _chapter_marker(self, marker: Marker) -> None:
        builder = self._builder
        builder.close_all_of((VERSE, CHAPTER))

        if marker.data is None:
            builder.push_error(marker, "Chapter marker is missing its chapter number")
        else:
            self._chapter = int(marker.data)
            start = builder.length
            builder.open(CHAPTER, ChapterBlock(min=start, max=start, kind="c", chapter=self._chapter))
        builder.append(marker.text)

    def _alternate_chapter(self, marker: Marker) -> None:
        """Record ``\\ca`` data on the open chapter block."""
        if marker.data is None:
            return
        builder = self._builder
        block = builder.current(CHAPTER)
        if block is None:
            builder.push_error(marker, "Alternate chapter number outside of a chapter")
            return
        builder.update(CHAPTER, replace(block, alt=int(marker.data)))


def compile_markers(
    markers: Iterable[Marker],
    *,
    book: str | None = None,
    chapter: int | None = None,
    config: ParseConfig | None = None,
) -> Document:
    """Compile a marker sequence (convenience wrapper around BodyCompiler)."""
    return BodyCompiler(config).compile(markers, book=book, chapter=chapter)
