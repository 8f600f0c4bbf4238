"""Footnote and cross-reference sub-compilers.

A note (``\\f ... \\f*``, ``\\x ... \\x*``) is compiled into its own
sub-document: restricted to the note's marker vocabulary, with gap indices
relative to the note's text. The body compiler anchors the result as a
zero-width NoteBlock in the parent text.

Both sub-compilers are plain functions returning
``(next marker index, note block, trailing text after the closing marker)``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from versicle.markers import Marker
from versicle.metadata import MarkerMetadata
from versicle.nodes import (
    CharacterBlock,
    NoteBlock,
    NoteVerseBlock,
    ReferenceBlock,
    StyleBlock,
)
from versicle.parsing.categories import MarkerClass, classify, is_block_level
from versicle.parsing.styling import PushError, StyleBuilder, apply_character_marker
from versicle.refs import chapter_verse_ref, parse_int_or_range

CONTENT = "content"

# Markers that cannot occur inside a note; meeting one means the note was
# never closed.
_NOTE_BREAKING = frozenset(
    {
        MarkerClass.VERSE,
        MarkerClass.CHAPTER,
        MarkerClass.IDENTIFICATION,
        MarkerClass.FOOTNOTE,
        MarkerClass.CROSS_REFERENCE,
    }
)


@dataclass(frozen=True, slots=True)
class NoteVocabulary:
    """Marker kinds legal inside one kind of note.

    Attributes:
        content: Mutually exclusive content kinds sharing one category; each
            implicitly closes the previous one
        paired: Kinds that need an explicit closing marker
        reference: Content kind whose data is a chapter:verse reference

    """

    content: frozenset[str]
    paired: frozenset[str]
    reference: str


FOOTNOTE_VOCABULARY = NoteVocabulary(
    content=frozenset({"fr", "fq", "fqa", "fk", "fl", "fw", "fp", "ft"}),
    paired=frozenset({"fv", "fdc", "fm"}),
    reference="fr",
)

CROSS_REFERENCE_VOCABULARY = NoteVocabulary(
    content=frozenset({"xo", "xk", "xq", "xt", "xta"}),
    paired=frozenset({"xop", "xot", "xnt", "xdc", "rq"}),
    reference="xo",
)


def parse_footnote(
    markers: Sequence[Marker],
    index: int,
    *,
    book: str | None,
    metadata: MarkerMetadata,
    push_error: PushError,
) -> tuple[int, NoteBlock, str]:
    """Compile the footnote opened by ``markers[index]`` (``\\f``, ``\\fe`` or ``\\ef``).

    Args:
        markers: Full marker sequence
        index: Index of the opening marker
        book: Current book id, used for ``\\fr`` references
        metadata: Marker metadata for classifying character kinds
        push_error: Receives data errors

    Returns:
        Index of the next marker to compile, the footnote block (anchored at
        0; the caller positions it) and the text following the closing marker.
    """
    return _compile_note(markers, index, FOOTNOTE_VOCABULARY, book, metadata, push_error)


def parse_cross_reference(
    markers: Sequence[Marker],
    index: int,
    *,
    book: str | None,
    metadata: MarkerMetadata,
    push_error: PushError,
) -> tuple[int, NoteBlock, str]:
    """Compile the cross reference opened by ``markers[index]`` (``\\x`` or ``\\ex``).

    See parse_footnote for arguments and return value.
    """
    return _compile_note(markers, index, CROSS_REFERENCE_VOCABULARY, book, metadata, push_error)


def _compile_note(
    markers: Sequence[Marker],
    index: int,
    vocabulary: NoteVocabulary,
    book: str | None,
    metadata: MarkerMetadata,
    push_error: PushError,
) -> tuple[int, NoteBlock, str]:
    opener = markers[index]
    caller = opener.data
    if caller is None:
        push_error(opener, "Note opening marker must have data to specify the caller")
        caller = ""

    builder = StyleBuilder()
    builder.append(opener.text)
    trailing = ""
    closed = False

    index += 1
    while index < len(markers):
        marker = markers[index]

        if marker.kind == opener.kind and marker.closing:
            trailing = marker.text or ""
            index += 1
            closed = True
            break

        kind = marker.kind
        if kind in vocabulary.content:
            _content_marker(builder, marker, vocabulary, book, push_error)
        elif kind in vocabulary.paired:
            _paired_marker(builder, marker, push_error)
        else:
            cls = classify(kind, metadata)
            if cls is MarkerClass.CHARACTER:
                apply_character_marker(builder, marker, push_error)
            elif cls in _NOTE_BREAKING or is_block_level(cls):
                if marker.closing and cls in (MarkerClass.FOOTNOTE, MarkerClass.CROSS_REFERENCE):
                    # \fe ... \f*: treat the mismatched closer as the end
                    push_error(marker, f"Mismatched closing marker for \\{opener.kind} note")
                    trailing = marker.text or ""
                    index += 1
                    closed = True
                else:
                    push_error(opener, f"Unterminated \\{opener.kind} note, ended by {marker.tag}")
                    closed = True
                break
            else:
                push_error(marker, f"Skipping unexpected marker kind within note context: {kind}")
        index += 1

    if not closed:
        push_error(opener, f"Unterminated \\{opener.kind} note at end of input")

    text, styling = builder.finish()
    note = NoteBlock(min=0, max=0, kind=opener.kind, caller=caller, text=text, styling=styling)
    return index, note, trailing


def _content_marker(
    builder: StyleBuilder,
    marker: Marker,
    vocabulary: NoteVocabulary,
    book: str | None,
    push_error: PushError,
) -> None:
    if marker.closing:
        current = builder.current(CONTENT)
        if current is not None and current.kind == marker.kind:
            builder.close(CONTENT)
        else:
            push_error(marker, f"Closing marker without an open \\{marker.kind} element")
        builder.append(marker.text)
        return

    builder.close_characters()
    start = builder.length
    block: StyleBlock
    if marker.kind == vocabulary.reference:
        ref = None
        if marker.data is None:
            push_error(marker, "Reference marker is missing its chapter:verse data")
        else:
            ref = chapter_verse_ref(book, marker.data)
            if ref is None:
                push_error(marker, f"Could not parse reference {marker.data!r}")
        block = ReferenceBlock(min=start, max=start, kind=marker.kind, ref=ref)
    elif marker.attributes:
        block = CharacterBlock(min=start, max=start, kind=marker.kind, attributes=marker.attributes)
    else:
        block = StyleBlock(min=start, max=start, kind=marker.kind)

    builder.open(CONTENT, block)
    builder.append(marker.text)


def _paired_marker(builder: StyleBuilder, marker: Marker, push_error: PushError) -> None:
    if marker.closing:
        if not builder.close(marker.kind):
            push_error(marker, f"Attempt to close \\{marker.kind}, but it is not currently open")
        builder.append(marker.text)
        return

    start = builder.length
    block: StyleBlock
    if marker.kind == "fv":
        verse = parse_int_or_range(marker.data) if marker.data is not None else None
        if verse is None:
            push_error(marker, "Footnote verse marker is missing its verse number")
        block = NoteVerseBlock(min=start, max=start, kind="fv", verse=verse)
    else:
        block = StyleBlock(min=start, max=start, kind=marker.kind)

    builder.open(marker.kind, block)
    builder.append(marker.text)
