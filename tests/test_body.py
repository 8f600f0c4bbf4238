"""Tests for versicle.parsing.BodyCompiler — paragraphs, verses, lists and tables."""

from versicle import parse
from versicle.lexer import lex
from versicle.markers import LevelRange, Marker
from versicle.nodes import (
    ChapterBlock,
    CharacterBlock,
    NoteBlock,
    ParagraphBlock,
    StyleBlock,
    TableCellBlock,
    VerseBlock,
    VirtualBlock,
)
from versicle.parsing import BodyCompiler, compile_markers
from versicle.refs import BibleRef, BibleRefRange


def _spans(doc, kind: str) -> list[tuple[int, int]]:  # type: ignore[no-untyped-def]
    return [(b.min, b.max) for b in doc.blocks(kind)]


class TestParagraphs:
    """Mutually exclusive paragraph-level markers."""

    def test_paragraph_closed_by_next_paragraph(self) -> None:
        doc = parse("\\p\\v 1 Hello World.\\pc Centered Text.", book="GEN", chapter=1)

        assert doc.success
        assert doc.text == "Hello World.Centered Text."
        assert doc.styling == (
            VerseBlock(0, 26, "v", ref=BibleRef("GEN", 1, 1)),
            ParagraphBlock(0, 12, "p"),
            ParagraphBlock(12, 26, "pc"),
        )

    def test_poetry_levels(self) -> None:
        doc = parse("\\c 1 \\q1 one \\q2 two \\b \\q1 three")

        assert doc.text == "onetwothree"
        assert [b for b in doc.styling if b.kind == "q"] == [
            ParagraphBlock(0, 3, "q", level=1),
            ParagraphBlock(3, 6, "q", level=2),
            ParagraphBlock(6, 11, "q", level=1),
        ]
        assert doc.blocks("b") == (ParagraphBlock(6, 6, "b"),)

    def test_heading_closes_poetry(self) -> None:
        doc = parse("\\c 1 \\q1 line \\s1 Heading \\p text")

        assert _spans(doc, "q") == [(0, 4)]
        assert _spans(doc, "s") == [(4, 11)]
        assert _spans(doc, "p") == [(11, 15)]

    def test_paragraph_closes_character_spans(self) -> None:
        doc = parse("\\c 1 \\p a \\nd LORD \\p b")

        assert doc.text == "a LORDb"
        assert doc.blocks("nd") == (CharacterBlock(2, 6, "nd"),)


class TestCharacterMarkers:
    """Character spans in body text."""

    def test_span_and_trailing_text(self) -> None:
        doc = parse("\\c 1 \\p \\v 1 Text \\nd LORD\\nd* here", book="GEN")

        assert doc.text == "Text LORD here"
        assert doc.blocks("nd") == (CharacterBlock(5, 9, "nd"),)

    def test_nested_spans(self) -> None:
        doc = parse("\\c 1 \\p \\add the \\+nd LORD\\+nd*\\add* God")

        assert doc.text == "the LORD God"
        assert doc.blocks("add") == (CharacterBlock(0, 8, "add"),)
        assert doc.blocks("nd") == (CharacterBlock(4, 8, "nd"),)

    def test_word_attributes(self) -> None:
        doc = parse('\\c 1 \\p \\w gracious|lemma="grace"\\w* Lord')

        assert doc.text == "gracious Lord"
        assert doc.blocks("w") == (CharacterBlock(0, 8, "w", attributes={"lemma": "grace"}),)

    def test_unmatched_closer_single_error(self) -> None:
        doc = parse("\\c 1 \\p a\\nd* b")

        assert doc.text == "a b"
        assert len(doc.errors) == 1
        assert doc.errors[0].marker == Marker(kind="nd", closing=True, text=" b")
        assert _spans(doc, "p") == [(0, 3)]

    def test_closing_paragraph_marker_is_error(self) -> None:
        doc = parse("\\c 1 \\p a\\p* b")

        assert doc.text == "a b"
        assert len(doc.errors) == 1
        assert "without an open span" in doc.errors[0].message


class TestVersesAndChapters:
    """Verse references and chapter extents."""

    def test_chapters_and_verses(self) -> None:
        doc = parse("\\c 1 \\p \\v 1 One \\v 2 Two \\c 2 \\p \\v 1 Three", book="GEN")

        assert doc.success
        assert doc.text == "OneTwoThree"
        assert doc.blocks("c") == (
            ChapterBlock(0, 6, "c", chapter=1),
            ChapterBlock(6, 11, "c", chapter=2),
        )
        assert doc.blocks("v") == (
            VerseBlock(0, 3, "v", ref=BibleRef("GEN", 1, 1)),
            VerseBlock(3, 6, "v", ref=BibleRef("GEN", 1, 2)),
            VerseBlock(6, 11, "v", ref=BibleRef("GEN", 2, 1)),
        )

    def test_verse_range(self) -> None:
        doc = parse("\\c 11 \\q2 \\v 15-16 text", book="SIR")

        (verse,) = doc.blocks("v")
        assert verse.ref == BibleRefRange(BibleRef("SIR", 11, 15), BibleRef("SIR", 11, 16))  # type: ignore[attr-defined]

    def test_id_sets_book(self) -> None:
        doc = parse("\\id MAT Some edition\n\\c 1\n\\p\n\\v 1 Hi")

        assert doc.success
        assert doc.text == "Hi"
        assert str(doc.blocks("v")[0].ref) == "MAT 1:1"  # type: ignore[attr-defined]

    def test_identification_markers_skipped(self) -> None:
        doc = parse("\\id GEN\n\\ide UTF-8\n\\h Genesis\n\\toc1 Genesis\n\\mt1 Genesis\n\\c 1")

        assert doc.success
        assert doc.text == "Genesis"
        assert _spans(doc, "mt") == [(0, 7)]

    def test_verse_before_chapter(self) -> None:
        doc = parse("\\p \\v 1 Hi", book="GEN")

        assert len(doc.errors) == 1
        assert doc.blocks("v") == (VerseBlock(0, 2, "v", ref=BibleRef("GEN", 0, 1)),)

    def test_verses_before_chapter_reported_once(self) -> None:
        doc = parse("\\p \\v 1 a \\v 2 b \\v 3 c", book="GEN")

        assert len(doc.errors) == 1
        assert [str(b.ref) for b in doc.blocks("v")] == ["GEN 0:1", "GEN 0:2", "GEN 0:3"]  # type: ignore[attr-defined]

    def test_alternate_chapter_number(self) -> None:
        doc = parse("\\c 1 \\ca 2\\ca* \\p \\v 1 a", book="GEN")

        assert doc.success
        assert doc.text == "a"
        assert doc.blocks("c") == (ChapterBlock(0, 1, "c", chapter=1, alt=2),)

    def test_alternate_chapter_outside_chapter(self) -> None:
        doc = parse("\\p \\ca 2\\ca* a")

        assert len(doc.errors) == 1
        assert "Alternate chapter" in doc.errors[0].message

    def test_starting_chapter_from_caller(self) -> None:
        doc = parse("\\p \\v 1 Hi", book="GEN", chapter=3)

        assert doc.success
        assert str(doc.blocks("v")[0].ref) == "GEN 3:1"  # type: ignore[attr-defined]


class TestLists:
    """List entries and virtual list wrappers."""

    def test_list_structure(self) -> None:
        doc = parse("\\c 1 \\lh Header \\li1 One \\li2 Two \\lf Footer \\p After")

        assert doc.success
        assert doc.text == "HeaderOneTwoFooterAfter"
        assert doc.blocks("list") == (VirtualBlock(0, 18, "list"),)
        assert doc.blocks("list_items") == (VirtualBlock(6, 12, "list_items"),)
        assert doc.blocks("lh") == (ParagraphBlock(0, 6, "lh"),)
        assert doc.blocks("li") == (
            ParagraphBlock(6, 9, "li", level=1),
            ParagraphBlock(9, 12, "li", level=2),
        )
        assert doc.blocks("lf") == (ParagraphBlock(12, 18, "lf"),)
        assert _spans(doc, "p") == [(18, 23)]

    def test_virtual_blocks_marked(self) -> None:
        doc = parse("\\c 1 \\li a")

        (wrapper,) = doc.blocks("list")
        assert isinstance(wrapper, VirtualBlock)
        assert wrapper.is_virtual


class TestTables:
    """Table rows, cells and the virtual table wrapper."""

    def test_table_structure(self) -> None:
        doc = parse("\\c 1 \\tr \\th1 A \\thr2 B \\tr \\tc1-2 C \\p D")

        assert doc.success
        assert doc.text == "A BCD"
        assert doc.blocks("table") == (VirtualBlock(0, 4, "table"),)
        assert _spans(doc, "tr") == [(0, 3), (3, 4)]
        assert doc.blocks("th") == (TableCellBlock(0, 2, "th", column=1, align="start"),)
        assert doc.blocks("thr") == (TableCellBlock(2, 3, "thr", column=2, align="end"),)
        assert doc.blocks("tc") == (TableCellBlock(3, 4, "tc", column=LevelRange(1, 2), align="start"),)
        assert _spans(doc, "p") == [(4, 5)]

    def test_cell_outside_row(self) -> None:
        doc = parse("\\c 1 \\p \\tcc1 x")

        assert len(doc.errors) == 1
        assert doc.blocks("tcc") == (TableCellBlock(0, 1, "tcc", column=1, align="center"),)


class TestNotesInBody:
    """Notes are anchored zero-width in the body text."""

    def test_footnote_anchor(self) -> None:
        doc = parse("\\c 1 \\p God\\f + \\ft note text\\f* created")

        assert doc.success
        assert doc.text == "God created"
        assert doc.blocks("f") == (
            NoteBlock(3, 3, "f", caller="+", text="note text", styling=(StyleBlock(0, 9, "ft"),)),
        )

    def test_footnote_only(self) -> None:
        doc = parse("\\f + \\ft Hello world\\f*")

        assert doc.text == ""
        assert doc.styling == (
            NoteBlock(0, 0, "f", caller="+", text="Hello world", styling=(StyleBlock(0, 11, "ft"),)),
        )
        assert doc.errors == ()

    def test_stray_note_closer(self) -> None:
        doc = parse("\\c 1 \\p a\\f* b")

        assert doc.text == "a b"
        assert len(doc.errors) == 1


class TestUnknownMarkers:
    """Unknown kinds are reported and skipped."""

    def test_unknown_kind(self) -> None:
        doc = parse("\\c 1 \\p Hi \\zz odd \\p more")

        assert doc.text == "Hi more"
        assert len(doc.errors) == 1
        assert doc.errors[0].marker.kind == "zz"

    def test_note_content_outside_note(self) -> None:
        doc = parse("\\c 1 \\p a \\ft b")

        assert len(doc.errors) == 1
        assert doc.text == "a "


class TestCompilerEntryPoints:
    """BodyCompiler and compile_markers."""

    def test_compile_markers(self) -> None:
        markers = list(lex("\\p\\v 1 Hello"))
        doc = compile_markers(markers, book="GEN", chapter=1)
        assert doc.text == "Hello"

    def test_compiler_reusable(self) -> None:
        compiler = BodyCompiler()
        first = compiler.compile(lex("\\c 1 \\p one"))
        second = compiler.compile(lex("\\c 1 \\p one"))
        assert first == second
        assert first.text == "one"

    def test_empty(self) -> None:
        doc = compile_markers([])
        assert doc.text == ""
        assert doc.styling == ()
        assert doc.success
