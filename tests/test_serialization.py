"""Tests for versicle.serialization — plain dicts and typed JSON round-trip."""

import json

import pytest

from versicle import parse
from versicle.config import ParseConfig
from versicle.nodes import Document, StyleBlock
from versicle.serialization import from_dict, from_json, to_dict, to_json


class TestPlainDict:
    """The plain shape consumers read."""

    def test_footnote_document(self) -> None:
        doc = parse("\\f + \\ft Hello world\\f*")
        assert to_dict(doc) == {
            "text": "",
            "styling": [
                {
                    "min": 0,
                    "max": 0,
                    "kind": "f",
                    "caller": "+",
                    "text": "Hello world",
                    "styling": [{"min": 0, "max": 11, "kind": "ft"}],
                }
            ],
            "errors": [],
        }

    def test_verse_ref_and_none_fields(self) -> None:
        doc = parse("\\c 1 \\p \\v 1 Hi", book="GEN")
        blocks = to_dict(doc)["styling"]
        assert {"min": 0, "max": 2, "kind": "v", "ref": {"book": "GEN", "chapter": 1, "verse": 1}} in blocks
        # ParagraphBlock.level is None and omitted
        assert {"min": 0, "max": 2, "kind": "p"} in blocks

    def test_attributes(self) -> None:
        doc = parse('\\c 1 \\p \\w grace|lemma="g"\\w*')
        (w,) = [b for b in to_dict(doc)["styling"] if b["kind"] == "w"]
        assert w["attributes"] == {"lemma": "g"}

    def test_no_type_discriminator(self) -> None:
        assert "_type" not in to_dict(parse("\\c 1"))


class TestRoundTrip:
    """Typed dicts and JSON rebuild equal documents."""

    @pytest.mark.parametrize(
        "source",
        [
            "\\c 1 \\p \\v 1 Text \\nd LORD\\nd* here",
            "\\c 1 \\tr \\th1 A \\tc1-2 B",
            "\\c 1 \\lh H \\li1 a \\li2 b",
            "\\c 1 \\p a\\x - \\xo 1:2 \\xt Gen 3:4|link-href=\"GEN 3:4\"\\x* b",
            "\\c 1 \\p \\v 15-16 a\\f + \\fr 11:15-16 \\ft b\\fv 3\\fv*\\f*",
            "\\c 1 \\p a\\nd* b",
        ],
    )
    def test_json_round_trip(self, source: str) -> None:
        doc = parse(source, book="GEN")
        assert from_json(to_json(doc)) == doc

    def test_typed_dict_round_trip(self) -> None:
        doc = parse("\\c 1 \\p \\v 1 Text \\w a|b\\w*", book="GEN")
        assert from_dict(to_dict(doc, typed=True)) == doc

    def test_errors_round_trip(self) -> None:
        doc = parse("\\c x \\p a", config=ParseConfig(recover_lexer_errors=True))
        restored = from_json(to_json(doc))
        assert restored.errors == doc.errors
        assert restored.errors[0].marker.kind == "c"

    def test_json_deterministic(self) -> None:
        doc = parse("\\c 1 \\p \\v 1 a", book="GEN")
        assert to_json(doc) == to_json(parse("\\c 1 \\p \\v 1 a", book="GEN"))
        assert json.loads(to_json(doc))["_type"] == "Document"

    def test_non_ascii_preserved(self) -> None:
        doc = parse("\\c 1 \\p “אֱלֹהִ֑ים”")
        assert "אֱלֹהִ֑ים" in to_json(doc)
        assert from_json(to_json(doc)).text == doc.text


class TestErrors:
    """Invalid serialized input."""

    def test_missing_type(self) -> None:
        with pytest.raises(ValueError, match="_type"):
            from_dict({"text": ""})

    def test_unknown_type(self) -> None:
        with pytest.raises(ValueError, match="Unknown"):
            from_dict({"_type": "Nope"})

    def test_not_a_document(self) -> None:
        block = to_dict(StyleBlock(0, 1, "p"), typed=True)
        with pytest.raises(ValueError, match="Expected Document"):
            from_json(json.dumps(block))

    def test_document_from_dict(self) -> None:
        assert from_dict({"_type": "Document", "text": "x"}) == Document(text="x")
