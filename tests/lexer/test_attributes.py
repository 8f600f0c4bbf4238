"""Tests for versicle.lexer.parse_attributes."""

import pytest

from versicle.errors import MarkerAttributeError, VersicleError
from versicle.lexer import parse_attributes


class TestParseAttributes:
    """Attribute list grammar."""

    def test_empty(self) -> None:
        assert parse_attributes("w", "") == {}
        assert parse_attributes("w", "   ") == {}

    def test_keyed_values(self) -> None:
        assert parse_attributes("fig", 'src="a.png" size="col"') == {"src": "a.png", "size": "col"}

    def test_quoted_keyless_value(self) -> None:
        assert parse_attributes("w", '"grace"') == {"lemma": "grace"}

    def test_bare_keyless_value(self) -> None:
        assert parse_attributes("rb", "BB") == {"gloss": "BB"}

    def test_default_keys(self) -> None:
        assert parse_attributes("xt", "GEN.1.1") == {"link-href": "GEN.1.1"}
        assert parse_attributes("jmp", '"#x"') == {"link-href": "#x"}
        assert parse_attributes("ref", '"GEN 1:1"') == {"loc": "GEN 1:1"}

    def test_value_keeps_spaces_and_commas(self) -> None:
        assert parse_attributes("w", 'strong="H1234, G5485"') == {"strong": "H1234, G5485"}

    def test_custom_key(self) -> None:
        assert parse_attributes("w", 'x-occurrence="1"') == {"x-occurrence": "1"}

    def test_keyless_without_default(self) -> None:
        with pytest.raises(MarkerAttributeError) as exc_info:
            parse_attributes("fig", "test")
        assert exc_info.value.kind == "fig"
        assert isinstance(exc_info.value, VersicleError)

    def test_invalid_key(self) -> None:
        with pytest.raises(MarkerAttributeError):
            parse_attributes("w", 'a.b="x"')

    def test_unquoted_value(self) -> None:
        with pytest.raises(MarkerAttributeError):
            parse_attributes("w", "lemma=grace")

    def test_unterminated_quote(self) -> None:
        with pytest.raises(MarkerAttributeError):
            parse_attributes("w", 'lemma="grace')
