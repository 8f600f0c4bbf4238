"""Marker lexer: groups tokens into Marker records.

Consumes the token stream from the Tokenizer with one token of lookahead and
produces one Marker per marker occurrence, with its level, inline data,
trailing free text and word-level attributes attached.

Whitespace handling:
    Whitespace after an opening marker (and after its data) is a separator
    and is consumed. Every other whitespace run becomes a single space in
    the marker's text, unless it is followed by end of input, by "|", or by
    a *significant* marker (paragraph-style or \\v). That whitespace is
    structural and is dropped.

Thread Safety:
MarkerLexer instances are restartable but not thread-safe: lex() resets
the instance state on every call.

"""

from __future__ import annotations

import re
from collections.abc import Iterator

from versicle.config import DEFAULT_CONFIG, ParseConfig
from versicle.errors import (
    DataFormatError,
    GrammarError,
    MarkerAttributeError,
    UsfmSyntaxError,
)
from versicle.lexer.attributes import parse_attributes
from versicle.markers import (
    MARKER_KIND_RE,
    MARKER_RE,
    LevelRange,
    Marker,
    get_data_pattern,
)
from versicle.nodes import ParserError
from versicle.tokenizer import Tokenizer
from versicle.tokens import Token, TokenType
from versicle.utils.logger import get_logger
from versicle.utils.text import line_col

logger = get_logger(__name__)

BYTE_ORDER_MARK = "\ufeff"

_TEXT_TYPES = (TokenType.WORD, TokenType.WHITESPACE)


class MarkerLexer:
    """Lexer producing Marker records from USFM source.

    Usage:
            >>> for marker in MarkerLexer("\\\\c 1\\n\\\\v 1 In the beginning").lex():
            ...     print(marker)
        Marker(kind='c', level=None, nested=False, closing=False, data='1', ...)
        Marker(kind='v', ..., data='1', text='In the beginning', attributes=None)

    Errors:
        UsfmSyntaxError and GrammarError are always raised. DataFormatError
        and MarkerAttributeError are raised unless the config enables
        ``recover_lexer_errors``, in which case they are recorded on
        ``errors`` and lexing continues.

    """

    __slots__ = (
        "_source",
        "_source_file",
        "_config",
        "_tokens",
        "_current",
        "errors",
    )

    def __init__(
        self,
        source: str,
        config: ParseConfig | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize lexer with source text.

        Args:
            source: USFM source text (a leading byte-order mark is ignored)
            config: Parse configuration (defaults to DEFAULT_CONFIG)
            source_file: Optional source file path for error messages
        """
        if source.startswith(BYTE_ORDER_MARK):
            source = source[1:]
        self._source = source
        self._source_file = source_file
        self._config = config or DEFAULT_CONFIG
        self._tokens: Iterator[Token] = iter(())
        self._current: Token | None = None
        self.errors: list[ParserError] = []

    def lex(self) -> Iterator[Marker]:
        """Lex source into a marker stream.

        Each call starts a fresh pass over the source.

        Yields:
            Marker objects one at a time

        Raises:
            UsfmSyntaxError: Free text or "|" where the grammar forbids it
            GrammarError: Marker token the marker grammar cannot parse
            DataFormatError: Missing/malformed inline data (unless recovering)
            MarkerAttributeError: Bad attribute list (unless recovering)
        """
        self._tokens = Tokenizer(self._source, self._config.extra_whitespace).tokenize()
        self._current = next(self._tokens, None)
        self.errors = []

        while True:
            while self._current is not None and self._current.type is TokenType.WHITESPACE:
                self._advance()
            if self._current is None:
                return
            yield self._lex_marker(self._current)

    # =========================================================================
    # Token navigation
    # =========================================================================

    def _advance(self) -> Token | None:
        """Advance to next token and return it."""
        self._current = next(self._tokens, None)
        return self._current

    def _is_significant(self, token: Token) -> bool:
        """True if whitespace in front of *token* must not be folded into text."""
        if token.value.endswith("*"):
            return False
        match = MARKER_KIND_RE.match(token.value)
        return match is not None and self._config.metadata.is_significant(match.group(1))

    def _syntax_error(self, message: str, token: Token) -> UsfmSyntaxError:
        lineno, col = line_col(self._source, token.min)
        return UsfmSyntaxError(message, lineno, col, self._source_file)

    # =========================================================================
    # Marker parsing
    # =========================================================================

    def _lex_marker(self, token: Token) -> Marker:
        if token.type is not TokenType.MARKER:
            raise self._syntax_error(f"Expected marker, got {token.value[:20]!r}", token)

        match = MARKER_RE.fullmatch(token.value)
        if match is None:
            msg = f"Marker token {token.value!r} at offset {token.min} does not match the marker grammar"
            raise GrammarError(msg)
        plus, kind, level_start, level_end, star = match.groups()

        level: int | LevelRange | None = None
        if level_start is not None:
            level = int(level_start) if level_end is None else LevelRange(int(level_start), int(level_end))
        closing = star is not None

        nxt = self._advance()
        if not closing and nxt is not None:
            if nxt.type is TokenType.WHITESPACE:
                self._advance()
            elif nxt.type is TokenType.VBAR:
                raise self._syntax_error(f"Expected whitespace after marker {token.value!r}", nxt)

        parts: list[str] = []
        data: str | None = None
        pending: list[str] = []

        pattern = get_data_pattern(kind, closing)
        if pattern is not None:
            try:
                data = self._lex_data(kind, pattern, token, parts)
            except DataFormatError as e:
                if not self._config.recover_lexer_errors:
                    raise
                pending.append(str(e))

        self._lex_text(parts)
        text = "".join(parts) or None

        attributes: dict[str, str] | None = None
        if self._current is not None and self._current.type is TokenType.VBAR:
            try:
                attributes = parse_attributes(kind, self._lex_attribute_string(token))
            except MarkerAttributeError as e:
                if not self._config.recover_lexer_errors:
                    raise
                pending.append(str(e))

        marker = Marker(
            kind=kind,
            level=level,
            nested=plus is not None,
            closing=closing,
            data=data,
            text=text,
            attributes=attributes,
            offset=token.min,
        )
        for message in pending:
            logger.debug("Recovered lexer error: %s", message)
            self.errors.append(ParserError(marker, message))
        return marker

    def _lex_data(
        self,
        kind: str,
        pattern: re.Pattern[str],
        marker_token: Token,
        parts: list[str],
    ) -> str:
        """Consume the inline data following a marker.

        Data is matched against the source from the first data word, so a
        pattern may run over whitespace (``\\ide Custom (FONT.TTF)``). A word
        only partially matched by *pattern* contributes its remainder to the
        marker's text.
        """
        word = self._current
        if word is None or word.type is not TokenType.WORD:
            got = "end of input" if word is None else repr(word.value[:20])
            raise DataFormatError(kind, f"expected data, got {got}", line_col(self._source, marker_token.min)[0])

        match = pattern.match(self._source, word.min)
        if match is None:
            raise DataFormatError(kind, f"malformed data {word.value[:20]!r}", line_col(self._source, word.min)[0])

        data = match.group(0)
        end = match.end()
        # Token max is inclusive
        token = self._current
        while token is not None and token.max < end:
            token = self._advance()
        if token is not None and token.min < end:
            parts.append(token.value[end - token.min :])
            self._advance()
        elif token is not None and token.type is TokenType.WHITESPACE:
            self._advance()
        return data

    def _lex_text(self, parts: list[str]) -> None:
        """Accumulate free text up to the next marker or "|"."""
        while self._current is not None and self._current.type in _TEXT_TYPES:
            token = self._current
            nxt = self._advance()
            if token.type is TokenType.WORD:
                parts.append(token.value)
                continue
            if nxt is None or nxt.type is TokenType.VBAR:
                break
            if nxt.type is TokenType.MARKER and self._is_significant(nxt):
                break
            parts.append(" ")

    def _lex_attribute_string(self, marker_token: Token) -> str:
        """Consume "|" and the raw attribute text up to the next marker."""
        self._advance()
        raw: list[str] = []
        while self._current is not None and self._current.type is not TokenType.MARKER:
            if self._current.type is TokenType.VBAR:
                msg = f"Marker {marker_token.value!r} has more than one '|' attribute separator"
                raise self._syntax_error(msg, self._current)
            raw.append(self._current.value)
            self._advance()
        return "".join(raw)


def lex(source: str, config: ParseConfig | None = None) -> Iterator[Marker]:
    """Lex USFM source into markers (convenience wrapper around MarkerLexer)."""
    return MarkerLexer(source, config).lex()
