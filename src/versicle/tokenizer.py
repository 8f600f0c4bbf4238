"""Character-level tokenizer for USFM source.

Classifies every source character into one of four token types. No trimming
or interpretation happens here; that is the marker lexer's job.

Thread Safety:
Tokenizer instances hold only the immutable source and are restartable:
every call to tokenize() starts a fresh scan with local state.

"""

from __future__ import annotations

import re
from collections.abc import Iterator

from versicle.tokens import Token, TokenType

WHITESPACE_CHARS = " \t\r\n"
PILCROW = "¶"

_NEWLINE_RE = re.compile(r"\r\n?")


class Tokenizer:
    """Splits USFM source into Whitespace, VBar, Word and Marker tokens.

    Usage:
            >>> for token in Tokenizer("\\\\v 1 In").tokenize():
            ...     print(token)
        Token(MARKER, '\\\\v', 0:1)
        Token(WHITESPACE, ' ', 2:2)
        Token(WORD, '1', 3:3)
        Token(WHITESPACE, ' ', 4:4)
        Token(WORD, 'In', 5:6)

    """

    __slots__ = ("_source", "_whitespace")

    def __init__(self, source: str, extra_whitespace: str = "") -> None:
        """Initialize tokenizer with source text.

        Args:
            source: USFM source text
            extra_whitespace: Additional characters to treat as whitespace,
                e.g. a pilcrow for editions that use it as a separator
        """
        self._source = source
        self._whitespace = frozenset(WHITESPACE_CHARS + extra_whitespace)

    def tokenize(self) -> Iterator[Token]:
        """Tokenize source into a token stream.

        Yields:
            Token objects covering every source character exactly once

        Complexity: O(n) where n = len(source)
        """
        source = self._source
        whitespace = self._whitespace
        end = len(source)
        pos = 0

        while pos < end:
            start = pos
            c = source[pos]

            if c in whitespace:
                while pos < end and source[pos] in whitespace:
                    pos += 1
                value = _NEWLINE_RE.sub("\n", source[start:pos])
                yield Token(TokenType.WHITESPACE, value, start, pos - 1)

            elif c == "|":
                pos += 1
                yield Token(TokenType.VBAR, "|", start, start)

            elif c == "\\":
                pos += 1
                while pos < end:
                    c = source[pos]
                    if c in whitespace or c == "|" or c == "\\":
                        break
                    pos += 1
                    if c == "*":
                        break
                yield Token(TokenType.MARKER, source[start:pos], start, pos - 1)

            else:
                while pos < end:
                    c = source[pos]
                    if c in whitespace or c == "|" or c == "\\":
                        break
                    pos += 1
                yield Token(TokenType.WORD, source[start:pos], start, pos - 1)


def tokenize(source: str, extra_whitespace: str = "") -> Iterator[Token]:
    """Tokenize USFM source (convenience wrapper around Tokenizer)."""
    return Tokenizer(source, extra_whitespace).tokenize()
