"""Token and TokenType definitions for the Versicle tokenizer.

The tokenizer produces a flat stream of Token objects that the marker lexer
consumes. Each Token has a type, value, and the offsets of its first and last
source characters.

Thread Safety:
Token is frozen (immutable) and safe to share across threads.
TokenType is an enum (inherently immutable).

"""

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Token types produced by the tokenizer."""

    WHITESPACE = auto()  # maximal run of whitespace characters
    VBAR = auto()  # the "|" attribute separator
    WORD = auto()  # anything else, not prefixed by "\"
    MARKER = auto()  # "\" prefixed run, e.g. \v, \+nd, \f*


@dataclass(frozen=True, slots=True)
class Token:
    """A token produced by the tokenizer.

    Attributes:
        type: The token type (from TokenType enum)
        value: The string value; CR, LF and CRLF all appear as "\\n"
        min: Offset of the first source character
        max: Offset of the last source character

    """

    type: TokenType
    value: str
    min: int
    max: int

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        val = self.value
        if len(val) > 20:
            val = val[:17] + "..."
        return f"Token({self.type.name}, {val!r}, {self.min}:{self.max})"
