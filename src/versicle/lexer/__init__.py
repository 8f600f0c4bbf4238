"""Marker lexer for Versicle.

Turns the tokenizer's flat token stream into Marker records.

Architecture:
lexer/
├── __init__.py          # Re-exports MarkerLexer, lex, parse_attributes
├── core.py              # MarkerLexer (marker grammar, data, text, whitespace)
└── attributes.py        # Word-level attribute lists after "|"

Usage:
    >>> from versicle.lexer import lex
    >>> list(lex("\\\\c 1"))
    [Marker(kind='c', level=None, nested=False, closing=False, data='1', text=None, attributes=None)]

"""

from versicle.lexer.attributes import parse_attributes
from versicle.lexer.core import MarkerLexer, lex

__all__ = ["MarkerLexer", "lex", "parse_attributes"]
