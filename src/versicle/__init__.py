"""
Versicle: USFM scripture markup compiler for Python

Compiles USFM (backslash-marker scripture markup) into a flat text buffer plus
typed style blocks: paragraphs, verses, chapters, character spans, lists,
tables and embedded footnote/cross-reference sub-documents. Data errors are
collected on the result instead of aborting the compile.

Quick Start:
    >>> from versicle import parse
    >>> doc = parse("\\\\id GEN\\n\\\\c 1\\n\\\\p\\n\\\\v 1 In the beginning")
    >>> doc.text
    'In the beginning'
    >>> [str(b.ref) for b in doc.blocks("v")]
    ['GEN 1:1']

Pipeline:
    >>> from versicle import tokenize, lex, compile_markers
    >>> markers = list(lex("\\\\p\\\\v 1 Hello"))
    >>> compile_markers(markers, book="GEN", chapter=1).text
    'Hello'

Installation:
    pip install versicle              # Compiler (zero deps)
    pip install versicle[test]        # + pytest and hypothesis
"""

from dataclasses import replace

from versicle.config import DEFAULT_CONFIG, ParseConfig
from versicle.errors import (
    DataFormatError,
    DocumentError,
    GrammarError,
    MarkerAttributeError,
    UsfmSyntaxError,
    VersicleError,
)
from versicle.lexer import MarkerLexer, lex
from versicle.markers import LevelRange, Marker
from versicle.metadata import MarkerMeta, MarkerMetadata, StyleType
from versicle.nodes import (
    ChapterBlock,
    CharacterBlock,
    Document,
    NoteBlock,
    NoteVerseBlock,
    ParagraphBlock,
    ParserError,
    ReferenceBlock,
    StyleBlock,
    TableCellBlock,
    VerseBlock,
    VirtualBlock,
)
from versicle.parsing import BodyCompiler, compile_markers, sort_style_blocks
from versicle.refs import BibleRef, BibleRefRange
from versicle.serialization import from_dict, from_json, to_dict, to_json
from versicle.tokenizer import Tokenizer, tokenize
from versicle.tokens import Token, TokenType

__version__ = "0.1.0"


def parse(
    source: str,
    *,
    book: str | None = None,
    chapter: int | None = None,
    config: ParseConfig | None = None,
    source_file: str | None = None,
    strict: bool = False,
) -> Document:
    """Compile USFM source into a Document.

    Args:
        source: USFM source text
        book: Book id for verse references until an ``\\id`` marker sets one
        chapter: Starting chapter, for fragments without a ``\\c`` marker
        config: Parse configuration (defaults to DEFAULT_CONFIG)
        source_file: Optional source file path for error messages
        strict: Raise DocumentError if the document has any data errors

    Returns:
        Document with text, sorted styling and collected errors. Errors the
        lexer recovered from (``recover_lexer_errors``) come first.

    Raises:
        UsfmSyntaxError: Token sequence violates the marker grammar
        DataFormatError: Bad inline data (unless recovering lexer errors)
        MarkerAttributeError: Bad attribute list (unless recovering lexer errors)
        DocumentError: strict is set and the document has errors

    Example:
        >>> doc = parse("\\\\f + \\\\ft Hello world\\\\f*")
        >>> doc.styling[0].text
        'Hello world'
    """
    config = config or DEFAULT_CONFIG

    lexer = MarkerLexer(source, config, source_file=source_file)
    markers = list(lexer.lex())
    doc = BodyCompiler(config).compile(markers, book=book, chapter=chapter)
    if lexer.errors:
        doc = replace(doc, errors=(*lexer.errors, *doc.errors))

    if strict and not doc.success:
        raise DocumentError(doc)
    return doc


__all__ = [
    # Entry points
    "parse",
    "tokenize",
    "lex",
    "compile_markers",
    # Pipeline stages
    "Tokenizer",
    "MarkerLexer",
    "BodyCompiler",
    # Configuration
    "DEFAULT_CONFIG",
    "ParseConfig",
    "MarkerMeta",
    "MarkerMetadata",
    "StyleType",
    # Tokens and markers
    "Token",
    "TokenType",
    "Marker",
    "LevelRange",
    # Documents
    "Document",
    "ParserError",
    "StyleBlock",
    "ParagraphBlock",
    "CharacterBlock",
    "TableCellBlock",
    "VerseBlock",
    "ChapterBlock",
    "ReferenceBlock",
    "NoteVerseBlock",
    "VirtualBlock",
    "NoteBlock",
    "BibleRef",
    "BibleRefRange",
    "sort_style_blocks",
    # Serialization
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    # Errors
    "VersicleError",
    "UsfmSyntaxError",
    "GrammarError",
    "DataFormatError",
    "MarkerAttributeError",
    "DocumentError",
]
