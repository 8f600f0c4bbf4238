"""Compiler stages that turn markers into a Document.

Architecture:
parsing/
├── __init__.py          # Re-exports BodyCompiler, compile_markers, note sub-compilers
├── body.py              # BodyCompiler (paragraphs, verses, chapters, lists, tables)
├── notes.py             # Footnote and cross-reference sub-compilers
├── categories.py        # Marker kind -> MarkerClass and open-block categories
└── styling.py           # StyleBuilder, character spans, block ordering

"""

from versicle.parsing.body import BodyCompiler, compile_markers
from versicle.parsing.categories import MarkerClass, classify
from versicle.parsing.notes import parse_cross_reference, parse_footnote
from versicle.parsing.styling import StyleBuilder, sort_style_blocks, style_block_sort_key

__all__ = [
    "BodyCompiler",
    "MarkerClass",
    "StyleBuilder",
    "classify",
    "compile_markers",
    "parse_cross_reference",
    "parse_footnote",
    "sort_style_blocks",
    "style_block_sort_key",
]
