"""Marker classification for the body compiler.

Every marker kind maps to a MarkerClass, which selects the compiler's
handling, and paragraph-level classes map to a category: the slot in the
open-block set that mutually exclusive markers share (opening ``\\m`` closes
an open ``\\p`` because both live in "paragraph").

Kinds without an explicit entry fall back to the style type in the injected
marker metadata; kinds unknown to both are UNKNOWN and reported.
"""

from __future__ import annotations

from enum import Enum, auto

from versicle.metadata import MarkerMetadata, StyleType


class MarkerClass(Enum):
    """How the body compiler treats a marker kind."""

    PARAGRAPH = auto()
    POETRY = auto()
    HEADING = auto()
    LIST_ENTRY = auto()
    TABLE_ROW = auto()
    TABLE_CELL = auto()
    CHARACTER = auto()
    VERSE = auto()
    CHAPTER = auto()
    FOOTNOTE = auto()
    CROSS_REFERENCE = auto()
    IDENTIFICATION = auto()
    UNKNOWN = auto()


# Categories (open-block slots)
PARAGRAPH = "paragraph"
POETRY = "poetry"
HEADING = "heading"
LIST_ENTRY = "list_entry"
TABLE_ROW = "table_row"
TABLE_CELL = "table_cell"
VERSE = "verse"
CHAPTER = "chapter"

# Virtual wrapper categories; the block kind equals the category
LIST = "list"
LIST_ITEMS = "list_items"
TABLE = "table"

# Categories closed whenever any paragraph-level marker opens
PARAGRAPH_LEVEL = (PARAGRAPH, POETRY, HEADING, LIST_ENTRY, TABLE_CELL, TABLE_ROW)

CLASS_CATEGORIES: dict[MarkerClass, str] = {
    MarkerClass.PARAGRAPH: PARAGRAPH,
    MarkerClass.POETRY: POETRY,
    MarkerClass.HEADING: HEADING,
    MarkerClass.LIST_ENTRY: LIST_ENTRY,
    MarkerClass.TABLE_ROW: TABLE_ROW,
    MarkerClass.TABLE_CELL: TABLE_CELL,
}


def _kinds(cls: MarkerClass, names: str) -> dict[str, MarkerClass]:
    return dict.fromkeys(names.split(), cls)


MARKER_CLASSES: dict[str, MarkerClass] = {
    **_kinds(
        MarkerClass.PARAGRAPH,
        "p m po pr cls pmo pm pmc pmr pi mi nb pc ph lit b "
        "ip im ipi imi ipq imq ipr ib iex ie ili",
    ),
    **_kinds(MarkerClass.POETRY, "q qr qc qa qm qd iq"),
    **_kinds(
        MarkerClass.HEADING,
        "mt mte ms mr s sr r d sp cl cd cp imt imte is iot io",
    ),
    **_kinds(MarkerClass.LIST_ENTRY, "lh li lim lf"),
    **_kinds(MarkerClass.TABLE_ROW, "tr"),
    **_kinds(MarkerClass.TABLE_CELL, "th thr thc tc tcr tcc"),
    **_kinds(
        MarkerClass.CHARACTER,
        "w wg wh wa rb pro fig ndx jmp ref "
        "add bk dc k nd ord pn png addpn qt sig sls tl wj qs qac iqt ior "
        "em bd it bdit no sc sup lik liv litl va vp ca rq",
    ),
    **_kinds(MarkerClass.VERSE, "v"),
    **_kinds(MarkerClass.CHAPTER, "c"),
    **_kinds(MarkerClass.FOOTNOTE, "f fe ef"),
    **_kinds(MarkerClass.CROSS_REFERENCE, "x ex"),
    **_kinds(MarkerClass.IDENTIFICATION, "id ide sts rem h toc toca usfm pb"),
}

# Table cell kind -> text alignment
CELL_ALIGNMENT: dict[str, str] = {
    "th": "start",
    "tc": "start",
    "thc": "center",
    "tcc": "center",
    "thr": "end",
    "tcr": "end",
}

# Footnote/cross-reference content kinds; only legal inside a note
NOTE_CONTENT_KINDS = frozenset(
    "fr fq fqa fk fl fw fp ft fv fdc fm xo xk xq xt xta xop xot xnt xdc".split()
)


def classify(kind: str, metadata: MarkerMetadata) -> MarkerClass:
    """Classify *kind* for the body compiler.

    Note content kinds are UNKNOWN outside a note, even though the metadata
    knows them as character styles.
    """
    cls = MARKER_CLASSES.get(kind)
    if cls is not None:
        return cls
    if kind in NOTE_CONTENT_KINDS:
        return MarkerClass.UNKNOWN

    match metadata.style_type(kind):
        case StyleType.PARAGRAPH:
            return MarkerClass.PARAGRAPH
        case StyleType.CHARACTER:
            return MarkerClass.CHARACTER
        case _:
            return MarkerClass.UNKNOWN


def is_block_level(cls: MarkerClass) -> bool:
    """True for every class with a block category, table rows and cells included.

    Notes treat any of these as the end of an unterminated note.
    """
    return cls in CLASS_CATEGORIES
