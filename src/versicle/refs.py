"""Scripture references built from verse and chapter:verse marker data."""

from __future__ import annotations

import re
from dataclasses import dataclass

from versicle.markers import LevelRange


@dataclass(frozen=True, slots=True)
class BibleRef:
    """A single verse, e.g. GEN 1:1."""

    book: str | None
    chapter: int
    verse: int

    def __str__(self) -> str:
        book = f"{self.book} " if self.book else ""
        return f"{book}{self.chapter}:{self.verse}"


@dataclass(frozen=True, slots=True)
class BibleRefRange:
    """An inclusive range of verses, e.g. GEN 1:10-11."""

    start: BibleRef
    end: BibleRef

    def __str__(self) -> str:
        if self.start.chapter == self.end.chapter:
            return f"{self.start}-{self.end.verse}"
        return f"{self.start}-{self.end.chapter}:{self.end.verse}"


Ref = BibleRef | BibleRefRange

_VERSE_RE = re.compile(r"(\d+)(?:-(\d+))?")
_CHAPTER_VERSE_RE = re.compile(r"(\d+)[:.v](\d+)(?:-(\d+))?:?")


def parse_int_or_range(value: str) -> int | LevelRange | None:
    """Parse "3" or "3-5"; returns None for anything else."""
    match = _VERSE_RE.fullmatch(value)
    if match is None:
        return None
    start, end = match.groups()
    if end is None:
        return int(start)
    return LevelRange(int(start), int(end))


def verse_ref(book: str | None, chapter: int, data: str) -> Ref | None:
    """Build the reference for ``\\v`` data ("1" or "10-11") in *chapter*.

    Returns:
        BibleRef, BibleRefRange, or None if *data* is not a verse number.
    """
    verse = parse_int_or_range(data)
    if verse is None:
        return None
    if isinstance(verse, LevelRange):
        return BibleRefRange(
            BibleRef(book, chapter, verse.start),
            BibleRef(book, chapter, verse.end),
        )
    return BibleRef(book, chapter, verse)


def chapter_verse_ref(book: str | None, data: str) -> Ref | None:
    """Build the reference for ``\\fr``/``\\xo`` data such as "9:44" or "11:15-16:".

    The chapter comes from *data*; only the book is taken from context.
    Separators ":", "." and "v" are accepted, as is a trailing ":".

    Example:
        >>> str(chapter_verse_ref("SIR", "11:15-16"))
        'SIR 11:15-16'

    """
    match = _CHAPTER_VERSE_RE.fullmatch(data.strip())
    if match is None:
        return None
    chapter, verse, end = match.groups()
    start = BibleRef(book, int(chapter), int(verse))
    if end is None:
        return start
    return BibleRefRange(start, BibleRef(book, int(chapter), int(end)))
