"""Source text helpers."""

from __future__ import annotations


def line_col(source: str, offset: int) -> tuple[int, int]:
    """Convert an absolute source offset to a (line, column) pair.

    Both values are 1-indexed, matching the locations reported in
    UsfmSyntaxError messages.

    Example:
        >>> line_col("id GEN\\nc 1", 7)
        (2, 1)
    """
    offset = max(0, min(offset, len(source)))
    lineno = source.count("\n", 0, offset) + 1
    col = offset - (source.rfind("\n", 0, offset) + 1) + 1
    return lineno, col
