"""Exception classes for Versicle.

Fatal problems (input the grammar cannot describe) are raised as exceptions.
Problems the compiler can work around are collected as ``ParserError`` values
on the resulting Document instead (see ``versicle.nodes``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from versicle.nodes import Document


class VersicleError(Exception):
    """Base exception for all Versicle errors.

    Subclass this for specific error categories.
    """

    pass


class UsfmSyntaxError(VersicleError):
    """Token sequence does not follow the USFM marker grammar.

    Raised by the lexer, e.g. when free text appears where a marker is
    expected.
    """

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        col_offset: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize syntax error with optional location.

        Args:
            message: Error description
            lineno: Line number where error occurred (1-indexed)
            col_offset: Column offset where error occurred (1-indexed)
            source_file: Path to source file (optional)
        """
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset
        self.source_file = source_file

        location = ""
        if source_file:
            location = f"{source_file}:"
        if lineno is not None:
            location += f"{lineno}:"
            if col_offset is not None:
                location += f"{col_offset}:"
        if location:
            location = location.rstrip(":") + " "

        super().__init__(f"{location}{message}")


class GrammarError(VersicleError):
    """Internal contradiction between tokenizer and lexer.

    A marker token was produced that the marker grammar cannot parse.
    Processing stops immediately.
    """

    pass


class DataFormatError(VersicleError):
    """Inline data expected after a marker is missing or malformed.

    Example: ``\\c hello`` (chapter number expected).
    """

    def __init__(self, kind: str, message: str, lineno: int | None = None) -> None:
        """Initialize data format error.

        Args:
            kind: Marker kind that expected data (e.g. "c", "v")
            message: Description of the problem
            lineno: Line number of the marker (optional)
        """
        self.kind = kind
        self.lineno = lineno

        location = f" (line {lineno})" if lineno else ""
        super().__init__(f"Marker '\\{kind}'{location}: {message}")


class MarkerAttributeError(VersicleError):
    """Attribute list after ``|`` could not be parsed."""

    def __init__(self, kind: str, message: str) -> None:
        """Initialize attribute error.

        Args:
            kind: Marker kind the attributes belong to
            message: Description of the problem
        """
        self.kind = kind
        super().__init__(f"Attributes of '\\{kind}': {message}")


class DocumentError(VersicleError):
    """Document compiled with data errors while strict parsing was requested."""

    def __init__(self, document: Document) -> None:
        self.document = document
        count = len(document.errors)
        first = document.errors[0].message if count else ""
        super().__init__(f"{count} error(s) while compiling document; first: {first}")
