"""Parse configuration for Versicle.

Configuration is an immutable object passed explicitly to the lexer and the
body compiler. There is no process-wide configuration state: two parses with
different configs can run side by side.

Usage:
    from versicle import parse
    from versicle.config import ParseConfig

    config = ParseConfig(pilcrow_is_whitespace=True)
    doc = parse(source, config=config)

    # From an external settings mapping
    config = ParseConfig.from_dict({"recover_lexer_errors": True})

"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from versicle.metadata import MarkerMetadata
from versicle.tokenizer import PILCROW


@dataclass(frozen=True, slots=True)
class ParseConfig:
    """Immutable parse configuration.

    Per-call context (book id, starting chapter) is intentionally excluded;
    it is passed to the compiler with each document.

    Attributes:
        metadata: Marker metadata used for whitespace significance and for
            categorizing marker kinds (defaults to the built-in USFM 3 table)
        pilcrow_is_whitespace: Treat "¶" as whitespace, for editions that use
            it as a separator
        recover_lexer_errors: Record inline data and attribute errors on the
            lexer instead of raising them

    """

    metadata: MarkerMetadata = field(default_factory=MarkerMetadata.default)
    pilcrow_is_whitespace: bool = False
    recover_lexer_errors: bool = False

    @property
    def extra_whitespace(self) -> str:
        """Characters the tokenizer treats as whitespace besides the USFM set."""
        return PILCROW if self.pilcrow_is_whitespace else ""

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> ParseConfig:
        """Create ParseConfig from dictionary.

        Only includes keys that are valid ParseConfig fields; unknown keys
        are silently ignored. A ``metadata`` value given as a plain mapping is
        converted with MarkerMetadata.from_dict and layered over the built-in
        table.

        Args:
            config_dict: Dictionary with config values. Keys should match
                ParseConfig attribute names.

        Returns:
            New ParseConfig instance with values from dict.

        Example:
            >>> config = ParseConfig.from_dict({
            ...     "pilcrow_is_whitespace": True,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.pilcrow_is_whitespace
            True

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}

        metadata = filtered.get("metadata")
        if metadata is not None and not isinstance(metadata, MarkerMetadata):
            filtered["metadata"] = MarkerMetadata.default().merged(
                MarkerMetadata.from_dict(metadata)
            )
        return cls(**filtered)


# Module-level default config (immutable, reused)
DEFAULT_CONFIG: ParseConfig = ParseConfig()


__all__ = [
    "DEFAULT_CONFIG",
    "ParseConfig",
]
