"""Word-level attribute list parsing.

Parses the text after a marker's "|" separator, e.g.::

    \\w gracious|lemma="grace" strong="H1234,G5485"\\w*
    \\w gracious|grace\\w*            (keyless -> default attribute "lemma")

Values are kept as raw strings; comma-separated lists such as
``strong="H1234,G5485"`` are not split.
"""

from __future__ import annotations

import re

from versicle.errors import MarkerAttributeError
from versicle.markers import get_default_attribute

_KEY_RE = re.compile(r"[A-Za-z0-9_\-]+")
_WHITESPACE = " \t\r\n"


def parse_attributes(kind: str, attrib_string: str) -> dict[str, str]:
    """Parse an attribute list for a marker of *kind*.

    Each attribute is one of ``key="value"``, a bare quoted ``"value"`` or a
    bare unquoted token; the last two are assigned to the kind's default key.

    Args:
        kind: Marker kind owning the attributes (selects the default key)
        attrib_string: Raw text after the "|"

    Returns:
        Mapping of attribute key to raw value.

    Raises:
        MarkerAttributeError: On a keyless value for a kind without a default
            key, an invalid key, or an unterminated quoted value.
    """
    attribs: dict[str, str] = {}
    s = attrib_string.strip()
    n = len(s)
    i = 0

    while i < n:
        while i < n and s[i] in _WHITESPACE:
            i += 1
        if i >= n:
            break

        if s[i] == '"':
            value, i = _read_quoted(kind, s, i)
            attribs[_default_key(kind, value)] = value
            continue

        start = i
        while i < n and s[i] not in _WHITESPACE and s[i] != "=":
            i += 1
        token = s[start:i]

        if i < n and s[i] == "=":
            if not _KEY_RE.fullmatch(token):
                msg = f"invalid attribute key {token!r}"
                raise MarkerAttributeError(kind, msg)
            i += 1
            if i >= n or s[i] != '"':
                msg = f'expected " to open value of attribute {token!r}'
                raise MarkerAttributeError(kind, msg)
            value, i = _read_quoted(kind, s, i)
            attribs[token] = value
        else:
            attribs[_default_key(kind, token)] = token

    return attribs


def _read_quoted(kind: str, s: str, i: int) -> tuple[str, int]:
    """Read a quoted value starting at the opening quote; returns (value, next index)."""
    end = s.find('"', i + 1)
    if end == -1:
        msg = f"unterminated quoted value: {s[i:]!r}"
        raise MarkerAttributeError(kind, msg)
    return s[i + 1 : end], end + 1


def _default_key(kind: str, value: str) -> str:
    key = get_default_attribute(kind)
    if key is None:
        msg = f"keyless attribute {value!r} but this marker kind has no default attribute"
        raise MarkerAttributeError(kind, msg)
    return key
