"""Front-matter boundaries, key detection, and line splicing.

Documents are handled as lists of lines with their original terminators,
so everything outside the inserted lines is written back byte for byte.
The header is never re-dumped through YAML: ruamel.yaml is only used to
read the existing top-level keys.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from fmrewrite.domain.errors import MalformedDocumentError

FRONTMATTER_DELIMITER = "---"

# slug -> literal lines to insert (no terminators)
FieldBuilder = Callable[[str], list[str]]

_TOP_LEVEL_KEY_RE = re.compile(r"^([^\s#:\-][^:]*?)\s*:(?:\s|$)")


def _new_yaml() -> YAML:
    """Create a fresh round-trip YAML parser (the YAML object is stateful)."""
    y = YAML()
    y.preserve_quotes = True
    return y


def _strip_eol(line: str) -> str:
    return line.rstrip("\r\n")


# ---------------------------------------------------------------------------
# Boundaries
# ---------------------------------------------------------------------------


def find_header_end(lines: Sequence[str], path: Path) -> int:
    """Return the index of the closing ``---`` marker.

    Raises:
        MalformedDocumentError: line 0 is not ``---`` or the block is never
            closed.
    """
    if not lines or _strip_eol(lines[0]) != FRONTMATTER_DELIMITER:
        raise MalformedDocumentError(path, "first line is not '---'")
    for idx in range(1, len(lines)):
        if _strip_eol(lines[idx]) == FRONTMATTER_DELIMITER:
            return idx
    raise MalformedDocumentError(path, "front matter is never closed")


def detect_newline(lines: Sequence[str]) -> str:
    """Line terminator used by the opening marker (``\\n`` if none)."""
    if lines and lines[0].endswith("\r\n"):
        return "\r\n"
    return "\n"


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


def scan_top_level_keys(lines: Sequence[str]) -> list[str]:
    """Shallow ``key:`` scan of lines at column 0, in order of appearance."""
    keys: list[str] = []
    for line in lines:
        match = _TOP_LEVEL_KEY_RE.match(_strip_eol(line))
        if match and match.group(1) not in keys:
            keys.append(match.group(1))
    return keys


def header_keys(header: Sequence[str]) -> set[str]:
    """Top-level keys of a header block.

    Parses with ruamel.yaml; headers that are not a valid YAML mapping (for
    example duplicate keys left by an earlier naive run, or a value such as
    an impossible date that fails to construct) fall back to the line scan.
    """
    text = "".join(header)
    try:
        data: Any = _new_yaml().load(text)
    except (YAMLError, ValueError):
        # ValueError: scalars that resolve but do not construct (date: 2014-02-30)
        return set(scan_top_level_keys(header))
    if isinstance(data, dict):
        return {str(key) for key in data}
    return set(scan_top_level_keys(header))


# ---------------------------------------------------------------------------
# Splicing
# ---------------------------------------------------------------------------


def insert_after_opening(lines: Sequence[str], new_lines: Sequence[str]) -> list[str]:
    """Return *lines* with *new_lines* spliced in right after the opening marker."""
    newline = detect_newline(lines)
    first = lines[0]
    if not first.endswith(("\n", "\r")):
        first += newline
    inserted = [f"{line}{newline}" for line in new_lines]
    return [first, *inserted, *lines[1:]]


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def redirect_builder(base_url: str, field: str = "redirect_to") -> FieldBuilder:
    """Build a ``<field>:`` list with one ``<base_url>/<slug>`` entry."""
    base = base_url.rstrip("/")

    def build(slug: str) -> list[str]:
        return [f"{field}:", f"  - {base}/{slug}"]

    return build


def template_builder(key: str, template: str) -> FieldBuilder:
    """Build a single ``<key>: <value>`` line; ``{slug}`` in *template* is filled."""

    def build(slug: str) -> list[str]:
        return [f"{key}: {template.format(slug=slug)}"]

    return build
