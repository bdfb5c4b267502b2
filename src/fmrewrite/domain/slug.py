"""Slug derivation from document filenames.

Jekyll-style posts are named ``YYYY-MM-DD-<name>.<ext>``; the slug is the
``<name>`` part. The date strip is best effort: names without a date prefix
only lose their extension.
"""

from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Iterable
from pathlib import Path

_DATE_PREFIX_RE = re.compile(r"^\d+-\d+-\d+-")


def derive_slug(filename: str) -> str:
    """Return the slug for *filename* (a bare name, not a path)."""
    name = _DATE_PREFIX_RE.sub("", filename, count=1)
    # Drop the last extension even when nothing precedes it ("2014-01-30-.md").
    stem, dot, _ext = name.rpartition(".")
    return stem if dot else name


def find_slug_collisions(paths: Iterable[Path]) -> dict[str, list[Path]]:
    """Group *paths* that share a slug within the same directory.

    Returns ``{"<dir>/<slug>": [paths...]}`` for every group of two or more.
    """
    groups: dict[tuple[Path, str], list[Path]] = defaultdict(list)
    for path in paths:
        groups[(path.parent, derive_slug(path.name))].append(path)
    return {
        f"{parent.as_posix()}/{slug}": sorted(members)
        for (parent, slug), members in groups.items()
        if len(members) > 1
    }
