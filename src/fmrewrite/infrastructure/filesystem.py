"""Filesystem operations for content trees.

INVARIANT: A document on disk is either its old content or its new
content, never a partial write. Writes go to a temporary file in the same
directory and are moved into place with ``os.replace``.

Reads and writes keep line terminators untouched (``newline=""``) so lines
outside the inserted block round-trip byte for byte.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
from collections.abc import Sequence
from pathlib import Path, PurePath
from tempfile import NamedTemporaryFile

from fmrewrite.domain.errors import DocumentIOError, InvalidPatternError, NotFoundError

logger = logging.getLogger(__name__)

# Directories never descended into during discovery.
_SKIP_DIRS = frozenset({".git", "_site", ".jekyll-cache", "node_modules"})

# Split after "\n" only; str.splitlines also breaks on \f, \x1c, \x85, U+2028.
_LINE_RE = re.compile(r"(?<=\n)")


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def require_directory(root: Path) -> Path:
    """Return *root* if it is an existing directory, else raise NotFoundError."""
    if not root.is_dir():
        raise NotFoundError(root)
    return root


def pattern_problem(pattern: str) -> str | None:
    """Why *pattern* cannot be globbed relative to a root, or None if it can."""
    if not pattern.strip():
        return "pattern is empty"
    pure = PurePath(pattern)
    if pure.is_absolute() or pure.anchor or pattern.startswith(("/", "\\")):
        return "pattern must be relative to the root"
    if ".." in pure.parts:
        return "pattern must not climb out of the root"
    return None


def find_documents(root: Path, pattern: str) -> list[Path]:
    """Files under *root* matching *pattern*, in lexicographic path order.

    Raises:
        InvalidPatternError: *pattern* is empty or not relative to *root*.
        NotFoundError: *root* is not a directory.
    """
    problem = pattern_problem(pattern)
    if problem:
        raise InvalidPatternError(root, pattern, problem)
    require_directory(root)
    results: list[Path] = []
    for path in root.glob(pattern):
        if not path.is_file():
            continue
        if any(part in _SKIP_DIRS for part in path.relative_to(root).parts):
            continue
        results.append(path)
    return sorted(results)


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def read_lines(path: Path) -> list[str]:
    """Read *path* as UTF-8 lines, terminators included."""
    try:
        with path.open(encoding="utf-8", newline="") as fh:
            text = fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentIOError(path, "read", exc) from exc
    return [line for line in _LINE_RE.split(text) if line]


def write_lines_atomic(path: Path, lines: Sequence[str]) -> None:
    """Replace *path* with *lines* via temp file + rename.

    The temp file is removed on any failure and the original stays intact.
    File mode of the original is carried over.
    """
    tmp_name: str | None = None
    try:
        with NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="",
            delete=False,
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
        ) as tmp:
            tmp_name = tmp.name
            tmp.writelines(lines)
            tmp.flush()
            os.fsync(tmp.fileno())
        shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise DocumentIOError(path, "write", exc) from exc
    logger.debug("Wrote %s", path)


def backup_file(path: Path, suffix: str) -> Path:
    """Copy *path* to ``<path><suffix>`` and return the backup path."""
    backup_path = path.with_name(path.name + suffix)
    try:
        shutil.copy2(path, backup_path)
    except OSError as exc:
        raise DocumentIOError(path, "back up", exc) from exc
    logger.debug("Backed up %s -> %s", path, backup_path)
    return backup_path
