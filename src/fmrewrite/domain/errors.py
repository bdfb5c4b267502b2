"""Error taxonomy for front-matter rewrites.

``NotFoundError`` and ``InvalidPatternError`` are fatal for a whole run.
``MalformedDocumentError`` and ``DocumentIOError`` are per-document: the
batch records them and moves on.
"""

from __future__ import annotations

from pathlib import Path


class RewriteError(Exception):
    """Base error carrying the path it concerns."""

    code = "REWRITE_ERROR"

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(message)
        self.path = path
        self.message = message

    @property
    def detail(self) -> dict[str, str]:
        return {"path": str(self.path)}


class NotFoundError(RewriteError):
    """The root directory does not exist or is not a directory."""

    code = "NOT_FOUND"

    def __init__(self, path: Path) -> None:
        super().__init__(path, f"Root directory not found: {path}")


class InvalidPatternError(RewriteError):
    """The document glob cannot be used relative to the root."""

    code = "INVALID_ARGUMENT"

    def __init__(self, path: Path, pattern: str, reason: str) -> None:
        super().__init__(path, f"Invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern

    @property
    def detail(self) -> dict[str, str]:
        return {"path": str(self.path), "pattern": self.pattern}


class MalformedDocumentError(RewriteError):
    """The document does not open with a terminated front-matter block."""

    code = "MALFORMED_DOCUMENT"

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(path, f"Malformed document {path}: {reason}")
        self.reason = reason


class DocumentIOError(RewriteError):
    """Reading or writing a document failed; the cause is chained."""

    code = "IO_ERROR"

    def __init__(self, path: Path, action: str, exc: BaseException) -> None:
        super().__init__(path, f"Failed to {action} {path}: {exc}")
        self.action = action
