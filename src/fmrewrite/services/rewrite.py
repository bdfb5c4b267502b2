"""RewriteService — batch front-matter rewrites.

Pipeline per document: READ → CHECK HEADER → BUILD → SKIP IF PRESENT →
SPLICE → (DIFF | BACKUP → WRITE)

``rewrite_all`` is the core operation and is usable without settings.
:class:`RewriteService` wraps it for the CLI and returns ServiceResult.
"""

from __future__ import annotations

import difflib
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any

from fmrewrite.domain.errors import (
    DocumentIOError,
    InvalidPatternError,
    MalformedDocumentError,
    NotFoundError,
)
from fmrewrite.domain.frontmatter import (
    FieldBuilder,
    find_header_end,
    header_keys,
    insert_after_opening,
    redirect_builder,
    scan_top_level_keys,
    template_builder,
)
from fmrewrite.domain.slug import derive_slug, find_slug_collisions
from fmrewrite.infrastructure.filesystem import (
    backup_file,
    find_documents,
    read_lines,
    write_lines_atomic,
)
from fmrewrite.services.base import BaseService
from fmrewrite.services.result import ServiceError, ServiceResult

logger = logging.getLogger(__name__)


class DocumentStatus(StrEnum):
    """Outcome of a single document in a batch."""

    REWRITTEN = "rewritten"
    WOULD_REWRITE = "would-rewrite"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class SkippedDocument:
    """A document the batch could not rewrite."""

    path: Path
    error: str
    reason: str


@dataclass
class RewriteReport:
    """Aggregate outcome of one ``rewrite_all`` run."""

    processed: list[Path] = field(default_factory=list)
    unchanged: list[Path] = field(default_factory=list)
    skipped: list[SkippedDocument] = field(default_factory=list)
    diffs: dict[Path, str] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    @property
    def processed_count(self) -> int:
        return len(self.processed)

    @property
    def skipped_paths(self) -> list[Path]:
        return [s.path for s in self.skipped]


# ---------------------------------------------------------------------------
# Core operation
# ---------------------------------------------------------------------------


def rewrite_document(
    path: Path,
    field_builder: FieldBuilder,
    *,
    dry_run: bool = False,
    backup_suffix: str | None = None,
) -> tuple[DocumentStatus, str | None]:
    """Ensure the fields built for *path*'s slug are in its front matter.

    Returns ``(status, diff)``; *diff* is only set in dry-run mode.

    Raises:
        MalformedDocumentError: no terminated ``---`` header at line 0.
        DocumentIOError: reading, backing up, or writing failed.
        ValueError: the builder emitted no top-level ``key:`` line.
    """
    lines = read_lines(path)
    end = find_header_end(lines, path)

    slug = derive_slug(path.name)
    new_lines = field_builder(slug)
    emitted = scan_top_level_keys(new_lines)
    if not emitted:
        msg = f"Field builder produced no top-level key for slug {slug!r}: {new_lines!r}"
        raise ValueError(msg)

    existing = header_keys(lines[1:end])
    present = [key for key in emitted if key in existing]
    if present:
        logger.debug("Skipping %s: already has %s", path, ", ".join(present))
        return DocumentStatus.UNCHANGED, None

    modified = insert_after_opening(lines, new_lines)

    if dry_run:
        diff = "".join(
            difflib.unified_diff(lines, modified, fromfile=str(path), tofile=str(path))
        )
        return DocumentStatus.WOULD_REWRITE, diff

    if backup_suffix:
        backup_file(path, backup_suffix)
    write_lines_atomic(path, modified)
    return DocumentStatus.REWRITTEN, None


def rewrite_all(
    root: Path,
    pattern: str,
    field_builder: FieldBuilder,
    *,
    dry_run: bool = False,
    backup_suffix: str | None = None,
    on_document: Callable[[Path, DocumentStatus], None] | None = None,
) -> RewriteReport:
    """Rewrite every document under *root* matching *pattern*.

    Documents are processed one at a time in lexicographic path order.
    Per-document failures are recorded in the report and never stop the
    batch. In dry-run mode nothing is written and ``processed`` lists the
    documents that would change.

    Raises:
        NotFoundError: *root* is missing; no document is touched.
        InvalidPatternError: *pattern* is not a glob relative to *root*.
    """
    paths = find_documents(root, pattern)
    report = RewriteReport()
    logger.debug("Matched %d documents under %s with %r", len(paths), root, pattern)

    for group, members in find_slug_collisions(paths).items():
        names = ", ".join(p.name for p in members)
        report.warnings.append(f"Slug collision for {group}: {names}")

    for path in paths:
        try:
            status, diff = rewrite_document(
                path,
                field_builder,
                dry_run=dry_run,
                backup_suffix=backup_suffix,
            )
        except (MalformedDocumentError, DocumentIOError) as exc:
            logger.info("Skipped %s: %s", path, exc.message)
            report.skipped.append(SkippedDocument(path=path, error=exc.code, reason=exc.message))
            status = DocumentStatus.SKIPPED
        else:
            if status is DocumentStatus.UNCHANGED:
                report.unchanged.append(path)
            else:
                report.processed.append(path)
                if diff is not None:
                    report.diffs[path] = diff
        if on_document is not None:
            on_document(path, status)

    return report


# ---------------------------------------------------------------------------
# Service adapter
# ---------------------------------------------------------------------------


def _relative(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


class RewriteService(BaseService):
    """Runs batch rewrites with defaults taken from settings."""

    def redirect(
        self,
        root: Path | str | None = None,
        *,
        base_url: str | None = None,
        field_name: str | None = None,
        pattern: str | None = None,
        dry_run: bool = False,
        backup: bool = False,
    ) -> ServiceResult:
        """Add a redirect list pointing at ``<base_url>/<slug>``."""
        base_url = base_url or self._settings.redirect.base_url
        field_name = field_name or self._settings.redirect.field
        if not base_url:
            return ServiceResult(
                ok=False,
                op="rewrite",
                error=ServiceError(
                    code="INVALID_ARGUMENT",
                    message="No redirect base URL given (use --base-url or [redirect] base_url)",
                ),
            )
        return self._run(
            self._root(root),
            self._pattern(pattern),
            redirect_builder(base_url, field_name),
            field_name=field_name,
            dry_run=dry_run,
            backup=backup,
        )

    def add_field(
        self,
        key: str,
        template: str,
        root: Path | str | None = None,
        *,
        pattern: str | None = None,
        dry_run: bool = False,
        backup: bool = False,
    ) -> ServiceResult:
        """Add ``<key>: <template>`` with ``{slug}`` filled per document."""
        return self._run(
            self._root(root),
            self._pattern(pattern),
            template_builder(key, template),
            field_name=key,
            dry_run=dry_run,
            backup=backup,
        )

    def _run(
        self,
        root: Path,
        pattern: str,
        builder: FieldBuilder,
        *,
        field_name: str,
        dry_run: bool,
        backup: bool,
    ) -> ServiceResult:
        op = "rewrite"
        start = time.perf_counter()
        suffix = self._settings.rewrite.backup_suffix if backup else None

        try:
            report = rewrite_all(
                root,
                pattern,
                builder,
                dry_run=dry_run,
                backup_suffix=suffix,
            )
        except (NotFoundError, InvalidPatternError) as exc:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(code=exc.code, message=exc.message, detail=exc.detail),
            )

        data: dict[str, Any] = {
            "root": str(root),
            "pattern": pattern,
            "field": field_name,
            "dry_run": dry_run,
            "processed_count": report.processed_count,
            "processed": [_relative(p, root) for p in report.processed],
            "unchanged": [_relative(p, root) for p in report.unchanged],
            "skipped": [
                {"path": _relative(s.path, root), "error": s.error, "reason": s.reason}
                for s in report.skipped
            ],
        }
        if dry_run:
            data["diffs"] = {_relative(p, root): d for p, d in report.diffs.items()}
        if suffix:
            data["backup_suffix"] = suffix

        return ServiceResult(
            ok=True,
            op=op,
            data=data,
            warnings=list(report.warnings),
            meta={"duration_ms": round((time.perf_counter() - start) * 1000, 2)},
        )
