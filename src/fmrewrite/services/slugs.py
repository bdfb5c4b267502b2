"""SlugService — preview the slug each matched document resolves to."""

from __future__ import annotations

from pathlib import Path

from fmrewrite.domain.errors import InvalidPatternError, NotFoundError
from fmrewrite.domain.slug import derive_slug, find_slug_collisions
from fmrewrite.infrastructure.filesystem import find_documents
from fmrewrite.services.base import BaseService
from fmrewrite.services.result import ServiceError, ServiceResult


class SlugService(BaseService):
    """Read-only listing of documents and their derived slugs."""

    def list_slugs(
        self,
        root: Path | str | None = None,
        *,
        pattern: str | None = None,
    ) -> ServiceResult:
        op = "slugs"
        root = self._root(root)
        pattern = self._pattern(pattern)

        try:
            paths = find_documents(root, pattern)
        except (NotFoundError, InvalidPatternError) as exc:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(code=exc.code, message=exc.message, detail=exc.detail),
            )

        collisions = find_slug_collisions(paths)
        warnings = [
            f"Slug collision for {group}: {', '.join(p.name for p in members)}"
            for group, members in collisions.items()
        ]
        items = [
            {"path": p.relative_to(root).as_posix(), "slug": derive_slug(p.name)} for p in paths
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "root": str(root),
                "pattern": pattern,
                "count": len(items),
                "items": items,
                "collisions": {
                    group: [p.relative_to(root).as_posix() for p in members]
                    for group, members in collisions.items()
                },
            },
            warnings=warnings,
        )
