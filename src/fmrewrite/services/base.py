"""BaseService — shared foundation for fmrewrite services.

Every service receives the frozen :class:`FmSettings` at construction
time and reads its defaults (root, pattern, backup suffix, redirect
base URL) from there. Explicit method arguments always win over settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fmrewrite.config.settings import FmSettings


class BaseService:
    """Base for service-layer classes.

    Usage::

        class RewriteService(BaseService):
            def redirect(self, root: Path, ...) -> ServiceResult:
                root = self._root(root)
                ...
    """

    def __init__(self, settings: FmSettings) -> None:
        self._settings = settings

    def _pattern(self, pattern: str | None) -> str:
        return pattern or self._settings.rewrite.pattern

    def _root(self, root: Path | str | None) -> Path:
        """Explicit *root*, or the configured root relative to the project root."""
        if root is not None:
            return Path(root)
        return self._settings.project_root / self._settings.rewrite.root
