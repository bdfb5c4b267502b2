"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, fmrewrite.toml only contains
overrides. A Jekyll blog needs only ``[redirect] base_url``.
"""

from __future__ import annotations

from pydantic import BaseModel

# --- fmrewrite.toml sections ---


class RewriteConfig(BaseModel):
    """[rewrite] section."""

    model_config = {"frozen": True}

    root: str = "."
    pattern: str = "_posts/**/*.md"
    backup_suffix: str = ".bak"


class RedirectConfig(BaseModel):
    """[redirect] section."""

    model_config = {"frozen": True}

    base_url: str = ""
    field: str = "redirect_to"

