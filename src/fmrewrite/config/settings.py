"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``FMREWRITE_*`` prefix
  3. TOML file    — ``fmrewrite.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

The TOML layer is pydantic-settings' own :class:`TomlConfigSettingsSource`,
pointed at whichever file :meth:`FmSettings.from_cli` resolved.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    InitSettingsSource,
    PydanticBaseSettingsSource,
    TomlConfigSettingsSource,
)

from fmrewrite.config.discovery import find_config
from fmrewrite.config.models import RedirectConfig, RewriteConfig


class FmSettings(BaseSettings):
    """Unified settings for the fmrewrite CLI.

    Merges CLI flags, environment variables, TOML config sections,
    and code-baked defaults into a single frozen object.  Stored on the
    :class:`AppContext` at the CLI root level.

    Attributes:
        project_root: Directory the configured ``[rewrite] root`` is
            relative to (parent of ``fmrewrite.toml``, or CWD if no config
            found).
        config_path: The TOML file in effect, or None. Only a value passed
            at construction selects the file; it is never read from TOML
            or the environment.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "FMREWRITE_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    rewrite: RewriteConfig = Field(default_factory=RewriteConfig)
    redirect: RedirectConfig = Field(default_factory=RedirectConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML file named by the ``config_path`` kwarg below env vars."""
        toml_path = None
        if isinstance(init_settings, InitSettingsSource):
            toml_path = init_settings.init_kwargs.get("config_path")
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> FmSettings:
        """Construct settings from a CLI invocation.

        Uses *config_path* when given, else walks up from *project_root*
        (or CWD) for ``fmrewrite.toml``. Without an explicit *project_root*
        the config file's directory becomes the project root.

        Raises:
            click.ClickException: *config_path* does not exist or the TOML
                is invalid.
        """
        if config_path:
            toml_path: Path | None = Path(config_path)
            if not toml_path.is_file():
                raise click.ClickException(f"Config file not found: {toml_path}")
        else:
            toml_path = find_config(project_root)

        if project_root is None:
            project_root = toml_path.parent if toml_path else Path.cwd()

        try:
            return cls(project_root=project_root, config_path=toml_path, **cli_flags)
        except tomllib.TOMLDecodeError as exc:
            raise click.ClickException(f"Invalid TOML in {toml_path}: {exc}") from exc
