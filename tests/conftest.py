"""Shared pytest fixtures and test helpers for fmrewrite tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from fmrewrite.config.settings import FmSettings

CHANGE_DATA = '---\nlayout: post\ntitle: "X"\n---\nBody text.\n'


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Drop FMREWRITE_* env vars and restore root logger handlers afterwards."""
    for name in list(os.environ):
        if name.startswith("FMREWRITE_"):
            monkeypatch.delenv(name)
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Temporary Jekyll-style site with a ``_posts`` directory.

    Contains one dated post, one undated post in a nested directory, and a
    non-Markdown file that the default pattern must ignore.
    """
    posts = tmp_path / "_posts"
    (posts / "2015").mkdir(parents=True)
    write_post(posts / "2014-01-30-change-data.md", CHANGE_DATA)
    write_post(posts / "2015" / "about-me.md", "---\nlayout: page\n---\n\n# About\n")
    (posts / "notes.txt").write_text("not a post\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def settings(site_root: Path) -> FmSettings:
    """Settings rooted at the temp site, with a redirect base URL."""
    return FmSettings.from_cli(
        project_root=site_root,
        redirect={"base_url": "https://example.com"},
    )


@pytest.fixture
def _isolated_site(site_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp site so CLI defaults resolve against it."""
    monkeypatch.chdir(site_root)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def write_post(path: Path, content: str) -> Path:
    """Write *content* verbatim (no newline translation)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content.encode("utf-8"))
    return path


def read_post(path: Path) -> str:
    return path.read_bytes().decode("utf-8")
