"""Tests for the rewrite_all core operation."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from fmrewrite.domain.errors import NotFoundError
from fmrewrite.domain.frontmatter import redirect_builder, template_builder
from fmrewrite.services.rewrite import DocumentStatus, rewrite_all, rewrite_document
from tests.conftest import CHANGE_DATA, read_post, write_post

PATTERN = "_posts/**/*.md"
BUILD = redirect_builder("https://example.com")


def _snapshot(root: Path) -> dict[str, bytes]:
    files = sorted(p for p in root.rglob("*") if p.is_file())
    return {p.relative_to(root).as_posix(): p.read_bytes() for p in files}


class TestRewriteAll:
    def test_end_to_end_redirect(self, site_root: Path) -> None:
        report = rewrite_all(site_root, PATTERN, BUILD)
        post = site_root / "_posts" / "2014-01-30-change-data.md"
        lines = read_post(post).splitlines()
        assert lines[:5] == [
            "---",
            "redirect_to:",
            "  - https://example.com/change-data",
            "layout: post",
            'title: "X"',
        ]
        assert report.processed_count == 2
        assert report.skipped == []

    def test_original_lines_shift_down_unchanged(self, site_root: Path) -> None:
        post = site_root / "_posts" / "2014-01-30-change-data.md"
        before = read_post(post).splitlines(keepends=True)
        rewrite_all(site_root, PATTERN, template_builder("permalink", "/{slug}/"))
        after = read_post(post).splitlines(keepends=True)
        assert after[0] == before[0]
        assert after[1] == "permalink: /change-data/\n"
        assert after[2:] == before[1:]

    def test_undated_slug(self, site_root: Path) -> None:
        rewrite_all(site_root, PATTERN, BUILD)
        text = read_post(site_root / "_posts" / "2015" / "about-me.md")
        assert "  - https://example.com/about-me\n" in text

    def test_idempotent(self, site_root: Path) -> None:
        rewrite_all(site_root, PATTERN, BUILD)
        once = _snapshot(site_root)
        report = rewrite_all(site_root, PATTERN, BUILD)
        assert _snapshot(site_root) == once
        assert report.processed_count == 0
        assert len(report.unchanged) == 2

    def test_existing_key_is_left_alone(self, tmp_path: Path) -> None:
        content = "---\nredirect_to: https://elsewhere.com/x\nlayout: post\n---\n"
        post = write_post(tmp_path / "_posts" / "2014-01-01-x.md", content)
        report = rewrite_all(tmp_path, PATTERN, BUILD)
        assert read_post(post) == content
        assert report.unchanged == [post]

    def test_key_in_body_does_not_count(self, tmp_path: Path) -> None:
        post = write_post(
            tmp_path / "_posts" / "2014-01-01-x.md",
            "---\nlayout: post\n---\nredirect_to: not a header\n",
        )
        rewrite_all(tmp_path, PATTERN, BUILD)
        assert read_post(post).startswith("---\nredirect_to:\n  - https://example.com/x\n")

    def test_malformed_document_recorded_and_untouched(self, site_root: Path) -> None:
        bad = write_post(site_root / "_posts" / "2014-02-01-bad.md", "# No header\n---\n")
        report = rewrite_all(site_root, PATTERN, BUILD)
        assert read_post(bad) == "# No header\n---\n"
        assert report.skipped_paths == [bad]
        assert report.skipped[0].error == "MALFORMED_DOCUMENT"
        assert str(bad) in report.skipped[0].reason
        # the rest of the batch still ran
        assert report.processed_count == 2

    def test_unterminated_header_skipped(self, tmp_path: Path) -> None:
        post = write_post(tmp_path / "_posts" / "x.md", "---\nlayout: post\n")
        report = rewrite_all(tmp_path, PATTERN, BUILD)
        assert report.skipped_paths == [post]
        assert read_post(post) == "---\nlayout: post\n"

    def test_impossible_date_does_not_abort_batch(self, site_root: Path) -> None:
        odd = write_post(site_root / "_posts" / "2014-02-28-a.md", "---\ndate: 2014-02-30\n---\n")
        report = rewrite_all(site_root, PATTERN, BUILD)
        assert report.skipped == []
        assert report.processed_count == 3
        assert read_post(odd) == (
            "---\nredirect_to:\n  - https://example.com/a\ndate: 2014-02-30\n---\n"
        )
        assert rewrite_all(site_root, PATTERN, BUILD).unchanged == report.processed

    def test_missing_root_raises_without_writes(self, tmp_path: Path) -> None:
        before = _snapshot(tmp_path)
        with pytest.raises(NotFoundError) as exc_info:
            rewrite_all(tmp_path / "missing", PATTERN, BUILD)
        assert exc_info.value.path == tmp_path / "missing"
        assert _snapshot(tmp_path) == before

    def test_write_failure_is_per_document(
        self, site_root: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        real_replace = os.replace

        def flaky(src: str, dst: str | os.PathLike[str]) -> None:
            if Path(dst).name == "about-me.md":
                raise OSError("read-only")
            real_replace(src, dst)

        monkeypatch.setattr(os, "replace", flaky)
        report = rewrite_all(site_root, PATTERN, BUILD)
        assert [p.name for p in report.processed] == ["2014-01-30-change-data.md"]
        assert [s.error for s in report.skipped] == ["IO_ERROR"]
        assert read_post(site_root / "_posts" / "2015" / "about-me.md").startswith("---\nlayout")

    def test_crlf_document(self, tmp_path: Path) -> None:
        post = write_post(tmp_path / "_posts" / "a.md", "---\r\nlayout: post\r\n---\r\nBody\r\n")
        rewrite_all(tmp_path, PATTERN, BUILD)
        assert read_post(post) == (
            "---\r\nredirect_to:\r\n  - https://example.com/a\r\nlayout: post\r\n---\r\nBody\r\n"
        )

    def test_body_bytes_preserved(self, tmp_path: Path) -> None:
        body = "Body with trailing spaces   \n\n\tTabbed\nno newline at end"
        post = write_post(tmp_path / "_posts" / "a.md", f"---\nlayout: post\n---\n{body}")
        rewrite_all(tmp_path, PATTERN, BUILD)
        assert read_post(post).endswith(f"---\n{body}")

    def test_dry_run_writes_nothing(self, site_root: Path) -> None:
        before = _snapshot(site_root)
        report = rewrite_all(site_root, PATTERN, BUILD, dry_run=True)
        assert _snapshot(site_root) == before
        assert report.processed_count == 2
        post = site_root / "_posts" / "2014-01-30-change-data.md"
        assert "+redirect_to:\n" in report.diffs[post]
        assert "+  - https://example.com/change-data\n" in report.diffs[post]

    def test_backup_suffix(self, site_root: Path) -> None:
        rewrite_all(site_root, PATTERN, BUILD, backup_suffix=".orig")
        backup = site_root / "_posts" / "2014-01-30-change-data.md.orig"
        assert read_post(backup) == CHANGE_DATA

    def test_slug_collision_warning(self, tmp_path: Path) -> None:
        write_post(tmp_path / "_posts" / "2014-01-01-hello.md", "---\n---\n")
        write_post(tmp_path / "_posts" / "2015-01-01-hello.md", "---\n---\n")
        report = rewrite_all(tmp_path, PATTERN, BUILD)
        assert len(report.warnings) == 1
        assert "hello" in report.warnings[0]

    def test_on_document_callback(self, site_root: Path) -> None:
        write_post(site_root / "_posts" / "zz-bad.md", "nope\n")
        seen: list[tuple[str, DocumentStatus]] = []
        rewrite_all(site_root, PATTERN, BUILD, on_document=lambda p, s: seen.append((p.name, s)))
        assert seen == [
            ("2014-01-30-change-data.md", DocumentStatus.REWRITTEN),
            ("about-me.md", DocumentStatus.REWRITTEN),
            ("zz-bad.md", DocumentStatus.SKIPPED),
        ]


class TestRewriteDocument:
    def test_builder_without_key_is_rejected(self, tmp_path: Path) -> None:
        post = write_post(tmp_path / "a.md", "---\n---\n")
        with pytest.raises(ValueError, match="no top-level key"):
            rewrite_document(post, lambda slug: [f"  - {slug}"])

    def test_dry_run_status(self, tmp_path: Path) -> None:
        post = write_post(tmp_path / "a.md", "---\n---\n")
        status, diff = rewrite_document(post, BUILD, dry_run=True)
        assert status is DocumentStatus.WOULD_REWRITE
        assert diff is not None
