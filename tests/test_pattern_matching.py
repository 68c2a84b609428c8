# tests/test_pattern_matching.py
"""Tests for ignore-file loading and layered ignore resolution."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from amc.core.discovery.pattern_matching import IgnoreRules, load_ignore_file
from amc.exceptions import IgnoreFileLoadWarning


def write_ignore(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


class TestLoadIgnoreFile:

    def test_missing_file_returns_none(self, tmp_path):
        assert load_ignore_file(tmp_path / ".gitignore", tmp_path) is None

    def test_undecodable_file_warns(self, tmp_path):
        bad = tmp_path / ".gitignore"
        bad.write_bytes(b"\xff\xfe\xfd")
        with pytest.warns(IgnoreFileLoadWarning):
            assert load_ignore_file(bad, tmp_path) is None

    def test_unsearchable_directory_is_skipped(self, tmp_path):
        injected_log = MagicMock()
        with patch.object(Path, "is_file", side_effect=PermissionError(13, "Permission denied")):
            assert load_ignore_file(tmp_path / ".gitignore", tmp_path, injected_log) is None
        injected_log.warning.assert_called_once()
        assert injected_log.warning.call_args.args[0] == "directory_entry_unreadable"

    def test_comments_and_blank_lines_never_decide(self, tmp_path):
        matcher = load_ignore_file(write_ignore(tmp_path / ".gitignore", "# a comment\n\n*.tmp\n"), tmp_path)
        assert matcher.check(tmp_path / "a.tmp", is_dir=False) is True
        assert matcher.check(tmp_path / "a.rs", is_dir=False) is None

    def test_check_reports_negation(self, tmp_path):
        matcher = load_ignore_file(write_ignore(tmp_path / ".gitignore", "*.log\n!keep.log\n"), tmp_path)
        assert matcher.check(tmp_path / "drop.log", is_dir=False) is True
        assert matcher.check(tmp_path / "keep.log", is_dir=False) is False

    def test_directory_only_pattern(self, tmp_path):
        matcher = load_ignore_file(write_ignore(tmp_path / ".gitignore", "cache/\n"), tmp_path)
        assert matcher.check(tmp_path / "cache", is_dir=True) is True
        assert matcher.check(tmp_path / "cache", is_dir=False) is None

    def test_anchored_pattern(self, tmp_path):
        matcher = load_ignore_file(write_ignore(tmp_path / ".gitignore", "/build\n"), tmp_path)
        assert matcher.check(tmp_path / "build", is_dir=True) is True
        assert matcher.check(tmp_path / "src" / "build", is_dir=True) is None

    def test_path_outside_base_is_undecided(self, tmp_path):
        matcher = load_ignore_file(write_ignore(tmp_path / "sub" / ".gitignore", "*\n"), tmp_path / "sub")
        assert matcher.check(tmp_path / "other.rs", is_dir=False) is None


class TestIgnoreRules:

    def test_inner_layer_overrides_outer(self, tmp_path):
        write_ignore(tmp_path / ".gitignore", "*.rs\n")
        write_ignore(tmp_path / "keep" / ".gitignore", "!*.rs\n")
        rules = IgnoreRules(tmp_path)

        assert rules.is_ignored(tmp_path / "top.rs", is_dir=False)
        assert not rules.is_ignored(tmp_path / "keep" / "inner.rs", is_dir=False)

    def test_base_layers_have_lowest_precedence(self, tmp_path):
        base = load_ignore_file(write_ignore(tmp_path / "global_ignore", "*.rs\n"), tmp_path)
        write_ignore(tmp_path / ".gitignore", "!main.rs\n")
        rules = IgnoreRules(tmp_path, [base])

        assert rules.is_ignored(tmp_path / "other.rs", is_dir=False)
        assert not rules.is_ignored(tmp_path / "main.rs", is_dir=False)

    def test_explicit_failed_load_is_not_retried(self, tmp_path):
        gitignore = write_ignore(tmp_path / ".gitignore", "*.rs\n")
        rules = IgnoreRules(tmp_path)
        rules.add_explicit(gitignore, None)

        assert not rules.is_ignored(tmp_path / "main.rs", is_dir=False)

    def test_unmatched_path_is_kept(self, tmp_path):
        assert not IgnoreRules(tmp_path).is_ignored(tmp_path / "main.rs", is_dir=False)
