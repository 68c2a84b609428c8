# tests/test_cli.py
"""End-to-end tests for the amc command line."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from amc import __version__
from amc.cli.interface import main_cli

from conftest import make_tree


@pytest.fixture
def runner():
    return CliRunner()


def listed_paths(output: str):
    return {line for line in output.splitlines() if line}


def test_lists_relative_paths_with_default_config(runner):
    with runner.isolated_filesystem() as td:
        make_tree(Path(td), {"main.rs": "", "lib/mod.rs": "", "README.md": ""})

        result = runner.invoke(main_cli, [], catch_exceptions=False)

        assert result.exit_code == 0
        assert listed_paths(result.stdout) == {"main.rs", "lib/mod.rs"}


def test_config_file_extensions_and_excluded_folders(runner):
    with runner.isolated_filesystem() as td:
        make_tree(Path(td), {
            ".amc.toml": 'delimiter = "---"\nextensions = ["py", "toml"]\nexcluded_folders = ["build"]\n',
            "app.py": "",
            "pyproject.toml": "",
            "build/generated.py": "",
            "pkg/build/also_generated.py": "",
        })

        result = runner.invoke(main_cli, ["--config", ".amc.toml"], catch_exceptions=False)

        assert result.exit_code == 0
        assert listed_paths(result.stdout) == {"app.py", "pyproject.toml"}


def test_cli_options_override_config(runner):
    with runner.isolated_filesystem() as td:
        make_tree(Path(td), {
            "proj/.amc.toml": 'extensions = ["py"]\nexcluded_folders = ["build"]\n',
            "proj/app.py": "",
            "proj/notes.md": "",
            "proj/docs/guide.md": "",
            "proj/docs/target/old.md": "",
        })

        result = runner.invoke(
            main_cli,
            ["--dir", "proj", "--config", "proj/.amc.toml", "-e", "md", "-x", "target"],
            catch_exceptions=False,
        )

        assert result.exit_code == 0
        assert listed_paths(result.stdout) == {"notes.md", "docs/guide.md"}


def test_top_level_only_flag(runner):
    with runner.isolated_filesystem() as td:
        make_tree(Path(td), {"target/a.rs": "", "docs/target/b.rs": ""})

        result = runner.invoke(main_cli, ["-x", "target", "--top-level-only"], catch_exceptions=False)

        assert result.exit_code == 0
        assert listed_paths(result.stdout) == {"docs/target/b.rs"}


def test_gitignore_and_no_ignore(runner):
    with runner.isolated_filesystem() as td:
        make_tree(Path(td), {".gitignore": "generated/\n", "main.rs": "", "generated/out.rs": ""})

        respected = runner.invoke(main_cli, [], catch_exceptions=False)
        disabled = runner.invoke(main_cli, ["--no-ignore"], catch_exceptions=False)

        assert listed_paths(respected.stdout) == {"main.rs"}
        assert listed_paths(disabled.stdout) == {"main.rs", "generated/out.rs"}


def test_absolute_paths_and_nul_separator(runner):
    with runner.isolated_filesystem() as td:
        make_tree(Path(td), {"a.rs": "", "b.rs": ""})

        result = runner.invoke(main_cli, ["--absolute-paths", "-0"], catch_exceptions=False)

        assert result.exit_code == 0
        entries = [p for p in result.stdout.split("\0") if p]
        assert len(entries) == 2
        assert all(Path(p).is_absolute() for p in entries)
        assert {Path(p).name for p in entries} == {"a.rs", "b.rs"}


def test_summary_goes_to_stderr(runner):
    with runner.isolated_filesystem() as td:
        make_tree(Path(td), {"a.rs": ""})

        result = runner.invoke(main_cli, ["--summary", "-x", "target"], catch_exceptions=False)

        assert result.exit_code == 0
        assert listed_paths(result.stdout) == {"a.rs"}
        assert "Files discovered: 1" in result.stderr
        assert "Excluded folders: target" in result.stderr


def test_missing_directory_is_an_error(runner):
    with runner.isolated_filesystem():
        result = runner.invoke(main_cli, ["--dir", "no_such_dir"])

        assert result.exit_code == 1
        assert "Error:" in result.stderr
        assert result.stdout == ""


def test_invalid_config_is_an_error(runner):
    with runner.isolated_filesystem() as td:
        (Path(td) / ".amc.toml").write_text("extensions = [oops")

        result = runner.invoke(main_cli, [])

        assert result.exit_code == 1
        assert "Error:" in result.stderr


def test_empty_extension_list_warns(runner):
    with runner.isolated_filesystem() as td:
        make_tree(Path(td), {".amc.toml": "extensions = []\n", "a.rs": ""})

        result = runner.invoke(main_cli, [], catch_exceptions=False)

        assert result.exit_code == 0
        assert result.stdout == ""
        assert "no extensions configured" in result.stderr


def test_version(runner):
    result = runner.invoke(main_cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
