# amc/core/discovery/git_utils.py
"""
Locates the git-side ignore sources for a scan root: the repository root,
its local exclude file and the user's global excludes file.
"""
import os
import subprocess
from pathlib import Path
from typing import Optional, Tuple
import structlog

from amc.exceptions import GitError

log = structlog.get_logger(__name__)


def _run_git_command(
    args: list[str], cwd: Path, check_exit_code: bool = True
) -> Tuple[bool, str, str]:
    """
    runs a git command via subprocess.
    returns a tuple: (success_flag, stdout_str, stderr_str).
    if `check_exit_code` is true, raises `GitError` on non-zero exit.
    """
    command_parts = ["git"] + [str(arg) for arg in args]
    log.debug("executing_git_command", command=" ".join(command_parts), cwd=str(cwd))
    try:
        process = subprocess.run(
            command_parts,
            capture_output=True,
            text=True,
            check=False,
            cwd=cwd,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError:
        log.debug("git_executable_not_found", note="ensure git is installed and in your system's path.")
        raise GitError("git command not found. is git installed and in path?") from None
    except OSError as e:
        raise GitError(f"unexpected error running git command {' '.join(args)}: {e}") from e

    was_successful = process.returncode == 0
    stdout_content = (process.stdout or "").strip()
    stderr_content = (process.stderr or "").strip()

    if not was_successful:
        error_details = {
            "command": " ".join(command_parts),
            "exit_code": process.returncode,
            "cwd": str(cwd),
            "stderr": stderr_content if stderr_content else "(empty)",
        }
        log.debug("git_command_failed", **error_details)
        if check_exit_code:
            raise GitError(f"git command failed. details: {error_details}")

    return was_successful, stdout_content, stderr_content


def find_repository_root(start: Path) -> Optional[Path]:
    """returns the closest directory at or above `start` containing a `.git` entry."""
    for candidate in (start, *start.parents):
        if (candidate / ".git").exists():
            return candidate
    return None


def resolve_git_dir(repo_root: Path) -> Optional[Path]:
    # `.git` is usually a directory; worktrees and submodules use a `gitdir:` file.
    dot_git = repo_root / ".git"
    if dot_git.is_dir():
        return dot_git
    try:
        first_line = dot_git.read_text(encoding="utf-8").splitlines()[0]
    except (OSError, UnicodeDecodeError, IndexError):
        return None
    prefix = "gitdir:"
    if not first_line.startswith(prefix):
        return None
    git_dir = Path(first_line[len(prefix):].strip())
    if not git_dir.is_absolute():
        git_dir = repo_root / git_dir
    return git_dir if git_dir.is_dir() else None


def get_repository_exclude_file(repo_root: Path) -> Optional[Path]:
    """path of the repository-local `info/exclude` file, if it exists."""
    git_dir = resolve_git_dir(repo_root)
    if git_dir is None:
        return None
    exclude_file = git_dir / "info" / "exclude"
    return exclude_file if exclude_file.is_file() else None


def _default_global_excludes_file() -> Path:
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_config_home) if xdg_config_home else Path.home() / ".config"
    return base / "git" / "ignore"


def get_global_excludes_file(cwd: Path) -> Optional[Path]:
    """
    path of the user's global excludes file, if it exists.

    `core.excludesFile` wins when set; otherwise git's default location
    `$XDG_CONFIG_HOME/git/ignore` (or `~/.config/git/ignore`) is used.
    """
    configured: Optional[str] = None
    try:
        ok, stdout_str, _ = _run_git_command(
            ["config", "--get", "core.excludesFile"], cwd, check_exit_code=False
        )
        if ok and stdout_str:
            configured = stdout_str
    except GitError as e:
        log.debug("global_excludes_lookup_failed", error=str(e))

    candidate = Path(configured).expanduser() if configured else _default_global_excludes_file()
    if candidate.is_file():
        log.debug("global_excludes_file_found", path=str(candidate))
        return candidate
    return None
