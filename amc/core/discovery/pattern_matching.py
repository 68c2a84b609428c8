# amc/core/discovery/pattern_matching.py
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple
import pathspec
import structlog

from amc.exceptions import IgnoreFileLoadWarning

log = structlog.get_logger(__name__)

# per-directory ignore files, lowest precedence first.
PER_DIRECTORY_IGNORE_FILES = (".gitignore", ".ignore")


@dataclass(frozen=True)
class IgnoreMatcher:
    # compiled gitignore-style patterns, anchored at the directory they apply to.
    base_dir: Path
    spec: pathspec.PathSpec
    source: Path

    def check(self, path: Path, is_dir: bool) -> Optional[bool]:
        """
        True if the last matching pattern ignores `path`, False if it is
        re-included by a negated pattern, None if no pattern matches.
        """
        try:
            rel_path = path.relative_to(self.base_dir)
        except ValueError:
            return None
        path_str = rel_path.as_posix()
        if is_dir:
            # directory-only patterns ("build/") need the trailing slash.
            path_str += "/"

        decision: Optional[bool] = None
        for pattern in self.spec.patterns:
            if pattern.include is None:
                continue
            if pattern.regex.match(path_str):
                decision = pattern.include
        return decision


def load_ignore_file(ignore_file_path: Path, base_dir: Path, logger=None) -> Optional[IgnoreMatcher]:
    # loads and compiles gitignore patterns from a file. a file that cannot be
    # read or parsed is reported and skipped.
    logger = logger if logger is not None else log
    try:
        if not ignore_file_path.is_file():
            return None
    except OSError as e:
        # the containing directory is listable but not searchable.
        logger.warning("directory_entry_unreadable", path=str(ignore_file_path), error=str(e))
        return None
    try:
        with ignore_file_path.open("r", encoding="utf-8") as f_obj:
            spec = pathspec.PathSpec.from_lines(pathspec.patterns.GitWildMatchPattern, f_obj)
    except (OSError, ValueError) as e:
        logger.warning("failed_to_parse_ignore_file", path=str(ignore_file_path), error=str(e))
        warnings.warn(
            f"failed to load ignore file {ignore_file_path}: {e}",
            IgnoreFileLoadWarning,
            stacklevel=2,
        )
        return None
    logger.debug("loaded_ignore_file", path=str(ignore_file_path), patterns=len(spec.patterns))
    return IgnoreMatcher(base_dir=base_dir, spec=spec, source=ignore_file_path)


class IgnoreRules:
    """
    Layered gitignore resolution for one walk.

    ``base_layers`` (global excludes, repository ``info/exclude``) have the
    lowest precedence. On top of them come the per-directory ignore files
    from ``top_dir`` down to the directory holding the path being checked.
    The innermost layer with a matching pattern decides.
    """

    def __init__(
        self,
        top_dir: Path,
        base_layers: Iterable[IgnoreMatcher] = (),
        logger=None,
    ):
        self.top_dir = top_dir
        self.log = logger if logger is not None else log
        self._base_layers: Tuple[IgnoreMatcher, ...] = tuple(base_layers)
        self._explicit: Dict[Path, Optional[IgnoreMatcher]] = {}
        self._chain_cache: Dict[Path, Tuple[IgnoreMatcher, ...]] = {}

    def add_explicit(self, ignore_file_path: Path, matcher: Optional[IgnoreMatcher]) -> None:
        # an ignore file loaded up front; the per-directory scan reuses the
        # result, including a failed load, instead of reading it again.
        self._explicit[ignore_file_path] = matcher
        self._chain_cache.clear()

    def _load_directory(self, directory: Path) -> List[IgnoreMatcher]:
        matchers: List[IgnoreMatcher] = []
        for file_name in PER_DIRECTORY_IGNORE_FILES:
            ignore_file = directory / file_name
            if ignore_file in self._explicit:
                matcher = self._explicit[ignore_file]
            else:
                matcher = load_ignore_file(ignore_file, directory, self.log)
            if matcher is not None:
                matchers.append(matcher)
        return matchers

    def _chain_for(self, directory: Path) -> Tuple[IgnoreMatcher, ...]:
        cached = self._chain_cache.get(directory)
        if cached is not None:
            return cached

        if directory == self.top_dir or self.top_dir not in directory.parents:
            parent_chain = self._base_layers
        else:
            parent_chain = self._chain_for(directory.parent)

        chain = parent_chain + tuple(self._load_directory(directory))
        self._chain_cache[directory] = chain
        return chain

    def is_ignored(self, path: Path, is_dir: bool) -> bool:
        for matcher in reversed(self._chain_for(path.parent)):
            decision = matcher.check(path, is_dir)
            if decision is not None:
                return decision
        return False
