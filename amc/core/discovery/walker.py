# amc/core/discovery/walker.py
import os
import stat
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union
import structlog

from amc.config.settings import AmcConfig, ExclusionScope, FilterConfig
from amc.core.discovery.filters import FilterPipeline
from amc.core.discovery.git_utils import (
    find_repository_root,
    get_global_excludes_file,
    get_repository_exclude_file,
)
from amc.core.discovery.models import CandidateEntry, EntryKind, FileRecord
from amc.core.discovery.path_resolution import resolve_scan_root
from amc.core.discovery.pattern_matching import IgnoreMatcher, IgnoreRules, load_ignore_file

log = structlog.get_logger(__name__)


class FileWalker:
    """
    Walks a directory tree and returns the files that pass the layered
    ignore rules and the configured filters.

    Diagnostics go to ``log``; any structlog-compatible logger can be
    injected, the module logger is used otherwise.
    """

    def __init__(
        self,
        extensions: Iterable[str],
        excluded_folders: Iterable[str] = (),
        exclusion_scope: ExclusionScope = ExclusionScope.ANY_DEPTH,
        *,
        respect_ignore_files: bool = True,
        git_global: bool = True,
        git_exclude: bool = True,
        log=None,
    ):
        self.filter_config = FilterConfig.build(extensions, excluded_folders, exclusion_scope)
        self.pipeline = FilterPipeline.from_config(self.filter_config)
        self.respect_ignore_files = respect_ignore_files
        self.git_global = git_global
        self.git_exclude = git_exclude
        self.log = log if log is not None else structlog.get_logger(__name__)

    @classmethod
    def from_config(cls, config: AmcConfig, **kwargs) -> "FileWalker":
        return cls(config.extensions, config.excluded_folders, config.exclusion_scope, **kwargs)

    @property
    def extensions(self):
        return self.filter_config.extensions

    @property
    def excluded_folders(self):
        return self.filter_config.excluded_folders

    def walk(self, directory: Union[str, Path]) -> List[FileRecord]:
        """Returns every matching file under ``directory``. Raises PathResolutionError for a bad root."""
        return list(self.iter_records(directory))

    def iter_records(self, directory: Union[str, Path]) -> Iterator[FileRecord]:
        # the root is resolved eagerly so a bad path fails before iteration starts.
        base_path = resolve_scan_root(directory)
        return self._iter_records(base_path)

    def _iter_records(self, base_path: Path) -> Iterator[FileRecord]:
        self.log.info("file_walk_started", directory=str(base_path))
        self.log.info("looking_for_extensions", extensions=sorted(self.extensions))

        ignore_rules = self._build_ignore_rules(base_path) if self.respect_ignore_files else None
        matched = 0

        for dirpath, dirnames, filenames in os.walk(base_path, topdown=True, followlinks=False, onerror=self._on_walk_error):
            current_dir = Path(dirpath)
            relative_dir = current_dir.relative_to(base_path)

            # prune directories; the leaf filters would reject their contents anyway.
            dirnames[:] = sorted(
                d for d in dirnames
                if not self._is_pruned(current_dir / d, relative_dir / d, ignore_rules)
            )

            for file_name in sorted(filenames):
                absolute_path = current_dir / file_name
                kind = self._classify(absolute_path)
                if kind is None:
                    continue
                if ignore_rules is not None and ignore_rules.is_ignored(absolute_path, is_dir=False):
                    self.log.debug("file_ignored_by_ignore_rules", path=str(absolute_path))
                    continue

                entry = CandidateEntry(absolute_path, relative_dir / file_name, kind)
                rejected_by = self.pipeline.rejected_by(entry)
                self.log.debug(
                    "checking_file",
                    path=str(absolute_path),
                    included=rejected_by is None,
                    rejected_by=rejected_by,
                )
                if rejected_by is not None:
                    continue

                matched += 1
                yield FileRecord(
                    absolute_path=absolute_path,
                    relative_path=self._derive_relative_path(absolute_path, base_path),
                )

        self.log.info("file_walk_complete", directory=str(base_path), matched=matched)

    def _build_ignore_rules(self, base_path: Path) -> IgnoreRules:
        repo_root = find_repository_root(base_path)
        anchor = repo_root if repo_root is not None else base_path
        if repo_root is None:
            self.log.debug("no_git_repository_found", directory=str(base_path))

        base_layers: List[IgnoreMatcher] = []
        if self.git_global:
            global_file = get_global_excludes_file(base_path)
            if global_file is not None:
                matcher = load_ignore_file(global_file, anchor, self.log)
                if matcher is not None:
                    base_layers.append(matcher)
        if self.git_exclude and repo_root is not None:
            exclude_file = get_repository_exclude_file(repo_root)
            if exclude_file is not None:
                matcher = load_ignore_file(exclude_file, repo_root, self.log)
                if matcher is not None:
                    base_layers.append(matcher)

        rules = IgnoreRules(anchor, base_layers, self.log)

        # the root-level .gitignore is applied whether or not a repository was found.
        gitignore_path = base_path / ".gitignore"
        if gitignore_path.exists():
            self.log.info("found_root_gitignore", path=str(gitignore_path))
            rules.add_explicit(gitignore_path, load_ignore_file(gitignore_path, base_path, self.log))

        return rules

    def _is_pruned(self, absolute_dir: Path, relative_dir: Path, ignore_rules: Optional[IgnoreRules]) -> bool:
        if self.pipeline.prunes_directory(relative_dir):
            self.log.debug("directory_excluded_by_name", path=str(absolute_dir))
            return True
        if ignore_rules is not None and ignore_rules.is_ignored(absolute_dir, is_dir=True):
            self.log.debug("directory_ignored_by_ignore_rules", path=str(absolute_dir))
            return True
        return False

    def _classify(self, path: Path) -> Optional[EntryKind]:
        # follows symlinks: a link to a regular file counts as a file.
        try:
            mode = os.stat(path).st_mode
        except FileNotFoundError:
            if os.path.islink(path):
                return EntryKind.OTHER
            self.log.debug("directory_entry_vanished", path=str(path))
            return None
        except OSError as e:
            self.log.warning("directory_entry_unreadable", path=str(path), error=str(e))
            return None
        if stat.S_ISREG(mode):
            return EntryKind.FILE
        if stat.S_ISDIR(mode):
            return EntryKind.DIRECTORY
        return EntryKind.OTHER

    def _on_walk_error(self, error: OSError) -> None:
        self.log.warning("directory_entry_unreadable", path=str(error.filename), error=str(error))

    def _derive_relative_path(self, absolute_path: Path, base_path: Path) -> Path:
        try:
            return absolute_path.relative_to(base_path)
        except ValueError:
            self.log.warning("relative_path_derivation_failed", path=str(absolute_path), root=str(base_path))
            return absolute_path


def discover_files(config: AmcConfig, directory: Union[str, Path] = ".", **walker_kwargs) -> List[FileRecord]:
    # convenience wrapper: one walk with a loaded configuration.
    return FileWalker.from_config(config, **walker_kwargs).walk(directory)
