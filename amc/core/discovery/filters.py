# amc/core/discovery/filters.py
"""
Predicates deciding whether a visited entry belongs in the result set.

Each filter answers a single yes/no question about one entry and holds no
mutable state, so a pipeline gives the same answer in any traversal order.
"""
from pathlib import PurePath
from typing import FrozenSet, Optional, Sequence, Tuple

from amc.config.settings import ExclusionScope, FilterConfig
from amc.core.discovery.models import CandidateEntry, EntryKind


class EntryFilter:
    name = "entry"

    def accepts(self, entry: CandidateEntry) -> bool:
        raise NotImplementedError


class RegularFileFilter(EntryFilter):
    name = "regular_file"

    def accepts(self, entry: CandidateEntry) -> bool:
        return entry.kind is EntryKind.FILE


class ExcludedFolderFilter(EntryFilter):
    name = "excluded_folder"

    def __init__(self, excluded_folders: FrozenSet[str], scope: ExclusionScope = ExclusionScope.ANY_DEPTH):
        self.excluded_folders = excluded_folders
        self.scope = scope

    def _ancestry(self, relative_path: PurePath) -> Tuple[str, ...]:
        # components from the scan root down to the immediate parent.
        parents = relative_path.parts[:-1]
        if self.scope is ExclusionScope.TOP_LEVEL:
            return parents[:1]
        return parents

    def accepts(self, entry: CandidateEntry) -> bool:
        if not self.excluded_folders:
            return True
        return not any(part in self.excluded_folders for part in self._ancestry(entry.relative_path))

    def prunes_directory(self, relative_dir: PurePath) -> bool:
        """True if nothing beneath `relative_dir` can pass this filter."""
        if not self.excluded_folders:
            return False
        parts = relative_dir.parts
        if self.scope is ExclusionScope.TOP_LEVEL:
            parts = parts[:1]
        return any(part in self.excluded_folders for part in parts)


class ReservedFileFilter(EntryFilter):
    name = "reserved_file"

    def __init__(self, reserved_file_names: FrozenSet[str]):
        self.reserved_file_names = reserved_file_names

    def accepts(self, entry: CandidateEntry) -> bool:
        return entry.name not in self.reserved_file_names


class ExtensionFilter(EntryFilter):
    name = "extension"

    def __init__(self, extensions: FrozenSet[str]):
        self.extensions = extensions

    def accepts(self, entry: CandidateEntry) -> bool:
        suffix = PurePath(entry.name).suffix
        if not suffix:
            return False
        return suffix[1:] in self.extensions


class FilterPipeline:
    # filters applied in order; the first rejection wins.
    def __init__(self, filters: Sequence[EntryFilter]):
        self.filters: Tuple[EntryFilter, ...] = tuple(filters)

    @classmethod
    def from_config(cls, config: FilterConfig) -> "FilterPipeline":
        return cls([
            RegularFileFilter(),
            ExcludedFolderFilter(config.excluded_folders, config.exclusion_scope),
            ReservedFileFilter(config.reserved_file_names),
            ExtensionFilter(config.extensions),
        ])

    def rejected_by(self, entry: CandidateEntry) -> Optional[str]:
        for entry_filter in self.filters:
            if not entry_filter.accepts(entry):
                return entry_filter.name
        return None

    def accepts(self, entry: CandidateEntry) -> bool:
        return self.rejected_by(entry) is None

    def prunes_directory(self, relative_dir: PurePath) -> bool:
        return any(
            f.prunes_directory(relative_dir)
            for f in self.filters
            if isinstance(f, ExcludedFolderFilter)
        )
