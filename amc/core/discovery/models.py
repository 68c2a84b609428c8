# amc/core/discovery/models.py
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class EntryKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"
    OTHER = "other"


@dataclass(frozen=True)
class CandidateEntry:
    # a node visited during traversal, before filtering.
    absolute_path: Path
    relative_path: Path
    kind: EntryKind

    @property
    def name(self) -> str:
        return self.absolute_path.name


@dataclass(frozen=True)
class FileRecord:
    """A discovered file.

    ``relative_path`` is ``absolute_path`` with the scan root stripped off and
    is meant for display. Consumers read content through ``absolute_path``.
    """

    absolute_path: Path
    relative_path: Path
