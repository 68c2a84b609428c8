from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional
import structlog

log = structlog.get_logger(__name__)

DEFAULT_CONFIG_FILENAME = ".amc.toml"
DEFAULT_DELIMITER = "---"
DEFAULT_EXTENSIONS = ["rs"]

# file names that are never treated as content, whatever their extension.
RESERVED_FILE_NAMES: FrozenSet[str] = frozenset({DEFAULT_CONFIG_FILENAME})


class ExclusionScope(Enum):
    # where an excluded folder name is matched within a file's ancestry.
    ANY_DEPTH = "any_depth"
    TOP_LEVEL = "top_level"

    @classmethod
    def from_string(cls, s: Optional[str]) -> "ExclusionScope":
        if not s:
            return cls.ANY_DEPTH
        try:
            return cls(s.lower())
        except ValueError:
            log.warning("invalid_exclusion_scope_string", input_string=s)
            return cls.ANY_DEPTH


def normalize_extension(ext: str) -> str:
    # "rs" and ".rs" are the same configured extension.
    return ext[1:] if ext.startswith(".") else ext


@dataclass(frozen=True)
class FilterConfig:
    """Read-only filter settings for a single walk.

    ``extensions`` are stored without their leading dot and are matched
    case-sensitively. ``excluded_folders`` are bare directory names compared
    against whole path components.
    """

    extensions: FrozenSet[str] = frozenset()
    excluded_folders: FrozenSet[str] = frozenset()
    exclusion_scope: ExclusionScope = ExclusionScope.ANY_DEPTH
    reserved_file_names: FrozenSet[str] = RESERVED_FILE_NAMES

    @classmethod
    def build(
        cls,
        extensions: Iterable[str],
        excluded_folders: Iterable[str] = (),
        exclusion_scope: ExclusionScope = ExclusionScope.ANY_DEPTH,
    ) -> "FilterConfig":
        return cls(
            extensions=frozenset(normalize_extension(e) for e in extensions),
            excluded_folders=frozenset(excluded_folders),
            exclusion_scope=exclusion_scope,
        )


@dataclass
class AmcConfig:
    # holds the settings read from a configuration file. `delimiter` is
    # accepted for compatibility with existing config files and is not used
    # by discovery.
    delimiter: str = DEFAULT_DELIMITER
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    excluded_folders: List[str] = field(default_factory=list)
    exclusion_scope: ExclusionScope = ExclusionScope.ANY_DEPTH

    def to_filter_config(self) -> FilterConfig:
        return FilterConfig.build(self.extensions, self.excluded_folders, self.exclusion_scope)
