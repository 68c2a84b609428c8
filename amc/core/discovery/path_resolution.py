# amc/core/discovery/path_resolution.py
from pathlib import Path
from typing import Union
import structlog

from amc.exceptions import PathResolutionError

log = structlog.get_logger(__name__)

def resolve_scan_root(raw_path: Union[str, Path]) -> Path:
    # resolves the walk's starting directory to an absolute, symlink-free path.
    candidate = Path(raw_path)
    try:
        if candidate == Path("."):
            base_path = Path.cwd()
        else:
            base_path = candidate.resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise PathResolutionError(f"failed to resolve directory path '{raw_path}': {e}") from e

    if not base_path.is_dir():
        raise PathResolutionError(f"scan root is not a directory: {base_path}")

    log.debug("scan_root_resolved", raw_path=str(raw_path), resolved=str(base_path))
    return base_path
