import sys
from typing import Iterable
import structlog
from amc.exceptions import OutputError

log = structlog.get_logger(__name__)

def write_to_stdout(text_content: str):
    # writes text to standard output.
    try:
        sys.stdout.write(text_content)
        sys.stdout.flush()
    except UnicodeEncodeError as e:
        log.warning("stdout_write_failed_trying_binary_fallback", error=str(e))
        try:
            sys.stdout.buffer.write(text_content.encode("utf-8", errors="replace"))
            sys.stdout.buffer.flush()
        except OSError as inner_e:
            raise OutputError(f"failed to write to stdout: {inner_e}") from inner_e
    except OSError as e:
        raise OutputError(f"failed to write to stdout: {e}") from e

def format_path_listing(paths: Iterable[str], nul_separated: bool = False) -> str:
    # one path per line, or NUL-terminated for xargs -0.
    separator = "\0" if nul_separated else "\n"
    return "".join(f"{p}{separator}" for p in paths)
