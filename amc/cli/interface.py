# amc/cli/interface.py
import sys
from pathlib import Path
from typing import Any, List

import click
from click_option_group import optgroup
from rich.console import Console as RichConsole
from rich.progress import Progress, SpinnerColumn, TextColumn
import structlog
import logging as stdlib_logging

from amc import __version__ as app_version
from amc.config.loader import load_config
from amc.config.settings import AmcConfig, ExclusionScope, DEFAULT_CONFIG_FILENAME
from amc.core.discovery import FileRecord, FileWalker
from amc.core.output import format_path_listing, write_to_stdout
from amc.exceptions import AmcError
from amc.logging_setup import configure_logging

log = structlog.get_logger(__name__)


def _apply_cli_overrides(config: AmcConfig, cli_params: dict) -> AmcConfig:
    # cli extensions replace the configured list; excluded folders are added to it.
    if cli_params.get("extensions"):
        config.extensions = list(cli_params["extensions"])
    if cli_params.get("excluded_folders"):
        config.excluded_folders = list(dict.fromkeys([*config.excluded_folders, *cli_params["excluded_folders"]]))
    if cli_params.get("top_level_only"):
        config.exclusion_scope = ExclusionScope.TOP_LEVEL
    return config


def _discover_with_progress(walker: FileWalker, directory: str) -> List[FileRecord]:
    app_log_level = stdlib_logging.getLogger("amc").getEffectiveLevel()
    progress_disabled = app_log_level > stdlib_logging.INFO or not sys.stderr.isatty()
    stderr_console = RichConsole(file=sys.stderr)

    with Progress(
        SpinnerColumn(), TextColumn("[bold blue]{task.description}"),
        transient=True, disable=progress_disabled, console=stderr_console
    ) as progress:
        discover_task = progress.add_task("discovering files...", total=None)
        records = walker.walk(directory)
        progress.update(discover_task, completed=True, description=f"discovered {len(records)} files.")
    return records


def _run_discovery_flow(config: AmcConfig, cli_params: dict) -> None:
    log.info("discovery_flow_started", directory=cli_params["directory"])
    walker = FileWalker.from_config(config, respect_ignore_files=not cli_params.get("no_ignore", False))
    records = _discover_with_progress(walker, cli_params["directory"])

    if cli_params.get("absolute_paths"):
        listed = [str(r.absolute_path) for r in records]
    else:
        listed = [r.relative_path.as_posix() for r in records]
    write_to_stdout(format_path_listing(listed, nul_separated=cli_params.get("nul_separated", False)))

    if cli_params.get("show_summary"):
        click.secho("--- discovery summary ---", fg="cyan", err=True)
        click.echo(f"Files discovered: {len(records)}", err=True)
        click.echo(f"Extensions: {', '.join(sorted(walker.extensions)) or '(none)'}", err=True)
        if walker.excluded_folders:
            click.echo(f"Excluded folders: {', '.join(sorted(walker.excluded_folders))}", err=True)


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@optgroup.group("Input Options", help="Where to scan and which configuration to use.")
@optgroup.option("-d", "--dir", "directory", default=".", show_default=True, help="Directory to scan.")
@optgroup.option("-c", "--config", "config_path", type=click.Path(path_type=Path), default=DEFAULT_CONFIG_FILENAME, show_default=True, help="Config file path. Defaults are used if it does not exist.")
@optgroup.group("Filtering Options", help="Control which files are discovered.")
@optgroup.option("-e", "--ext", "extensions", multiple=True, help="File extension to include (repeatable). Replaces the configured list.")
@optgroup.option("-x", "--exclude-folder", "excluded_folders", multiple=True, help="Folder name to exclude at any depth (repeatable). Added to the configured list.")
@optgroup.option("--top-level-only", "top_level_only", is_flag=True, default=False, help="Match excluded folder names only directly under the scan root.")
@optgroup.option("--no-ignore", "no_ignore", is_flag=True, default=False, help="Disable .gitignore, .ignore and git exclude processing.")
@optgroup.group("Output Options", help="How discovered files are listed.")
@optgroup.option("--absolute-paths", "absolute_paths", is_flag=True, default=False, help="List absolute paths instead of paths relative to the scan root.")
@optgroup.option("-0", "--null", "nul_separated", is_flag=True, default=False, help="Separate listed paths with NUL instead of newline.")
@optgroup.option("--summary", "show_summary", is_flag=True, default=False, help="Print a discovery summary to stderr.")
@optgroup.group("Application Behavior", help="Logging.")
@optgroup.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info, -vv debug.")
@optgroup.option("--force-json-logs", "force_json_logs_cli", is_flag=True, default=False, help="Force JSON logs.")
@click.version_option(version=app_version, package_name="all-my-circuits", prog_name="amc", help="Show version and exit.")
def main_cli(**cli_params: Any):
    """amc: list the project files to annotate, honoring .gitignore rules,
    excluded folders and an extension allow-list."""

    log_level = "warning"
    if cli_params.get("verbosity_level", 0) == 1: log_level = "info"
    elif cli_params.get("verbosity_level", 0) >= 2: log_level = "debug"
    configure_logging(log_level_str=log_level, force_json_logs=cli_params.get("force_json_logs_cli", False))

    log.debug("cli_command_invoked", params=cli_params)

    try:
        config = load_config(cli_params["config_path"])
        config = _apply_cli_overrides(config, cli_params)
        if not config.extensions:
            click.secho("Warning: no extensions configured; nothing will match.", fg="yellow", err=True)
        _run_discovery_flow(config, cli_params)

    except AmcError as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    except click.ClickException as e:
        log.error("click_exception_in_cli", error_type=type(e).__name__, message=str(e))
        e.show(); sys.exit(e.exit_code)
    except Exception as e:
        log.critical("unexpected_critical_error_in_cli", message=str(e), exc_info=True)
        click.secho(f"Unexpected critical error: {e}. Please report this.", fg="red", err=True)
        sys.exit(1)
