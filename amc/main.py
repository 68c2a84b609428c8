# amc/main.py
"""Main entry point for the amc CLI application."""

from amc.cli.interface import main_cli


def entrypoint():
    """Function to be called by the script defined in pyproject.toml."""
    main_cli(prog_name="amc")

if __name__ == '__main__':
    entrypoint()
