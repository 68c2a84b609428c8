# amc/core/discovery/__init__.py
"""
File discovery and filtering for amc.

Walks a directory tree once, honoring gitignore-style rules, excluded folder
names, reserved file names and an extension allow-list.
"""
from .models import CandidateEntry, EntryKind, FileRecord
from .walker import FileWalker, discover_files

__all__ = ["CandidateEntry", "EntryKind", "FileRecord", "FileWalker", "discover_files"]
