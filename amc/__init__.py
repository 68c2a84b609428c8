# amc/__init__.py
"""all-my-circuits: discover project files for annotation and concatenation."""

__version__ = "0.2.3"
