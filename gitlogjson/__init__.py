"""
gitlogjson - Git history JSON exporter

A CLI tool that exports a repository's commit history as a JSON array,
escaping free-form commit fields without relying on a JSON encoder.
"""

from gitlogjson.__version__ import __version__

__all__ = ["__version__"]
