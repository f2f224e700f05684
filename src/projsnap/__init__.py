"""Project snapshot utilities.

This package scans a project directory, filters it with gitignore-style rules,
and renders the surviving files as a single text document: a tree diagram
followed by the contents of every included file.
"""

from importlib.metadata import PackageNotFoundError, version

from projsnap.projsnap import ProjectSnapshot, scan

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("projsnap")
except PackageNotFoundError:
    __version__ = "unknown"

__all__ = ["ProjectSnapshot", "scan", "__version__"]
