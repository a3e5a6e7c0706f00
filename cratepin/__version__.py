"""
cratepin version information.

Single source of truth for the package version, used by the CLI
``--version`` flag and the HTTP ``User-Agent`` header.
"""

from __future__ import annotations

__version__ = "0.1.0"

#: Human-readable version (for CLI)
VERSION_STRING = f"cratepin {__version__}"
