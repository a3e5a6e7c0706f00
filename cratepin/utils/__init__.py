"""
Utility helpers for cratepin.

This package provides reusable utilities used across cratepin, including:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Synchronous HTTP client utilities

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from cratepin.utils.logger import (
    get_logger,
    setup_logging,
    verbosity_to_level,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from cratepin.utils.console import (
    get_error_console,
    get_raw_console,
    print_error,
    print_plain,
    print_table,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# HTTP utilities
# ---------------------------------------------------------------------------

from cratepin.utils.http import HTTPClient

__all__ = [
    # Console
    "print_error",
    "print_plain",
    "print_table",
    "print_warning",
    "get_raw_console",
    "get_error_console",
    "reconfigure_console",
    # Logging
    "get_logger",
    "setup_logging",
    "verbosity_to_level",
    # HTTP
    "HTTPClient",
]
