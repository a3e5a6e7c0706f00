"""
Console output utilities for cratepin using Rich.

User-facing output of the CLI goes through this module; diagnostics go
through :mod:`cratepin.utils.logger`.  Status messages are written to
stderr so that ``cratepin resolve --format toml`` output can be piped
straight into a manifest.
"""

from __future__ import annotations

import os
import sys
import threading
from typing import Any, Dict, List, Optional

from rich.table import Table
from rich.theme import Theme
from rich.console import Console

CRATEPIN_THEME = Theme(
    {
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "crate": "bold magenta",
        "version": "green",
        "dim": "dim",
    }
)

_console: Optional[Console] = None
_err_console: Optional[Console] = None
_console_lock = threading.Lock()


def _should_use_color(stream: Any) -> bool:
    """Return True if colored output should be enabled for *stream*."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("CI"):
        return False
    try:
        return stream.isatty()
    except (AttributeError, OSError):
        return False


def _make_console(stderr: bool) -> Console:
    use_color = _should_use_color(sys.stderr if stderr else sys.stdout)
    return Console(
        theme=CRATEPIN_THEME,
        stderr=stderr,
        no_color=not use_color,
        highlight=False,
    )


def get_raw_console() -> Console:
    """Return the singleton stdout console."""
    global _console

    if _console is None:
        with _console_lock:
            if _console is None:
                _console = _make_console(stderr=False)
    return _console


def get_error_console() -> Console:
    """Return the singleton stderr console used for status messages."""
    global _err_console

    if _err_console is None:
        with _console_lock:
            if _err_console is None:
                _err_console = _make_console(stderr=True)
    return _err_console


def reconfigure_console() -> None:
    """Drop the cached consoles so the next call re-reads ``NO_COLOR``."""
    global _console, _err_console
    with _console_lock:
        _console = None
        _err_console = None


# ---------------------------------------------------------------------------
# Status messages (stderr)
# ---------------------------------------------------------------------------


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    """Print an error message."""
    get_error_console().print(
        f"{prefix} {message}", style="error", markup=False, soft_wrap=True
    )


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    """Print a warning message."""
    get_error_console().print(
        f"{prefix} {message}", style="warning", markup=False, soft_wrap=True
    )


# ---------------------------------------------------------------------------
# Structured output (stdout)
# ---------------------------------------------------------------------------


def print_table(
    data: List[Dict[str, Any]],
    *,
    headers: Optional[List[str]] = None,
    title: Optional[str] = None,
    column_styles: Optional[Dict[str, str]] = None,
) -> None:
    """Render rows of dictionaries as a Rich table.

    Args:
        data: Row dictionaries.
        headers: Column order. Defaults to keys of the first row.
        title: Optional table title.
        column_styles: Theme style per column name.
    """
    if not data:
        return

    if headers is None:
        headers = list(data[0].keys())

    table = Table(title=title, show_header=True, header_style="bold")

    column_styles = column_styles or {}
    for header in headers:
        table.add_column(header, style=column_styles.get(header), overflow="fold")

    for row in data:
        table.add_row(*(str(row.get(h, "")) for h in headers))

    get_raw_console().print(table)


def print_plain(text: str) -> None:
    """Print text to stdout without markup or highlighting."""
    get_raw_console().print(text, markup=False, highlight=False, soft_wrap=True)
