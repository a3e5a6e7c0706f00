"""
Shared context object for cratepin CLI commands.

The top-level ``cratepin`` group builds one :class:`CratePinContext` per
invocation; subcommands receive it through :data:`pass_context`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from cratepin.config import CratePinConfig


class CratePinContext:
    """Global context object for cratepin CLI commands.

    Attributes:
        config_path: Path of the configuration file in use, if any.
        config: Loaded configuration (defaults when no file was found).
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
    """

    __slots__ = ("config_path", "config", "verbose", "color")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.config: CratePinConfig = CratePinConfig()
        self.verbose: int = 0
        self.color: bool = True


#: Click decorator for injecting :class:`CratePinContext` into commands.
pass_context = click.make_pass_decorator(CratePinContext, ensure=True)
