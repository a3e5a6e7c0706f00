"""
Command-line interface for cratepin.

This module provides the main CLI entry point and handles global options,
configuration loading, and command registration.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from cratepin.config import load_config
from cratepin.__version__ import __version__
from cratepin.context import CratePinContext
from cratepin.exceptions import ConfigError, CratePinError
from cratepin.commands.resolve import resolve
from cratepin.utils.console import print_error, print_warning, reconfigure_console
from cratepin.utils.logger import get_logger, setup_logging, verbosity_to_level

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="CRATEPIN_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="CRATEPIN_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="cratepin",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """cratepin: pin crate names to registry versions.

    \b
    Available commands:
      cratepin resolve NAME[@REQ]...   Resolve crates to concrete versions

    \b
    Examples:
      cratepin resolve serde tokio@1
      cratepin resolve --rust-version 1.70 clap
      cratepin -v resolve --format toml parking-lot

    Use ``cratepin COMMAND --help`` for command-specific options.
    """
    level = verbosity_to_level(verbose)
    setup_logging(level=level, verbose=verbose >= 2)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))

    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    cratepin_ctx = CratePinContext()
    cratepin_ctx.config_path = config or loaded_config.source_path
    cratepin_ctx.config = loaded_config
    cratepin_ctx.color = color
    cratepin_ctx.verbose = verbose
    ctx.obj = cratepin_ctx

    logger.debug("cratepin v%s", __version__)
    logger.debug("Config path: %s", cratepin_ctx.config_path)
    logger.debug("Configuration: %s", loaded_config.to_log_dict())


cli.add_command(resolve)


def main() -> int:
    """Main entry point for the cratepin CLI.

    Returns:
        Exit code:
            0   Success
            1   Unhandled or application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        cli(standalone_mode=False)
        return 0

    except click.exceptions.Exit as exc:
        return exc.exit_code

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1

    except CratePinError as exc:
        print_error(str(exc))
        logger.debug(
            "CratePinError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except (KeyboardInterrupt, click.exceptions.Abort):
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
