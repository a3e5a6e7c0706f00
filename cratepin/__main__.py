"""
Executable module for cratepin.

Running ``python -m cratepin`` is equivalent to running ``cratepin``.
"""

from __future__ import annotations

import sys


def main() -> int:
    """Forward to :func:`cratepin.cli.main` and return its exit code."""
    # Import lazily so dependencies are only loaded during CLI use
    from cratepin.cli import main as cli_main

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
