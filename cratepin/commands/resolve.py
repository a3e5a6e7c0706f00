"""Resolve command implementation for cratepin.

Turns crate names into concrete registry versions, the way ``cargo add``
does before it edits a manifest.

Each SPEC argument is either:

- ``NAME``: pin the latest usable version, or
- ``NAME@REQ``: pin the highest usable version matching ``REQ``
  (e.g. ``tokio@1``, ``serde@~1.0.100``).

Names are matched fuzzily (``parking-lot`` finds ``parking_lot``); a
warning is printed when the crate found is spelled differently.

Typical usage::

    $ cratepin resolve serde tokio@1 --format toml
    serde = "1.0.197"
    tokio = "1.36.0"

    # Only versions that build with Rust 1.65
    $ cratepin resolve --rust-version 1.65 clap

    # Resolve against a registry mirror on disk
    $ cratepin resolve --local-index ./index serde
"""

from __future__ import annotations

import sys
import json
import click
from pathlib import Path
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

from cratepin.config import normalize_index_url
from cratepin.context import pass_context, CratePinContext
from cratepin.core import (
    IndexHandle,
    LocalIndex,
    SparseIndex,
    get_compatible_dependency,
    get_latest_dependency,
)
from cratepin.core.resolver import WarningSink
from cratepin.exceptions import (
    ConfigError,
    CratePinError,
    InvalidToolchainSpecError,
    InvalidVersionReqError,
)
from cratepin.models import Dependency, RustVersion
from cratepin.utils import (
    HTTPClient,
    get_logger,
    print_error,
    print_plain,
    print_table,
    print_warning,
)

logger = get_logger("commands.resolve")

#: (spec, requirement text or None, resolved dependency)
Resolved = Tuple[str, Optional[str], Dependency]

#: (spec, error)
Failed = Tuple[str, CratePinError]


def _parse_rust_version_option(
    ctx: click.Context,
    param: click.Parameter,
    value: Optional[str],
) -> Optional[RustVersion]:
    if value is None:
        return None
    try:
        return RustVersion.parse(value)
    except InvalidToolchainSpecError as exc:
        raise click.BadParameter(str(exc), ctx=ctx, param=param) from exc


def _parse_index_url_option(
    ctx: click.Context,
    param: click.Parameter,
    value: Optional[str],
) -> Optional[str]:
    if value is None:
        return None
    try:
        return normalize_index_url(value)
    except ConfigError as exc:
        raise click.BadParameter(exc.message, ctx=ctx, param=param) from exc


@click.command()
@click.argument("specs", nargs=-1, required=True, metavar="NAME[@REQ]...")
@click.option(
    "--allow-prerelease/--no-allow-prerelease",
    default=None,
    help="Consider prerelease versions when no requirement is given "
    "(overrides the configuration file).",
)
@click.option(
    "--rust-version",
    callback=_parse_rust_version_option,
    metavar="VERSION",
    help="Skip versions that need a newer Rust toolchain (e.g. 1.70).",
)
@click.option(
    "--index-url",
    callback=_parse_index_url_option,
    metavar="URL",
    help="Sparse registry index URL (default: crates.io).",
)
@click.option(
    "--local-index",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Read the registry index from a local directory instead.",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "simple", "json", "toml"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def resolve(
    ctx: CratePinContext,
    specs: Tuple[str, ...],
    allow_prerelease: Optional[bool],
    rust_version: Optional[RustVersion],
    index_url: Optional[str],
    local_index: Optional[Path],
    output_format: str,
) -> None:
    """Resolve crate names to concrete registry versions.

    \b
    Exits:
        0 if every crate was resolved, 1 otherwise.
    """
    config = ctx.config
    if allow_prerelease is None:
        allow_prerelease = config.allow_prerelease
    rust_version = rust_version or config.rust_version
    index_url = index_url or config.index_url

    logger.debug(
        "Resolving %s (allow_prerelease=%s, rust_version=%s)",
        ", ".join(specs),
        allow_prerelease,
        rust_version,
    )

    # JSON output carries warnings in the document instead of stderr
    warnings: List[str] = []
    warn = warnings.append if output_format == "json" else print_warning

    with _open_index(local_index, index_url, config.timeout) as index:
        resolved, failed = resolve_specs(
            specs,
            index,
            allow_prerelease=allow_prerelease,
            rust_version=rust_version,
            warn=warn,
        )

    _display(resolved, failed, warnings, output_format)
    sys.exit(1 if failed else 0)


def resolve_specs(
    specs: Tuple[str, ...],
    index: IndexHandle,
    *,
    allow_prerelease: bool,
    rust_version: Optional[RustVersion],
    warn: Optional[WarningSink] = None,
) -> Tuple[List[Resolved], List[Failed]]:
    """Resolve every ``NAME[@REQ]`` spec against one index handle.

    Specs are resolved one after another; a failure for one crate is
    recorded and does not stop the others.

    Returns:
        ``(resolved, failed)`` lists in input order.
    """
    resolved: List[Resolved] = []
    failed: List[Failed] = []

    for spec in specs:
        requirement: Optional[str] = None
        try:
            name, requirement = split_spec(spec)
            if requirement is None:
                dep = get_latest_dependency(
                    name, allow_prerelease, rust_version, index, warn=warn
                )
            else:
                dep = get_compatible_dependency(
                    name, requirement, rust_version, index, warn=warn
                )
        except CratePinError as exc:
            logger.debug("Failed to resolve %s: %r", spec, exc)
            failed.append((spec, exc))
        else:
            resolved.append((spec, requirement, dep))

    return resolved, failed


def split_spec(spec: str) -> Tuple[str, Optional[str]]:
    """Split ``NAME@REQ`` into its parts; ``REQ`` is ``None`` when absent.

    Raises:
        InvalidVersionReqError: ``@`` is present but nothing follows it.
    """
    name, sep, requirement = spec.partition("@")
    if not sep:
        return name.strip(), None
    if not requirement.strip():
        raise InvalidVersionReqError(requirement, "empty requirement after `@`")
    return name.strip(), requirement.strip()


@contextmanager
def _open_index(
    local_index: Optional[Path],
    index_url: str,
    timeout: int,
) -> Iterator[IndexHandle]:
    if local_index is not None:
        logger.debug("Using local index at %s", local_index)
        yield LocalIndex(local_index)
        return

    logger.debug("Using sparse index at %s", index_url)
    with HTTPClient(timeout=timeout) as http:
        yield SparseIndex(http, index_url)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def _display(
    resolved: List[Resolved],
    failed: List[Failed],
    warnings: List[str],
    output_format: str,
) -> None:
    output_format = output_format.lower()

    if output_format == "json":
        print_plain(json.dumps(_to_json(resolved, failed, warnings), indent=2))
        return

    for spec, exc in failed:
        print_error(f"{spec}: {exc.message}")

    if output_format == "toml":
        for _, _, dep in resolved:
            print_plain(dep.to_toml())
    elif output_format == "simple":
        for _, _, dep in resolved:
            print_plain(f"{dep.name} {dep.version}")
    else:
        print_table(
            [
                {
                    "Crate": dep.name,
                    "Requested": requirement or "latest",
                    "Version": dep.version,
                }
                for _, requirement, dep in resolved
            ],
            title="Resolved crates",
            column_styles={"Crate": "crate", "Version": "version"},
        )


def _to_json(
    resolved: List[Resolved],
    failed: List[Failed],
    warnings: List[str],
) -> Dict[str, Any]:
    return {
        "resolved": [
            {**dep.to_json(), "requested": spec, "requirement": requirement}
            for spec, requirement, dep in resolved
        ],
        "errors": [
            {"spec": spec, "error": exc.message, "type": type(exc).__name__}
            for spec, exc in failed
        ],
        "warnings": warnings,
    }
