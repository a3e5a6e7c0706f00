"""Crate version resolution for cratepin.

This module provides the two entry points manifest-editing code uses to
turn a crate name into a pinned :class:`~cratepin.models.Dependency`:

- :func:`get_latest_dependency`: newest usable version;
- :func:`get_compatible_dependency`: newest usable version matching a
  version requirement.

Both look the name up under every dash/underscore spelling, filter out
yanked and toolchain-incompatible versions, and pin the winner under the
name actually found in the index.  When that name differs from the one
requested, a warning message is handed to the ``warn`` callback (or
logged when no callback is given).

Typical usage::

    from cratepin.core import SparseIndex, get_latest_dependency
    from cratepin.utils.http import HTTPClient

    with HTTPClient() as http:
        index = SparseIndex(http)
        dep = get_latest_dependency("serde_json", False, None, index)
        print(dep.to_toml())        # serde_json = "1.0.115"
"""

from __future__ import annotations

from typing import Callable, Optional, Union

from cratepin.core.index import IndexHandle, fuzzy_query_registry_index
from cratepin.core.selector import read_compatible_version, read_latest_version
from cratepin.exceptions import EmptyCrateNameError
from cratepin.models.dependency import Dependency
from cratepin.models.rust_version import RustVersion
from cratepin.models.version_req import VersionReq
from cratepin.utils.logger import get_logger

logger = get_logger("resolver")

#: Receives human-readable, non-fatal diagnostics.
WarningSink = Callable[[str], None]


def get_latest_dependency(
    crate_name: str,
    allow_prerelease: bool,
    rust_version: Optional[RustVersion],
    index: IndexHandle,
    *,
    warn: Optional[WarningSink] = None,
) -> Dependency:
    """Query the latest version of *crate_name* from a registry index.

    Args:
        crate_name: Requested crate name (any dash/underscore spelling).
        allow_prerelease: Consider prerelease versions too.
        rust_version: Toolchain ceiling; ``None`` disables the check.
        index: Registry index handle.
        warn: Callback for the name-substitution warning.

    Returns:
        The resolved :class:`Dependency`, carrying the name found in the
        index.

    Raises:
        EmptyCrateNameError: *crate_name* is empty.
        CrateNotFoundError: No spelling of *crate_name* exists in the index.
        NoAvailableVersionError: All versions were filtered out.
    """
    if not crate_name:
        raise EmptyCrateNameError()

    crate_versions = fuzzy_query_registry_index(crate_name, index)
    dep = read_latest_version(crate_versions, allow_prerelease, rust_version)

    _warn_if_renamed(dep, crate_name, warn)
    return dep


def get_compatible_dependency(
    crate_name: str,
    version_req: Union[VersionReq, str],
    rust_version: Optional[RustVersion],
    index: IndexHandle,
    *,
    warn: Optional[WarningSink] = None,
) -> Dependency:
    """Find the highest version of *crate_name* compatible with *version_req*.

    Args:
        crate_name: Requested crate name (any dash/underscore spelling).
        version_req: Requirement, parsed or as text (e.g. ``"^1.2"``).
        rust_version: Toolchain ceiling; ``None`` disables the check.
        index: Registry index handle.
        warn: Callback for the name-substitution warning.

    Raises:
        EmptyCrateNameError: *crate_name* is empty.
        InvalidVersionReqError: *version_req* text does not parse.
        CrateNotFoundError: No spelling of *crate_name* exists in the index.
        NoAvailableVersionError: No usable version matches.
    """
    if not crate_name:
        raise EmptyCrateNameError()

    if isinstance(version_req, str):
        version_req = VersionReq.parse(version_req)

    crate_versions = fuzzy_query_registry_index(crate_name, index)
    dep = read_compatible_version(crate_versions, version_req, rust_version)

    _warn_if_renamed(dep, crate_name, warn)
    return dep


def _warn_if_renamed(
    dep: Dependency,
    crate_name: str,
    warn: Optional[WarningSink],
) -> None:
    if dep.name == crate_name:
        return

    message = f"Added `{dep.name}` instead of `{crate_name}`"
    if warn is None:
        logger.warning(message)
    else:
        warn(message)
