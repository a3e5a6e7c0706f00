"""Version selection for cratepin.

Given the version records of one crate, pick the version to pin.  Both
selection modes share one filter pipeline and differ only in the last
predicate:

1. **Yanked** versions are never selected.
2. **Toolchain ceiling**: when the caller supplies a ``rust-version``,
   versions declaring a newer minimum toolchain are skipped.  Versions
   that declare nothing always pass.
3. **Mode predicate**:

   - *latest*: stable versions only, unless prereleases are allowed;
   - *compatible*: versions satisfying a :class:`VersionReq`.

The highest remaining version by semver precedence wins.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional, Sequence

from cratepin.constants import NO_AVAILABLE_VERSION_MESSAGE
from cratepin.exceptions import NoAvailableVersionError
from cratepin.models.crate_version import CrateVersion
from cratepin.models.dependency import Dependency
from cratepin.models.rust_version import RustVersion
from cratepin.models.version_req import VersionReq

__all__ = ["read_latest_version", "read_compatible_version"]

Predicate = Callable[[CrateVersion], bool]


def read_latest_version(
    versions: Sequence[CrateVersion],
    allow_prerelease: bool,
    rust_version: Optional[RustVersion],
) -> Dependency:
    """Select the newest usable version.

    Args:
        versions: Records of a single crate.
        allow_prerelease: Also consider prerelease versions.
        rust_version: Toolchain ceiling, or ``None`` for no ceiling.

    Returns:
        The selected version as a :class:`Dependency`.

    Raises:
        NoAvailableVersionError: Every version was filtered out.

    Example::

        >>> read_latest_version(versions, False, None).version
        '0.5.0'
    """
    return _select(
        versions,
        rust_version,
        lambda v: allow_prerelease or not v.is_prerelease,
    )


def read_compatible_version(
    versions: Sequence[CrateVersion],
    version_req: VersionReq,
    rust_version: Optional[RustVersion],
) -> Dependency:
    """Select the newest usable version matching *version_req*.

    Prerelease versions are only eligible when *version_req* opts into
    them (see :meth:`VersionReq.matches`).

    Raises:
        NoAvailableVersionError: No usable version matches.
    """
    return _select(versions, rust_version, lambda v: version_req.matches(v.version))


def _select(
    versions: Sequence[CrateVersion],
    rust_version: Optional[RustVersion],
    mode_predicate: Predicate,
) -> Dependency:
    candidates = _usable(versions, rust_version)
    candidates = (v for v in candidates if mode_predicate(v))

    latest = max(candidates, key=lambda v: v.version, default=None)
    if latest is None:
        crate_name = versions[0].name if versions else None
        raise NoAvailableVersionError(
            NO_AVAILABLE_VERSION_MESSAGE,
            crate_name=crate_name,
        )

    return Dependency(name=latest.name, version=str(latest.version))


def _usable(
    versions: Iterable[CrateVersion],
    rust_version: Optional[RustVersion],
) -> Iterable[CrateVersion]:
    """Drop yanked versions and versions above the toolchain ceiling."""
    for version in versions:
        if version.yanked:
            continue
        if (
            rust_version is not None
            and version.rust_version is not None
            and version.rust_version > rust_version
        ):
            continue
        yield version
