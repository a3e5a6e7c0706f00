"""
cratepin: pin crate names to registry versions.

cratepin resolves a bare crate name to a concrete version from a Cargo
registry index.  It is the version-lookup half of ``cargo add``-style
tooling: given ``serde_json`` (or ``serde-json``), find the crate the
registry actually publishes and pick the newest version that is not
yanked, matches an optional version requirement, and builds with the
caller's toolchain.

Example::

    from cratepin import MemoryIndex, IndexVersion, get_latest_dependency

    index = MemoryIndex.from_versions([IndexVersion("serde", "1.0.197")])
    get_latest_dependency("serde", False, None, index).to_toml()
    # 'serde = "1.0.197"'
"""

from __future__ import annotations

from cratepin.__version__ import __version__
from cratepin.core import (
    IndexHandle,
    LocalIndex,
    MemoryIndex,
    SparseIndex,
    get_compatible_dependency,
    get_latest_dependency,
)
from cratepin.exceptions import (
    CrateNotFoundError,
    CratePinError,
    EmptyCrateNameError,
    IndexLookupError,
    InvalidIndexRecordError,
    InvalidToolchainSpecError,
    InvalidVersionReqError,
    NoAvailableVersionError,
)
from cratepin.models import Dependency, IndexEntry, IndexVersion, RustVersion, VersionReq

__author__ = "cratepin Contributors"
__license__ = "Apache-2.0 OR MIT"

__all__ = [
    "__version__",
    # Resolution
    "get_latest_dependency",
    "get_compatible_dependency",
    # Index handles
    "IndexHandle",
    "LocalIndex",
    "MemoryIndex",
    "SparseIndex",
    # Models
    "Dependency",
    "IndexEntry",
    "IndexVersion",
    "RustVersion",
    "VersionReq",
    # Errors
    "CratePinError",
    "CrateNotFoundError",
    "EmptyCrateNameError",
    "IndexLookupError",
    "InvalidIndexRecordError",
    "InvalidToolchainSpecError",
    "InvalidVersionReqError",
    "NoAvailableVersionError",
]
