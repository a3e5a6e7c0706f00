"""
Unified data model exports for cratepin.

This module re-exports all core data models to provide a stable and
convenient public API. Users can import models directly from
``cratepin.models`` instead of individual submodules.

Example:
    >>> from cratepin.models import Dependency, RustVersion, VersionReq
"""

from __future__ import annotations

from cratepin.models.dependency import Dependency
from cratepin.models.rust_version import RustVersion
from cratepin.models.version_req import Comparator, Op, VersionReq
from cratepin.models.crate_version import CrateVersion, IndexEntry, IndexVersion

__all__ = [
    "Comparator",
    "CrateVersion",
    "Dependency",
    "IndexEntry",
    "IndexVersion",
    "Op",
    "RustVersion",
    "VersionReq",
]
