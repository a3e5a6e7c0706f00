"""
Core functionality exports for cratepin.

Importing from here keeps user-facing imports clean and stable:

    from cratepin.core import get_latest_dependency, SparseIndex
"""

from __future__ import annotations

from cratepin.core.names import gen_fuzzy_crate_names
from cratepin.core.sparse_index import SparseIndex
from cratepin.core.selector import read_compatible_version, read_latest_version
from cratepin.core.resolver import get_compatible_dependency, get_latest_dependency
from cratepin.core.index import (
    IndexHandle,
    LocalIndex,
    MemoryIndex,
    crate_index_path,
    fuzzy_query_registry_index,
    parse_index_file,
)

__all__ = [
    "IndexHandle",
    "LocalIndex",
    "MemoryIndex",
    "SparseIndex",
    "crate_index_path",
    "fuzzy_query_registry_index",
    "gen_fuzzy_crate_names",
    "get_compatible_dependency",
    "get_latest_dependency",
    "parse_index_file",
    "read_compatible_version",
    "read_latest_version",
]
