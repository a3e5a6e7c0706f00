"""
Registry index records for cratepin.

Two layers are modelled here:

- :class:`IndexVersion` / :class:`IndexEntry` are the raw records an index
  handle returns, with versions still as strings.
- :class:`CrateVersion` is the typed record the selector ranks, built once
  per resolution call from the raw records of a single matched name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from semantic_version import Version

from cratepin.models.rust_version import RustVersion


@dataclass(frozen=True)
class IndexVersion:
    """One published version as listed in a registry index file.

    Attributes:
        name: Crate name exactly as published.
        version: Semver version string (``vers`` in the index format).
        rust_version: Declared ``rust-version``, if any.
        yanked: Whether the registry has withdrawn this version.
    """

    name: str
    version: str
    rust_version: Optional[str] = None
    yanked: bool = False

    @classmethod
    def from_index_json(cls, data: Dict[str, Any]) -> "IndexVersion":
        """Build a record from one line of a registry index file.

        Raises:
            KeyError: ``name`` or ``vers`` is missing.
        """
        return cls(
            name=data["name"],
            version=data["vers"],
            rust_version=data.get("rust_version"),
            yanked=bool(data.get("yanked", False)),
        )


@dataclass
class IndexEntry:
    """All published versions of one crate name, in index order."""

    name: str
    versions: List[IndexVersion] = field(default_factory=list)


@dataclass(frozen=True)
class CrateVersion:
    """A typed candidate considered by the version selector.

    Attributes:
        name: Crate name of the matched index entry.
        version: Parsed semantic version.
        rust_version: Minimum toolchain the version declares, if any.
        yanked: Whether the version is withdrawn.
    """

    name: str
    version: Version
    rust_version: Optional[RustVersion] = None
    yanked: bool = False

    @property
    def is_prerelease(self) -> bool:
        return bool(self.version.prerelease)

    @classmethod
    def from_index(cls, record: IndexVersion) -> "CrateVersion":
        """Parse a raw index record.

        Raises:
            ValueError: ``record.version`` is not valid semver.
            InvalidToolchainSpecError: ``record.rust_version`` does not parse.
        """
        return cls(
            name=record.name,
            version=Version(record.version),
            rust_version=(
                RustVersion.parse(record.rust_version)
                if record.rust_version
                else None
            ),
            yanked=record.yanked,
        )
