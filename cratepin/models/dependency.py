"""
Resolved dependency model for cratepin.

A :class:`Dependency` is what the resolver hands back to manifest-editing
callers: the crate name that was actually found in the index (which may
differ from the requested spelling) and the selected version.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Dependency:
    """A crate pinned to a registry version.

    Attributes:
        name: Crate name as published in the registry index.
        version: Selected version string.
    """

    name: str
    version: str

    def to_toml(self) -> str:
        """Render the ``[dependencies]`` manifest line for this crate.

        Example::

            >>> Dependency("serde", "1.0.197").to_toml()
            'serde = "1.0.197"'
        """
        return f'{self.name} = "{self.version}"'

    def to_json(self) -> Dict[str, str]:
        """Serialize to a JSON-compatible dictionary."""
        return {"name": self.name, "version": self.version}

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"
