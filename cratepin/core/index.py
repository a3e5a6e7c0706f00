"""Registry index access for cratepin.

Defines the :class:`IndexHandle` protocol the resolver depends on, two
file-format helpers shared by every index backend, the in-process
backends (:class:`MemoryIndex`, :class:`LocalIndex`), and the fuzzy lookup
that tries every spelling of a crate name against a handle.

Index files use the registry format: one JSON object per line, one line
per published version::

    {"name":"serde","vers":"1.0.0","deps":[],"cksum":"…","yanked":false}
    {"name":"serde","vers":"1.0.1","deps":[],"cksum":"…","yanked":false,"rust_version":"1.31"}

Typical usage::

    index = LocalIndex(Path("~/registry-mirror").expanduser())
    versions = fuzzy_query_registry_index("serde_json", index)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Protocol

from cratepin.constants import MAX_INDEX_FILE_SIZE
from cratepin.core.names import gen_fuzzy_crate_names
from cratepin.exceptions import (
    CrateNotFoundError,
    IndexLookupError,
    InvalidIndexRecordError,
    InvalidToolchainSpecError,
)
from cratepin.models.crate_version import CrateVersion, IndexEntry, IndexVersion
from cratepin.utils.logger import get_logger

logger = get_logger("index")

__all__ = [
    "IndexHandle",
    "LocalIndex",
    "MemoryIndex",
    "crate_index_path",
    "fuzzy_query_registry_index",
    "parse_index_file",
    "published_name_entry",
]


class IndexHandle(Protocol):
    """Anything the resolver can look crate names up in.

    ``lookup`` returns ``None`` when the registry has no crate with this
    name (compared case-insensitively, separators significant), and raises :class:`IndexLookupError` when the answer could
    not be obtained (network failure, malformed index file).
    """

    def lookup(self, name: str) -> Optional[IndexEntry]: ...


# ---------------------------------------------------------------------------
# Index file format helpers
# ---------------------------------------------------------------------------


def crate_index_path(name: str) -> str:
    """Return the relative path of *name*'s file inside a registry index.

    Example::

        >>> crate_index_path("a")
        '1/a'
        >>> crate_index_path("syn")
        '3/s/syn'
        >>> crate_index_path("Serde_JSON")
        'se/rd/serde_json'
    """
    lowered = name.lower()
    length = len(lowered)
    if length == 0:
        raise ValueError("crate name must not be empty")
    if length == 1:
        return f"1/{lowered}"
    if length == 2:
        return f"2/{lowered}"
    if length == 3:
        return f"3/{lowered[0]}/{lowered}"
    return f"{lowered[:2]}/{lowered[2:4]}/{lowered}"


def parse_index_file(
    text: str,
    *,
    crate_name: str,
    source: Optional[str] = None,
) -> IndexEntry:
    """Parse the contents of one registry index file.

    Args:
        text: Raw file contents.
        crate_name: Name that was looked up (for error reporting and as a
            fallback entry name for empty files).
        source: URL or path the text came from (for error reporting).

    Returns:
        An :class:`IndexEntry` listing every version line in file order.

    Raises:
        IndexLookupError: A line is not a JSON object with ``name`` and
            ``vers`` keys.
    """
    versions: List[IndexVersion] = []

    for line_number, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            data = json.loads(line)
            if not isinstance(data, dict):
                raise TypeError(f"expected JSON object, got {type(data).__name__}")
            versions.append(IndexVersion.from_index_json(data))
        except (ValueError, TypeError, KeyError) as exc:
            raise IndexLookupError(
                f"Malformed index line {line_number} for `{crate_name}`",
                crate_name=crate_name,
                source=source,
                original_error=exc,
            ) from exc

    entry_name = versions[0].name if versions else crate_name
    return IndexEntry(name=entry_name, versions=versions)


# ---------------------------------------------------------------------------
# Backends
# ---------------------------------------------------------------------------


class MemoryIndex:
    """Dict-backed index.

    Like a registry, names are matched case-insensitively but separators
    are significant: ``Foo_Bar`` finds ``foo_bar`` and not ``foo-bar``.

    Example::

        >>> index = MemoryIndex.from_versions([IndexVersion("foo", "0.1.0")])
        >>> index.lookup("foo").versions[0].version
        '0.1.0'
    """

    def __init__(self, entries: Optional[Mapping[str, IndexEntry]] = None) -> None:
        self._entries: Dict[str, IndexEntry] = {
            name.lower(): entry for name, entry in (entries or {}).items()
        }

    @classmethod
    def from_versions(cls, versions: Iterable[IndexVersion]) -> "MemoryIndex":
        """Group raw version records into entries by their ``name``."""
        index = cls()
        for version in versions:
            index.add(version)
        return index

    def add(self, version: IndexVersion) -> None:
        entry = self._entries.setdefault(
            version.name.lower(), IndexEntry(name=version.name)
        )
        entry.versions.append(version)

    def lookup(self, name: str) -> Optional[IndexEntry]:
        return self._entries.get(name.lower())


class LocalIndex:
    """Index backed by a directory laid out like a registry index.

    A crate ``serde`` is read from ``<root>/se/rd/serde``.  The path is
    lower-cased, so ``Serde`` reads the same file and the entry comes back
    under the published name ``serde``.

    Args:
        root: Directory containing the index tree.
        max_file_size: Refuse index files larger than this many bytes.
    """

    def __init__(self, root: Path, *, max_file_size: int = MAX_INDEX_FILE_SIZE) -> None:
        self.root = Path(root)
        self.max_file_size = max_file_size

    def lookup(self, name: str) -> Optional[IndexEntry]:
        path = self.root / crate_index_path(name)
        if not path.is_file():
            return None

        try:
            size = path.stat().st_size
            if size > self.max_file_size:
                raise IndexLookupError(
                    f"Index file too large: {size} bytes (max {self.max_file_size})",
                    crate_name=name,
                    source=str(path),
                )
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise IndexLookupError(
                f"Cannot read index file for `{name}`",
                crate_name=name,
                source=str(path),
                original_error=exc,
            ) from exc

        entry = parse_index_file(text, crate_name=name, source=str(path))
        return published_name_entry(entry, name)


def published_name_entry(entry: IndexEntry, name: str) -> Optional[IndexEntry]:
    """Keep the records published under *name*, ignoring case.

    The returned entry carries the name as published, which may differ in
    case from *name*.
    """
    wanted = name.lower()
    versions = [v for v in entry.versions if v.name.lower() == wanted]
    if not versions:
        return None
    return IndexEntry(name=versions[0].name, versions=versions)


# ---------------------------------------------------------------------------
# Fuzzy lookup
# ---------------------------------------------------------------------------


def fuzzy_query_registry_index(
    crate_name: str,
    index: IndexHandle,
) -> List[CrateVersion]:
    """Look *crate_name* up under every dash/underscore spelling.

    Variants are tried in the order produced by
    :func:`~cratepin.core.names.gen_fuzzy_crate_names` (requested spelling
    first) and the first one present in the index wins.  Lookup errors for
    a variant are logged and the next variant is tried.

    Args:
        crate_name: Name as requested by the user.
        index: Index handle, used exclusively for the duration of the call.

    Returns:
        Typed version records of the matched crate.

    Raises:
        CrateNotFoundError: No spelling exists in the index.  When lookups
            failed along the way, the last failure is chained as the cause.
        InvalidIndexRecordError: A record of the matched crate has a
            version or ``rust_version`` that cannot be parsed.
    """
    last_error: Optional[IndexLookupError] = None

    for the_name in gen_fuzzy_crate_names(crate_name):
        try:
            krate = index.lookup(the_name)
        except IndexLookupError as exc:
            logger.debug("Lookup of `%s` failed: %s", the_name, exc)
            last_error = exc
            continue

        if krate is None:
            logger.debug("No crate named `%s` in index", the_name)
            continue

        logger.debug("Found `%s` with %d versions", the_name, len(krate.versions))
        return _to_crate_versions(krate)

    raise CrateNotFoundError(crate_name) from last_error


def _to_crate_versions(krate: IndexEntry) -> List[CrateVersion]:
    versions: List[CrateVersion] = []
    for record in krate.versions:
        try:
            versions.append(CrateVersion.from_index(record))
        except (ValueError, TypeError) as exc:
            raise InvalidIndexRecordError(
                record.name, record.version, f"invalid version: {exc}"
            ) from exc
        except InvalidToolchainSpecError as exc:
            raise InvalidIndexRecordError(
                record.name,
                record.version,
                f"invalid rust_version {record.rust_version!r}",
            ) from exc
    return versions
