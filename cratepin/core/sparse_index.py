"""Sparse HTTP registry index for cratepin.

Implements :class:`~cratepin.core.index.IndexHandle` over the sparse
index protocol used by crates.io: every crate has one file at
``{index_url}{crate_index_path(name)}``, and a 404 (or 410/451) means
the crate does not exist.

Every looked-up name is cached, hits and misses alike, for the lifetime
of the handle.  The cache is plain mutable state; one handle must not be
shared by concurrent resolution calls.

Typical usage::

    with HTTPClient() as http:
        index = SparseIndex(http)
        entry = index.lookup("serde")
        print(len(entry.versions))
"""

from __future__ import annotations

from typing import Dict, Optional

from cratepin.constants import DEFAULT_INDEX_URL, INDEX_NOT_FOUND_STATUSES
from cratepin.core.index import (
    crate_index_path,
    parse_index_file,
    published_name_entry,
)
from cratepin.exceptions import IndexLookupError, NetworkError
from cratepin.models.crate_version import IndexEntry
from cratepin.utils.http import HTTPClient
from cratepin.utils.logger import get_logger

logger = get_logger("sparse_index")

__all__ = ["SparseIndex"]


class SparseIndex:
    """Registry index fetched file-by-file over HTTP.

    Args:
        http_client: Client used for every request; owned by the caller.
        index_url: Base URL of the sparse index, ending with ``/``.
    """

    def __init__(
        self,
        http_client: HTTPClient,
        index_url: str = DEFAULT_INDEX_URL,
    ) -> None:
        self.http_client = http_client
        self.index_url = index_url if index_url.endswith("/") else index_url + "/"
        self._cache: Dict[str, Optional[IndexEntry]] = {}

    def lookup(self, name: str) -> Optional[IndexEntry]:
        """Return the index entry for *name*, or ``None``.

        Raises:
            IndexLookupError: The request failed or the file is malformed.
        """
        if name in self._cache:
            return self._cache[name]

        url = self.index_url + crate_index_path(name)
        try:
            response = self.http_client.get(url)
        except NetworkError as exc:
            raise IndexLookupError(
                f"Failed to fetch index file for `{name}`",
                crate_name=name,
                source=url,
                original_error=exc,
            ) from exc

        if response.status_code in INDEX_NOT_FOUND_STATUSES:
            logger.debug("Index has no file for `%s` (HTTP %d)", name, response.status_code)
            self._cache[name] = None
            return None

        entry = published_name_entry(
            parse_index_file(response.text, crate_name=name, source=url),
            name,
        )
        self._cache[name] = entry
        return entry

    def clear_cache(self) -> None:
        """Forget every cached lookup."""
        self._cache.clear()

    def is_cached(self, name: str) -> bool:
        """Return ``True`` if *name* has been looked up already."""
        return name in self._cache
