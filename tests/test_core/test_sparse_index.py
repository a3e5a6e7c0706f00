from __future__ import annotations

import json
from unittest.mock import MagicMock

import httpx
import pytest

from cratepin.core.sparse_index import SparseIndex
from cratepin.exceptions import IndexLookupError, NetworkError
from cratepin.utils.http import HTTPClient


def make_response(status_code: int, text: str = "") -> httpx.Response:
    return httpx.Response(
        status_code,
        text=text,
        request=httpx.Request("GET", "https://index.example/"),
    )


@pytest.fixture
def http_client() -> MagicMock:
    return MagicMock(spec=HTTPClient)


@pytest.mark.unit
class TestSparseIndexInit:
    """Tests for SparseIndex construction."""

    def test_default_url(self, http_client: MagicMock) -> None:
        """Test crates.io is the default index."""
        index = SparseIndex(http_client)

        assert index.index_url == "https://index.crates.io/"

    def test_trailing_slash_added(self, http_client: MagicMock) -> None:
        """Test the base URL always ends with a slash."""
        index = SparseIndex(http_client, "https://mirror.example/index")

        assert index.index_url == "https://mirror.example/index/"


@pytest.mark.unit
class TestSparseIndexLookup:
    """Tests for SparseIndex.lookup."""

    def test_fetches_registry_path(self, http_client: MagicMock, index_line) -> None:
        """Test the crate file is requested from its registry path."""
        body = "\n".join(
            json.dumps(index_line("serde", v)) for v in ("1.0.0", "1.0.1")
        )
        http_client.get.return_value = make_response(200, body)

        entry = SparseIndex(http_client).lookup("serde")

        http_client.get.assert_called_once_with("https://index.crates.io/se/rd/serde")
        assert entry is not None
        assert [v.version for v in entry.versions] == ["1.0.0", "1.0.1"]

    @pytest.mark.parametrize("status_code", [404, 410, 451])
    def test_not_found(self, http_client: MagicMock, status_code: int) -> None:
        """Test not-found statuses mean the crate does not exist."""
        http_client.get.return_value = make_response(status_code)

        assert SparseIndex(http_client).lookup("nope") is None

    def test_other_spelling_in_file(self, http_client: MagicMock, index_line) -> None:
        """Test records under another spelling do not count as a hit."""
        http_client.get.return_value = make_response(
            200, json.dumps(index_line("foo_bar", "0.1.0"))
        )

        assert SparseIndex(http_client).lookup("foo-bar") is None

    def test_network_error(self, http_client: MagicMock) -> None:
        """Test transport failures become IndexLookupError."""
        failure = NetworkError("offline", url="https://index.crates.io/se/rd/serde")
        http_client.get.side_effect = failure

        with pytest.raises(IndexLookupError) as exc_info:
            SparseIndex(http_client).lookup("serde")

        assert exc_info.value.original_error is failure
        assert exc_info.value.source == "https://index.crates.io/se/rd/serde"

    def test_malformed_body(self, http_client: MagicMock) -> None:
        """Test a malformed index file raises IndexLookupError."""
        http_client.get.return_value = make_response(200, "<html>oops</html>")

        with pytest.raises(IndexLookupError):
            SparseIndex(http_client).lookup("serde")


@pytest.mark.unit
class TestSparseIndexCache:
    """Tests for SparseIndex caching."""

    def test_hits_cached(self, http_client: MagicMock, index_line) -> None:
        """Test a found crate is fetched once."""
        http_client.get.return_value = make_response(
            200, json.dumps(index_line("serde", "1.0.0"))
        )
        index = SparseIndex(http_client)

        first = index.lookup("serde")
        second = index.lookup("serde")

        assert first is second
        assert http_client.get.call_count == 1
        assert index.is_cached("serde")

    def test_misses_cached(self, http_client: MagicMock) -> None:
        """Test a missing crate is fetched once."""
        http_client.get.return_value = make_response(404)
        index = SparseIndex(http_client)

        index.lookup("nope")
        index.lookup("nope")

        assert http_client.get.call_count == 1

    def test_failures_not_cached(self, http_client: MagicMock) -> None:
        """Test failed lookups are retried on the next call."""
        http_client.get.side_effect = NetworkError("offline")
        index = SparseIndex(http_client)

        with pytest.raises(IndexLookupError):
            index.lookup("serde")

        assert not index.is_cached("serde")

    def test_clear_cache(self, http_client: MagicMock) -> None:
        """Test clear_cache forgets previous lookups."""
        http_client.get.return_value = make_response(404)
        index = SparseIndex(http_client)
        index.lookup("nope")

        index.clear_cache()
        index.lookup("nope")

        assert not index.is_cached("other")
        assert http_client.get.call_count == 2
