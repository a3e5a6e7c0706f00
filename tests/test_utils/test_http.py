from __future__ import annotations

from typing import Generator
from unittest.mock import MagicMock, patch

import httpx
import pytest

from cratepin.exceptions import NetworkError
from cratepin.utils.http import HTTPClient

URL = "https://index.crates.io/se/rd/serde"


def make_response(status_code: int, text: str = "", headers=None) -> httpx.Response:
    return httpx.Response(
        status_code,
        text=text,
        headers=headers,
        request=httpx.Request("GET", URL),
    )


@pytest.fixture
def http_client() -> HTTPClient:
    """Create an HTTPClient whose transport is a mock.

    Returns:
        HTTPClient: Client with ``_client`` replaced so no request leaves
        the process.
    """
    client = HTTPClient(timeout=5, max_retries=2)
    client._client = MagicMock(spec=httpx.Client)
    return client


@pytest.fixture
def no_sleep() -> Generator[MagicMock, None, None]:
    """Skip backoff delays."""
    with patch("cratepin.utils.http.time.sleep") as mock_sleep:
        yield mock_sleep


@pytest.mark.unit
class TestHTTPClientInit:
    """Tests for HTTPClient initialization and configuration."""

    def test_default_values(self) -> None:
        """Test HTTPClient initializes with the default constants."""
        client = HTTPClient()

        assert client.timeout == 30
        assert client.max_retries == 3
        assert client.rate_limit_delay == 0.0
        assert client.verify_ssl is True
        assert "cratepin" in client.user_agent
        assert client._max_429_retries == 5
        assert client._client is None

    def test_custom_values(self) -> None:
        """Test constructor parameters are stored."""
        client = HTTPClient(
            timeout=10,
            max_retries=0,
            rate_limit_delay=0.5,
            verify_ssl=False,
            user_agent="Custom/1.0",
        )

        assert client.timeout == 10
        assert client.max_retries == 0
        assert client.rate_limit_delay == 0.5
        assert client.verify_ssl is False
        assert client.user_agent == "Custom/1.0"


@pytest.mark.unit
class TestHTTPClientLifecycle:
    """Tests for client creation and cleanup."""

    def test_context_manager_creates_and_closes(self) -> None:
        """Test the httpx client lives only inside the with block."""
        with patch("cratepin.utils.http.httpx.Client") as mock_client_cls:
            with HTTPClient(user_agent="Test/1.0") as client:
                assert client._client is mock_client_cls.return_value

            mock_client_cls.return_value.close.assert_called_once()
            assert client._client is None

        kwargs = mock_client_cls.call_args.kwargs
        assert kwargs["http2"] is True
        assert kwargs["headers"] == {"User-Agent": "Test/1.0"}

    def test_close_without_client(self) -> None:
        """Test close is a no-op before the first request."""
        client = HTTPClient()

        client.close()

        assert client._client is None


@pytest.mark.unit
class TestHTTPClientGet:
    """Tests for HTTPClient.get retry behaviour."""

    def test_success(self, http_client: HTTPClient) -> None:
        """Test a 200 response is returned directly."""
        http_client._client.request.return_value = make_response(200, "ok")

        response = http_client.get(URL)

        assert response.text == "ok"
        http_client._client.request.assert_called_once_with("GET", URL)

    def test_url_cleaned(self, http_client: HTTPClient) -> None:
        """Test surrounding whitespace and quotes are stripped."""
        http_client._client.request.return_value = make_response(200)

        http_client.get(f'  "{URL}" ')

        http_client._client.request.assert_called_once_with("GET", URL)

    @pytest.mark.parametrize("status_code", [404, 410, 451])
    def test_not_found_returned(self, http_client: HTTPClient, status_code: int) -> None:
        """Test not-found statuses are handed back, not raised."""
        http_client._client.request.return_value = make_response(status_code)

        assert http_client.get(URL).status_code == status_code

    def test_client_error_raises(self, http_client: HTTPClient) -> None:
        """Test other 4xx responses fail immediately."""
        http_client._client.request.return_value = make_response(403, "denied")

        with pytest.raises(NetworkError) as exc_info:
            http_client.get(URL)

        assert exc_info.value.status_code == 403
        assert exc_info.value.response_body == "denied"
        assert http_client._client.request.call_count == 1

    def test_server_error_retried(
        self, http_client: HTTPClient, no_sleep: MagicMock
    ) -> None:
        """Test 5xx responses are retried with backoff."""
        http_client._client.request.side_effect = [
            make_response(503),
            make_response(200, "ok"),
        ]

        assert http_client.get(URL).text == "ok"
        assert no_sleep.call_count == 1

    def test_server_error_exhausts_retries(
        self, http_client: HTTPClient, no_sleep: MagicMock
    ) -> None:
        """Test NetworkError after every attempt failed."""
        http_client._client.request.return_value = make_response(500)

        with pytest.raises(NetworkError, match="after 3 attempts"):
            http_client.get(URL)

        assert http_client._client.request.call_count == 3

    def test_timeout_retried(self, http_client: HTTPClient, no_sleep: MagicMock) -> None:
        """Test timeouts are retried."""
        http_client._client.request.side_effect = [
            httpx.ReadTimeout("slow"),
            make_response(200, "ok"),
        ]

        assert http_client.get(URL).text == "ok"

    def test_network_error_chained(
        self, http_client: HTTPClient, no_sleep: MagicMock
    ) -> None:
        """Test the last transport error is chained to NetworkError."""
        failure = httpx.ConnectError("refused")
        http_client._client.request.side_effect = failure

        with pytest.raises(NetworkError) as exc_info:
            http_client.get(URL)

        assert exc_info.value.__cause__ is failure
        assert exc_info.value.url == URL

    @pytest.mark.parametrize(
        "failure",
        [
            httpx.RemoteProtocolError("Server disconnected"),
            httpx.ProxyError("proxy refused"),
        ],
        ids=["protocol", "proxy"],
    )
    def test_other_transport_errors_wrapped(
        self, http_client: HTTPClient, no_sleep: MagicMock, failure: Exception
    ) -> None:
        """Test every transport failure is retried and then wrapped."""
        http_client._client.request.side_effect = failure

        with pytest.raises(NetworkError) as exc_info:
            http_client.get(URL)

        assert exc_info.value.__cause__ is failure
        assert http_client._client.request.call_count == 3

    def test_unsupported_protocol_not_retried(
        self, http_client: HTTPClient, no_sleep: MagicMock
    ) -> None:
        """Test a URL with an unusable scheme fails straight away."""
        failure = httpx.UnsupportedProtocol("Request URL is missing a scheme")
        http_client._client.request.side_effect = failure

        with pytest.raises(NetworkError) as exc_info:
            http_client.get("index.crates.io/se/rd/serde")

        assert exc_info.value.__cause__ is failure
        assert http_client._client.request.call_count == 1
        no_sleep.assert_not_called()

    def test_rate_limited_then_ok(
        self, http_client: HTTPClient, no_sleep: MagicMock
    ) -> None:
        """Test 429 responses honour Retry-After."""
        http_client._client.request.side_effect = [
            make_response(429, headers={"Retry-After": "2"}),
            make_response(200, "ok"),
        ]

        assert http_client.get(URL).text == "ok"
        no_sleep.assert_called_once_with(2)

    @pytest.mark.parametrize(
        "header, delay",
        [
            ("Wed, 21 Oct 2015 07:28:00 GMT", 1),
            ("soon", 1),
            ("-3", 0),
        ],
        ids=["http-date", "garbage", "negative"],
    )
    def test_rate_limited_odd_retry_after(
        self, http_client: HTTPClient, no_sleep: MagicMock, header: str, delay: int
    ) -> None:
        """Test Retry-After values that are not delay seconds fall back."""
        http_client._client.request.side_effect = [
            make_response(429, headers={"Retry-After": header}),
            make_response(200, "ok"),
        ]

        assert http_client.get(URL).text == "ok"
        no_sleep.assert_called_once_with(delay)

    def test_rate_limit_exhausted(
        self, http_client: HTTPClient, no_sleep: MagicMock
    ) -> None:
        """Test repeated 429 responses eventually fail."""
        http_client.max_retries = 10
        http_client._client.request.return_value = make_response(429)

        with pytest.raises(NetworkError) as exc_info:
            http_client.get(URL)

        assert exc_info.value.status_code == 429
        assert http_client._client.request.call_count == 6


@pytest.mark.unit
class TestRateLimit:
    """Tests for the minimum delay between requests."""

    def test_disabled_by_default(self, no_sleep: MagicMock) -> None:
        """Test no delay is applied when rate_limit_delay is zero."""
        HTTPClient()._rate_limit()

        no_sleep.assert_not_called()

    def test_delay_applied(self, no_sleep: MagicMock) -> None:
        """Test back-to-back requests are spaced out."""
        client = HTTPClient(rate_limit_delay=1.0)

        with patch("cratepin.utils.http.time.time", return_value=100.0):
            client._rate_limit()
            client._rate_limit()

        no_sleep.assert_called_once()
        assert no_sleep.call_args.args[0] == pytest.approx(1.0)
