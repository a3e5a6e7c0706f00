from __future__ import annotations

import io
import logging
from typing import Generator
from unittest.mock import patch

import pytest

from cratepin.utils.logger import (
    ROOT_LOGGER_NAME,
    ColoredFormatter,
    get_logger,
    setup_logging,
    verbosity_to_level,
)


@pytest.fixture
def clean_logger_state() -> Generator[None, None, None]:
    """Start each test with a bare ``cratepin`` logger.

    Yields:
        None
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    yield
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)


@pytest.fixture
def captured_stream() -> io.StringIO:
    return io.StringIO()


def make_record(level: int = logging.WARNING, msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord(
        name="cratepin.test",
        level=level,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


@pytest.mark.unit
class TestColoredFormatter:
    """Tests for ColoredFormatter."""

    def test_plain_without_color(self) -> None:
        """Test the level name is left alone when colour is off."""
        formatter = ColoredFormatter("%(levelname)s: %(message)s", use_color=False)

        assert formatter.format(make_record()) == "WARNING: hello"

    def test_colored_on_terminal(self) -> None:
        """Test the level name is wrapped in ANSI codes on a terminal."""
        with patch(
            "cratepin.utils.logger._terminal_supports_color", return_value=True
        ):
            formatter = ColoredFormatter("%(levelname)s: %(message)s")

        output = formatter.format(make_record(logging.ERROR))

        assert output.startswith("\033[31mERROR\033[0m")

    def test_original_record_untouched(self) -> None:
        """Test colouring does not leak into other handlers."""
        with patch(
            "cratepin.utils.logger._terminal_supports_color", return_value=True
        ):
            formatter = ColoredFormatter("%(levelname)s")
        record = make_record()

        formatter.format(record)

        assert record.levelname == "WARNING"

    def test_no_color_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test NO_COLOR disables colour."""
        monkeypatch.setenv("NO_COLOR", "1")

        assert ColoredFormatter("%(message)s").use_color is False


@pytest.mark.unit
class TestVerbosityToLevel:
    """Tests for verbosity_to_level."""

    @pytest.mark.parametrize(
        "verbose, level",
        [
            (-1, logging.WARNING),
            (0, logging.WARNING),
            (1, logging.INFO),
            (2, logging.DEBUG),
            (5, logging.DEBUG),
        ],
    )
    def test_mapping(self, verbose: int, level: int) -> None:
        """Test -v counts map onto logging levels."""
        assert verbosity_to_level(verbose) == level


@pytest.mark.unit
class TestSetupLogging:
    """Tests for setup_logging."""

    def test_single_handler(
        self, clean_logger_state: None, captured_stream: io.StringIO
    ) -> None:
        """Test repeated calls replace the handler."""
        setup_logging(stream=captured_stream)
        logger = setup_logging(stream=captured_stream)

        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_level_filters(
        self, clean_logger_state: None, captured_stream: io.StringIO
    ) -> None:
        """Test records below the level are dropped."""
        setup_logging(level=logging.WARNING, stream=captured_stream)

        get_logger("test").info("hidden")
        get_logger("test").warning("shown")

        output = captured_stream.getvalue()
        assert "hidden" not in output
        assert "WARNING: shown" in output

    def test_verbose_format(
        self, clean_logger_state: None, captured_stream: io.StringIO
    ) -> None:
        """Test verbose output includes the logger name."""
        setup_logging(level=logging.DEBUG, verbose=True, stream=captured_stream)

        get_logger("resolver").debug("details")

        assert "cratepin.resolver - DEBUG - details" in captured_stream.getvalue()


@pytest.mark.unit
class TestGetLogger:
    """Tests for get_logger."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            (None, "cratepin"),
            ("cratepin", "cratepin"),
            ("resolver", "cratepin.resolver"),
            ("cratepin.index", "cratepin.index"),
        ],
    )
    def test_namespacing(self, name, expected: str) -> None:
        """Test loggers always live under the cratepin namespace."""
        assert get_logger(name).name == expected

    def test_null_handler_installed(self, clean_logger_state: None) -> None:
        """Test library use stays silent without configuration."""
        get_logger("index")

        handlers = logging.getLogger(ROOT_LOGGER_NAME).handlers
        assert any(isinstance(h, logging.NullHandler) for h in handlers)
