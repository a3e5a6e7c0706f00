"""
Custom exception hierarchy for cratepin.

Every error raised by cratepin derives from :class:`CratePinError` and may
carry structured metadata in ``details`` so that the CLI and debug logs can
show *what* failed without parsing the message text.

Resolution errors are fatal to a single resolution call; the only error
that is recovered locally is :class:`IndexLookupError`, which the index
lookup treats as "this name variant is not available".
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional


class CratePinError(Exception):
    """Base exception for all cratepin errors.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


# ---------------------------------------------------------------------------
# Resolution errors
# ---------------------------------------------------------------------------


class EmptyCrateNameError(CratePinError):
    """Raised when resolution is requested for an empty crate name."""

    def __init__(self, message: str = "Found empty crate name") -> None:
        super().__init__(message)


class InvalidToolchainSpecError(CratePinError):
    """Raised when a ``rust-version`` string is not a value like ``1.32``.

    Args:
        spec: The rejected text.
        reason: Optional explanation of which rule was violated.
    """

    __slots__ = ("spec",)

    def __init__(self, spec: str, *, reason: Optional[str] = None) -> None:
        details: MutableMapping[str, Any] = {"spec": spec}
        _add_if(details, "reason", reason)
        super().__init__("rust-version must be a value like `1.32`", details)
        self.spec = spec


class InvalidVersionReqError(CratePinError):
    """Raised when a version requirement expression cannot be parsed.

    Args:
        requirement: The rejected requirement text.
        reason: What is wrong with it.
    """

    __slots__ = ("requirement", "reason")

    def __init__(self, requirement: str, reason: str) -> None:
        super().__init__(
            f"Invalid version requirement {requirement!r}: {reason}",
        )
        self.requirement = requirement
        self.reason = reason


class CrateNotFoundError(CratePinError):
    """Raised when no spelling of a crate name exists in the registry index.

    Args:
        crate_name: The name originally requested by the caller.
    """

    __slots__ = ("crate_name",)

    def __init__(self, crate_name: str) -> None:
        super().__init__(
            f"The crate `{crate_name}` could not be found in registry index.",
        )
        self.crate_name = crate_name


class NoAvailableVersionError(CratePinError):
    """Raised when every published version was filtered out.

    Args:
        message: Advisory text shown to the user.
        crate_name: Name of the crate whose versions were exhausted.
    """

    __slots__ = ("crate_name",)

    def __init__(self, message: str, *, crate_name: Optional[str] = None) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "crate", crate_name)
        super().__init__(message, details)
        self.crate_name = crate_name


# ---------------------------------------------------------------------------
# Index and transport errors
# ---------------------------------------------------------------------------


class NetworkError(CratePinError):
    """Raised when HTTP or network operations fail.

    Args:
        message: Error description.
        url: URL being accessed.
        status_code: HTTP status code, if available.
        response_body: Raw response body, truncated for safety.
    """

    __slots__ = ("url", "status_code", "response_body")

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "url", url)
        _add_if(details, "status_code", status_code)

        if response_body is not None:
            details["response"] = _truncate(response_body)

        super().__init__(message, details)

        self.url = url
        self.status_code = status_code
        self.response_body = response_body


class IndexLookupError(CratePinError):
    """Raised by an index handle when a single lookup fails.

    Covers transport failures and malformed index files alike.

    Args:
        message: Error description.
        crate_name: Name variant that was being looked up.
        source: URL or path of the index file involved.
        original_error: Exception that triggered this error.
    """

    __slots__ = ("crate_name", "source", "original_error")

    def __init__(
        self,
        message: str,
        *,
        crate_name: Optional[str] = None,
        source: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "crate", crate_name)
        _add_if(details, "source", source)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.crate_name = crate_name
        self.source = source
        self.original_error = original_error


class InvalidIndexRecordError(CratePinError):
    """Raised when a matched crate lists a version that cannot be parsed.

    Fatal to the resolution call; the record is never skipped.

    Args:
        crate_name: Published name of the matched crate.
        version: The ``vers`` value of the offending record.
        reason: Why the record was rejected.
    """

    __slots__ = ("crate_name", "version")

    def __init__(self, crate_name: str, version: str, reason: str) -> None:
        super().__init__(
            f"Invalid index record for `{crate_name}` version {version!r}",
            {"crate": crate_name, "version": version, "reason": reason},
        )
        self.crate_name = crate_name
        self.version = version


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------


class ConfigError(CratePinError):
    """Raised when a configuration file is missing, malformed, or invalid.

    Args:
        message: Error description.
        config_path: Path of the offending configuration file.
        option: Name of the offending option, if any.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option
