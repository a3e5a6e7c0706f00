"""
Centralized constants for cratepin.

This module defines immutable configuration values used across cratepin,
including registry endpoints, network settings, resolution limits, and
logging formats. All values are intended to be treated as read-only.
"""

from typing import Final, FrozenSet

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "cratepin/{version} (https://github.com/cratepin/cratepin)"

# ---------------------------------------------------------------------------
# Registry index
# ---------------------------------------------------------------------------

#: Sparse index of the crates.io registry.
DEFAULT_INDEX_URL: Final[str] = "https://index.crates.io/"

#: HTTP statuses a sparse index uses to say "no such crate".
INDEX_NOT_FOUND_STATUSES: Final[FrozenSet[int]] = frozenset({404, 410, 451})

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 30

#: Maximum number of retries for failed HTTP requests.
DEFAULT_MAX_RETRIES: Final[int] = 3

#: Maximum number of retries after HTTP 429 responses.
MAX_RATE_LIMIT_RETRIES: Final[int] = 5

# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

#: Separator characters that registries treat as interchangeable in names.
NAME_SEPARATORS: Final[str] = "-_"

#: Only the first N separators of a crate name are varied (2**10 variants max).
MAX_FUZZY_SEPARATORS: Final[int] = 10

#: Advice attached to ``NoAvailableVersionError``.
NO_AVAILABLE_VERSION_MESSAGE: Final[str] = (
    "No available versions exist. Either all were yanked "
    "or only prerelease versions exist. Trying with the "
    "--allow-prerelease flag might solve the issue."
)

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed size (in bytes) of a single local index file.
MAX_INDEX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
