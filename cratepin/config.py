"""Configuration file loader for cratepin.

Supports two formats:

- ``cratepin.toml``: settings under ``[cratepin]`` table
- ``pyproject.toml``: settings under ``[tool.cratepin]`` table

Discovery order:

1. Explicit path from ``--config`` or ``CRATEPIN_CONFIG``
2. ``cratepin.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.cratepin]`` section

Configuration precedence: defaults < config file < CLI args.

Example (``cratepin.toml``)::

    [cratepin]
    allow_prerelease = false
    rust_version = "1.70"
    index_url = "https://index.crates.io/"
    timeout = 30
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple
from dataclasses import dataclass, field

from cratepin.constants import DEFAULT_INDEX_URL, DEFAULT_TIMEOUT
from cratepin.exceptions import ConfigError, InvalidToolchainSpecError
from cratepin.models.rust_version import RustVersion
from cratepin.utils.logger import get_logger

logger = get_logger("config")


@dataclass
class CratePinConfig:
    """Parsed and validated cratepin configuration.

    Attributes:
        allow_prerelease: Let ``resolve`` pick prerelease versions when no
            requirement is given.
        rust_version: Toolchain ceiling applied to every resolution, or
            ``None`` for no ceiling.
        index_url: Base URL of the sparse registry index.
        timeout: HTTP timeout in seconds.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    allow_prerelease: bool = False
    rust_version: Optional[RustVersion] = None
    index_url: str = DEFAULT_INDEX_URL
    timeout: int = DEFAULT_TIMEOUT

    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging."""
        return {
            "allow_prerelease": self.allow_prerelease,
            "rust_version": str(self.rust_version) if self.rust_version else None,
            "index_url": self.index_url,
            "timeout": self.timeout,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    cratepin_toml = cwd / "cratepin.toml"
    if cratepin_toml.is_file():
        logger.debug("Found cratepin.toml: %s", cratepin_toml)
        return cratepin_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_cratepin_section(pyproject_toml):
        logger.debug("Found [tool.cratepin] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_cratepin_section(path: Path) -> bool:
    """Check if pyproject.toml contains a ``[tool.cratepin]`` section.

    A pyproject.toml that cannot be read or parsed is simply not ours.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    return "cratepin" in raw.get("tool", {})


def load_config(config_path: Optional[Path] = None) -> CratePinConfig:
    """Load and validate cratepin configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`CratePinConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return CratePinConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get("cratepin", {})
    else:
        section = raw.get("cratepin", {})

    if not section:
        logger.debug("Config file found but no cratepin section; using defaults")
        return CratePinConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _expect(
    section: Dict[str, Any],
    option: str,
    expected: type,
    *,
    config_path: str,
) -> Any:
    value = section[option]
    # bool is a subclass of int; a boolean is never a valid number here
    if not isinstance(value, expected) or (
        expected is int and isinstance(value, bool)
    ):
        raise ConfigError(
            f"{option} must be {_TYPE_NAMES[expected]}, got {type(value).__name__}",
            config_path=config_path,
            option=option,
        )
    return value


_TYPE_NAMES = {bool: "a boolean", str: "a string", int: "an integer"}


def normalize_index_url(value: str, config_path: Optional[str] = None) -> str:
    """Require an http(s) URL and give it a trailing slash.

    Raises:
        ConfigError: *value* is not an http(s) URL.
    """
    if not value.startswith(("http://", "https://")):
        raise ConfigError(
            f"index_url must be an http(s) URL, got {value!r}",
            config_path=config_path,
            option="index_url",
        )
    return value if value.endswith("/") else value + "/"


def _parse_rust_version(value: str, config_path: str) -> RustVersion:
    try:
        return RustVersion.parse(value)
    except InvalidToolchainSpecError as exc:
        raise ConfigError(
            f"rust_version must be a value like `1.32`, got {value!r}",
            config_path=config_path,
            option="rust_version",
        ) from exc


def _parse_timeout(value: int, config_path: str) -> int:
    if value <= 0:
        raise ConfigError(
            f"timeout must be positive, got {value}",
            config_path=config_path,
            option="timeout",
        )
    return value


_OPTIONS: Dict[str, Tuple[type, Optional[Callable[[Any, str], Any]]]] = {
    "allow_prerelease": (bool, None),
    "rust_version": (str, _parse_rust_version),
    "index_url": (str, normalize_index_url),
    "timeout": (int, _parse_timeout),
}


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> CratePinConfig:
    """Parse and validate the ``[cratepin]`` / ``[tool.cratepin]`` table.

    Raises:
        ConfigError: Unknown keys, wrong types or invalid values.
    """
    unknown = set(section.keys()) - set(_OPTIONS)
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    config = CratePinConfig()
    for option, (expected, convert) in _OPTIONS.items():
        if option not in section:
            continue
        value = _expect(section, option, expected, config_path=config_path)
        if convert is not None:
            value = convert(value, config_path)
        setattr(config, option, value)

    return config
