from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Generator, Iterable, List

import pytest

from cratepin.core.index import crate_index_path
from cratepin.models import IndexVersion
from cratepin.utils import console as console_module


@pytest.fixture(autouse=True)
def reset_cratepin_logging() -> Generator[None, None, None]:
    """Undo ``setup_logging`` calls made by CLI tests.

    The CLI detaches the ``cratepin`` logger from the root logger, which
    would hide records from ``caplog`` in every later test.
    """
    root_logger = logging.getLogger("cratepin")
    handlers = list(root_logger.handlers)
    level = root_logger.level
    propagate = root_logger.propagate

    yield

    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    root_logger.propagate = propagate
    console_module.reconfigure_console()


@pytest.fixture
def no_color(monkeypatch: pytest.MonkeyPatch) -> None:
    """Force plain console output."""
    monkeypatch.setenv("NO_COLOR", "1")
    console_module.reconfigure_console()


def _index_line(
    name: str,
    vers: str,
    *,
    yanked: bool = False,
    rust_version: Any = None,
) -> Dict[str, Any]:
    """Build one registry index record the way a registry publishes it."""
    data: Dict[str, Any] = {
        "name": name,
        "vers": vers,
        "deps": [],
        "cksum": "0" * 64,
        "features": {},
        "yanked": yanked,
    }
    if rust_version is not None:
        data["rust_version"] = rust_version
    return data


@pytest.fixture
def index_line() -> Callable[..., Dict[str, Any]]:
    """Return the registry record builder."""
    return _index_line


@pytest.fixture
def write_local_index(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper that lays out index files under ``tmp_path/index``."""
    root = tmp_path / "index"
    root.mkdir()

    def _write(name: str, records: Iterable[Dict[str, Any]]) -> Path:
        path = root / crate_index_path(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        lines: List[str] = [json.dumps(record) for record in records]
        with open(path, "a", encoding="utf-8") as fh:
            for line in lines:
                fh.write(line + "\n")
        return root

    return _write


@pytest.fixture
def my_package_versions() -> List[IndexVersion]:
    """Versions of a crate whose newest release is a prerelease."""
    return [
        IndexVersion("my-package", "0.1.1-alpha"),
        IndexVersion("my-package", "0.1.0"),
        IndexVersion("my-package", "0.5.0"),
        IndexVersion("my-package", "0.6.0-alpha"),
    ]
