"""Pytest fixtures for munin-log-events tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from munin_log_events import PACKAGE_LOGGER
from munin_log_events.checkpoint import CheckpointStore
from munin_log_events.config import PluginConfig, PluginSettings, load_config

_FIXED_KEYS = {
    "services",
    "services_autoconf",
    "title",
    "vlabel",
    "category",
    "warning",
    "critical",
    "munin_statefile",
    "munin_plugstate",
    "munin_debug",
}
_DYNAMIC_SUFFIXES = ("_logfiles", "_regex", "_logbinding", "_warning", "_critical")


@pytest.fixture(autouse=True)
def clean_plugin_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Remove any plugin configuration inherited from the outer environment."""
    for key in list(os.environ):
        if key.lower() in _FIXED_KEYS or key.endswith(_DYNAMIC_SUFFIXES):
            monkeypatch.delenv(key, raising=False)
    yield
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
    pkg_logger.setLevel(logging.NOTSET)


@pytest.fixture
def plugin_env(monkeypatch: pytest.MonkeyPatch) -> Callable[..., None]:
    """Set plugin configuration the way munin-node does, via the environment."""

    def _set(**values: str) -> None:
        for key, value in values.items():
            monkeypatch.setenv(key, value)

    return _set


# =============================================================================
# Log and config factories
# =============================================================================


@pytest.fixture
def make_log(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a log file under tmp_path/logs."""

    def _make(name: str, lines: list[str], directory: str = "logs") -> Path:
        path = tmp_path / directory / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return path

    return _make


@pytest.fixture
def append_log() -> Callable[[Path, list[str]], None]:
    """Append lines to an existing log file."""

    def _append(path: Path, lines: list[str]) -> None:
        with path.open("a", encoding="utf-8") as f:
            f.write("".join(f"{line}\n" for line in lines))

    return _append


@pytest.fixture
def state_path(tmp_path: Path) -> Path:
    return tmp_path / "state" / "munin_log_events.state"


@pytest.fixture
def store(state_path: Path) -> CheckpointStore:
    return CheckpointStore(state_path)


@pytest.fixture
def make_config(state_path: Path) -> Callable[..., PluginConfig]:
    """Factory for a validated config from dynamic keys plus fixed settings."""

    def _make(environ: dict[str, str], **settings: str) -> PluginConfig:
        settings.setdefault("statefile", str(state_path))
        return load_config(PluginSettings(**settings), environ)

    return _make
