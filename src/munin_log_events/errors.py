"""Plugin exceptions and mapping of per-file failures to warnings."""

from __future__ import annotations

import re


class PluginError(Exception):
    """Base plugin error."""


class ConfigurationError(PluginError):
    """Required configuration is missing or inconsistent.

    Args:
        missing: Every missing configuration item, in the order found.
        reason: Free-form message used instead of the missing list.
    """

    def __init__(self, missing: list[str] | None = None, reason: str | None = None) -> None:
        self.missing = list(missing or [])
        if reason is None:
            reason = "Missing configuration: " + ", ".join(self.missing)
        super().__init__(reason)


def describe_file_error(e: Exception, path: str) -> str:
    """Convert a per-file failure into a warning message.

    Uses isinstance() checks, most specific OSError subclasses first.

    Args:
        e: The exception raised while processing the file.
        path: The log file being processed.

    Returns:
        A single-line message naming the file and the cause.
    """
    if isinstance(e, FileNotFoundError):
        return f"Log file {path} does not exist, skipping"

    if isinstance(e, PermissionError):
        return f"Log file {path} is not readable (permission denied), skipping"

    if isinstance(e, IsADirectoryError):
        return f"Log file {path} is a directory, skipping"

    if isinstance(e, OSError):
        return f"Cannot read log file {path}: {e.strerror or e}, skipping"

    if isinstance(e, re.error):
        return f"Invalid regular expression {e.pattern!r} while processing {path}: {e}, skipping"

    return f"Error while processing {path}: {e}, skipping"


__all__ = [
    "PluginError",
    "ConfigurationError",
    "describe_file_error",
]
