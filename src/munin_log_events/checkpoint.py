"""Persisted per-file line counts between plugin runs."""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


class CheckpointStore:
    """Flat ``key=value`` state file holding per-file line counts.

    One ``<identifier>_lines=<count>`` entry per tracked log file. The file
    is read once at the start of a run and fully rewritten once at the end;
    no locking is done, so concurrent runs against one path are last-writer-wins.

    Args:
        path: State file location (usually chosen by munin-node).
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """The state file path."""
        return self._path

    def load(self) -> dict[str, int]:
        """Read the previous checkpoint.

        Returns:
            Mapping of checkpoint key to line count; empty if the state file
            does not exist yet.
        """
        logger.debug("Reading state file: %s", self._path)
        if not self._path.exists():
            return {}

        checkpoint: dict[str, int] = {}
        with self._path.open(encoding="utf-8") as fh:
            for line_no, line in enumerate(fh, start=1):
                line = line.strip()
                if not line:
                    continue
                key, sep, value = line.partition("=")
                try:
                    if not sep or not key:
                        raise ValueError(line)
                    count = int(value)
                except ValueError:
                    logger.warning(
                        "Ignoring malformed state line %d in %s: %r", line_no, self._path, line
                    )
                    continue
                checkpoint[key.strip()] = max(count, 0)
        return checkpoint

    def save(self, checkpoint: dict[str, int]) -> None:
        """Replace the state file with ``checkpoint``, in insertion order."""
        logger.debug("Writing state file %s: %r", self._path, checkpoint)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as fh:
            for key, count in checkpoint.items():
                fh.write(f"{key}={count}\n")
        os.replace(tmp_path, self._path)


__all__ = ["CheckpointStore"]
