"""Incremental log event aggregation.

Each run resumes every log file one line past the line count recorded by the
previous run, counts lines matching the file type's event pattern and adds
them to the service the file is bound to. A file with fewer lines than its
checkpoint has been rotated or truncated and is rescanned from line 1.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from munin_log_events.checkpoint import CheckpointStore
from munin_log_events.config import PluginConfig
from munin_log_events.discovery import (
    bind_logfile,
    binding_order,
    expand_logfiles,
    resolve_services,
)
from munin_log_events.errors import describe_file_error
from munin_log_events.models import FileScan, LogfileEntry, Service, ServiceTotal
from munin_log_events.utils.naming import checkpoint_key

logger = logging.getLogger(__name__)


def scan_logfile(path: str | Path, regex: str, checkpoint: int = 0) -> FileScan:
    """Count event lines appended since ``checkpoint``.

    The line count and the match counts come from one read of the file.

    Args:
        path: Log file to scan.
        regex: Case-sensitive pattern, searched anywhere in each line.
        checkpoint: Line count recorded by the previous run.

    Returns:
        The current line count and the number of matching lines after the
        checkpoint, or in the whole file when it shrank below the checkpoint.

    Raises:
        OSError: If the file cannot be read.
        re.error: If ``regex`` is malformed.
    """
    pattern = re.compile(regex)

    lines = 0
    all_matches = 0
    new_matches = 0
    with open(path, "rb") as f:
        for line_no, raw in enumerate(f, start=1):
            lines = line_no
            line = raw.decode("utf-8", errors="replace").rstrip("\n")
            if pattern.search(line):
                all_matches += 1
                if line_no > checkpoint:
                    new_matches += 1

    rotated = lines < checkpoint
    if rotated:
        logger.debug(
            "%s shrank from %d to %d lines, rescanning from line 1", path, checkpoint, lines
        )

    matches = all_matches if rotated else new_matches
    return FileScan(path=str(path), lines=lines, matches=matches, rotated=rotated)


class LogEventAggregator:
    """Runs one collection cycle over all configured log files.

    Args:
        config: Validated plugin configuration.
        store: Checkpoint persistence for this plugin instance.
    """

    def __init__(self, config: PluginConfig, store: CheckpointStore) -> None:
        self._config = config
        self._store = store
        self._regexes = {t.name: t.regex for t in config.logfile_types}

    def collect(self) -> list[ServiceTotal]:
        """Scan every log file and return per-service totals.

        The new checkpoint holds exactly this run's log files: the current
        line count for scanned files, the previous value for skipped ones.
        Files no longer discovered drop out of the state file.

        Returns:
            One total per service, in service order.
        """
        services = resolve_services(self._config)
        entries = expand_logfiles(self._config.logfile_types)
        previous = self._store.load()

        totals = {service.name: ServiceTotal.for_service(service) for service in services}
        candidates = binding_order(services)
        checkpoint: dict[str, int] = {}

        for entry in entries:
            key = checkpoint_key(entry.path)
            if key in previous:
                checkpoint.setdefault(key, previous[key])

            result = self._scan_entry(entry, candidates, previous.get(key, 0))
            if result is None:
                continue

            service, scan = result
            totals[service.name].add(scan)
            checkpoint[key] = scan.lines
            logger.debug(
                "%s -> %s: %d new matching lines, %d lines total",
                entry.path,
                service.name,
                scan.matches,
                scan.lines,
            )

        self._store.save(checkpoint)
        return list(totals.values())

    def _scan_entry(
        self,
        entry: LogfileEntry,
        services: list[Service],
        checkpoint: int,
    ) -> tuple[Service, FileScan] | None:
        if not os.path.exists(entry.path):
            logger.warning(describe_file_error(FileNotFoundError(entry.path), entry.path))
            return None

        try:
            service = bind_logfile(entry.path, services)
            if service is None:
                logger.warning("Log file %s is not bound to any service, skipping", entry.path)
                return None
            return service, scan_logfile(entry.path, self._regexes[entry.type_name], checkpoint)
        except (OSError, re.error) as e:
            logger.warning(describe_file_error(e, entry.path))
            return None


__all__ = ["LogEventAggregator", "scan_logfile"]
