"""Service resolution, logfile discovery and service binding."""

from __future__ import annotations

import glob
import logging
import os
import re
from collections.abc import Iterable

from munin_log_events.config import PluginConfig
from munin_log_events.errors import ConfigurationError
from munin_log_events.models import LogfileEntry, LogfileType, Service

logger = logging.getLogger(__name__)


def _expand(pattern: str) -> list[str]:
    """Expand a glob like an unmatched shell glob: no match keeps the pattern."""
    matches = sorted(glob.glob(pattern))
    return matches or [pattern]


def _service_names(config: PluginConfig) -> list[str]:
    if config.services:
        names = list(config.services)
    else:
        names = [
            os.path.basename(path.rstrip(os.sep))
            for path in sorted(glob.glob(config.services_autoconf or ""))
        ]
        logger.debug("Autoconf %r found services %s", config.services_autoconf, names)

    seen: set[str] = set()
    unique = []
    for name in names:
        if name and name not in seen:
            seen.add(name)
            unique.append(name)
    return unique


def resolve_services(config: PluginConfig) -> list[Service]:
    """Resolve the service set in configured or discovered order.

    Args:
        config: Plugin configuration.

    Returns:
        Services with binding patterns and thresholds resolved.

    Raises:
        ConfigurationError: If two services share a munin field name or a
            name has no usable field name.
    """
    services = []
    fieldnames: dict[str, str] = {}
    for name in _service_names(config):
        binding = config.service_option(name, "logbinding")
        service = Service(
            name=name,
            logbinding=binding or name,
            explicit_binding=binding is not None,
            warning=config.service_option(name, "warning") or config.warning,
            critical=config.service_option(name, "critical") or config.critical,
        )
        if not service.fieldname:
            raise ConfigurationError(reason=f"Service name {name!r} has no usable field name")
        if service.fieldname in fieldnames:
            raise ConfigurationError(
                reason=(
                    f"Services {fieldnames[service.fieldname]!r} and {name!r} "
                    f"both map to field {service.fieldname!r}"
                )
            )
        fieldnames[service.fieldname] = name
        services.append(service)
    return services


def expand_logfiles(logfile_types: Iterable[LogfileType]) -> list[LogfileEntry]:
    """Expand every type's glob patterns into concrete entries.

    Entries keep their originating type so the right event pattern is used;
    a path listed by two types appears twice.
    """
    entries = []
    for logfile_type in logfile_types:
        for pattern in logfile_type.patterns:
            entries.extend(
                LogfileEntry(path=path, type_name=logfile_type.name) for path in _expand(pattern)
            )
    return entries


def binding_order(services: Iterable[Service]) -> list[Service]:
    """Services bound by their own name first, explicit bindings after.

    Configured order is kept within each group, so a catch-all explicit
    binding only receives files no named service claims.
    """
    services = list(services)
    return [s for s in services if not s.explicit_binding] + [
        s for s in services if s.explicit_binding
    ]


def bind_logfile(path: str, services: Iterable[Service]) -> Service | None:
    """Return the first service whose binding pattern matches ``path``.

    Args:
        path: Full log file path.
        services: Candidates, already in binding order.

    Returns:
        The owning service, or None if no binding matches.

    Raises:
        re.error: If a binding pattern is malformed.
    """
    for service in services:
        if re.search(service.logbinding, path):
            return service
    return None


__all__ = ["resolve_services", "expand_logfiles", "binding_order", "bind_logfile"]
