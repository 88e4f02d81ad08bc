"""Configuration for the munin log events plugin."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from munin_log_events.errors import ConfigurationError
from munin_log_events.models import LogfileType
from munin_log_events.utils.naming import clean_fieldname

LOGFILES_SUFFIX = "_logfiles"
REGEX_SUFFIX = "_regex"
SERVICE_OPTIONS = ("logbinding", "warning", "critical")


class PluginSettings(BaseSettings):
    """Fixed configuration keys, as set by munin-node ``env.*`` lines.

    Attributes:
        services: Space-separated explicit service names.
        services_autoconf: Glob whose match basenames become service names.
        title: Graph title.
        vlabel: Vertical axis label.
        category: Graph category.
        warning: Global warning threshold.
        critical: Global critical threshold.
        statefile: State file chosen by munin-node (MUNIN_STATEFILE).
        plugstate: Directory for plugin state (MUNIN_PLUGSTATE).
        debug: Verbose diagnostics (MUNIN_DEBUG).
    """

    model_config = SettingsConfigDict(
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    services: str | None = Field(default=None, description="Explicit service list")
    services_autoconf: str | None = Field(
        default=None, description="Glob whose match basenames are service names"
    )
    title: str = Field(default="Log events", description="Graph title")
    vlabel: str = Field(default="events", description="Vertical axis label")
    category: str = Field(default="other", description="Graph category")
    warning: str | None = Field(default=None, description="Global warning threshold")
    critical: str | None = Field(default=None, description="Global critical threshold")
    statefile: str | None = Field(
        default=None,
        validation_alias="MUNIN_STATEFILE",
        description="Checkpoint file path",
    )
    plugstate: str = Field(
        default="/var/lib/munin-node/plugin-state/nobody",
        validation_alias="MUNIN_PLUGSTATE",
        description="Directory for plugin state files",
    )
    debug: bool = Field(
        default=False,
        validation_alias="MUNIN_DEBUG",
        description="Enable debug logging",
    )


class PluginConfig(BaseModel):
    """Validated, immutable configuration for one plugin run."""

    model_config = ConfigDict(frozen=True)

    logfile_types: tuple[LogfileType, ...] = Field(description="Types ordered by name")
    services: tuple[str, ...] | None = Field(default=None, description="Explicit services")
    services_autoconf: str | None = Field(default=None, description="Autoconf glob")
    overrides: dict[str, str] = Field(
        default_factory=dict,
        description="Raw <service>_logbinding/_warning/_critical values",
    )
    title: str = "Log events"
    vlabel: str = "events"
    category: str = "other"
    warning: str | None = None
    critical: str | None = None
    statefile: str | None = None
    plugstate: str = "/var/lib/munin-node/plugin-state/nobody"

    def service_option(self, service: str, option: str) -> str | None:
        """Look up ``<service>_<option>``, by raw name then by field name."""
        for prefix in (service, clean_fieldname(service)):
            value = self.overrides.get(f"{prefix}_{option}")
            if value:
                return value
        return None

    def statefile_path(self, plugin_name: str) -> Path:
        """Checkpoint file for this plugin instance."""
        if self.statefile:
            return Path(self.statefile)
        return Path(self.plugstate) / f"{plugin_name}.state"


def _collect_logfile_types(environ: Mapping[str, str], missing: list[str]) -> list[LogfileType]:
    names: set[str] = set()
    for key in environ:
        for suffix in (LOGFILES_SUFFIX, REGEX_SUFFIX):
            if key.endswith(suffix) and len(key) > len(suffix):
                names.add(key[: -len(suffix)])

    if not names:
        missing.extend([f"<type>{LOGFILES_SUFFIX}", f"<type>{REGEX_SUFFIX}"])
        return []

    types = []
    for name in sorted(names):
        logfiles = environ.get(f"{name}{LOGFILES_SUFFIX}", "").strip()
        regex = environ.get(f"{name}{REGEX_SUFFIX}", "")
        if not logfiles:
            missing.append(f"{name}{LOGFILES_SUFFIX}")
        if not regex:
            missing.append(f"{name}{REGEX_SUFFIX}")
        if logfiles and regex:
            types.append(LogfileType(name=name, logfiles=logfiles, regex=regex))
    return types


def _collect_overrides(environ: Mapping[str, str]) -> dict[str, str]:
    suffixes = tuple(f"_{option}" for option in SERVICE_OPTIONS)
    return {
        key: value
        for key, value in environ.items()
        if key.endswith(suffixes) and key not in suffixes
    }


def load_config(
    settings: PluginSettings | None = None,
    environ: Mapping[str, str] | None = None,
) -> PluginConfig:
    """Build and validate the plugin configuration.

    Every missing item is collected before failing, so one run reports the
    whole problem.

    Args:
        settings: Fixed keys; read from the environment if None.
        environ: Source of the dynamic per-type and per-service keys;
            defaults to os.environ.

    Returns:
        The immutable configuration.

    Raises:
        ConfigurationError: If required configuration is missing.
    """
    if settings is None:
        settings = PluginSettings()
    if environ is None:
        environ = os.environ

    missing: list[str] = []
    logfile_types = _collect_logfile_types(environ, missing)
    overrides = _collect_overrides(environ)

    services = tuple(settings.services.split()) if settings.services else None
    if not services and not settings.services_autoconf:
        missing.append("services or services_autoconf")
    elif services and not settings.services_autoconf:
        if not any(key.endswith("_logbinding") and value for key, value in overrides.items()):
            missing.append("<service>_logbinding or services_autoconf")

    if missing:
        raise ConfigurationError(missing)

    return PluginConfig(
        logfile_types=tuple(logfile_types),
        services=services,
        services_autoconf=settings.services_autoconf,
        overrides=overrides,
        title=settings.title,
        vlabel=settings.vlabel,
        category=settings.category,
        warning=settings.warning,
        critical=settings.critical,
        statefile=settings.statefile,
        plugstate=settings.plugstate,
    )


__all__ = ["PluginSettings", "PluginConfig", "load_config"]
