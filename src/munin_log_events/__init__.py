"""munin-log-events - per-service log event counts for munin."""

from __future__ import annotations

import argparse
import logging
import os
import sys

from munin_log_events.utils.decorators import exit_on_config_error

PACKAGE_LOGGER = "munin_log_events"


def configure_logging(plugin_name: str, debug: bool = False) -> None:
    """Send package diagnostics to stderr, prefixed with the plugin name."""
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    prefix = plugin_name.replace("%", "%%")
    handler.setFormatter(logging.Formatter(f"{prefix}: %(levelname)s: %(message)s"))
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(logging.DEBUG if debug else logging.WARNING)


@exit_on_config_error
def run(mode: str | None, plugin_name: str) -> None:
    """Load configuration and print describe or collect output."""
    from pydantic import ValidationError

    from munin_log_events.aggregator import LogEventAggregator
    from munin_log_events.checkpoint import CheckpointStore
    from munin_log_events.config import PluginSettings, load_config
    from munin_log_events.discovery import resolve_services
    from munin_log_events.errors import ConfigurationError
    from munin_log_events.munin import render_config, render_values

    try:
        settings = PluginSettings()
    except ValidationError as e:
        raise ConfigurationError(reason=f"Invalid configuration: {e}") from e

    if settings.debug:
        configure_logging(plugin_name, debug=True)

    config = load_config(settings)
    if mode == "config":
        lines = render_config(config, resolve_services(config))
    else:
        store = CheckpointStore(config.statefile_path(plugin_name))
        lines = render_values(LogEventAggregator(config, store).collect())

    for line in lines:
        print(line)


def main() -> None:
    """Run the plugin once."""
    parser = argparse.ArgumentParser(
        description="munin-log-events - count matching log lines per service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables:
  <type>_logfiles      Glob pattern(s) of log files of this type (required)
  <type>_regex         Pattern counting event lines of this type (required)
  services             Space-separated service names
  services_autoconf    Glob whose match basenames become service names
  <service>_logbinding Pattern matched against log paths (default: service name)
  <service>_warning    Per-service warning threshold
  <service>_critical   Per-service critical threshold
  title, vlabel, category, warning, critical
                       Graph presentation and global thresholds
  MUNIN_STATEFILE      Checkpoint file (default: $MUNIN_PLUGSTATE/<plugin>.state)
  MUNIN_DEBUG          Set to 1 for debug output on stderr

Examples:
  # Print graph configuration
  munin-log-events config

  # Collect current values
  web_logfiles='/var/log/nginx/*.log' web_regex=' 5[0-9][0-9] ' \\
      services_autoconf='/etc/nginx/sites-enabled/*' munin-log-events
""",
    )
    parser.add_argument(
        "mode",
        nargs="?",
        default=None,
        help="'config' to describe the graph; anything else collects values",
    )
    args = parser.parse_args()

    plugin_name = os.path.basename(sys.argv[0]) or "munin-log-events"
    configure_logging(plugin_name)

    run(args.mode, plugin_name)


__all__ = ["main", "run", "configure_logging"]
