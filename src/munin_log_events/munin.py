"""Munin plugin protocol output for describe and collect modes."""

from __future__ import annotations

from collections.abc import Iterable

from munin_log_events.config import PluginConfig
from munin_log_events.models import Service, ServiceTotal


def _single_line(value: str) -> str:
    return " ".join(value.split())


def render_config(config: PluginConfig, services: Iterable[Service]) -> list[str]:
    """Graph and field metadata, one line per attribute.

    Args:
        config: Plugin configuration (graph title, labels, global thresholds).
        services: Services in configured or discovered order.

    Returns:
        Lines for ``<plugin> config``.
    """
    lines = [
        f"graph_title {_single_line(config.title)}",
        f"graph_vlabel {_single_line(config.vlabel)}",
        f"graph_category {_single_line(config.category)}",
        "graph_args --base 1000 -l 0",
    ]
    for service in services:
        field = service.fieldname
        lines.append(f"{field}.label {service.name}")
        lines.append(f"{field}.info Matching log lines for {service.name} since the last run")
        if service.warning:
            lines.append(f"{field}.warning {service.warning}")
        if service.critical:
            lines.append(f"{field}.critical {service.critical}")
    return lines


def render_values(totals: Iterable[ServiceTotal]) -> list[str]:
    """Per-service value lines, plus extinfo for services with affected files."""
    lines = []
    for total in totals:
        lines.append(f"{total.fieldname}.value {total.total}")
        if total.affected:
            lines.append(f"{total.fieldname}.extinfo {total.extinfo}")
    return lines


__all__ = ["render_config", "render_values"]
