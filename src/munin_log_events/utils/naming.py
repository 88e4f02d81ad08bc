"""Identifier sanitization for munin field names and checkpoint keys.

Munin only accepts ``[A-Za-z_][A-Za-z0-9_]*`` as field names. Raw service
names and log paths stay canonical everywhere else; these helpers are only
applied where identifiers leave the process.
"""

from __future__ import annotations

import re

_LEADING_RE = re.compile(r"^[^A-Za-z]+")
_INVALID_RE = re.compile(r"[^A-Za-z0-9]+")


def clean_fieldname(name: str) -> str:
    """Sanitize a name into a munin field identifier.

    Leading non-alphabetic characters are stripped and every remaining run
    of non-alphanumeric characters becomes a single underscore.

    Examples:
        >>> clean_fieldname("/var/log/app-1.log")
        'var_log_app_1_log'
        >>> clean_fieldname("foo--bar")
        'foo_bar'
    """
    return _INVALID_RE.sub("_", _LEADING_RE.sub("", name))


def checkpoint_key(path: str) -> str:
    """State file key holding the line count of ``path``."""
    return f"{clean_fieldname(path)}_lines"


__all__ = ["clean_fieldname", "checkpoint_key"]
