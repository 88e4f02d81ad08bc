"""Shared utility modules for munin-log-events.

- naming: identifier sanitization for output and state keys
- decorators: entry point error handling
"""

from munin_log_events.utils.decorators import exit_on_config_error
from munin_log_events.utils.naming import checkpoint_key, clean_fieldname

__all__ = [
    # Naming
    "clean_fieldname",
    "checkpoint_key",
    # Decorators
    "exit_on_config_error",
]
