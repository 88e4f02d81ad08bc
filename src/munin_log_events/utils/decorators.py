"""Error handling decorators for plugin entry points."""

from __future__ import annotations

import logging
from functools import wraps
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any

logger = logging.getLogger(__name__)


def exit_on_config_error(func: Callable) -> Callable:
    """Decorator to turn configuration errors into exit status 1.

    The error is logged (to stderr once logging is configured) and nothing
    else is printed, so the agent sees no partial output.

    Args:
        func: Entry point function.

    Returns:
        Decorated function that exits on ConfigurationError.
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        from munin_log_events.errors import ConfigurationError

        try:
            return func(*args, **kwargs)
        except ConfigurationError as e:
            logger.error("%s", e)
            raise SystemExit(1) from e

    return wrapper


__all__ = ["exit_on_config_error"]
