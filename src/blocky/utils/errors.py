"""
Error handling utilities and boundaries for Blocky.

Provides the exception taxonomy shared by blocks, the scheduler and the
configuration layer, plus a decorator for logging error boundaries.
"""

import logging
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

# Type variable for generic function decoration
F = TypeVar("F", bound=Callable[..., Any])


def error_boundary(
    *,
    reraise: bool = False,
    default_return: Any = None,
    log_level: int = logging.ERROR,
) -> Callable[[F], F]:
    """
    Decorator to create consistent error boundaries around functions.

    Used at the edges of the process (protocol input/output) where a single
    malformed message must not take the whole bar down.

    Args:
        reraise: If True, re-raise the exception after logging
        default_return: Value to return if error occurs and not reraising
        log_level: Logging level for the error (default: ERROR)

    Returns:
        Decorated function with error handling

    Example:
        >>> @error_boundary(default_return=None, log_level=logging.WARNING)
        ... def parse_line(line):
        ...     return json.loads(line)
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.log(
                    log_level,
                    f"Error in {func.__name__}: {e}",
                    exc_info=True,
                    extra={"function": func.__name__, "func_module": func.__module__},
                )

                if reraise:
                    raise

                return default_return

        return wrapper  # type: ignore

    return decorator


class BlockyError(Exception):
    """Base exception for all Blocky-specific errors."""

    pass


class ConfigurationError(BlockyError):
    """Raised when there's an issue with configuration."""

    pass


class ConstructionError(BlockyError):
    """Raised when a block cannot be built from its configuration."""

    def __init__(self, block_type: Optional[str], message: str):
        self.block_type = block_type
        self.message = message
        prefix = f"[{block_type}] " if block_type else ""
        super().__init__(f"{prefix}{message}")


class FormatParseError(ConstructionError):
    """Raised when a format template string is malformed."""

    def __init__(self, template: str, message: str):
        self.template = template
        super().__init__(None, f"invalid format {template!r}: {message}")


class FormatRenderError(BlockyError):
    """Raised when a template references a placeholder with no value."""

    def __init__(self, placeholder: str):
        self.placeholder = placeholder
        super().__init__(f"no value for placeholder {{{placeholder}}}")


class BlockUpdateError(BlockyError):
    """Raised when a whole update cycle of a block fails."""

    def __init__(self, block_type: str, message: str):
        self.block_type = block_type
        self.message = message
        super().__init__(f"[{block_type}] {message}")


class SensorParseError(BlockUpdateError):
    """Raised when sensor output is not well-formed."""

    pass


class CommandTimeoutError(BlockUpdateError):
    """Raised when an external command does not finish in time."""

    pass


class RecoverableReadingError(BlockyError):
    """Raised for a single reading that must be discarded."""

    pass


class ClickSpawnError(BlockyError):
    """Raised when a click-triggered command cannot be launched."""

    def __init__(self, command: str, cause: Exception):
        self.command = command
        self.cause = cause
        super().__init__(f"could not spawn {command!r}: {cause}")
