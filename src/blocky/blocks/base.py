"""
Base classes for all block types.

A block is a self-contained, periodically updated source of widgets. The
scheduler only ever talks to blocks through the contract defined here, so
new block types can be added without touching it.
"""

import logging
import math
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Type

from ..events import ClickEvent
from ..utils.errors import ConfigurationError
from ..utils.process import DEFAULT_TIMEOUT
from ..widgets.base import Widget

logger = logging.getLogger(__name__)


class BlockContext:
    """
    Shared context provided to every block at construction.

    Attributes:
        icons: Icon name to glyph mapping
        theme: State name to colour mapping
        command_timeout: Bound for external commands in seconds
    """

    def __init__(
        self,
        icons: Optional[Mapping[str, str]] = None,
        theme: Optional[Mapping[str, str]] = None,
        command_timeout: float = DEFAULT_TIMEOUT,
        request_update: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize block context.

        Args:
            icons: Icon glyphs from the config file
            theme: Colours from the config file
            command_timeout: Seconds before an external command is abandoned
            request_update: Scheduler handle used to ask for an early update
        """
        self.icons = dict(icons or {})
        self.theme = dict(theme or {})
        self.command_timeout = command_timeout
        self._request_update = request_update

    def request_update(self, block_id: str) -> None:
        """Ask the scheduler to update a block as soon as possible."""
        if self._request_update is None:
            logger.debug(f"No scheduler attached, ignoring update request for {block_id}")
            return
        self._request_update(block_id)


@dataclass(frozen=True)
class BlockConfig:
    """
    Immutable configuration snapshot for a block.

    Subclasses declare their fields with defaults; ``from_dict`` rejects any
    key that is not a declared field so that typos fail fast.
    """

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "BlockConfig":
        """
        Build a config from a raw mapping.

        Args:
            data: Block section of the config file (without the "block" key)

        Returns:
            Validated, defaulted config

        Raises:
            ConfigurationError: On unknown fields or invalid values
        """
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown field(s) for {cls.__name__}: {', '.join(unknown)} "
                f"(expected one of: {', '.join(sorted(known))})"
            )
        try:
            return cls(**data)
        except TypeError as e:
            raise ConfigurationError(f"Invalid {cls.__name__}: {e}") from e

    def _check_type(self, name: str, types: Tuple[type, ...], optional: bool = False) -> None:
        value = getattr(self, name)
        if value is None and optional:
            return
        # bool is an int subclass but never a valid number here
        if isinstance(value, bool) and bool not in types:
            raise ConfigurationError(f"{type(self).__name__}.{name} must not be a boolean")
        if not isinstance(value, types):
            expected = " or ".join(t.__name__ for t in types)
            raise ConfigurationError(
                f"{type(self).__name__}.{name} must be {expected}, got {type(value).__name__}"
            )

    def _check_interval(self, name: str = "interval") -> None:
        self._check_type(name, (int, float))
        value = getattr(self, name)
        if not math.isfinite(value) or value <= 0:
            raise ConfigurationError(f"{type(self).__name__}.{name} must be a positive finite number")


class BaseBlock(ABC):
    """
    Base class for all status bar blocks.

    Class Attributes:
        block_type: Unique identifier for this block type (e.g., "time")
        config_class: BlockConfig subclass describing accepted fields

    Example:
        >>> class UptimeBlock(BaseBlock):
        ...     block_type = "uptime"
        ...     config_class = UptimeConfig
        ...
        ...     def update(self):
        ...         self.widget.set_text(read_uptime())
        ...         return self.config.interval
        ...
        ...     def click(self, event):
        ...         pass
        ...
        ...     def view(self):
        ...         return [self.widget]
    """

    # Block type identifier (must be unique)
    block_type: str = None

    # Accepted configuration
    config_class: Type[BlockConfig] = BlockConfig

    def __init__(self, config: Optional[Mapping[str, Any]], context: BlockContext):
        """
        Initialize block with configuration.

        Args:
            config: Block configuration from YAML
            context: Shared formatting/theming context

        Raises:
            ValueError: If block_type is not defined
            ConfigurationError: If the configuration is invalid
        """
        if not self.block_type:
            raise ValueError(f"{self.__class__.__name__} must define block_type")

        self.config = self.config_class.from_dict(config)
        self.context = context
        self._id = uuid.uuid4().hex

    @property
    def id(self) -> str:
        """Process-unique identity used to route click events."""
        return self._id

    @property
    def interval(self) -> Optional[float]:
        """Configured poll cadence in seconds (None if not auto-polled)."""
        return getattr(self.config, "interval", None)

    @abstractmethod
    def update(self) -> Optional[float]:
        """
        Run one polling cycle and refresh the block's widgets.

        Returns:
            Seconds until the next automatic update, or None to stop
            automatic polling

        Raises:
            BlockUpdateError: If the whole cycle failed
        """
        pass

    @abstractmethod
    def click(self, event: ClickEvent) -> None:
        """
        React to a click event.

        Must be a no-op for events that do not target this block.

        Raises:
            ClickSpawnError: If a click-triggered command failed to launch
        """
        pass

    @abstractmethod
    def view(self) -> List[Widget]:
        """Return the block's widgets in display order."""
        pass

    def request_update(self) -> None:
        """Ask the scheduler to update this block early."""
        self.context.request_update(self.id)

    def describe(self) -> Dict[str, Any]:
        """Summary used in debug logging."""
        return {"type": self.block_type, "id": self.id, "interval": self.interval}

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<{self.__class__.__name__}(type={self.block_type}, id={self.id})>"
