"""
Input events delivered from the bar to blocks.
"""

from enum import IntEnum
from typing import Any, Dict, Optional


class MouseButton(IntEnum):
    """Pointer buttons, numbered as X11 reports them."""

    UNKNOWN = 0
    LEFT = 1
    MIDDLE = 2
    RIGHT = 3
    WHEEL_UP = 4
    WHEEL_DOWN = 5
    BACK = 8
    FORWARD = 9

    @classmethod
    def from_value(cls, value: Any) -> "MouseButton":
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return cls.UNKNOWN


class ClickEvent:
    """
    A click on one widget of the bar.

    Attributes:
        name: Identity of the block the click targets (None if the bar
            could not attribute it)
        button: Button that was pressed
        instance: Optional widget instance reported by the bar
    """

    __slots__ = ("name", "button", "instance")

    def __init__(
        self,
        name: Optional[str],
        button: MouseButton = MouseButton.LEFT,
        instance: Optional[str] = None,
    ):
        self.name = name
        self.button = button
        self.instance = instance

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClickEvent":
        """
        Build an event from a decoded protocol message.

        Args:
            data: Mapping with "name", "button" and optionally "instance"

        Returns:
            ClickEvent

        Raises:
            ValueError: If data is not a mapping
        """
        if not isinstance(data, dict):
            raise ValueError(f"Click event must be an object, got {type(data).__name__}")
        name = data.get("name")
        instance = data.get("instance")
        return cls(
            name=str(name) if name is not None else None,
            button=MouseButton.from_value(data.get("button")),
            instance=str(instance) if instance is not None else None,
        )

    def targets(self, block_id: str) -> bool:
        """Check whether this event is addressed to the given block."""
        return self.name is not None and self.name == block_id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ClickEvent):
            return NotImplemented
        return (self.name, self.button, self.instance) == (
            other.name,
            other.button,
            other.instance,
        )

    def __repr__(self) -> str:
        return f"<ClickEvent(name={self.name}, button={self.button.name})>"
