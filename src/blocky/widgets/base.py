"""
Base classes for all widget types.

A widget is the renderable unit a block exposes: some text, a severity
state and a spacing mode, tagged with the identity of the owning block so
that click events can be routed back to it.
"""

import logging
from enum import Enum, IntEnum
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)


class State(IntEnum):
    """Severity of a widget, in ascending urgency."""

    GOOD = 0
    IDLE = 1
    INFO = 2
    WARNING = 3
    CRITICAL = 4


class Spacing(Enum):
    """Whether a widget takes up room on the bar."""

    NORMAL = "normal"
    HIDDEN = "hidden"


class Widget:
    """
    Mutable display unit owned by exactly one block.

    Attributes:
        id: Identity of the owning block (never changes)
        text: Display text, may be empty
        state: Current severity
        spacing: Visibility mode
    """

    def __init__(self, id: str, theme: Optional[Mapping[str, str]] = None):
        """
        Initialize widget.

        Args:
            id: Identity of the owning block
            theme: Optional mapping of state name to colour
        """
        self._id = id
        self._theme = dict(theme or {})
        self.text = ""
        self.state = State.IDLE
        self.spacing = Spacing.NORMAL

    @property
    def id(self) -> str:
        """Identity of the owning block."""
        return self._id

    def set_text(self, text: str) -> None:
        self.text = text

    def set_state(self, state: State) -> None:
        if not isinstance(state, State):
            raise TypeError(f"Expected State, got {type(state).__name__}")
        self.state = state

    def set_spacing(self, spacing: Spacing) -> None:
        self.spacing = spacing

    @property
    def is_hidden(self) -> bool:
        return self.spacing is Spacing.HIDDEN

    def full_text(self) -> str:
        """Text as it should appear on the bar."""
        if self.is_hidden:
            return self.text
        return f" {self.text} "

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the widget for the output collaborator.

        Returns:
            Dictionary with name, full_text, state and optional colour
        """
        data: Dict[str, Any] = {
            "name": self._id,
            "full_text": self.full_text(),
            "state": self.state.name.lower(),
            "separator": not self.is_hidden,
        }
        color = self._theme.get(self.state.name.lower())
        if color:
            data["color"] = color
        return data

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<{self.__class__.__name__}(id={self._id}, text={self.text!r}, "
            f"state={self.state.name}, spacing={self.spacing.value})>"
        )
