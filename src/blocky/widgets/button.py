"""
Button widget: an optional icon followed by text.
"""

from typing import Any, Dict, Mapping, Optional

from .base import Spacing, State, Widget


class ButtonWidget(Widget):
    """
    Clickable text widget with an optional icon glyph.

    Built fluently by the owning block:

    Example:
        >>> widget = (
        ...     ButtonWidget("abc123", icons={"time": "@ "})
        ...     .with_icon("time")
        ...     .with_spacing(Spacing.HIDDEN)
        ... )
    """

    def __init__(
        self,
        id: str,
        icons: Optional[Mapping[str, str]] = None,
        theme: Optional[Mapping[str, str]] = None,
    ):
        super().__init__(id, theme)
        self._icons = dict(icons or {})
        self.icon = ""

    def with_icon(self, name: str) -> "ButtonWidget":
        # Unknown icon names render without a glyph
        self.icon = self._icons.get(name, "")
        return self

    def with_text(self, text: str) -> "ButtonWidget":
        self.set_text(text)
        return self

    def with_state(self, state: State) -> "ButtonWidget":
        self.set_state(state)
        return self

    def with_spacing(self, spacing: Spacing) -> "ButtonWidget":
        self.set_spacing(spacing)
        return self

    def full_text(self) -> str:
        if self.is_hidden:
            # Collapsed widgets only show their icon
            return f"{self.icon}{self.text}"
        return f" {self.icon}{self.text} "

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["instance"] = self.id
        return data
