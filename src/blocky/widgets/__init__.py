"""
Widgets are the renderable output of blocks.

Each widget carries display text, a severity state and a spacing mode, and
is tagged with the identity of the block that owns it.
"""

from .base import Spacing, State, Widget
from .button import ButtonWidget

__all__ = ["ButtonWidget", "Spacing", "State", "Widget"]
