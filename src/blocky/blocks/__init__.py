"""
Block system for periodically updated status bar segments.

Blocks sample some piece of system state on their own cadence and expose
the result as widgets:
- Hardware temperatures (lm-sensors)
- Date/time

Every module in this package is scanned by BlockRegistry.auto_discover(),
so adding a block type only requires dropping a BaseBlock subclass here.
"""

from .base import BaseBlock, BlockConfig, BlockContext

__all__ = ["BaseBlock", "BlockConfig", "BlockContext"]
