"""
Blocky - A modular YAML-driven status bar block host for Linux
"""

__version__ = "0.1.0"

from .controller import BlockyController

__all__ = ["BlockyController"]
