"""
Configuration loading for Blocky.
"""

from .loader import ConfigLoader

__all__ = ["ConfigLoader"]
