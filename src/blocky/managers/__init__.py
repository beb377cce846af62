"""
Managers for running blocks.

- Scheduler: polls blocks on their cadence and routes click events
- BlockRegistry: maps block type names to block classes
"""

from .scheduler import BlockRegistry, Scheduler, UpdateRequest

__all__ = [
    "BlockRegistry",
    "Scheduler",
    "UpdateRequest",
]
