"""
Severity classification for numeric readings.
"""

from typing import NamedTuple

from ..widgets.base import State


class Thresholds(NamedTuple):
    """Ascending upper bounds for the good/idle/info/warning states."""

    good: float
    idle: float
    info: float
    warning: float


def classify(value: float, thresholds: Thresholds) -> State:
    """
    Map a reading onto a severity state.

    The first threshold the value does not exceed wins, so a value equal to
    a threshold gets the less urgent state. Thresholds are not checked for
    ordering.

    Args:
        value: Reading to classify
        thresholds: Upper bounds for GOOD, IDLE, INFO and WARNING

    Returns:
        Matching State, CRITICAL if the value exceeds every bound
    """
    if value <= thresholds.good:
        return State.GOOD
    if value <= thresholds.idle:
        return State.IDLE
    if value <= thresholds.info:
        return State.INFO
    if value <= thresholds.warning:
        return State.WARNING
    return State.CRITICAL
