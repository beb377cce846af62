"""
Tests for severity classification.
"""

import pytest

from blocky.utils.severity import Thresholds, classify
from blocky.widgets.base import State

DEFAULTS = Thresholds(good=20, idle=45, info=60, warning=80)


class TestClassify:
    """Test the threshold ladder"""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (-5, State.GOOD),
            (19, State.GOOD),
            (30, State.IDLE),
            (50, State.INFO),
            (61, State.WARNING),
            (81, State.CRITICAL),
            (150, State.CRITICAL),
        ],
    )
    def test_ladder(self, value, expected):
        assert classify(value, DEFAULTS) is expected

    @pytest.mark.parametrize(
        "value, expected",
        [
            (20, State.GOOD),
            (45, State.IDLE),
            (60, State.INFO),
            (80, State.WARNING),
        ],
    )
    def test_boundary_maps_to_lower_state(self, value, expected):
        assert classify(value, DEFAULTS) is expected

    def test_misordered_thresholds_first_match_wins(self):
        """Thresholds are not validated; the ladder is applied as-is"""
        thresholds = Thresholds(good=50, idle=10, info=60, warning=80)
        assert classify(30, thresholds) is State.GOOD
        assert classify(55, thresholds) is State.INFO

    def test_states_are_ordered(self):
        assert State.GOOD < State.IDLE < State.INFO < State.WARNING < State.CRITICAL
