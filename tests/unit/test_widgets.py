"""
Tests for widget implementations.
"""

import unittest

from blocky.widgets import ButtonWidget, Spacing, State, Widget


class TestWidget(unittest.TestCase):
    """Test base Widget functionality."""

    def test_defaults(self):
        """Test a new widget is empty, idle and visible."""
        widget = Widget("abc")
        self.assertEqual(widget.id, "abc")
        self.assertEqual(widget.text, "")
        self.assertIs(widget.state, State.IDLE)
        self.assertIs(widget.spacing, Spacing.NORMAL)

    def test_set_state_rejects_non_state(self):
        """Test state must be a State member."""
        widget = Widget("abc")
        with self.assertRaises(TypeError):
            widget.set_state("critical")
        self.assertIs(widget.state, State.IDLE)

    def test_to_dict(self):
        """Test serialization for the bar."""
        widget = Widget("abc", theme={"warning": "#ffff00"})
        widget.set_text("61°")
        widget.set_state(State.WARNING)
        self.assertEqual(
            widget.to_dict(),
            {
                "name": "abc",
                "full_text": " 61° ",
                "state": "warning",
                "separator": True,
                "color": "#ffff00",
            },
        )

    def test_to_dict_without_theme_colour(self):
        """Test no colour key when the theme has none for the state."""
        widget = Widget("abc")
        self.assertNotIn("color", widget.to_dict())


class TestButtonWidget(unittest.TestCase):
    """Test ButtonWidget functionality."""

    def test_builder(self):
        """Test fluent construction."""
        widget = (
            ButtonWidget("abc", icons={"time": "@ "})
            .with_icon("time")
            .with_text("12:00")
            .with_state(State.GOOD)
            .with_spacing(Spacing.NORMAL)
        )
        self.assertEqual(widget.icon, "@ ")
        self.assertEqual(widget.full_text(), " @ 12:00 ")
        self.assertIs(widget.state, State.GOOD)

    def test_unknown_icon(self):
        """Test unknown icon names render without a glyph."""
        widget = ButtonWidget("abc").with_icon("nope").with_text("x")
        self.assertEqual(widget.full_text(), " x ")

    def test_hidden_spacing(self):
        """Test hidden widgets drop padding and separator."""
        widget = ButtonWidget("abc", icons={"thermometer": "T"}).with_icon("thermometer")
        widget.set_spacing(Spacing.HIDDEN)
        data = widget.to_dict()
        self.assertEqual(data["full_text"], "T")
        self.assertFalse(data["separator"])
        self.assertEqual(data["instance"], "abc")
