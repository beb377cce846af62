"""
Integration tests for BlockyController.

These tests wire a real config file, real blocks and the scheduler together,
with only the sensors command and process spawning mocked out.
"""

import io
import json
import subprocess
import threading
import time
from unittest.mock import patch

import pytest

from blocky.blocks.temperature import TemperatureBlock
from blocky.blocks.time import TimeBlock
from blocky.controller import BlockyController
from blocky.events import ClickEvent, MouseButton
from blocky.widgets.base import Spacing


def status_lines(stream):
    """Decode every status line written so far."""
    lines = stream.getvalue().splitlines()[2:]
    return [json.loads(line.rstrip(",")) for line in lines if line not in ("[", "]")]


class TestControllerSetup:
    """Test configuration and block construction"""

    def test_setup_blocks(self, config_file):
        controller = BlockyController(str(config_file), io.StringIO(), io.StringIO())
        assert controller.load_config()
        assert controller.setup_blocks()

        temperature, clock = controller.blocks
        assert isinstance(temperature, TemperatureBlock)
        assert isinstance(clock, TimeBlock)
        assert temperature.context.command_timeout == 2
        assert clock.on_click == "gnome-calendar"

    def test_invalid_block_prevents_start(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("blocks:\n  - block: temperature\n    format: '{average'\n")
        controller = BlockyController(str(path), io.StringIO(), io.StringIO())
        assert controller.run() is False
        assert controller.blocks == []

    def test_unknown_field_prevents_start(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("blocks:\n  - block: time\n    timezon: UTC\n")
        controller = BlockyController(str(path), io.StringIO(), io.StringIO())
        assert controller.run() is False

    def test_missing_config(self, tmp_path):
        controller = BlockyController(str(tmp_path / "nope.yaml"), io.StringIO(), io.StringIO())
        assert controller.run() is False


class TestWakeCycles:
    """Test scheduler wake cycles through the controller"""

    @pytest.fixture
    def controller(self, config_file, sensors_output):
        output = io.StringIO()
        controller = BlockyController(str(config_file), output, io.StringIO())
        assert controller.load_config()
        assert controller.setup_blocks()
        controller.writer.start()
        with patch("blocky.blocks.temperature.run_command", return_value=sensors_output):
            yield controller

    def test_first_cycle_renders_all_blocks(self, controller):
        controller.scheduler.step(max_wait=0)

        (status,) = status_lines(controller.writer.stream)
        temperature, clock = controller.blocks
        assert [w["name"] for w in status] == [temperature.id, clock.id]
        assert status[0]["full_text"] == " T 40° avg, 61° max "
        assert status[0]["state"] == "warning"

    def test_click_collapses_temperature(self, controller):
        controller.scheduler.step(max_wait=0)
        temperature = controller.blocks[0]

        controller.scheduler.push_event(ClickEvent(temperature.id, MouseButton.LEFT))
        controller.scheduler.step(max_wait=0)

        assert temperature.view()[0].spacing is Spacing.HIDDEN
        status = status_lines(controller.writer.stream)[-1]
        assert status[0]["full_text"] == "T "

    def test_click_time_spawns_command(self, controller):
        controller.scheduler.step(max_wait=0)
        clock = controller.blocks[1]

        controller.scheduler.push_event(ClickEvent(clock.id, MouseButton.LEFT))
        controller.scheduler.step(max_wait=0)

        subprocess.Popen.assert_called_once()
        assert subprocess.Popen.call_args[0][0] == "gnome-calendar"

    def test_sensor_failure_keeps_previous_output(self, controller):
        controller.scheduler.step(max_wait=0)
        temperature = controller.blocks[0]

        with patch("blocky.blocks.temperature.run_command", return_value="garbage"):
            controller.scheduler.request_update(temperature.id)
            controller.scheduler.step(max_wait=0)

        assert temperature.view()[0].text == "40° avg, 61° max"


class TestRunLoop:
    """Test the full run loop"""

    def test_run_and_stop(self, config_file, sensors_output):
        output = io.StringIO()
        controller = BlockyController(str(config_file), output, io.StringIO())

        with patch("blocky.blocks.temperature.run_command", return_value=sensors_output):
            thread = threading.Thread(target=controller.run, daemon=True)
            thread.start()

            deadline = time.time() + 5
            while not status_lines(output) and time.time() < deadline:
                time.sleep(0.01)
            controller.stop()
            thread.join(timeout=5)

        assert not thread.is_alive()
        assert status_lines(output)
        assert output.getvalue().rstrip().endswith("]")
