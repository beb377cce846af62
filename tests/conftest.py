"""
Pytest configuration and fixtures
"""

import json
from unittest.mock import Mock

import pytest
import yaml

from blocky.blocks.base import BlockContext


SENSORS_OUTPUT = {
    "coretemp-isa-0000": {
        "Adapter": "ISA adapter",
        "Package id 0": {
            "temp1_input": 61.0,
            "temp1_max": 80.0,
            "temp1_crit": 100.0,
            "temp1_crit_alarm": 0.0,
        },
        "Core 0": {
            "temp2_input": 42.0,
            "temp2_max": 80.0,
            "temp2_crit": 100.0,
        },
        "Core 1": {
            "temp3_input": 18.5,
            "temp3_max": 80.0,
        },
    },
    "acpitz-acpi-0": {
        "Adapter": "ACPI interface",
    },
}


@pytest.fixture
def sample_config():
    """Sample configuration for testing"""
    return {
        "settings": {"command_timeout": 2},
        "icons": {"thermometer": "T ", "time": "@ "},
        "theme": {"critical": "#ff0000"},
        "blocks": [
            {"block": "temperature", "collapsed": False, "interval": 10},
            {"block": "time", "format": "%H:%M", "on_click": "gnome-calendar"},
        ],
    }


@pytest.fixture
def config_file(tmp_path, sample_config):
    """Create a temporary config file"""
    config_path = tmp_path / "test_config.yaml"
    with open(config_path, "w") as f:
        yaml.dump(sample_config, f)
    return config_path


@pytest.fixture
def sensors_output():
    """Raw `sensors -j` output with readings 61, 42 and 18.5"""
    return json.dumps(SENSORS_OUTPUT)


@pytest.fixture
def block_context():
    """Block context with icons and a recording update handle"""
    return BlockContext(
        icons={"thermometer": "T ", "time": "@ "},
        theme={"critical": "#ff0000"},
        command_timeout=2,
        request_update=Mock(),
    )


class FakeClock:
    """Manually advanced monotonic clock"""

    def __init__(self, start=100.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def no_subprocess_calls(monkeypatch):
    """Prevent actual subprocess calls during testing"""
    mock_popen = Mock()
    mock_popen.returncode = 0
    monkeypatch.setattr("subprocess.Popen", Mock(return_value=mock_popen))
    monkeypatch.setattr(
        "subprocess.run", Mock(return_value=Mock(returncode=0, stdout=b"", stderr=b""))
    )
