"""
Temperature block backed by lm-sensors.
"""

import json
import logging
import math
import subprocess
from dataclasses import dataclass
from numbers import Real
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..events import ClickEvent, MouseButton
from ..utils.errors import (
    CommandTimeoutError,
    ConstructionError,
    FormatParseError,
    RecoverableReadingError,
    SensorParseError,
)
from ..utils.format import FormatTemplate
from ..utils.process import DEFAULT_TIMEOUT, run_command
from ..utils.severity import Thresholds, classify
from ..widgets.base import Spacing, Widget
from ..widgets.button import ButtonWidget
from .base import BaseBlock, BlockConfig, BlockContext

logger = logging.getLogger(__name__)

# Readings outside this open interval are sensor noise
MIN_VALID = -101
MAX_VALID = 151

# lm-sensors names temperature readings temp<N>_input
FIELD_PREFIX = "temp"
FIELD_SUFFIX = "input"

SensorsOutput = Dict[str, Dict[str, Any]]


@dataclass(frozen=True)
class TemperatureConfig(BlockConfig):
    """
    Configuration for the temperature block.

    Fields:
        interval: Update interval in seconds
        collapsed: Start with the text hidden
        good/idle/info/warning: Maximum temperature for each state
        format: Display template with {average}, {min} and {max}
        chip: Only read this sensor chip
        inputs: Only use these sensor inputs
    """

    interval: float = 5
    collapsed: bool = True
    good: int = 20
    idle: int = 45
    info: int = 60
    warning: int = 80
    format: str = "{average}° avg, {max}° max"
    chip: Optional[str] = None
    inputs: Optional[Tuple[str, ...]] = None

    def __post_init__(self):
        self._check_interval()
        self._check_type("collapsed", (bool,))
        for name in ("good", "idle", "info", "warning"):
            self._check_type(name, (int, float))
        self._check_type("format", (str,))
        self._check_type("chip", (str,), optional=True)
        if self.inputs is not None:
            if isinstance(self.inputs, str) or not isinstance(self.inputs, (list, tuple)):
                self._check_type("inputs", (list, tuple))
            # Freeze YAML lists
            object.__setattr__(self, "inputs", tuple(str(i) for i in self.inputs))

    @property
    def thresholds(self) -> Thresholds:
        return Thresholds(self.good, self.idle, self.info, self.warning)


def read_sensors(chip: Optional[str] = None, timeout: Optional[float] = DEFAULT_TIMEOUT) -> SensorsOutput:
    """
    Read all sensors as JSON via ``sensors -j``.

    Args:
        chip: Optional chip name to restrict the output to
        timeout: Seconds to wait for the sensors command

    Returns:
        Mapping chip name -> input name -> raw reading

    Raises:
        SensorParseError: If sensors is missing or its output is malformed
        CommandTimeoutError: If sensors does not answer in time
    """
    args = ["sensors", "-j"]
    if chip:
        args.append(chip)

    try:
        output = run_command(args, timeout=timeout)
    except subprocess.TimeoutExpired:
        raise CommandTimeoutError(
            TemperatureBlock.block_type, f"sensors did not finish within {timeout}s"
        ) from None
    except OSError as e:
        raise SensorParseError(TemperatureBlock.block_type, f"could not run sensors: {e}") from e

    return parse_sensors_output(output)


def parse_sensors_output(output: str) -> SensorsOutput:
    """
    Decode ``sensors -j`` output.

    Raises:
        SensorParseError: If the output is not a mapping of mappings
    """
    try:
        parsed = json.loads(output)
    except ValueError as e:
        raise SensorParseError(TemperatureBlock.block_type, f"sensors output is invalid: {e}") from e

    if not isinstance(parsed, dict) or not all(isinstance(v, dict) for v in parsed.values()):
        raise SensorParseError(
            TemperatureBlock.block_type, "sensors output is invalid: expected chip -> inputs mapping"
        )
    return parsed


def _as_readings(value: Any) -> Optional[Dict[str, float]]:
    """Interpret a sensor input as name -> number, None if it is something else."""
    if not isinstance(value, dict):
        return None
    readings = {}
    for name, reading in value.items():
        if isinstance(reading, bool) or not isinstance(reading, Real):
            return None
        try:
            readings[str(name)] = float(reading)
        except OverflowError:
            # Out of float range; the range check discards it with a notice
            readings[str(name)] = math.copysign(math.inf, reading)
    return readings


def _check_range(value: float) -> int:
    if not MIN_VALID < value < MAX_VALID:
        raise RecoverableReadingError(
            f"Temperature ({value}) outside of range ([{MIN_VALID + 1}, {MAX_VALID - 1}])"
        )
    return int(value)


def collect_temperatures(sensors: SensorsOutput, inputs: Optional[Tuple[str, ...]] = None) -> List[int]:
    """
    Extract valid temperature readings from sensors output.

    Inputs whose reading is not a flat numeric mapping (like the "Adapter"
    entry) are skipped silently; out-of-range values are logged and dropped.

    Args:
        sensors: Output of read_sensors()
        inputs: Optional whitelist of input names

    Returns:
        Readings truncated toward zero
    """
    temperatures: List[int] = []
    for chip, chip_inputs in sensors.items():
        for input_name, input_values in chip_inputs.items():
            if inputs is not None and input_name not in inputs:
                continue

            readings = _as_readings(input_values)
            if readings is None:
                continue

            for field_name, value in readings.items():
                if not (field_name.startswith(FIELD_PREFIX) and field_name.endswith(FIELD_SUFFIX)):
                    continue
                try:
                    temperatures.append(_check_range(value))
                except RecoverableReadingError as e:
                    logger.warning(f"{chip}/{input_name}/{field_name}: {e}")

    return temperatures


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def summarize(temperatures: List[int]) -> Dict[str, int]:
    """Return the average, min and max of a non-empty list of readings."""
    return {
        "average": round_half_away(sum(temperatures) / len(temperatures)),
        "min": min(temperatures),
        "max": max(temperatures),
    }


class TemperatureBlock(BaseBlock):
    """
    Display aggregated hardware temperatures.

    Left-click toggles between the collapsed (icon only) and expanded views.

    Example:
        - block: temperature
          interval: 10
          collapsed: false
          chip: "*-isa-*"
          format: "{min}°-{max}°"
    """

    block_type = "temperature"
    config_class = TemperatureConfig

    def __init__(self, config: Optional[Mapping[str, Any]], context: BlockContext):
        super().__init__(config, context)

        try:
            self.format = FormatTemplate.parse(self.config.format)
        except FormatParseError as e:
            raise ConstructionError(
                self.block_type, f"Invalid format specified for temperature: {e.message}"
            ) from e

        self.collapsed = self.config.collapsed
        self.output = ""
        self.text = (
            ButtonWidget(self.id, context.icons, context.theme)
            .with_icon("thermometer")
            .with_spacing(Spacing.HIDDEN if self.collapsed else Spacing.NORMAL)
        )

    def read(self) -> SensorsOutput:
        """Read the sensors this block is configured for."""
        return read_sensors(self.config.chip, timeout=self.context.command_timeout)

    def update(self) -> Optional[float]:
        temperatures = collect_temperatures(self.read(), self.config.inputs)

        if not temperatures:
            logger.debug("No valid temperature readings, keeping previous output")
            return self.config.interval

        values = summarize(temperatures)
        self.output = self.format.render(values)
        if not self.collapsed:
            self.text.set_text(self.output)

        self.text.set_state(classify(values["max"], self.config.thresholds))
        return self.config.interval

    def click(self, event: ClickEvent) -> None:
        if not event.targets(self.id) or event.button != MouseButton.LEFT:
            return

        self.collapsed = not self.collapsed
        if self.collapsed:
            self.text.set_text("")
            self.text.set_spacing(Spacing.HIDDEN)
        else:
            self.text.set_text(self.output)
            self.text.set_spacing(Spacing.NORMAL)

    def view(self) -> List[Widget]:
        return [self.text]
