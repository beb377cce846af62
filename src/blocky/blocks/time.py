"""
Date/time block for displaying time and date information.
"""

import locale
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any, Iterator, List, Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..events import ClickEvent, MouseButton
from ..utils.errors import ConstructionError
from ..utils.process import spawn
from ..widgets.base import Widget
from ..widgets.button import ButtonWidget
from .base import BaseBlock, BlockConfig, BlockContext

logger = logging.getLogger(__name__)

# LC_TIME is process-wide; serialize every temporary switch
_locale_lock = threading.Lock()


@contextmanager
def time_locale(name: Optional[str]) -> Iterator[None]:
    """
    Temporarily switch LC_TIME to the given locale.

    Args:
        name: Locale name as accepted by setlocale, or None for no change

    Raises:
        locale.Error: If the locale is not available
    """
    if name is None:
        yield
        return

    with _locale_lock:
        previous = locale.setlocale(locale.LC_TIME)
        locale.setlocale(locale.LC_TIME, name)
        try:
            yield
        finally:
            locale.setlocale(locale.LC_TIME, previous)


def resolve_locale(name: str) -> str:
    """
    Find the setlocale name for a configured locale.

    Tries the name as given, then with a UTF-8 codeset (so "fr_FR" works on
    systems that only generate "fr_FR.UTF-8").

    Raises:
        ConstructionError: If no candidate is available
    """
    candidates = [name]
    if "." not in name and name not in ("C", "POSIX"):
        candidates.append(f"{name}.UTF-8")

    for candidate in candidates:
        try:
            with time_locale(candidate):
                pass
            return candidate
        except locale.Error:
            continue

    raise ConstructionError(TimeBlock.block_type, f"invalid locale {name!r}")


def resolve_timezone(name: str) -> tzinfo:
    """
    Look up an IANA timezone.

    Raises:
        ConstructionError: If the zone is unknown
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConstructionError(TimeBlock.block_type, f"invalid timezone {name!r}: {e}") from e


@dataclass(frozen=True)
class TimeConfig(BlockConfig):
    """
    Configuration for the time block.

    Fields:
        format: strftime format string
        interval: Update interval in seconds
        on_click: Shell command run on left-click
        timezone: IANA zone name (default: system local time)
        locale: Locale for day/month names (default: C locale)
    """

    format: str = "%a %d/%m %R"
    interval: float = 5
    on_click: Optional[str] = None
    timezone: Optional[str] = None
    locale: Optional[str] = None

    def __post_init__(self):
        self._check_type("format", (str,))
        self._check_interval()
        self._check_type("on_click", (str,), optional=True)
        self._check_type("timezone", (str,), optional=True)
        self._check_type("locale", (str,), optional=True)


class TimeBlock(BaseBlock):
    """
    Display the current date and/or time.

    Example:
        - block: time
          format: "%H:%M:%S"
          interval: 1
          timezone: Europe/Paris
          locale: fr_FR
          on_click: "gnome-calendar"
    """

    block_type = "time"
    config_class = TimeConfig

    def __init__(self, config: Optional[Mapping[str, Any]], context: BlockContext):
        super().__init__(config, context)

        self.format = self.config.format
        self.on_click = self.config.on_click
        self.timezone = resolve_timezone(self.config.timezone) if self.config.timezone else None
        self.locale = resolve_locale(self.config.locale) if self.config.locale else None

        self.time = (
            ButtonWidget(self.id, context.icons, context.theme).with_text("").with_icon("time")
        )

    def now(self) -> datetime:
        """Current instant in the configured zone (local time by default)."""
        if self.timezone is not None:
            return datetime.now(self.timezone)
        return datetime.now().astimezone()

    def format_time(self, moment: datetime) -> str:
        """Render a datetime with the configured format and locale."""
        with time_locale(self.locale):
            return moment.strftime(self.format)

    def update(self) -> Optional[float]:
        self.time.set_text(self.format_time(self.now()))
        return self.config.interval

    def click(self, event: ClickEvent) -> None:
        if not event.targets(self.id) or event.button != MouseButton.LEFT:
            return
        if self.on_click:
            spawn(self.on_click)

    def view(self) -> List[Widget]:
        return [self.time]
