"""
Minimal JSON-lines bar protocol.

BarWriter emits the aggregate view as one JSON array per render; EventReader
reads click events from the bar on a background thread and hands them to a
callback (normally Scheduler.push_event).
"""

import json
import logging
import sys
import threading
from typing import Callable, List, Optional, TextIO

from .events import ClickEvent
from .utils.errors import error_boundary
from .widgets.base import Widget

logger = logging.getLogger(__name__)


class BarWriter:
    """Writes rendered widgets to the bar."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout
        self._started = False
        self._lock = threading.Lock()

    def start(self) -> None:
        """Write the protocol header and open the status array."""
        with self._lock:
            if self._started:
                return
            self.stream.write(json.dumps({"version": 1, "click_events": True}) + "\n")
            self.stream.write("[\n")
            self.stream.flush()
            self._started = True

    @error_boundary(default_return=None)
    def write(self, widgets: List[Widget]) -> None:
        """Write one status line."""
        if not self._started:
            self.start()
        line = json.dumps([widget.to_dict() for widget in widgets], ensure_ascii=False)
        with self._lock:
            self.stream.write(line + ",\n")
            self.stream.flush()

    def close(self) -> None:
        """Close the status array."""
        with self._lock:
            if not self._started:
                return
            self.stream.write("]\n")
            self.stream.flush()
            self._started = False


@error_boundary(default_return=None, log_level=logging.WARNING)
def parse_event_line(line: str) -> Optional[ClickEvent]:
    """
    Parse one line of the click event stream.

    Returns:
        ClickEvent, or None for framing lines and malformed input
    """
    line = line.strip().lstrip(",").strip()
    if not line or line in ("[", "]"):
        return None
    return ClickEvent.from_dict(json.loads(line))


class EventReader:
    """
    Reads click events on a background thread.

    Responsibilities:
    - Parse the click event stream line by line
    - Forward each event to the scheduler inbox
    """

    def __init__(
        self,
        on_event: Callable[[ClickEvent], None],
        stream: Optional[TextIO] = None,
    ):
        """
        Initialize the event reader.

        Args:
            on_event: Called from the reader thread with every parsed event
            stream: Input stream (default: stdin)
        """
        self.on_event = on_event
        self.stream = stream if stream is not None else sys.stdin
        self.running = False
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Start the reader thread."""
        if self._thread and self._thread.is_alive():
            logger.warning("Event reader already running")
            return

        self.running = True
        self._thread = threading.Thread(target=self._read_loop, daemon=True, name="EventReader")
        self._thread.start()
        logger.debug("Event reader started")

    def stop(self) -> None:
        """
        Stop the reader thread.

        A blocked readline() cannot be interrupted; the daemon thread is
        left to die with the process in that case.
        """
        self.running = False
        if self._thread:
            self._thread.join(timeout=0.5)
            self._thread = None
        logger.debug("Event reader stopped")

    def _read_loop(self) -> None:
        """Main reading loop (runs in background thread)."""
        for line in self.stream:
            if not self.running:
                break
            event = parse_event_line(line)
            if event is not None:
                logger.debug(f"Received {event!r}")
                self.on_event(event)
        self.running = False
        logger.debug("Event stream closed")
