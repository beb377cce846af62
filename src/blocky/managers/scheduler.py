"""
Block scheduling and event routing.

This module drives the lifecycle of blocks: it polls each block on its own
cadence, routes click events to blocks and asks the output collaborator to
re-render after every change.
"""

import logging
import queue
import threading
import time
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..blocks.base import BaseBlock, BlockContext
from ..events import ClickEvent
from ..utils.errors import BlockyError, ConfigurationError
from ..widgets.base import Widget

logger = logging.getLogger(__name__)


class UpdateRequest:
    """Inbox message asking for an immediate update of one block."""

    __slots__ = ("block_id",)

    def __init__(self, block_id: str):
        self.block_id = block_id

    def __repr__(self) -> str:
        return f"<UpdateRequest(block_id={self.block_id})>"


# Inbox sentinel that ends run()
_STOP = object()


class Scheduler:
    """
    Drives a set of blocks from a single loop.

    Responsibilities:
    - Poll each block when its update interval has elapsed
    - Route click events to blocks
    - Handle early update requests from blocks
    - Request a re-render of the aggregate view after any change

    Blocks are updated and clicked only from the thread that calls step()
    or run(); other threads talk to the scheduler through its inbox
    (push_event, request_update, stop).
    """

    # Upper bound on a single wait so stop() is noticed promptly
    MAX_WAIT = 60.0

    def __init__(
        self,
        on_render: Optional[Callable[[List[Widget]], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the scheduler.

        Args:
            on_render: Called with the aggregate view after every change
            clock: Monotonic clock in seconds (injectable for tests)
        """
        self.on_render = on_render
        self._clock = clock
        self._blocks: List[BaseBlock] = []
        self._due: Dict[str, Optional[float]] = {}  # {block_id: next due time}
        self._inbox: "queue.Queue[Any]" = queue.Queue()
        self._lock = threading.Lock()  # Guards registration against concurrent reads
        self.running = False

    # Registration

    def register(self, block: BaseBlock) -> None:
        """
        Add a block. It is due for its first update immediately.

        Raises:
            ValueError: If a block with the same identity is already registered
        """
        with self._lock:
            if block.id in self._due:
                raise ValueError(f"Block {block.id} is already registered")
            self._blocks.append(block)
            self._due[block.id] = self._clock()
        logger.info(f"Registered block: {block.describe()}")

    @property
    def blocks(self) -> List[BaseBlock]:
        """Registered blocks in registration order."""
        with self._lock:
            return list(self._blocks)

    def next_due(self, block_id: str) -> Optional[float]:
        """Next automatic update time of a block (None if not auto-polled)."""
        return self._due.get(block_id)

    # Inbox

    def request_update(self, block_id: str) -> None:
        """Ask for an immediate update of a block (thread-safe)."""
        self._inbox.put(UpdateRequest(block_id))

    def push_event(self, event: ClickEvent) -> None:
        """Queue a click event for delivery (thread-safe)."""
        self._inbox.put(event)

    def stop(self) -> None:
        """Stop run() after the current wake cycle (thread-safe)."""
        self.running = False
        self._inbox.put(_STOP)

    # Loop

    def time_until_next(self) -> Optional[float]:
        """Seconds until the earliest due block, None if nothing is scheduled."""
        due_times = [due for due in self._due.values() if due is not None]
        if not due_times:
            return None
        return max(0.0, min(due_times) - self._clock())

    def step(self, max_wait: Optional[float] = None) -> bool:
        """
        Run one wake cycle.

        Waits for the earliest due block or an inbox message, whichever
        comes first, then handles it.

        Args:
            max_wait: Optional cap on the wait in seconds

        Returns:
            False if a stop request was received, True otherwise
        """
        wait = self.time_until_next()
        limit = self.MAX_WAIT if max_wait is None else max_wait
        wait = limit if wait is None else min(wait, limit)

        try:
            message = self._inbox.get(timeout=wait) if wait > 0 else self._inbox.get_nowait()
        except queue.Empty:
            message = None

        if message is _STOP:
            return False

        changed = False
        if isinstance(message, ClickEvent):
            changed = self.dispatch_click(message)
        elif isinstance(message, UpdateRequest):
            changed = self._handle_update_request(message)
        elif message is not None:
            logger.warning(f"Ignoring unknown scheduler message: {message!r}")

        changed = bool(self.run_due_updates()) or changed

        if changed:
            self.render()
        return True

    def run(self) -> None:
        """Run wake cycles until stop() is called."""
        self.running = True
        logger.debug(f"Scheduler running with {len(self._blocks)} block(s)")
        try:
            while self.running:
                if not self.step():
                    break
        finally:
            self.running = False
            logger.debug("Scheduler stopped")

    def run_due_updates(self) -> List[BaseBlock]:
        """
        Update every block whose due time has passed, in registration order.

        Returns:
            Blocks that were updated
        """
        now = self._clock()
        updated = []
        for block in self.blocks:
            due = self._due.get(block.id)
            if due is None or due > now:
                continue
            self._update_block(block)
            updated.append(block)
        return updated

    def _update_block(self, block: BaseBlock) -> None:
        try:
            interval = block.update()
        except BlockyError as e:
            logger.error(f"Update of {block.block_type} block failed: {e}")
            interval = block.interval
        except Exception as e:
            logger.error(
                f"Unexpected error updating {block.block_type} block: {e}", exc_info=True
            )
            interval = block.interval

        if interval is None:
            self._due[block.id] = None
            logger.debug(f"{block.block_type} block ({block.id}) stopped automatic updates")
        else:
            # Advance from now so a slow or late block does not burst-catch-up
            self._due[block.id] = self._clock() + interval

    def _handle_update_request(self, request: UpdateRequest) -> bool:
        if request.block_id not in self._due:
            logger.debug(f"Update requested for unknown block {request.block_id}")
            return False
        self._due[request.block_id] = self._clock()
        return False

    def dispatch_click(self, event: ClickEvent) -> bool:
        """
        Deliver a click event to every block in registration order.

        Blocks ignore events that do not target them.

        Returns:
            True if the event targeted a registered block
        """
        matched = False
        for block in self.blocks:
            if event.targets(block.id):
                matched = True
            try:
                block.click(event)
            except BlockyError as e:
                logger.error(f"Click on {block.block_type} block failed: {e}")
            except Exception as e:
                logger.error(
                    f"Unexpected error handling click on {block.block_type} block: {e}",
                    exc_info=True,
                )

        if not matched:
            logger.debug(f"Click event for unknown block {event.name}")
        return matched

    def view(self) -> List[Widget]:
        """Concatenate every block's widgets in registration order."""
        widgets: List[Widget] = []
        for block in self.blocks:
            widgets.extend(block.view())
        return widgets

    def render(self) -> None:
        """Hand the aggregate view to the output collaborator."""
        if self.on_render is None:
            return
        self.on_render(self.view())


class BlockRegistry:
    """
    Registry for auto-discovering block types.
    """

    def __init__(self):
        """Initialize empty registry."""
        self._blocks: Dict[str, type] = {}

    def register(self, block_class: type) -> None:
        """
        Register a block class.

        Args:
            block_class: Block class to register

        Raises:
            TypeError: If block_class doesn't inherit from BaseBlock
            ValueError: If block_type is not defined
        """
        if not isinstance(block_class, type) or not issubclass(block_class, BaseBlock):
            raise TypeError(f"{block_class} must inherit from BaseBlock")

        block_type = block_class.block_type

        if not block_type:
            raise ValueError(f"{block_class.__name__} must define block_type class attribute")

        if block_type in self._blocks:
            logger.warning(f"Overwriting existing block type: {block_type}")

        self._blocks[block_type] = block_class
        logger.debug(f"Registered block type: {block_type}")

    def get_block_class(self, block_type: str):
        """
        Get block class by type.

        Args:
            block_type: Block type identifier

        Returns:
            Block class or None if not found
        """
        return self._blocks.get(block_type)

    def list_blocks(self) -> list:
        """List all registered block types."""
        return list(self._blocks.keys())

    def create(self, block_config: Mapping[str, Any], context: BlockContext) -> BaseBlock:
        """
        Build a block from its config section.

        Args:
            block_config: Mapping with a "block" type key plus block fields
            context: Shared block context

        Returns:
            Constructed block

        Raises:
            ConfigurationError: If the type is missing or unknown, or the
                fields are invalid
            ConstructionError: If the block rejects its configuration
        """
        fields = dict(block_config)
        block_type = fields.pop("block", None)
        if not block_type:
            raise ConfigurationError("Block is missing 'block' type")

        block_class = self.get_block_class(block_type)
        if block_class is None:
            raise ConfigurationError(
                f"Unknown block type: {block_type} (available: {', '.join(self.list_blocks())})"
            )

        return block_class(fields, context)

    def auto_discover(self) -> None:
        """Auto-discover and register all block modules."""
        import importlib
        import pkgutil

        import blocky.blocks as blocks_pkg

        for _importer, modname, _ispkg in pkgutil.iter_modules(blocks_pkg.__path__):
            if modname in ["base", "__init__"]:
                continue

            try:
                module = importlib.import_module(f"blocky.blocks.{modname}")

                # Find all BaseBlock subclasses defined in the module
                for attr_name in dir(module):
                    attr = getattr(module, attr_name)
                    if (
                        isinstance(attr, type)
                        and issubclass(attr, BaseBlock)
                        and attr is not BaseBlock
                        and attr.__module__ == module.__name__
                        and attr.block_type
                    ):
                        self.register(attr)
                        logger.info(f"Auto-registered block: {attr.block_type}")

            except Exception as e:
                logger.error(f"Failed to load block module {modname}: {e}")
