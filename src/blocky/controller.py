"""
Main controller for Blocky.
"""

import logging
from typing import Any, Dict, List, Optional, TextIO

from .blocks.base import BaseBlock, BlockContext
from .config.loader import ConfigLoader
from .managers import BlockRegistry, Scheduler
from .protocol import BarWriter, EventReader

logger = logging.getLogger(__name__)


class BlockyController:
    """
    Main controller wiring configuration, blocks and the bar protocol.

    This controller delegates specific responsibilities to:
    - ConfigLoader: Reads and validates the YAML file
    - BlockRegistry: Builds blocks from their config sections
    - Scheduler: Polls blocks and routes click events
    - BarWriter / EventReader: Talk to the bar
    """

    def __init__(
        self,
        config_path: str,
        status_stream: Optional[TextIO] = None,
        event_stream: Optional[TextIO] = None,
    ) -> None:
        """
        Initialize the Blocky controller.

        Args:
            config_path: Path to YAML configuration file
            status_stream: Stream the bar reads status lines from (default: stdout)
            event_stream: Stream the bar writes click events to (default: stdin)
        """
        self.config_path: str = config_path
        self.config: Optional[Dict[str, Any]] = None

        self.config_loader: ConfigLoader = ConfigLoader()
        self.block_registry: BlockRegistry = BlockRegistry()
        self.writer: BarWriter = BarWriter(status_stream)
        self.scheduler: Scheduler = Scheduler(on_render=self.writer.write)
        self.event_reader: EventReader = EventReader(self.scheduler.push_event, event_stream)

        self.block_registry.auto_discover()
        logger.info(f"Registered blocks: {self.block_registry.list_blocks()}")

    @property
    def blocks(self) -> List[BaseBlock]:
        return self.scheduler.blocks

    def load_config(self) -> bool:
        """
        Load configuration from file.

        Returns:
            True if successful, False otherwise
        """
        try:
            self.config = self.config_loader.load(self.config_path)
            return True
        except Exception as e:
            logger.error(f"Failed to load config: {e}")
            return False

    def build_context(self) -> BlockContext:
        """Create the shared context handed to every block."""
        settings = self.config.get("settings", {})
        return BlockContext(
            icons=self.config.get("icons"),
            theme=self.config.get("theme"),
            command_timeout=settings.get("command_timeout"),
            request_update=self.scheduler.request_update,
        )

    def setup_blocks(self) -> bool:
        """
        Construct every configured block and register it with the scheduler.

        A block that fails to construct is fatal: the bar does not start
        with a partial configuration.

        Returns:
            True if all blocks were built, False otherwise
        """
        context = self.build_context()
        blocks = []
        for index, block_config in enumerate(self.config["blocks"], start=1):
            try:
                blocks.append(self.block_registry.create(block_config, context))
            except Exception as e:
                logger.error(f"Failed to build block #{index}: {e}")
                return False

        for block in blocks:
            self.scheduler.register(block)
        return True

    def stop(self) -> None:
        """Request a graceful shutdown (safe from signal handlers)."""
        logger.info("Stopping Blocky...")
        self.scheduler.stop()

    def run(self) -> bool:
        """
        Main application run loop.

        Returns:
            True on clean shutdown, False if startup failed
        """
        if not self.load_config():
            logger.error("Cannot start without valid configuration")
            return False

        if not self.setup_blocks():
            logger.error("Cannot start with invalid blocks")
            return False

        self.writer.start()
        self.event_reader.start()
        logger.info("Blocky is running.")

        try:
            self.scheduler.run()
        except KeyboardInterrupt:
            logger.info("Received shutdown signal")
        finally:
            logger.info("Shutting down Blocky...")
            self.event_reader.stop()
            self.writer.close()
        return True
