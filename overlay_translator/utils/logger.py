"""
User-visible event log.

Mirrors every entry to the module logger as well, so the same events reach
both the status display and the application log.
"""
import logging
from datetime import datetime
from typing import Callable, List, Optional

logger = logging.getLogger("overlay_translator.events")


class EventLog:
    """Timestamped status log with an optional callback sink."""

    def __init__(self, callback: Optional[Callable[[str], None]] = None):
        """
        Args:
            callback: receives every formatted entry as it is logged
        """
        self.callback = callback
        self.logs: List[str] = []

    def log(self, message: str, timestamp: bool = True):
        if timestamp:
            ts = datetime.now().strftime("%H:%M:%S")
            formatted = f"[{ts}] {message}"
        else:
            formatted = message

        self.logs.append(formatted)

        if self.callback:
            self.callback(formatted)

    def info(self, message: str):
        logger.info(message)
        self.log(message)

    def warning(self, message: str):
        logger.warning(message)
        self.log(f"WARN: {message}")

    def error(self, message: str):
        logger.error(message)
        self.log(f"ERROR: {message}")

    def clear(self):
        self.logs.clear()

    def get_all(self) -> str:
        """All entries, one per line."""
        return "\n".join(self.logs)

    def __len__(self) -> int:
        return len(self.logs)
