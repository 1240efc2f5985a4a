"""Transient user notifications."""

import logging
from typing import List, Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, message: str) -> None:
        ...


class LoggingNotifier:
    """Writes notifications to the application log."""

    def notify(self, message: str) -> None:
        logger.info(f"[NOTICE] {message}")


class CollectingNotifier:
    """Keeps notifications in memory until drained."""

    def __init__(self):
        self.messages: List[str] = []

    def notify(self, message: str) -> None:
        logger.info(f"[NOTICE] {message}")
        self.messages.append(message)

    def drain(self) -> List[str]:
        messages, self.messages = self.messages, []
        return messages
