"""
notifier.py — Toast-style notices shown to the user
"""
import logging

logger = logging.getLogger(__name__)

SUCCESS = "success"
ERROR = "error"
INFO = "info"


class Notifier:
    """Surface a short notice to the user. Hosts override show()."""

    def show(self, kind: str, message: str) -> None:
        raise NotImplementedError


class LoggingNotifier(Notifier):
    def show(self, kind: str, message: str) -> None:
        level = logging.ERROR if kind == ERROR else logging.INFO
        logger.log(level, f"[{kind}] {message}")


class RecordingNotifier(Notifier):
    """Keeps every notice in order; handy for hosts that render later."""

    def __init__(self):
        self.notices: list[tuple[str, str]] = []

    def show(self, kind: str, message: str) -> None:
        self.notices.append((kind, message))

    def messages(self) -> list[str]:
        return [m for _, m in self.notices]
