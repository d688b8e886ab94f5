import logging
from contextlib import contextmanager
from typing import Iterator, List, Tuple


class ExportLogger:
    """
    Collects (level, message) pairs during an export and forwards them
    to the ``collada_export`` stdlib logger.

    Messages logged inside ``scope(name)`` are prefixed with ``[name]``.
    Past ``max_messages`` only the count of dropped messages is kept.
    """

    def __init__(self, max_messages: int = 500):
        self.max_messages = max_messages
        self.dropped = 0
        self._messages: List[Tuple[str, str]] = []  # (level, message)
        self._scopes: List[str] = []
        self._logger = logging.getLogger("collada_export")

    def debug(self, msg: str) -> None:
        self._log(logging.DEBUG, msg)

    def info(self, msg: str) -> None:
        self._log(logging.INFO, msg)

    def warning(self, msg: str) -> None:
        self._log(logging.WARNING, msg)

    def error(self, msg: str) -> None:
        self._log(logging.ERROR, msg)

    @contextmanager
    def scope(self, name: str) -> Iterator[None]:
        self._scopes.append(name)
        try:
            yield
        finally:
            self._scopes.pop()

    def _log(self, level: int, msg: str) -> None:
        if self._scopes:
            msg = "".join(f"[{s}] " for s in self._scopes) + msg
        if len(self._messages) < self.max_messages:
            self._messages.append((logging.getLevelName(level), msg))
        else:
            self.dropped += 1
        self._logger.log(level, msg)

    @property
    def messages(self) -> List[Tuple[str, str]]:
        return self._messages

    def messages_at(self, level: str) -> List[str]:
        return [msg for lvl, msg in self._messages if lvl == level]

    def warnings(self) -> List[str]:
        return self.messages_at("WARNING")

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0

    @property
    def error_count(self) -> int:
        return len(self.messages_at("ERROR"))

    @property
    def warning_count(self) -> int:
        return len(self.messages_at("WARNING"))

    def clear(self) -> None:
        self._messages.clear()
        self.dropped = 0
