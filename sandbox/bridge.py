"""
Message bridge between a sandboxed run and the playground's output lists.
"""

from __future__ import annotations

import logging
import secrets

from pydantic import ValidationError

from playground.schemas import LogMessage, sandbox_message_adapter

logger = logging.getLogger(__name__)


class MessageBridge:
    """Relay validated sandbox messages into ``output`` and ``errors``.

    Every run gets a new generation number and a random token. Messages
    carrying anything else are dropped, so a torn-down run can never leak
    lines into the current one.
    """

    def __init__(self) -> None:
        self.output: list[str] = []
        self.errors: list[str] = []
        self.generation: int = 0
        self.token: str = ""
        self.dropped: int = 0

    def begin_run(self) -> tuple[int, str]:
        self.generation += 1
        self.token = secrets.token_hex(16)
        self.output = []
        self.errors = []
        return self.generation, self.token

    def receive(self, raw: object) -> bool:
        try:
            message = sandbox_message_adapter.validate_python(raw)
        except ValidationError as exc:
            self.dropped += 1
            logger.warning(f"Dropping malformed sandbox message: {exc.error_count()} validation error(s)")
            return False

        if message.token != self.token:
            self.dropped += 1
            logger.warning("Dropping sandbox message with unknown token")
            return False
        if message.generation != self.generation:
            self.dropped += 1
            logger.debug(f"Dropping stale message from run {message.generation}")
            return False

        if isinstance(message, LogMessage):
            self.output.append(message.payload)
        else:
            self.errors.append(message.payload)
        return True

    def report_error(self, text: str) -> None:
        self.errors.append(text)

    def snapshot(self) -> tuple[list[str], list[str]]:
        return list(self.output), list(self.errors)
