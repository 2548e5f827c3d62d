"""Persistent design-advice conversation."""

from __future__ import annotations

import logging
import threading

from ..exceptions import ValidationError
from .client import ChatHandle, GenerationClient
from .prompts import DESIGN_CHAT_INSTRUCTION

logger = logging.getLogger("squareedit.service.chat")


class DesignChat:
    """One conversation with the design assistant.

    The session starts on the first message and is kept until
    :meth:`reset`. Each instance owns its own session, so callers that
    need separate conversations create separate instances.
    """

    def __init__(
        self,
        client: GenerationClient,
        system_instruction: str = DESIGN_CHAT_INSTRUCTION,
    ) -> None:
        self.client = client
        self.system_instruction = system_instruction
        self._session: ChatHandle | None = None
        self._lock = threading.Lock()

    @property
    def started(self) -> bool:
        return self._session is not None

    def _ensure_session(self) -> ChatHandle:
        with self._lock:
            if self._session is None:
                logger.info("Starting design chat session")
                self._session = self.client.start_chat(self.system_instruction)
            return self._session

    def send(self, message: str) -> str:
        """Send a message, starting the session if needed.

        Raises:
            ValidationError: If the message is empty.
        """
        if not message or not message.strip():
            raise ValidationError("Chat message must not be empty")
        return self._ensure_session().send(message.strip())

    def reset(self) -> None:
        """Forget the conversation; the next message starts a new one."""
        with self._lock:
            self._session = None
