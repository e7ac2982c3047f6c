"""Ordered message history read by the conversation core, with an in-memory adapter."""

from __future__ import annotations

import bisect
from typing import Dict, List, Protocol

from src.agents.lib_agent.message import Message


class MessageHistorySource(Protocol):
    """Read/append access to a conversation's messages, ascending by created_at."""

    def list(self, conversation_id: str) -> List[Message]:
        """Return every message of the conversation in chronological order."""
        ...

    def append(self, conversation_id: str, message: Message) -> Message:
        """Record a message and return it."""
        ...


class InMemoryMessageHistory:
    """Process-local history keyed by conversation id. Not persisted."""

    def __init__(self) -> None:
        self._conversations: Dict[str, List[Message]] = {}

    def list(self, conversation_id: str) -> List[Message]:
        return list(self._conversations.get(conversation_id, []))

    def append(self, conversation_id: str, message: Message) -> Message:
        messages = self._conversations.setdefault(conversation_id, [])
        # mesmo created_at mantém ordem de chegada
        index = bisect.bisect_right([m.created_at for m in messages], message.created_at)
        messages.insert(index, message)
        return message

    def conversation_ids(self) -> List[str]:
        return list(self._conversations)
