"""Base interface for conversation summarizers."""

from typing import Sequence

from src.agents.lib_agent.message import Message


class SummaryLLM:
    """Contract: implement summarize(messages, agent_name)."""

    def summarize(self, messages: Sequence[Message], agent_name: str) -> str:
        """Return a condensed summary of the given messages.

        Failures propagate; recovery is the caller's decision.
        """
        raise NotImplementedError
