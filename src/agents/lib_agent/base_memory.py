"""Conversation window: recent messages verbatim, older ones summarized."""

from typing import Optional, Sequence

from configs import settings
from src.agents.lib_agent.base_summary import SummaryLLM
from src.agents.lib_agent.message import Message, format_transcript
from src.logger_config import get_logger

logger = get_logger(__name__)

SUMMARY_HEADER = "[Previous conversation summary]"
RECENT_HEADER = "[Recent conversation]"


def fallback_summary(message_count: int) -> str:
    """Deterministic stand-in used when the summarization call fails."""
    return f"Previous conversation with {message_count} messages about various topics."


class ContextWindower:
    """Turn an ordered history into one bounded text block for prompting."""

    def __init__(self, summarizer: SummaryLLM, recent_messages: Optional[int] = None) -> None:
        """Initialize with the summarizer and the size of the verbatim window.

        Args:
            summarizer: Summarizer used for messages older than the window.
            recent_messages: Number of most recent messages kept verbatim
                (defaults to settings.CONTEXT_RECENT_MESSAGES).
        """
        self.summarizer = summarizer
        self.recent_messages = (
            recent_messages if recent_messages is not None else settings.CONTEXT_RECENT_MESSAGES
        )
        if self.recent_messages < 1:
            raise ValueError("recent_messages must be at least 1")

    def prepare(self, messages: Sequence[Message], agent_name: str) -> str:
        """Return the context block for the given history.

        Up to `recent_messages` messages are rendered verbatim with no model
        call. Longer histories get one summary of everything before the window,
        followed by the window itself under its own header.
        """
        logger.info("Preparing conversation context: %d total messages", len(messages))
        if not messages:
            return ""

        if len(messages) <= self.recent_messages:
            return format_transcript(messages, agent_name)

        older = messages[: len(messages) - self.recent_messages]
        recent = messages[len(messages) - self.recent_messages :]

        summary = self._summarize(older, agent_name)
        recent_context = format_transcript(recent, agent_name)
        return f"{SUMMARY_HEADER}\n{summary}\n\n{RECENT_HEADER}\n{recent_context}"

    def _summarize(self, older: Sequence[Message], agent_name: str) -> str:
        if not older:
            return ""
        try:
            return self.summarizer.summarize(older, agent_name)
        except Exception as exc:
            fallback = fallback_summary(len(older))
            logger.warning("Summarization failed (%s); using fallback summary: %s", exc, fallback)
            return fallback
