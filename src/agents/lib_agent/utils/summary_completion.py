"""Generate conversation summaries with a single text-completion call."""

from typing import Sequence

from src.agents.lib_agent.base_llm import TextCompletion
from src.agents.lib_agent.base_summary import SummaryLLM
from src.agents.lib_agent.message import Message, format_transcript
from src.logger_config import get_logger

logger = get_logger(__name__)

SUMMARY_INSTRUCTION = (
    "Please produce a concise summary of the conversation, focusing on key topics, "
    "decisions, and context. Keep it brief but informative."
)


def build_summary_prompt(transcript: str, agent_name: str) -> str:
    return (
        f"{SUMMARY_INSTRUCTION}\n"
        f"The conversation is between a user and {agent_name}.\n\n"
        f"Conversation:\n{transcript}\n\n"
        "Summary:"
    )


class CompletionSummary(SummaryLLM):
    """Summarize the whole slice in one call; no chunking, no size cap."""

    def __init__(self, completion: TextCompletion) -> None:
        self.completion = completion

    def summarize(self, messages: Sequence[Message], agent_name: str) -> str:
        if not messages:
            return ""
        logger.info("Summarizing %d older messages for agent: %s", len(messages), agent_name)
        prompt = build_summary_prompt(format_transcript(messages, agent_name), agent_name)
        summary = self.completion.complete(prompt)
        logger.info("Summary generated (%d characters)", len(summary))
        return summary
