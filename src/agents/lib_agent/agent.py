"""Agent reply generation: prompt assembly plus a single completion call."""

from typing import Optional, Sequence

from .base_llm import EchoCompletion, TextCompletion
from .base_memory import ContextWindower
from .errors import CompletionError, CompletionUnavailable
from .message import USER_LABEL, AgentProfile, Message
from src.logger_config import get_logger

logger = get_logger(__name__)

DEFAULT_DESCRIPTION = "a helpful AI assistant"
DEFAULT_RETRY_DELAY = "60s"


def persona_line(agent: AgentProfile) -> str:
    return f"You are {agent.display_name}, {agent.description or DEFAULT_DESCRIPTION}."


def system_instruction(agent: AgentProfile) -> str:
    """Return the agent's configured system prompt, or the default persona line."""
    if agent.system_prompt and agent.system_prompt.strip():
        return agent.system_prompt
    return (
        f"{persona_line(agent)}\n"
        "Respond naturally and helpfully to the user's messages. "
        "Keep responses concise and relevant."
    )


def voice_instruction(agent: AgentProfile) -> str:
    """Spoken-conversation instruction; always built from the persona line."""
    return (
        f"{persona_line(agent)}\n"
        "You are having a voice conversation with the user. The user will speak to you, "
        "and you should respond naturally and conversationally.\n"
        "Keep your responses concise and clear for voice communication. "
        "Be friendly and engaging."
    )


def build_prompt(user_message: str, context: str, agent: AgentProfile) -> str:
    """Concatenate system instruction, optional history, user line and agent cue."""
    history = f"Conversation history:\n{context}\n\n" if context else ""
    return (
        f"{system_instruction(agent)}\n\n"
        f"{history}"
        f"{USER_LABEL}: {user_message}\n\n"
        f"{agent.display_name}:"
    )


def build_voice_prompt(user_text: str, context: str, agent: AgentProfile) -> str:
    history = f"Previous conversation context:\n{context}\n\n" if context else ""
    return (
        f"{voice_instruction(agent)}\n\n"
        f"{history}"
        f"{USER_LABEL}: {user_text}\n\n"
        f"{agent.display_name}:"
    )


def retry_delay(error: CompletionError) -> str:
    """Render the provider's retry-after hint ("20" -> "20s"), 60s when absent."""
    value = (error.retry_after or "").strip()
    if not value:
        return DEFAULT_RETRY_DELAY
    return f"{value}s" if value.isdigit() else value


class ResponseGenerator:
    """Produce the agent's reply to the user's newest message."""

    def __init__(
        self,
        completion: Optional[TextCompletion] = None,
        windower: Optional[ContextWindower] = None,
    ):
        """Initialize with the completion capability and an optional windower for process()."""
        self.completion = completion or EchoCompletion()
        self.windower = windower

    def generate(self, user_message: str, context: str, agent: AgentProfile) -> str:
        """Call the completion once and return its raw text.

        Raises:
            CompletionUnavailable: the capability has no credential; no call is made.
            CompletionError: the call failed. No retry happens here.
        """
        return self._complete(build_prompt(user_message, context, agent), agent)

    def generate_voice(self, user_text: str, context: str, agent: AgentProfile) -> str:
        """Reply to a transcribed voice turn with the spoken-conversation prompt.

        Same failure contract as generate(); a 429 becomes a "Rate limit exceeded"
        error carrying the provider's retry delay.
        """
        prompt = build_voice_prompt(user_text, context, agent)
        try:
            return self._complete(prompt, agent)
        except CompletionError as exc:
            if exc.status_code != 429:
                raise
            delay = retry_delay(exc)
            logger.error("Rate limit (429) on voice reply - retry in %s", delay)
            raise CompletionError(
                f"Rate limit exceeded. Please wait {delay} before trying again.",
                status_code=429,
                retry_after=exc.retry_after,
            ) from exc

    def _complete(self, prompt: str, agent: AgentProfile) -> str:
        if not self.completion.is_configured():
            raise CompletionUnavailable(
                f"Text completion is not configured; cannot answer as {agent.display_name}."
            )

        logger.info(
            "Generating response for agent: %s (prompt length: %d characters)",
            agent.display_name,
            len(prompt),
        )
        try:
            return self.completion.complete(prompt)
        except (CompletionUnavailable, CompletionError):
            raise
        except Exception as exc:
            raise CompletionError(f"Completion failed: {exc}") from exc

    def process(
        self, user_message: str, messages: Sequence[Message], agent: AgentProfile
    ) -> str:
        """Prepare the windowed context from the full history, then generate."""
        return self.generate(user_message, self._context(messages, agent), agent)

    def process_voice(
        self, user_text: str, messages: Sequence[Message], agent: AgentProfile
    ) -> str:
        """Voice counterpart of process(); shares the same windowed context."""
        return self.generate_voice(user_text, self._context(messages, agent), agent)

    def _context(self, messages: Sequence[Message], agent: AgentProfile) -> str:
        if self.windower is None:
            raise ValueError("ResponseGenerator.process requires a ContextWindower")
        return self.windower.prepare(messages, agent.display_name)
