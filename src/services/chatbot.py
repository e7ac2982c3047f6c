"""Record user messages and produce the agent's reply for each turn."""

from __future__ import annotations

from typing import List, Optional

from configs import Settings, settings as default_settings
from src.agents.lib_agent.agent import ResponseGenerator
from src.agents.lib_agent.base_llm import EchoCompletion, TextCompletion
from src.agents.lib_agent.base_memory import ContextWindower
from src.agents.lib_agent.errors import CompletionFailure
from src.agents.lib_agent.message import AgentProfile, Message
from src.agents.lib_agent.utils.openai_llm import OpenAICompletion
from src.agents.lib_agent.utils.summary_completion import CompletionSummary
from src.logger_config import get_logger
from src.models.conversation_models import AgentReply
from src.repositories.interactions.message_history import (
    InMemoryMessageHistory,
    MessageHistorySource,
)

logger = get_logger(__name__)


def fallback_reply(error: str) -> str:
    return (
        "I apologize, but I'm having trouble processing your message right now. "
        f"(Error: {error}). Please try again."
    )


class ConversationService:
    """Handle conversations between a user and an agent persona."""

    def __init__(
        self,
        history: MessageHistorySource,
        response_generator: ResponseGenerator,
    ) -> None:
        self.history = history
        self.response_generator = response_generator

    def send_message(
        self, conversation_id: str, content: str, agent: AgentProfile
    ) -> AgentReply:
        """Store the user's message, then generate and store the agent's reply.

        The user's message is recorded before any model call. When generation
        fails a visible apology reply is recorded instead of raising.
        """
        if not content or not content.strip():
            raise ValueError("Message content is required.")

        self.history.append(conversation_id, Message(sender_role="user", content=content))
        messages = self.history.list(conversation_id)
        logger.info(
            "User message received for %s; %d messages in conversation %s",
            agent.display_name,
            len(messages),
            conversation_id,
        )

        try:
            response = self.response_generator.process(content, messages, agent)
        except CompletionFailure as exc:
            logger.error("Error generating agent response: %s", exc)
            text = fallback_reply(str(exc))
            self.history.append(conversation_id, Message(sender_role="agent", content=text))
            return AgentReply(response=text, is_fallback=True, error=str(exc))

        self.history.append(conversation_id, Message(sender_role="agent", content=response))
        logger.info("Agent response saved for conversation %s", conversation_id)
        return AgentReply(response=response)

    def send_voice_text(
        self, conversation_id: str, user_text: str, agent: AgentProfile
    ) -> AgentReply:
        """Answer a transcribed voice turn using the shared conversation history.

        The transcript and the reply are recorded together only after a
        successful completion; failures propagate to the caller.
        """
        if not user_text or not user_text.strip():
            raise ValueError("Voice transcript is required.")

        messages = self.history.list(conversation_id)
        logger.info(
            "Voice text received for %s; %d messages of context in conversation %s",
            agent.display_name,
            len(messages),
            conversation_id,
        )
        response = self.response_generator.process_voice(user_text, messages, agent)

        self.history.append(conversation_id, Message(sender_role="user", content=user_text))
        self.history.append(conversation_id, Message(sender_role="agent", content=response))
        return AgentReply(response=response)

    def get_messages(self, conversation_id: str) -> List[Message]:
        return self.history.list(conversation_id)


def get_conversation_service(
    config: Optional[Settings] = None,
    history: Optional[MessageHistorySource] = None,
    completion: Optional[TextCompletion] = None,
    echo: bool = False,
) -> ConversationService:
    """Wire the default service: OpenAI completion, or the offline echo when requested."""
    config = config or default_settings
    if completion is None:
        if echo:
            completion = EchoCompletion()
        else:
            completion = OpenAICompletion(
                model=config.OPENAI_MODEL,
                api_key=config.OPENAI_API_KEY or "",
                temperature=config.OPENAI_TEMPERATURE,
                timeout=config.OPENAI_TIMEOUT,
                use_open_router=config.USE_OPEN_ROUTER,
            )
            if not completion.is_configured():
                logger.warning("OPENAI_API_KEY not set; agent replies will fall back.")

    windower = ContextWindower(
        CompletionSummary(completion), recent_messages=config.CONTEXT_RECENT_MESSAGES
    )
    return ConversationService(
        history=history if history is not None else InMemoryMessageHistory(),
        response_generator=ResponseGenerator(completion=completion, windower=windower),
    )
