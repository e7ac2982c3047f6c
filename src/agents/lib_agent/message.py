"""Message and agent profile structures read by the conversation core."""

from datetime import datetime, timezone
from typing import Iterable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

SenderRole = Literal["user", "agent"]

USER_LABEL = "User"
TRANSCRIPT_SEPARATOR = "\n\n"

# aliases accepted at the boundary (persisted "who_sent" codes included)
ROLE_ALIASES = {
    "user": "user",
    "usr": "user",
    "human": "user",
    "agent": "agent",
    "llm": "agent",
    "assistant": "agent",
}


class Message(BaseModel):
    """One immutable chat message of a conversation history."""

    model_config = ConfigDict(frozen=True)

    sender_role: SenderRole = Field(..., description="Who sent the message.")
    content: str = Field(..., description="Text content of the message.")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp, used to order the history.",
    )

    @field_validator("sender_role", mode="before")
    @classmethod
    def _normalize_role(cls, value: object) -> object:
        """Map known aliases onto "user"/"agent"; anything else fails validation."""
        if isinstance(value, str):
            return ROLE_ALIASES.get(value.strip().lower(), value)
        return value

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        """Naive timestamps are taken as UTC so histories stay comparable."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class AgentProfile(BaseModel):
    """Persona the user is talking to. Owned by the surrounding application."""

    model_config = ConfigDict(frozen=True)

    display_name: str = Field(..., min_length=1)
    description: Optional[str] = None
    system_prompt: Optional[str] = None
    slug: Optional[str] = None

    @field_validator("description", "system_prompt", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


def sender_label(message: Message, agent_name: str) -> str:
    """Return "User" for user messages and the agent's display name otherwise."""
    return USER_LABEL if message.sender_role == "user" else agent_name


def format_message(message: Message, agent_name: str) -> str:
    return f"{sender_label(message, agent_name)}: {message.content}"


def format_transcript(messages: Iterable[Message], agent_name: str) -> str:
    """Render messages as "<Sender>: <content>" lines separated by a blank line."""
    return TRANSCRIPT_SEPARATOR.join(format_message(m, agent_name) for m in messages)
