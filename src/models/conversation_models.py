"""Result models returned by the conversation service."""

from typing import Optional

from pydantic import BaseModel, Field


class AgentReply(BaseModel):
    """Outcome of one user turn."""

    response: str = Field(..., description="Text recorded as the agent's reply.")
    is_fallback: bool = Field(
        default=False,
        description="Whether the reply is the apology placeholder instead of a model answer.",
    )
    error: Optional[str] = Field(
        default=None, description="Completion failure message when is_fallback is set."
    )
