"""Application settings loaded from environment variables.

Defines all environment-driven configuration used by the conversation core.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed configuration model for the application."""

    # LLM parameters
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_TEMPERATURE: Optional[float] = None
    OPENAI_TIMEOUT: float = 60.0
    USE_OPEN_ROUTER: bool = False

    # Conversation window
    CONTEXT_RECENT_MESSAGES: int = 10

    # Agent personas
    PROMPTS_DIR: Optional[str] = None

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
