"""OpenAI ChatCompletion client wrapper exposing a single-prompt completion."""

import time
from typing import Optional

import openai
from openai import OpenAI, NOT_GIVEN

from configs import settings
from src.agents.lib_agent.base_llm import TextCompletion
from src.agents.lib_agent.errors import CompletionError, CompletionUnavailable
from src.logger_config import get_logger

logger = get_logger(__name__)

OPEN_ROUTER_BASE_URL = "https://openrouter.ai/api/v1"


def clean_api_key(value: Optional[str]) -> str:
    """Strip whitespace and surrounding quotes copied along from .env files."""
    return (value or "").strip().strip("\"'")


def mask_api_key(api_key: str) -> str:
    if len(api_key) <= 8:
        return "****"
    return f"{api_key[:4]}...{api_key[-4:]}"


class OpenAICompletion(TextCompletion):
    """Wrapper around the OpenAI client; the prompt is sent as one user message."""

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
        use_open_router: Optional[bool] = None,
    ) -> None:
        """Initialize model and credentials; defaults come from settings.

        Args:
            model: OpenAI model name to use.
            api_key: API key; settings.OPENAI_API_KEY is used only when None.
                Pass "" to build an explicitly unconfigured client.
            temperature: Sampling temperature; provider default when None.
            timeout: Per-request timeout in seconds.
            use_open_router: Route requests through OpenRouter's compatible API.
        """
        self.model = model or settings.OPENAI_MODEL
        self._api_key = clean_api_key(settings.OPENAI_API_KEY if api_key is None else api_key)
        self.temperature = (
            temperature if temperature is not None else settings.OPENAI_TEMPERATURE
        )
        self.timeout = timeout if timeout is not None else settings.OPENAI_TIMEOUT
        self.use_open_router = (
            use_open_router if use_open_router is not None else settings.USE_OPEN_ROUTER
        )
        self._client: Optional[OpenAI] = None

    def is_configured(self) -> bool:
        return bool(self._api_key)

    @property
    def client(self) -> OpenAI:
        """Create the SDK client lazily so env changes are picked up until first use."""
        if not self.is_configured():
            raise CompletionUnavailable(
                "OpenAI API key not configured. Please set OPENAI_API_KEY."
            )
        if self._client is None:
            logger.info(
                "Initializing OpenAI client with key %s (model: %s)",
                mask_api_key(self._api_key),
                self.model,
            )
            if self.use_open_router:
                self._client = OpenAI(
                    api_key=self._api_key,
                    base_url=OPEN_ROUTER_BASE_URL,
                    timeout=self.timeout,
                )
            else:
                self._client = OpenAI(api_key=self._api_key, timeout=self.timeout)
        return self._client

    def complete(self, prompt: str) -> str:
        """Call chat completions with the prompt and return the content string."""
        client = self.client
        logger.info(
            "Sending request to OpenAI (model: %s, prompt length: %d characters)",
            self.model,
            len(prompt),
        )
        start = time.perf_counter()
        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature if self.temperature is not None else NOT_GIVEN,
            )
        except openai.NotFoundError as exc:
            raise CompletionError(
                f"Model '{self.model}' not found or your API key is restricted.",
                status_code=exc.status_code,
            ) from exc
        except openai.APIStatusError as exc:
            raise CompletionError(
                f"OpenAI failed: {exc}",
                status_code=exc.status_code,
                retry_after=exc.response.headers.get("retry-after"),
            ) from exc
        except openai.OpenAIError as exc:
            raise CompletionError(f"OpenAI failed: {exc}") from exc

        content = response.choices[0].message.content or ""
        logger.info("Response received in %.0fms", (time.perf_counter() - start) * 1000)
        return content
