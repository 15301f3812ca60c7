import logging
from typing import Protocol

import openai
from openai import AsyncOpenAI

from repodiagram.core.config import settings
from repodiagram.errors import CompletionError

logger = logging.getLogger(__name__)

# Model families that reject custom temperature and use max_completion_tokens.
_REASONING_MODEL_PREFIXES = ("gpt-5", "o1", "o3", "o4")


def format_tagged_input(data: dict[str, str]) -> str:
    """Render each field as ``<key>\\nvalue\\n</key>``, blank line between fields."""
    return "\n\n".join(f"<{key}>\n{value}\n</{key}>" for key, value in data.items())


class CompletionService(Protocol):
    async def complete(self, system_prompt: str, data: dict[str, str]) -> str: ...


class LLMClient:
    """Provider-agnostic chat completion client over the OpenAI chat completions API."""

    def __init__(
        self,
        model_name: str | None = None,
        base_url: str | None = None,
        api_key: str | None = None,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ):
        self.model_name = model_name or settings.MODEL_DEFAULT
        self.temperature = settings.LLM_TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or settings.LLM_MAX_TOKENS

        self.client = AsyncOpenAI(
            base_url=base_url or settings.LLM_BASE_URL,
            api_key=api_key or settings.LLM_API_KEY,
        )

    async def aclose(self) -> None:
        await self.client.close()

    def _chat_completion_kwargs(self) -> dict:
        """Build provider/model-compatible kwargs for chat completions."""
        model_name = (self.model_name or "").lower()
        if model_name.startswith(_REASONING_MODEL_PREFIXES):
            return {"max_completion_tokens": self.max_tokens}
        return {"temperature": self.temperature, "max_tokens": self.max_tokens}

    async def complete(self, system_prompt: str, data: dict[str, str]) -> str:
        """Send the system prompt plus a tagged user message and return the raw text reply."""
        user_message = format_tagged_input(data)
        logger.info(
            "Issuing completion request to model %s (%s chars of input)...",
            self.model_name,
            len(user_message),
        )
        try:
            response = await self.client.chat.completions.create(
                model=self.model_name,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_message},
                ],
                **self._chat_completion_kwargs(),
            )
        except openai.APIStatusError as e:
            logger.error("Completion request to %s failed with %s", self.model_name, e.status_code)
            raise CompletionError(
                f"AI API error: {e.status_code} {e.message}", status_code=e.status_code
            ) from e
        except openai.APIError as e:
            logger.error("Error calling LLM provider %s: %s", self.model_name, e)
            raise CompletionError(f"AI API error: {e}") from e

        if not getattr(response, "choices", None):
            logger.error("Received 0 choices from %s: %s", self.model_name, response)
            raise CompletionError(f"Provider {self.model_name} returned no output")

        text_response = response.choices[0].message.content or ""
        if not text_response.strip():
            raise CompletionError(f"Provider {self.model_name} returned empty content")

        logger.info("Received completion from %s (%s chars).", self.model_name, len(text_response))
        return text_response
