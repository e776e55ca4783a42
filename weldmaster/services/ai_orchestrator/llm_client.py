"""
Async client for OpenAI-compatible chat completion APIs.

Defaults to Gemini through Google's OpenAI compatibility layer; any other
OpenAI-compatible endpoint (OpenAI itself, Groq, a local server) works by
changing the base URL and model.
"""

import logging
from typing import Optional
from openai import AsyncOpenAI
from openai import APIError, RateLimitError, APITimeoutError

from ...config import get_settings

logger = logging.getLogger(__name__)


class LLMClient:
    """
    Async wrapper around an OpenAI-compatible endpoint.

    Design principles:
    - Short answers: output capped for a quick on-site read
    - Fast: Async so the session keeps responding while a request is pending
    - Resilient: Basic retry logic for transient failures
    - Observable: Comprehensive logging
    """

    MAX_INPUT_TOKENS = 1000
    MAX_OUTPUT_TOKENS = 400
    REQUEST_TIMEOUT = 30.0  # seconds, per HTTP request

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Credential (defaults to the configured env variable)
            model: Model name (defaults to the configured model)
            base_url: OpenAI-compatible endpoint (defaults to the configured URL)
        """
        settings = get_settings()
        self.api_key = api_key or settings.credential
        if not self.api_key:
            raise ValueError(
                f"API key required. Set {settings.api_key_env} environment variable "
                "or pass api_key parameter."
            )

        self.model = model or settings.llm_model
        self.base_url = base_url if base_url is not None else settings.llm_base_url
        self.client = AsyncOpenAI(base_url=self.base_url, api_key=self.api_key)

        logger.info(f"LLMClient initialized with model: {self.model}")

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.4,
        max_retries: int = 2,
    ) -> str:
        """
        Generate completion with token management and retry logic.

        Args:
            system_prompt: System instructions
            user_prompt: User query
            temperature: Sampling temperature
            max_retries: Number of retry attempts on transient failure

        Returns:
            Generated response text

        Raises:
            RuntimeError: If the request fails or all retries are exhausted
        """
        # Rough estimation: ~4 chars per token
        estimated_input_tokens = (len(system_prompt) + len(user_prompt)) // 4
        if estimated_input_tokens > self.MAX_INPUT_TOKENS:
            logger.warning(
                f"Input may exceed token budget: ~{estimated_input_tokens} tokens "
                f"(limit: {self.MAX_INPUT_TOKENS})"
            )

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

        for attempt in range(max_retries + 1):
            try:
                logger.debug(f"Requesting completion (attempt {attempt + 1}/{max_retries + 1})")

                response = await self.client.chat.completions.create(
                    model=self.model,
                    messages=messages,
                    temperature=temperature,
                    max_tokens=self.MAX_OUTPUT_TOKENS,
                    timeout=self.REQUEST_TIMEOUT,
                )

                content = response.choices[0].message.content or ""

                usage = response.usage
                if usage is not None:
                    logger.info(
                        f"Completion successful - Tokens: {usage.prompt_tokens} in, "
                        f"{usage.completion_tokens} out, {usage.total_tokens} total"
                    )

                return content

            except RateLimitError as e:
                logger.warning(f"Rate limit hit (attempt {attempt + 1}): {e}")
                if attempt == max_retries:
                    raise RuntimeError("Rate limit exceeded. Try again later.")

            except APITimeoutError as e:
                logger.warning(f"Timeout (attempt {attempt + 1}): {e}")
                if attempt == max_retries:
                    raise RuntimeError("Request timed out. Try again later.")

            except APIError as e:
                logger.error(f"LLM API error: {e}")
                raise RuntimeError(f"AI service error: {str(e)}")

            except Exception as e:
                logger.error(f"Unexpected error in LLM completion: {e}")
                raise RuntimeError(f"Failed to generate response: {str(e)}")

        raise RuntimeError("Failed to get completion after all retries")


async def analyze_with_llm(system_prompt: str, user_prompt: str, credential: str) -> str:
    """Default analyzer for SessionState: one client per credential."""
    client = LLMClient(api_key=credential)
    return await client.complete(system_prompt=system_prompt, user_prompt=user_prompt)
