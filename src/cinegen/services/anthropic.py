"""Anthropic Claude API client wrapper."""

import logging
import time
from typing import Optional

from anthropic import Anthropic, APIError, APIConnectionError, RateLimitError

from ..config import config
from ..errors import ProviderError

logger = logging.getLogger(__name__)


class AnthropicClient:
    """Claude client used for storyline text, retrying transient failures."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialize the Anthropic client.

        Args:
            api_key: Anthropic API key. Defaults to ANTHROPIC_API_KEY env var.
            model: Model to use. Defaults to config.default_model.
            max_retries: Attempts before giving up on rate limits or
                connection errors.
            retry_delay: Base delay between retries in seconds (exponential backoff).
            timeout: Per-request timeout in seconds. Defaults to
                config.provider_timeout.
        """
        self._api_key = api_key or config.anthropic_api_key
        if not self._api_key:
            raise ValueError(
                "Anthropic API key not provided. Set ANTHROPIC_API_KEY env var."
            )

        self._timeout = timeout or config.provider_timeout
        self._client = Anthropic(api_key=self._api_key, timeout=self._timeout)
        self._model = model or config.default_model
        self._max_retries = max_retries
        self._retry_delay = retry_delay

    @property
    def model(self) -> str:
        """Return the model being used."""
        return self._model

    def create_message(
        self,
        prompt: str,
        max_tokens: int = 4096,
        system: Optional[str] = None,
        temperature: float = 0.7,
    ) -> str:
        """Send a single-turn prompt and return the text reply.

        Raises:
            ProviderError: If the request fails after all retries.
        """
        kwargs = {
            "model": self._model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
        }
        if system:
            kwargs["system"] = system

        for attempt in range(self._max_retries):
            try:
                logger.debug(
                    f"Sending request to Claude (attempt {attempt + 1}/{self._max_retries})"
                )
                response = self._client.messages.create(**kwargs)

                if not response.content:
                    raise ProviderError("Empty response from Claude")
                content = response.content[0]
                if hasattr(content, "text"):
                    return content.text
                return str(content)

            except (RateLimitError, APIConnectionError) as e:
                if attempt == self._max_retries - 1:
                    raise ProviderError(f"Claude request failed: {e}") from e
                delay = self._retry_delay * (2**attempt)
                logger.warning(f"Transient Claude error: {e}. Retrying in {delay:.1f}s...")
                time.sleep(delay)

            except APIError as e:
                logger.error(f"API error: {e}")
                raise ProviderError(f"Claude API error: {e}") from e

        raise ProviderError("Max retries exceeded")
