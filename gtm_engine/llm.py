import logging
import time
from dataclasses import dataclass
from typing import AsyncIterator, Optional

import anthropic
import httpx

from .config import Settings, get_settings

logger = logging.getLogger(__name__)


class LLMError(RuntimeError):
    """Base error for anything that goes wrong talking to the model provider."""

    code = "API_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


class LLMNotConfigured(LLMError):
    code = "NO_API_KEY"

    def __init__(self):
        super().__init__("ANTHROPIC_API_KEY not configured")


class LLMAuthError(LLMError):
    code = "INVALID_API_KEY"


class LLMRateLimited(LLMError):
    code = "RATE_LIMITED"
    status_code = 429


class LLMNetworkError(LLMError):
    code = "NETWORK_ERROR"
    status_code = 503


class LLMAPIError(LLMError):
    code = "API_ERROR"


class EmptyModelOutput(LLMError):
    code = "EMPTY_RESPONSE"

    def __init__(self):
        super().__init__("No text response from Claude")


@dataclass
class LLMResponse:
    content: str
    tokens_used: int = 0
    model: str = ""
    elapsed_ms: int = 0


def extract_text(message) -> str:
    parts = []
    for block in message.content:
        if getattr(block, "type", None) == "text" and block.text:
            parts.append(block.text)
    raw_text = "".join(parts)
    if not raw_text.strip():
        raise EmptyModelOutput()
    return raw_text


def translate_error(exc: Exception) -> LLMError:
    """Map an Anthropic SDK exception onto the service's error hierarchy."""
    if isinstance(exc, anthropic.AuthenticationError):
        return LLMAuthError("Invalid API key", details=str(exc))
    if isinstance(exc, anthropic.RateLimitError):
        return LLMRateLimited("Rate limited. Please try again in a moment.", details=str(exc))
    if isinstance(exc, anthropic.APIConnectionError):
        return LLMNetworkError("Network error. Please check your connection.", details=str(exc))
    return LLMAPIError(f"API error: {exc}", details=str(exc))


class LLMClient:
    """Thin async wrapper around the Anthropic Messages API."""

    def __init__(self, api_key: str, model: str, timeout: float = 120.0):
        self._http = httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        self._client = anthropic.AsyncAnthropic(api_key=api_key, http_client=self._http)
        self.model = model

    async def complete(self, prompt: str, max_tokens: int = 2000) -> LLMResponse:
        started = time.perf_counter()
        try:
            message = await self._client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.AnthropicError as exc:
            logger.error("Anthropic call failed: %s", exc)
            raise translate_error(exc) from exc

        content = extract_text(message)
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        tokens = (message.usage.input_tokens or 0) + (message.usage.output_tokens or 0)
        logger.info("Anthropic call finished in %d ms (%d tokens)", elapsed_ms, tokens)
        return LLMResponse(content=content, tokens_used=tokens, model=self.model, elapsed_ms=elapsed_ms)

    async def stream(self, prompt: str, max_tokens: int = 16000) -> AsyncIterator[str]:
        """Yield text deltas as the model produces them."""
        try:
            async with self._client.messages.stream(
                model=self.model,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": prompt}],
            ) as stream:
                async for text in stream.text_stream:
                    yield text
        except anthropic.AnthropicError as exc:
            logger.error("Anthropic stream failed: %s", exc)
            raise translate_error(exc) from exc

    async def aclose(self) -> None:
        await self._http.aclose()


def is_available(settings: Optional[Settings] = None) -> bool:
    settings = settings or get_settings()
    return bool(settings.anthropic_api_key)


_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """FastAPI dependency returning the shared client; raises when no key is set."""
    global _client
    settings = get_settings()
    if not settings.anthropic_api_key:
        raise LLMNotConfigured()
    if _client is None:
        _client = LLMClient(
            api_key=settings.anthropic_api_key,
            model=settings.anthropic_model,
            timeout=settings.request_timeout,
        )
    return _client


async def close_llm_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
