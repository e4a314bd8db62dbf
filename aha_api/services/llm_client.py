from typing import Any, Dict, List, Optional
import logging

import httpx

from aha_api.core.config import Settings
from aha_api.core.exceptions import UpstreamError
from aha_api.schemas.generate import ChatMessage

logger = logging.getLogger(__name__)

NO_RESPONSE = "No response"


def build_messages(user_prompt: str, system_prompt: Optional[str] = None) -> List[Dict[str, str]]:
    """System message first (if any), then the user message."""
    messages = []
    if system_prompt:
        messages.append(ChatMessage(role="system", content=system_prompt))
    messages.append(ChatMessage(role="user", content=user_prompt))
    return [m.model_dump() for m in messages]


def extract_text(data: Any) -> str:
    """First completion's text, or a placeholder when the shape is unexpected."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return NO_RESPONSE
    if not isinstance(content, str) or not content:
        return NO_RESPONSE
    return content


def extract_error(data: Any) -> str:
    try:
        message = data["error"]["message"]
    except (KeyError, TypeError):
        return "LLM Error"
    return message or "LLM Error"


class LLMClient:
    """Forwards prompts to an OpenAI-compatible chat completions URL."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_url = settings.LLM_API_URL
        self.default_model = settings.LLM_DEFAULT_MODEL
        self.max_tokens = settings.LLM_MAX_TOKENS
        self.client = httpx.AsyncClient(
            timeout=settings.LLM_TIMEOUT,
            transport=transport,
            headers={
                "Authorization": f"Bearer {settings.OPENAI_API_KEY}",
                "HTTP-Referer": settings.LLM_REFERER,
                "X-Title": settings.LLM_APP_TITLE,
            },
        )

    async def generate(
        self,
        user_prompt: str,
        system_prompt: Optional[str] = None,
        model: Optional[str] = None
    ) -> str:
        """
        Run one completion and return its text.

        Raises UpstreamError on transport failure or a non-success status,
        carrying the upstream's own error message when it sends one.
        """
        payload = {
            "model": model or self.default_model,
            "messages": build_messages(user_prompt, system_prompt),
            "max_tokens": self.max_tokens,
        }

        try:
            response = await self.client.post(self.api_url, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"LLM request failed: {e!r}")
            raise UpstreamError(str(e) or "LLM Error")

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.is_success:
            message = extract_error(data)
            logger.error(f"LLM returned {response.status_code}: {message}")
            raise UpstreamError(message)

        return extract_text(data)

    async def close(self):
        await self.client.aclose()
