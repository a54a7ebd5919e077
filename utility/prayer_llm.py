import logging
from typing import Dict, List, Optional

import httpx

from utility.catalog import get_catalog
from utility.errors import GenerationError

logger = logging.getLogger(__name__)


class PrayerLLM:
    """
    Async client for an OpenAI-compatible chat-completion endpoint.
    Sends one user message per prayer and returns the first choice's text.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo",
        base_url: str = "https://api.openai.com/v1",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            raise ValueError("API key must be provided for the generation service")
        self.api_key = api_key
        self.model = model
        self.endpoint = f"{base_url.rstrip('/')}/chat/completions"
        self.headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        self._transport = transport

    @staticmethod
    def build_messages(topic: str, language: str) -> List[Dict[str, str]]:
        prompt = get_catalog(language).build_prompt(topic)
        return [{"role": "user", "content": prompt}]

    async def complete(self, messages: List[Dict[str, str]]) -> str:
        payload = {
            "model": self.model,
            "messages": messages,
        }

        try:
            async with httpx.AsyncClient(timeout=None, transport=self._transport) as client:
                response = await client.post(self.endpoint, headers=self.headers, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Completion API returned %s: %s", e.response.status_code, e.response.text)
            raise GenerationError(f"Completion API returned {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Completion request failed: %s", e)
            raise GenerationError(str(e)) from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            logger.error("Unexpected completion payload: %r", data)
            raise GenerationError("Completion API returned no choices") from e

        text = (content or "").strip()
        if not text:
            raise GenerationError("Completion API returned an empty message")
        return text

    async def generate_prayer(self, topic: str, language: str) -> str:
        """Prefix phrase for `language` + topic, sent as the sole user message"""
        messages = self.build_messages(topic, language)
        prayer = await self.complete(messages)
        logger.info("Generated %s prayer about %r (%d chars)", language, topic, len(prayer))
        return prayer
