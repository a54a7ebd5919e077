from __future__ import annotations

import base64
import binascii
import logging
from typing import Optional

import httpx

from utility.catalog import VoiceConfig
from utility.errors import SynthesisError

logger = logging.getLogger(__name__)

TTS_ENDPOINT = "https://texttospeech.googleapis.com/v1/text:synthesize"

AUDIO_CONFIG = {
    "audioEncoding": "MP3",
    "speakingRate": 1.0,
    "pitch": 0,
}


class TTSClient:
    """Google Cloud Text-to-Speech over REST, keyed by API key"""

    def __init__(
        self,
        api_key: str,
        endpoint: str = TTS_ENDPOINT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            raise ValueError("API key must be provided for the synthesis service")
        self.api_key = api_key
        self.endpoint = endpoint
        self._transport = transport

    @staticmethod
    def build_payload(text: str, voice: VoiceConfig) -> dict:
        return {
            "input": {"text": text},
            "voice": {
                "name": voice.voice_name,
                "languageCode": voice.language_code,
                "ssmlGender": voice.gender,
            },
            "audioConfig": dict(AUDIO_CONFIG),
        }

    async def synthesize_base64(self, text: str, voice: VoiceConfig) -> str:
        """Return the raw base64 `audioContent` string"""
        payload = self.build_payload(text, voice)

        try:
            async with httpx.AsyncClient(timeout=None, transport=self._transport) as client:
                response = await client.post(
                    self.endpoint,
                    params={"key": self.api_key},
                    headers={"Content-Type": "application/json"},
                    json=payload,
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("TTS API returned %s: %s", e.response.status_code, e.response.text)
            raise SynthesisError(f"TTS API returned {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("TTS request failed: %s", e)
            raise SynthesisError(str(e)) from e

        audio_content = data.get("audioContent") if isinstance(data, dict) else None
        if not audio_content:
            raise SynthesisError("TTS API returned no audio content")
        return audio_content

    async def synthesize(self, text: str, voice: VoiceConfig) -> bytes:
        audio_b64 = await self.synthesize_base64(text, voice)
        try:
            audio = base64.b64decode(audio_b64, validate=True)
        except (binascii.Error, ValueError) as e:
            raise SynthesisError("TTS audio content is not valid base64") from e

        logger.info("Synthesized %d bytes of audio with %s", len(audio), voice.voice_name)
        return audio
