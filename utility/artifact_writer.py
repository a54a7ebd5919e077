from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path

from utility.storage import ArtifactStore, artifact_key, content_type_for, staged_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrayerUrls:
    audio_url: str
    text_url: str


class ArtifactWriter:
    """
    Stage prayer audio + text locally, upload both under keys that share one
    generated id, and remove the staged copies whatever happens.
    """

    def __init__(self, store: ArtifactStore, staging_dir: Path):
        self.store = store
        self.staging_dir = Path(staging_dir)

    async def write_prayer(self, text: str, audio: bytes, language: str) -> PrayerUrls:
        unique_id = str(uuid.uuid4())
        audio_key = artifact_key(unique_id, language, "audio")
        text_key = artifact_key(unique_id, language, "text")

        with staged_file(self.staging_dir, suffix=".mp3") as audio_path, \
                staged_file(self.staging_dir, suffix=".txt") as text_path:
            await asyncio.to_thread(audio_path.write_bytes, audio)
            await asyncio.to_thread(text_path.write_text, text, "utf-8")

            # Audio first; a failed text upload leaves the audio object behind
            audio_url = await self.store.upload_file(audio_path, audio_key, content_type_for("audio"))
            text_url = await self.store.upload_file(text_path, text_key, content_type_for("text"))

        logger.info("Stored prayer artifacts %s / %s", audio_key, text_key)
        return PrayerUrls(audio_url=audio_url, text_url=text_url)
