import asyncio
import logging
from typing import List, Optional

from utility.dto import PrayerListing
from utility.errors import ObjectNotFound, PrayerServiceError
from utility.storage import AUDIO_EXT, ArtifactStore, language_from_key, paired_text_key

logger = logging.getLogger(__name__)


class PrayerListingService:
    """
    Pair every audio object in the bucket with its text object.
    A missing or unreadable text object only blanks that entry's `text`.
    """

    def __init__(self, store: ArtifactStore):
        self.store = store

    async def _fetch_text(self, key: str) -> Optional[str]:
        try:
            return await self.store.read_text(key)
        except ObjectNotFound:
            logger.warning("No text object paired with audio: %s", key)
        except PrayerServiceError as e:
            logger.warning("Could not read text object %s: %s", key, e)
        except Exception:
            logger.exception("Unexpected error reading text object %s", key)
        return None

    async def list_prayers(self, include_text: bool = True) -> List[PrayerListing]:
        keys = await self.store.list_keys()
        audio_keys = [key for key in keys if key.endswith(AUDIO_EXT)]
        text_keys = [paired_text_key(key) for key in audio_keys]

        if include_text:
            texts = await asyncio.gather(*(self._fetch_text(key) for key in text_keys))
        else:
            texts = [None] * len(audio_keys)

        logger.info("Listed %d prayers out of %d objects", len(audio_keys), len(keys))
        return [
            PrayerListing(
                audioUrl=self.store.public_url(audio_key),
                textUrl=self.store.public_url(text_key),
                text=text,
                language=language_from_key(audio_key),
            )
            for audio_key, text_key, text in zip(audio_keys, text_keys, texts)
        ]
