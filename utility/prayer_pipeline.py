import logging
import time

from utility.artifact_writer import ArtifactWriter
from utility.dto import PrayerRequest, PrayerResponse
from utility.prayer_llm import PrayerLLM
from utility.tts_client import TTSClient
from utility.validator import validate_prayer_request

logger = logging.getLogger(__name__)


class PrayerPipeline:
    """validate → generate → synthesize → stage + upload"""

    def __init__(self, llm: PrayerLLM, tts: TTSClient, writer: ArtifactWriter):
        self.llm = llm
        self.tts = tts
        self.writer = writer

    async def run(self, request: PrayerRequest) -> PrayerResponse:
        # Rejects before any external call
        catalog = validate_prayer_request(request.topic, request.writer, request.language)

        t0 = time.perf_counter()
        prayer = await self.llm.generate_prayer(request.topic, request.language)
        t_generate = time.perf_counter() - t0

        audio = await self.tts.synthesize(prayer, catalog.voice)
        t_synthesize = time.perf_counter() - t0 - t_generate

        urls = await self.writer.write_prayer(prayer, audio, request.language)
        t_total = time.perf_counter() - t0

        logger.info(
            "Prayer pipeline timings: generate=%.3fs synthesize=%.3fs total=%.3fs",
            t_generate, t_synthesize, t_total,
        )
        return PrayerResponse(
            prayer=prayer,
            audioUrl=urls.audio_url,
            textUrl=urls.text_url,
            language=request.language,
        )
