from __future__ import annotations

import logging
from typing import List, Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from utility.artifact_writer import ArtifactWriter
from utility.catalog import get_catalog, supported_languages
from utility.config import Settings
from utility.dto import (
    FileUrlResponse,
    GifRequest,
    PosterRequest,
    PrayerListResponse,
    PrayerRequest,
    PrayerResponse,
)
from utility.errors import InvalidInput, InvalidLanguage, InvalidTopic, InvalidWriter
from utility.poster_renderer import PosterRenderer, PosterService
from utility.prayer_listing import PrayerListingService
from utility.prayer_llm import PrayerLLM
from utility.prayer_pipeline import PrayerPipeline
from utility.storage import ArtifactStore
from utility.tts_client import TTSClient

logger = logging.getLogger("prayer_service")

# -----------------------------
# FastAPI app
# -----------------------------
app = FastAPI(title="Prayer Generator")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# -----------------------------
# Setup
# -----------------------------
def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def configure_app(
    target: FastAPI,
    settings: Settings,
    s3_client=None,
    llm_transport: Optional[httpx.AsyncBaseTransport] = None,
    tts_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> None:
    """Build the shared clients/services and attach them to `target.state`."""
    store = ArtifactStore(settings.bucket_name, settings.region, client=s3_client)
    llm = PrayerLLM(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        base_url=settings.openai_base_url,
        transport=llm_transport,
    )
    tts = TTSClient(api_key=settings.google_api_key, transport=tts_transport)
    renderer = PosterRenderer(settings.backgrounds_dir, settings.font_path)

    target.state.prayer_pipeline = PrayerPipeline(llm, tts, ArtifactWriter(store, settings.staging_dir))
    target.state.listing = PrayerListingService(store)
    target.state.posters = PosterService(renderer, store, settings.staging_dir)


@app.on_event("startup")
async def startup():
    # Raises ConfigError (and aborts startup) when a required variable is missing
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    configure_app(app, settings)
    logger.info("✅ Server started, bucket=%s region=%s", settings.bucket_name, settings.region)


# -----------------------------
# Error handling
# -----------------------------
@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput):
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return PlainTextResponse(exc.reason, status_code=400)


# body field -> error, in the order the validator checks them
PRAYER_FIELD_ERRORS = (
    ("language", InvalidLanguage),
    ("topic", InvalidTopic),
    ("writer", InvalidWriter),
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Missing or mistyped prayer fields get the same 400 as unknown values."""
    if request.url.path != "/generate-prayer":
        return await request_validation_exception_handler(request, exc)

    fields = {err["loc"][1] for err in exc.errors() if len(err["loc"]) > 1}
    for field, error in PRAYER_FIELD_ERRORS:
        if field in fields:
            return await invalid_input_handler(request, error())
    return PlainTextResponse("Invalid request body", status_code=400)


def upstream_failure(message: str) -> PlainTextResponse:
    """Log the active exception in full, return only a generic message."""
    logger.exception(message)
    return PlainTextResponse(message, status_code=500)


# -----------------------------
# Catalog Endpoints
# -----------------------------
@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/languages", response_model=List[str])
async def languages():
    return list(supported_languages())


@app.get("/topics", response_model=List[str])
async def topics(language: str = "english"):
    return list(get_catalog(language).topics)


@app.get("/writers", response_model=List[str])
async def writers(language: str = "english"):
    return list(get_catalog(language).writers)


# -----------------------------
# Prayer Endpoints
# -----------------------------
@app.post("/generate-prayer", response_model=PrayerResponse)
async def generate_prayer(request: PrayerRequest):
    try:
        return await app.state.prayer_pipeline.run(request)
    except InvalidInput:
        raise
    except Exception:
        return upstream_failure("Error generating prayer and audio")


@app.get("/list-prayers", response_model=PrayerListResponse)
async def list_prayers(include_text: bool = True):
    try:
        prayers = await app.state.listing.list_prayers(include_text=include_text)
    except Exception:
        return upstream_failure("Error listing prayers")
    return PrayerListResponse(prayers=prayers)


# -----------------------------
# Poster Endpoints
# -----------------------------
@app.post("/generate-poster", response_model=FileUrlResponse)
async def generate_poster(request: PosterRequest):
    try:
        url = await app.state.posters.create_poster(request.text, request.format, request.background)
    except Exception:
        return upstream_failure("Error generating poster")
    return FileUrlResponse(fileUrl=url)


@app.post("/generate-gif", response_model=FileUrlResponse)
async def generate_gif(request: GifRequest):
    try:
        url = await app.state.posters.create_gif(request.text, request.background)
    except Exception:
        return upstream_failure("Error generating gif")
    return FileUrlResponse(fileUrl=url)


if __name__ == "__main__":
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
