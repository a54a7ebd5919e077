from typing import List, Optional

from pydantic import BaseModel


class PrayerRequest(BaseModel):
    topic: str
    writer: str
    language: str  # "english", "french", "arabic"


class PrayerResponse(BaseModel):
    prayer: str
    audioUrl: str
    textUrl: str
    language: str


class PrayerListing(BaseModel):
    audioUrl: str
    textUrl: str
    text: Optional[str] = None
    language: Optional[str] = None


class PrayerListResponse(BaseModel):
    prayers: List[PrayerListing]


class PosterRequest(BaseModel):
    text: str
    format: str = "png"  # "png", "jpeg", "webp"
    background: str


class GifRequest(BaseModel):
    text: str
    background: str


class FileUrlResponse(BaseModel):
    fileUrl: str
