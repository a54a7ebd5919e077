"""
S3 storage for prayer artifacts.

Provides key derivation for audio/text/image artifacts, public URL
construction, scoped local staging files and an async wrapper around the
boto3 client (blocking calls run in a worker thread).
"""
from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Iterator, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from utility.catalog import supported_languages
from utility.errors import ListingError, ObjectNotFound, UploadError

logger = logging.getLogger(__name__)

# kind -> (key prefix, extension, content type)
ARTIFACT_KINDS = {
    "audio": ("output", ".mp3", "audio/mpeg"),
    "text": ("prayer", ".txt", "text/plain; charset=utf-8"),
    "poster": ("poster", ".png", "image/png"),
    "gif": ("animation", ".gif", "image/gif"),
}

AUDIO_PREFIX, AUDIO_EXT, _ = ARTIFACT_KINDS["audio"]
TEXT_PREFIX, TEXT_EXT, _ = ARTIFACT_KINDS["text"]

PUBLIC_READ = "public-read"


# -----------------------------
# Keys
# -----------------------------
def artifact_key(unique_id: str, language: Optional[str], kind: str, extension: Optional[str] = None) -> str:
    """
    ('1234', 'english', 'audio') → 'output-1234-english.mp3'
    ('1234', None, 'poster', '.jpg') → 'poster-1234.jpg'
    """
    try:
        prefix, default_ext, _ = ARTIFACT_KINDS[kind]
    except KeyError:
        raise ValueError(f"Unknown artifact kind: {kind}") from None

    stem = f"{prefix}-{unique_id}"
    if language:
        stem = f"{stem}-{language}"
    return f"{stem}{extension or default_ext}"


def content_type_for(kind: str) -> str:
    return ARTIFACT_KINDS[kind][2]


def paired_text_key(audio_key: str) -> str:
    """'output-<id>-<lang>.mp3' → 'prayer-<id>-<lang>.txt'"""
    folder, sep, name = audio_key.rpartition("/")
    if name.endswith(AUDIO_EXT):
        name = name[: -len(AUDIO_EXT)] + TEXT_EXT
    if name.startswith(f"{AUDIO_PREFIX}-"):
        name = f"{TEXT_PREFIX}-" + name[len(AUDIO_PREFIX) + 1:]
    return f"{folder}{sep}{name}"


def language_from_key(key: str) -> Optional[str]:
    """Language suffix of a generated key, None for legacy keys without one"""
    name = key.rpartition("/")[2]
    stem = name.rsplit(".", 1)[0]
    suffix = stem.rsplit("-", 1)[-1]
    return suffix if suffix in supported_languages() else None


def public_url(bucket: str, region: str, key: str) -> str:
    return f"https://{bucket}.s3.{region}.amazonaws.com/{key}"


# -----------------------------
# Local staging
# -----------------------------
@contextmanager
def staged_file(staging_dir: Path, suffix: str = "") -> Iterator[Path]:
    """
    Reserve a temp file path in `staging_dir`; the file is removed on every
    exit path, including exceptions raised inside the block.
    """
    fd, name = tempfile.mkstemp(suffix=suffix, prefix="staged-", dir=str(staging_dir))
    os.close(fd)
    path = Path(name)
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)


# -----------------------------
# Bucket
# -----------------------------
@lru_cache(maxsize=4)
def get_s3_client(region: str):
    """Get a boto3 S3 client for `region` (credentials from the default chain)."""
    return boto3.client("s3", region_name=region)


class ArtifactStore:
    """Upload/list/read artifacts in one bucket"""

    def __init__(self, bucket: str, region: str, client=None):
        self.bucket = bucket
        self.region = region
        self.client = client if client is not None else get_s3_client(region)

    def public_url(self, key: str) -> str:
        return public_url(self.bucket, self.region, key)

    # ---- upload ----
    def _upload_file_sync(self, path: Path, key: str, content_type: str) -> str:
        try:
            with open(path, "rb") as stream:
                self.client.upload_fileobj(
                    stream,
                    self.bucket,
                    key,
                    ExtraArgs={"ACL": PUBLIC_READ, "ContentType": content_type},
                )
        except (ClientError, BotoCoreError, OSError) as e:
            logger.error("Upload of %s to %s failed: %s", key, self.bucket, e)
            raise UploadError(f"Failed to upload {key}") from e

        logger.info("Uploaded %s (%s)", key, content_type)
        return self.public_url(key)

    async def upload_file(self, path: Path, key: str, content_type: str) -> str:
        """Stream a local file to the bucket, public-read; returns its URL"""
        return await asyncio.to_thread(self._upload_file_sync, path, key, content_type)

    # ---- list ----
    def _list_keys_sync(self) -> List[str]:
        try:
            response = self.client.list_objects_v2(Bucket=self.bucket)
        except (ClientError, BotoCoreError) as e:
            logger.error("Listing bucket %s failed: %s", self.bucket, e)
            raise ListingError(f"Failed to list bucket {self.bucket}") from e

        # single page only
        return [item["Key"] for item in response.get("Contents", [])]

    async def list_keys(self) -> List[str]:
        return await asyncio.to_thread(self._list_keys_sync)

    # ---- read ----
    def _read_text_sync(self, key: str) -> str:
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404", "NotFound"):
                raise ObjectNotFound(key) from e
            raise ListingError(f"Failed to read {key}") from e
        except BotoCoreError as e:
            raise ListingError(f"Failed to read {key}") from e

        body = response["Body"]
        chunks = []
        try:
            for chunk in body.iter_chunks():
                chunks.append(chunk)
        except BotoCoreError as e:
            raise ListingError(f"Failed to read {key}") from e
        finally:
            body.close()
        return b"".join(chunks).decode("utf-8", errors="replace")

    async def read_text(self, key: str) -> str:
        return await asyncio.to_thread(self._read_text_sync, key)
