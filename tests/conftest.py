import base64
import json
import shutil
from pathlib import Path
from unittest.mock import MagicMock

import httpx
import pytest
from PIL import Image

from utility.config import BASE_DIR, Settings

FAKE_PRAYER = "Dear Lord, thank you for every blessing of this day. Amen."
FAKE_AUDIO = b"ID3\x04\x00fake-mp3-frames"


class FakeBucket:
    """In-memory stand-in for the boto3 S3 client calls the service makes"""

    def __init__(self):
        self.objects = {}
        self.uploads = []
        self.fail_on = set()
        self.client = MagicMock()
        self.client.upload_fileobj.side_effect = self._upload_fileobj
        self.client.list_objects_v2.side_effect = self._list_objects_v2
        self.client.get_object.side_effect = self._get_object

    def _upload_fileobj(self, stream, bucket, key, ExtraArgs=None):
        if any(key.startswith(prefix) for prefix in self.fail_on):
            from botocore.exceptions import ClientError
            raise ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject")
        body = stream.read()
        self.objects[key] = body
        self.uploads.append({"bucket": bucket, "key": key, "body": body, "extra": ExtraArgs})

    def _list_objects_v2(self, Bucket):
        if not self.objects:
            return {"KeyCount": 0}
        return {"Contents": [{"Key": key} for key in sorted(self.objects)]}

    def _get_object(self, Bucket, Key):
        from botocore.exceptions import ClientError
        if Key not in self.objects:
            raise ClientError({"Error": {"Code": "NoSuchKey", "Message": "missing"}}, "GetObject")
        body = MagicMock()
        data = self.objects[Key]
        body.iter_chunks.return_value = iter([data[i:i + 4] for i in range(0, len(data), 4)])
        return {"Body": body}


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served"""

    def __init__(self, respond):
        self.requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return respond(request)

        super().__init__(handler)

    def json_bodies(self):
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def bucket():
    return FakeBucket()


@pytest.fixture
def llm_transport():
    return RecordingTransport(
        lambda request: httpx.Response(200, json={"choices": [{"message": {"content": f"  {FAKE_PRAYER}\n"}}]})
    )


@pytest.fixture
def tts_transport():
    audio_b64 = base64.b64encode(FAKE_AUDIO).decode()
    return RecordingTransport(lambda request: httpx.Response(200, json={"audioContent": audio_b64}))


@pytest.fixture
def assets_dir(tmp_path) -> Path:
    assets = tmp_path / "assets"
    (assets / "backgrounds").mkdir(parents=True)
    (assets / "fonts").mkdir()
    shutil.copy(BASE_DIR / "assets" / "fonts" / "DejaVuSans.ttf", assets / "fonts" / "DejaVuSans.ttf")

    # 300x200 gradient so scaling/centering actually shows up in the pixels
    img = Image.new("RGB", (300, 200))
    img.putdata([(x % 256, y % 256, (x + y) % 256) for y in range(200) for x in range(300)])
    img.save(assets / "backgrounds" / "sunrise.png")
    return assets


@pytest.fixture
def staging_dir(tmp_path) -> Path:
    staging = tmp_path / "staging"
    staging.mkdir()
    return staging


@pytest.fixture
def settings(assets_dir, staging_dir) -> Settings:
    return Settings(
        openai_api_key="test-openai-key",
        google_api_key="test-google-key",
        bucket_name="prayers-bucket",
        region="us-east-1",
        port=5000,
        staging_dir=staging_dir,
        assets_dir=assets_dir,
    )
