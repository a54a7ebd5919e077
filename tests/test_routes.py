import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import app, configure_app
from conftest import FAKE_AUDIO, FAKE_PRAYER, RecordingTransport
from utility.catalog import get_catalog

client = TestClient(app)


@pytest.fixture(autouse=True)
def configured_app(settings, bucket, llm_transport, tts_transport):
    configure_app(app, settings, s3_client=bucket.client, llm_transport=llm_transport, tts_transport=tts_transport)
    yield app


# -----------------------------
# Catalog
# -----------------------------
def test_topics():
    response = client.get("/topics", params={"language": "french"})
    assert response.status_code == 200
    assert response.json() == list(get_catalog("french").topics)


def test_writers():
    response = client.get("/writers", params={"language": "english"})
    assert response.status_code == 200
    assert "Maya Angelou" in response.json()


@pytest.mark.parametrize("path", ["/topics", "/writers"])
def test_catalog_invalid_language(path):
    response = client.get(path, params={"language": "esperanto"})
    assert response.status_code == 400
    assert response.text == "Invalid language"


def test_languages_and_health():
    assert client.get("/languages").json() == ["english", "french", "arabic"]
    assert client.get("/health").json() == {"status": "ok"}


# -----------------------------
# Prayers
# -----------------------------
def test_generate_prayer_end_to_end(bucket, llm_transport, tts_transport, staging_dir):
    response = client.post(
        "/generate-prayer",
        json={"topic": "gratitude", "writer": "Maya Angelou", "language": "english"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["prayer"] == FAKE_PRAYER
    assert body["audioUrl"].endswith(".mp3")
    assert body["textUrl"].endswith(".txt")
    assert body["language"] == "english"

    assert len(llm_transport.requests) == 1
    assert len(tts_transport.requests) == 1
    assert [u["key"] for u in bucket.uploads] == [
        body["audioUrl"].rsplit("/", 1)[1],
        body["textUrl"].rsplit("/", 1)[1],
    ]
    assert bucket.uploads[0]["body"] == FAKE_AUDIO
    assert list(staging_dir.iterdir()) == []


@pytest.mark.parametrize("payload, reason", [
    ({"topic": "pizza", "writer": "Maya Angelou", "language": "english"}, "Invalid topic"),
    ({"topic": "gratitude", "writer": "Nobody", "language": "english"}, "Invalid writer"),
    ({"topic": "gratitude", "writer": "Maya Angelou", "language": "latin"}, "Invalid language"),
    ({"writer": "Maya Angelou", "language": "english"}, "Invalid topic"),
    ({"topic": 123, "writer": "Maya Angelou", "language": "english"}, "Invalid topic"),
    ({"topic": "gratitude", "writer": None, "language": "english"}, "Invalid writer"),
    ({"topic": "gratitude", "writer": "Maya Angelou"}, "Invalid language"),
    ({"topic": "gratitude", "writer": "Maya Angelou", "language": None}, "Invalid language"),
])
def test_generate_prayer_rejects_before_external_calls(payload, reason, bucket, llm_transport, tts_transport):
    response = client.post("/generate-prayer", json=payload)

    assert response.status_code == 400
    assert response.text == reason
    assert llm_transport.requests == []
    assert tts_transport.requests == []
    assert bucket.uploads == []


def test_generate_prayer_generation_failure(settings, bucket, tts_transport, staging_dir):
    failing = RecordingTransport(lambda request: httpx.Response(503, json={"error": "overloaded"}))
    configure_app(app, settings, s3_client=bucket.client, llm_transport=failing, tts_transport=tts_transport)

    response = client.post(
        "/generate-prayer",
        json={"topic": "gratitude", "writer": "Maya Angelou", "language": "english"},
    )

    assert response.status_code == 500
    assert response.text == "Error generating prayer and audio"
    assert "overloaded" not in response.text
    assert tts_transport.requests == []
    assert list(staging_dir.iterdir()) == []


def test_generate_prayer_upload_failure_cleans_up(bucket, staging_dir):
    bucket.fail_on.add("prayer-")

    response = client.post(
        "/generate-prayer",
        json={"topic": "الشكر", "writer": "نجيب محفوظ", "language": "arabic"},
    )

    assert response.status_code == 500
    assert list(staging_dir.iterdir()) == []


def test_list_prayers(bucket):
    bucket.objects.update({
        "output-a1-english.mp3": b"mp3",
        "prayer-a1-english.txt": b"Amen",
        "output-lost-french.mp3": b"mp3",
    })

    response = client.get("/list-prayers")

    assert response.status_code == 200
    prayers = {p["audioUrl"].rsplit("/", 1)[1]: p for p in response.json()["prayers"]}
    assert prayers["output-a1-english.mp3"]["text"] == "Amen"
    assert prayers["output-lost-french.mp3"]["text"] is None


def test_list_prayers_bucket_error(bucket):
    from botocore.exceptions import ClientError
    bucket.client.list_objects_v2.side_effect = ClientError({"Error": {"Code": "AccessDenied"}}, "ListObjectsV2")

    response = client.get("/list-prayers")

    assert response.status_code == 500
    assert response.text == "Error listing prayers"


# -----------------------------
# Posters
# -----------------------------
def test_generate_poster(bucket):
    response = client.post(
        "/generate-poster",
        json={"text": "Peace be with you", "format": "png", "background": "sunrise.png"},
    )

    assert response.status_code == 200
    assert response.json()["fileUrl"].endswith(".png")
    assert bucket.uploads[0]["extra"]["ContentType"] == "image/png"


def test_generate_poster_unknown_background(bucket):
    response = client.post(
        "/generate-poster",
        json={"text": "Peace be with you", "format": "png", "background": "nope.png"},
    )

    assert response.status_code == 500
    assert response.text == "Error generating poster"
    assert bucket.uploads == []


def test_generate_gif(bucket, staging_dir):
    response = client.post("/generate-gif", json={"text": "Peace be with you", "background": "sunrise.png"})

    assert response.status_code == 200
    assert response.json()["fileUrl"].endswith(".gif")
    assert list(staging_dir.iterdir()) == []


def test_generate_gif_upload_failure(bucket):
    bucket.fail_on.add("animation-")

    response = client.post("/generate-gif", json={"text": "Peace be with you", "background": "sunrise.png"})

    assert response.status_code == 500
    assert response.text == "Error generating gif"


def test_generate_prayer_non_object_body(llm_transport):
    response = client.post("/generate-prayer", content=b"[1, 2, 3]", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert llm_transport.requests == []


def test_other_routes_keep_default_validation_errors():
    response = client.post("/generate-gif", json={"text": "Peace be with you"})

    assert response.status_code == 422
    assert response.json()["detail"][0]["loc"] == ["body", "background"]


def test_configure_app_exposes_services():
    assert set(app.state._state) == {"prayer_pipeline", "listing", "posters"}
