from io import BytesIO
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from medscribe.services.pipeline import NO_TEXT_MESSAGE
from tests.conftest import make_data_uri


def test_recognize_success(app: TestClient, png_bytes: bytes) -> None:
    response = app.post(
        "/handwriting/recognize", json={"image": make_data_uri(png_bytes)}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["text"].startswith("Disease/Symptoms: Secondary amenorrhea\n")
    assert "Diane-35 1 tab daily" in body["text"]
    assert body["provider"] == "Dr. Smith, City Hospital"
    assert body["title"].startswith("Secondary amenorrhea - ")


def test_recognize_no_text_omits_title_and_provider(
    app: TestClient, png_bytes: bytes
) -> None:
    mock_doc_ai: MagicMock = app.app.state.document_ai_service
    mock_doc_ai.extract_text.return_value = ""

    response = app.post(
        "/handwriting/recognize", json={"image": make_data_uri(png_bytes)}
    )
    assert response.status_code == 200
    assert response.json() == {"text": NO_TEXT_MESSAGE}


def test_recognize_never_fails_on_bad_image(app: TestClient) -> None:
    response = app.post("/handwriting/recognize", json={"image": "not base64 at all"})
    assert response.status_code == 200
    assert response.json()["text"].startswith("Failed to recognize handwriting")


def test_recognize_requires_image_field(app: TestClient) -> None:
    response = app.post("/handwriting/recognize", json={})
    assert response.status_code == 422


def test_recognize_unavailable_services(app: TestClient, png_bytes: bytes) -> None:
    app.app.state.gemini_service = None
    response = app.post(
        "/handwriting/recognize", json={"image": make_data_uri(png_bytes)}
    )
    assert response.status_code == 503
    assert "unavailable" in response.json()["detail"]


def test_upload_success(app: TestClient, png_bytes: bytes) -> None:
    response = app.post(
        "/handwriting/upload",
        files={"file": ("note.png", BytesIO(png_bytes), "image/png")},
    )
    assert response.status_code == 200
    assert response.json()["provider"] == "Dr. Smith, City Hospital"

    mock_doc_ai: MagicMock = app.app.state.document_ai_service
    _, mime_type = mock_doc_ai.extract_text.call_args.args
    assert mime_type == "image/png"


def test_upload_rejects_non_image(app: TestClient) -> None:
    response = app.post(
        "/handwriting/upload",
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )
    assert response.status_code == 422
    assert "Invalid file type" in response.json()["detail"]


def test_upload_rejects_empty_file(app: TestClient) -> None:
    response = app.post(
        "/handwriting/upload",
        files={"file": ("note.png", b"", "image/png")},
    )
    assert response.status_code == 422
    assert "empty" in response.json()["detail"]


def test_upload_rejects_oversized_file(app: TestClient) -> None:
    app.app.state.settings.max_image_size_mb = 1
    response = app.post(
        "/handwriting/upload",
        files={"file": ("big.png", b"\x00" * (1024 * 1024 + 1), "image/png")},
    )
    assert response.status_code == 422
    assert "maximum size" in response.json()["detail"]
