import base64
import io
from datetime import date
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from PIL import Image, ImageDraw

from medscribe.config import Settings
from medscribe.dependencies import limiter
from medscribe.main import create_app

FIXED_DAY = date(2025, 1, 15)

WELL_FORMED_RESPONSE = """\
- Disease/Symptoms: Secondary amenorrhea
- Medications: Diane 1 tab daily, Phenergan 25 mg I/D
- Additional Notes: Patient is a 19-year-old female
- Healthcare Provider: Dr. Smith, City Hospital"""


def make_png(width: int = 64, height: int = 32) -> bytes:
    img = Image.new("RGB", (width, height), color=(230, 230, 230))
    draw = ImageDraw.Draw(img)
    draw.line((4, 16, width - 4, 16), fill=(20, 20, 20), width=2)
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def make_data_uri(content: bytes, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(content).decode('ascii')}"


@pytest.fixture()
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(
        gcp_project_id="test-project",
        gcp_processor_id="test-processor",
        gemini_api_key="test-api-key",
        title_date_format="%d/%m/%Y",
        debug=True,
    )


@pytest.fixture()
def app(test_settings: Settings) -> TestClient:
    application = create_app(settings=test_settings)
    limiter.reset()

    # Replace external services with mocks to avoid real API calls
    mock_doc_ai = MagicMock()
    mock_doc_ai.extract_text.return_value = "Diane 1 tab daily for amenorrhea"

    mock_gemini = MagicMock()
    mock_gemini.generate.return_value = WELL_FORMED_RESPONSE

    mock_rxnorm = MagicMock()
    mock_rxnorm.canonical_name.return_value = None

    application.state.document_ai_service = mock_doc_ai
    application.state.gemini_service = mock_gemini
    application.state.rxnorm_client = mock_rxnorm

    return TestClient(application)
