from unittest.mock import MagicMock, patch

import pytest
from google.genai import errors as genai_errors

from medscribe.exceptions import APIKeyError, LanguageModelError, QuotaExceededError
from medscribe.services.gemini import GeminiService, classify_error


def _client_error(code: int, message: str, status: str) -> genai_errors.ClientError:
    return genai_errors.ClientError(
        code, {"error": {"code": code, "message": message, "status": status}}
    )


@pytest.fixture()
def mock_genai() -> MagicMock:
    with patch("medscribe.services.gemini.genai") as genai:
        yield genai


def test_generate_returns_text(mock_genai: MagicMock) -> None:
    client = mock_genai.Client.return_value
    client.models.generate_content.return_value.text = "- Disease/Symptoms: Fever"

    service = GeminiService(api_key="key", model_name="gemini-1.5-pro")

    assert service.generate("prompt") == "- Disease/Symptoms: Fever"
    mock_genai.Client.assert_called_once_with(api_key="key")
    client.models.generate_content.assert_called_once_with(
        model="gemini-1.5-pro", contents="prompt"
    )


def test_generate_empty_text(mock_genai: MagicMock) -> None:
    client = mock_genai.Client.return_value
    client.models.generate_content.return_value.text = None

    service = GeminiService(api_key="key", model_name="gemini-1.5-pro")
    assert service.generate("prompt") == ""


def test_missing_api_key_is_rejected(mock_genai: MagicMock) -> None:
    with pytest.raises(APIKeyError):
        GeminiService(api_key="", model_name="gemini-1.5-pro")
    mock_genai.Client.assert_not_called()


def test_generate_maps_quota_errors(mock_genai: MagicMock) -> None:
    client = mock_genai.Client.return_value
    client.models.generate_content.side_effect = _client_error(
        429, "Resource has been exhausted", "RESOURCE_EXHAUSTED"
    )

    service = GeminiService(api_key="key", model_name="gemini-1.5-pro")
    with pytest.raises(QuotaExceededError) as exc_info:
        service.generate("prompt")
    assert exc_info.value.status_code == 429


def test_classify_api_key_error() -> None:
    exc = _client_error(
        400, "API key not valid. Please pass a valid API key.", "INVALID_ARGUMENT"
    )
    assert isinstance(classify_error(exc), APIKeyError)


def test_classify_other_errors() -> None:
    error = classify_error(RuntimeError("safety block"))
    assert type(error) is LanguageModelError
    assert error.status_code == 502
    assert "safety block" in error.message
