import logging

from google import genai
from google.genai import errors as genai_errors

from medscribe.exceptions import APIKeyError, LanguageModelError, QuotaExceededError

logger = logging.getLogger(__name__)

QUOTA_EXCEEDED_MESSAGE = (
    "Quota exceeded for Gemini API. Please enable billing or try again later."
)
API_KEY_MESSAGE = "Invalid or missing API key. Please contact the administrator."


def classify_error(exc: Exception) -> LanguageModelError:
    """Map a Gemini SDK exception onto the service error taxonomy."""
    if isinstance(exc, genai_errors.APIError) and exc.code == 429:
        return QuotaExceededError(QUOTA_EXCEEDED_MESSAGE)
    if "API key" in str(exc):
        return APIKeyError(API_KEY_MESSAGE)
    return LanguageModelError(f"Gemini request failed: {exc}")


class GeminiService:
    def __init__(self, api_key: str, model_name: str):
        if not api_key:
            raise APIKeyError(API_KEY_MESSAGE)
        self._client = genai.Client(api_key=api_key)
        self.model_name = model_name

    def generate(self, prompt: str) -> str:
        try:
            response = self._client.models.generate_content(
                model=self.model_name, contents=prompt
            )
            text = response.text
        except Exception as exc:
            raise classify_error(exc) from exc
        logger.debug("Gemini response (%s): %s", self.model_name, text)
        return text or ""
