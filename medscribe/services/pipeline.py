import logging
from collections.abc import Callable
from datetime import date
from typing import Protocol

from medscribe.exceptions import APIKeyError, QuotaExceededError
from medscribe.models.handwriting import (
    EnhancedImage,
    RecognitionInput,
    RecognitionResult,
)
from medscribe.services.gemini import API_KEY_MESSAGE, QUOTA_EXCEEDED_MESSAGE
from medscribe.services.medication import MedicationCorrector
from medscribe.services.preprocessing import decode_data_uri, enhance_image
from medscribe.services.prompts import build_interpretation_prompt
from medscribe.services.response_parser import (
    PrescriptionResponseParser,
    build_title,
    format_record_text,
)

logger = logging.getLogger(__name__)

NO_TEXT_MESSAGE = "No text recognized in the image."
FAILURE_MESSAGE = (
    "Failed to recognize handwriting. Please ensure the image is clear and try again."
)


class TextExtractor(Protocol):
    def extract_text(self, content: bytes, mime_type: str) -> str: ...


class TextGenerator(Protocol):
    def generate(self, prompt: str) -> str: ...


class HandwritingPipeline:
    """Turn a photographed handwritten note into a record draft.

    image -> enhance -> OCR -> language model -> parse -> correct medications.
    ``recognize`` never raises: failures become one of the canned messages.
    """

    def __init__(
        self,
        ocr: TextExtractor,
        llm: TextGenerator,
        corrector: MedicationCorrector,
        preprocess: Callable[[RecognitionInput], EnhancedImage] = enhance_image,
        today: Callable[[], date] = date.today,
        date_format: str = "%x",
    ):
        self._ocr = ocr
        self._llm = llm
        self._corrector = corrector
        self._preprocess = preprocess
        self._today = today
        self._date_format = date_format

    def recognize(self, image: str | RecognitionInput) -> RecognitionResult:
        try:
            if isinstance(image, str):
                image = decode_data_uri(image)
            return self._run(image)
        except QuotaExceededError:
            logger.warning("Gemini quota exceeded")
            return RecognitionResult(text=QUOTA_EXCEEDED_MESSAGE)
        except APIKeyError:
            logger.error("Gemini rejected the configured API key")
            return RecognitionResult(text=API_KEY_MESSAGE)
        except Exception as exc:
            if "API key" in str(exc):
                logger.error("API key error: %s", exc)
                return RecognitionResult(text=API_KEY_MESSAGE)
            logger.exception("Error recognizing handwriting")
            return RecognitionResult(text=FAILURE_MESSAGE)

    def _run(self, image: RecognitionInput) -> RecognitionResult:
        enhanced = self._preprocess(image)

        ocr_text = self._ocr.extract_text(enhanced.content, enhanced.mime_type)
        if not ocr_text:
            logger.info("OCR found no text")
            return RecognitionResult(text=NO_TEXT_MESSAGE)
        logger.debug("OCR text: %s", ocr_text)

        response = self._llm.generate(build_interpretation_prompt(ocr_text))
        fields = PrescriptionResponseParser.parse(response)
        title = build_title(fields, self._today(), self._date_format)

        medications = self._corrector.correct(fields.medications, fields.disease)
        text = format_record_text(fields, medications)
        logger.debug("Final output: %s", text)

        return RecognitionResult(text=text, provider=fields.provider, title=title)
