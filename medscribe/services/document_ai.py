import logging

from google.cloud import documentai_v1 as documentai

from medscribe.exceptions import OCRError

logger = logging.getLogger(__name__)

SUPPORTED_MIME_TYPES = {
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/bmp",
    "image/tiff",
    "image/webp",
}


class DocumentAIService:
    """Text detection for handwritten notes through a Document AI OCR processor."""

    def __init__(self, project_id: str, location: str, processor_id: str):
        self._client = documentai.DocumentProcessorServiceClient(
            client_options={
                "api_endpoint": f"{location}-documentai.googleapis.com"
            }
        )
        self._processor_name = self._client.processor_path(
            project_id, location, processor_id
        )

    def extract_text(self, content: bytes, mime_type: str) -> str:
        """Return the full text detected in an image, or "" if there is none."""
        if mime_type not in SUPPORTED_MIME_TYPES:
            raise OCRError(f"Unsupported image type for OCR: {mime_type}")

        raw_document = documentai.RawDocument(content=content, mime_type=mime_type)
        request = documentai.ProcessRequest(
            name=self._processor_name, raw_document=raw_document
        )
        try:
            result = self._client.process_document(request=request)
        except Exception as exc:
            raise OCRError(f"Document AI processing failed: {exc}") from exc

        text = result.document.text or ""
        logger.info("OCR extracted %d characters", len(text))
        return text
