import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, UploadFile

from medscribe.config import Settings
from medscribe.dependencies import get_pipeline, get_settings, limiter
from medscribe.exceptions import ImageValidationError
from medscribe.models.handwriting import (
    RecognitionInput,
    RecognitionRequest,
    RecognitionResult,
)
from medscribe.services.pipeline import HandwritingPipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/handwriting", tags=["handwriting"])


def _validate_image(content: bytes, max_size_mb: int) -> None:
    if not content:
        raise ImageValidationError("Uploaded file is empty")
    if len(content) > max_size_mb * 1024 * 1024:
        raise ImageValidationError(f"File exceeds maximum size of {max_size_mb}MB")


@router.post(
    "/recognize",
    response_model=RecognitionResult,
    response_model_exclude_none=True,
)
@limiter.limit("10/minute")
def recognize_handwriting(
    request: Request,
    body: RecognitionRequest,
    pipeline: Annotated[HandwritingPipeline, Depends(get_pipeline)],
) -> RecognitionResult:
    return pipeline.recognize(body.image)


@router.post(
    "/upload",
    response_model=RecognitionResult,
    response_model_exclude_none=True,
)
@limiter.limit("10/minute")
def upload_handwriting(
    request: Request,
    file: UploadFile,
    settings: Annotated[Settings, Depends(get_settings)],
    pipeline: Annotated[HandwritingPipeline, Depends(get_pipeline)],
) -> RecognitionResult:
    content_type = file.content_type or ""
    if not content_type.startswith("image/"):
        raise ImageValidationError(
            f"Invalid file type: {content_type}. Only images are accepted."
        )

    # Check Content-Length before reading to reject oversized uploads early
    max_bytes = settings.max_image_size_mb * 1024 * 1024
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > max_bytes:
        raise ImageValidationError(
            f"File exceeds maximum size of {settings.max_image_size_mb}MB"
        )

    content = file.file.read()
    _validate_image(content, settings.max_image_size_mb)
    logger.info("Received %s upload (%d bytes)", content_type, len(content))

    return pipeline.recognize(RecognitionInput(content=content, mime_type=content_type))
