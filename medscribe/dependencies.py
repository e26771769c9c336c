from typing import Annotated

from fastapi import Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from medscribe.config import Settings
from medscribe.exceptions import MedScribeError
from medscribe.services.medication import MedicationCorrector, default_resolvers
from medscribe.services.pipeline import HandwritingPipeline
from medscribe.services.summarizer import RecordSummarizer

limiter = Limiter(key_func=get_remote_address)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_pipeline(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> HandwritingPipeline:
    ocr = request.app.state.document_ai_service
    llm = request.app.state.gemini_service
    if ocr is None or llm is None:
        raise MedScribeError(
            "OCR or language model service is unavailable. "
            "Check credentials and configuration.",
            status_code=503,
        )
    corrector = MedicationCorrector(
        default_resolvers(getattr(request.app.state, "rxnorm_client", None)),
        max_workers=settings.correction_max_workers,
    )
    return HandwritingPipeline(
        ocr=ocr,
        llm=llm,
        corrector=corrector,
        date_format=settings.title_date_format,
    )


def get_summarizer(request: Request) -> RecordSummarizer:
    llm = request.app.state.gemini_service
    if llm is None:
        raise MedScribeError("Language model service is unavailable", status_code=503)
    return RecordSummarizer(llm)
