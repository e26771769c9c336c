from typing import Annotated

from fastapi import APIRouter, Depends, Request

from medscribe.dependencies import get_summarizer, limiter
from medscribe.models.records import (
    AnalysisRequest,
    AnalysisResponse,
    SummaryRequest,
    SummaryResponse,
)
from medscribe.services.summarizer import RecordSummarizer

router = APIRouter(prefix="/records", tags=["records"])


@router.post("/summary", response_model=SummaryResponse)
@limiter.limit("10/minute")
def summarize_record(
    request: Request,
    body: SummaryRequest,
    summarizer: Annotated[RecordSummarizer, Depends(get_summarizer)],
) -> SummaryResponse:
    summary = summarizer.summarize(body.text, body.summary_type)
    return SummaryResponse(summary=summary, summary_type=body.summary_type)


@router.post("/analysis", response_model=AnalysisResponse)
@limiter.limit("10/minute")
def analyze_records(
    request: Request,
    body: AnalysisRequest,
    summarizer: Annotated[RecordSummarizer, Depends(get_summarizer)],
) -> AnalysisResponse:
    return summarizer.analyze(body.records)
