from typing import Literal

from pydantic import BaseModel, Field

SummaryType = Literal["layman", "doctor"]


class SummaryRequest(BaseModel):
    text: str
    summary_type: SummaryType = "layman"


class SummaryResponse(BaseModel):
    summary: str
    summary_type: SummaryType


class RecordText(BaseModel):
    title: str | None = None
    text: str


class AnalysisRequest(BaseModel):
    records: list[RecordText] = Field(min_length=2)


class AnalysisResponse(BaseModel):
    analysis: str
    record_count: int
