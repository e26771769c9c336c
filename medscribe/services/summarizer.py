import logging

from medscribe.exceptions import RecordValidationError
from medscribe.models.records import AnalysisResponse, RecordText, SummaryType
from medscribe.services.pipeline import TextGenerator
from medscribe.services.prompts import build_analysis_prompt, build_summary_prompt

logger = logging.getLogger(__name__)

MIN_ANALYSIS_RECORDS = 2


class RecordSummarizer:
    """Language-model summaries of record text supplied by the caller."""

    def __init__(self, llm: TextGenerator):
        self._llm = llm

    def summarize(self, text: str, summary_type: SummaryType = "layman") -> str:
        if not text.strip():
            raise RecordValidationError("Record has no text to summarize")
        summary = self._llm.generate(build_summary_prompt(text.strip(), summary_type))
        logger.info("Generated %s summary (%d characters)", summary_type, len(summary))
        return summary.strip()

    def analyze(self, records: list[RecordText]) -> AnalysisResponse:
        records = [r for r in records if r.text.strip()]
        if len(records) < MIN_ANALYSIS_RECORDS:
            raise RecordValidationError(
                f"At least {MIN_ANALYSIS_RECORDS} records with text are required"
            )
        analysis = self._llm.generate(build_analysis_prompt(records))
        logger.info("Analyzed patterns across %d records", len(records))
        return AnalysisResponse(analysis=analysis.strip(), record_count=len(records))
