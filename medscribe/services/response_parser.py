import re
from datetime import date

from medscribe.models.handwriting import InterpretedFields
from medscribe.services.prompts import (
    DISEASE_LABEL,
    MEDICATIONS_LABEL,
    NOTES_LABEL,
    PROVIDER_LABEL,
)

UNKNOWN_DISEASE = "Unknown"
NO_MEDICATIONS = "None"
NO_NOTES = "None"

# Drug names worth keeping when the medication block comes back empty
_FALLBACK_KEYWORDS = (
    ("Diane", "Diane-35"),
    ("Penicillin", "Penicillin"),
)


def _line_pattern(label: str) -> re.Pattern[str]:
    return re.compile(rf"{re.escape(label)} (.*?)(?=\n|$)")


def _join_bullets(block: str) -> str:
    """Turn ``* item`` lines into a single ``, `` separated list."""
    items = [
        line.strip()[1:].strip()
        for line in block.split("\n")
        if line.strip().startswith("*")
    ]
    items = [item for item in items if item]
    return ", ".join(items) if items else block


class PrescriptionResponseParser:
    """Extract structured fields from the language model's answer."""

    DISEASE_RE = _line_pattern(DISEASE_LABEL)
    NOTES_RE = _line_pattern(NOTES_LABEL)
    PROVIDER_RE = _line_pattern(PROVIDER_LABEL)

    MEDICATIONS_START = f"- {MEDICATIONS_LABEL}"
    MEDICATIONS_END = f"- {NOTES_LABEL}"

    @classmethod
    def parse(cls, text: str) -> InterpretedFields:
        disease = cls._search(cls.DISEASE_RE, text)
        notes = cls._search(cls.NOTES_RE, text)
        provider = cls._search(cls.PROVIDER_RE, text)

        return InterpretedFields(
            disease=disease if disease is not None else UNKNOWN_DISEASE,
            medications=cls._extract_medications(text),
            notes=notes if notes is not None else NO_NOTES,
            provider=provider or "",
        )

    @staticmethod
    def _search(pattern: re.Pattern[str], text: str) -> str | None:
        match = pattern.search(text)
        return match.group(1).strip() if match else None

    @classmethod
    def _extract_medications(cls, text: str) -> str:
        # Positional slice between markers so multi-line bullet lists survive
        start = text.find(cls.MEDICATIONS_START)
        if start == -1:
            return NO_MEDICATIONS
        start += len(cls.MEDICATIONS_START)
        end = text.find(cls.MEDICATIONS_END, start)
        if end == -1:
            return NO_MEDICATIONS

        medications = text[start:end].strip()
        if "*" in medications:
            medications = _join_bullets(medications)

        if not medications or medications == NO_MEDICATIONS:
            fallback = [name for keyword, name in _FALLBACK_KEYWORDS if keyword in text]
            medications = ", ".join(fallback)

        return medications or NO_MEDICATIONS


def build_title(fields: InterpretedFields, today: date, date_format: str = "%x") -> str:
    current_date = today.strftime(date_format)
    if fields.disease and fields.disease != UNKNOWN_DISEASE:
        return f"{fields.disease} - {current_date}"
    if fields.medications and fields.medications != NO_MEDICATIONS:
        return f"Prescription - {current_date}"
    return f"Medical Note - {current_date}"


def format_record_text(fields: InterpretedFields, medications: str) -> str:
    return (
        f"{DISEASE_LABEL} {fields.disease}\n"
        f"{MEDICATIONS_LABEL} {medications}\n"
        f"{NOTES_LABEL} {fields.notes}"
    )
