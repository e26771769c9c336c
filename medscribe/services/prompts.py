"""Prompts sent to the language model.

The interpretation prompt and ``PrescriptionResponseParser`` agree on the
four labelled output lines; change them together.
"""

from medscribe.models.records import RecordText, SummaryType

DISEASE_LABEL = "Disease/Symptoms:"
MEDICATIONS_LABEL = "Medications:"
NOTES_LABEL = "Additional Notes:"
PROVIDER_LABEL = "Healthcare Provider:"

INTERPRETATION_PROMPT = """\
You are a medical transcription expert specializing in handwritten prescriptions. \
The following text was extracted from a doctor's handwritten medical note or \
prescription using OCR:

"{ocr_text}"

Interpret this text and extract the following:
- Disease or symptoms mentioned (e.g., secondary amenorrhea, fever).
- Medication names, dosages, and instructions (e.g., Penicillin 1+1+1, Phenergan 25 mg I/D).
- Any additional notes or instructions.
- Healthcare provider/doctor name and hospital/clinic if mentioned.

If the text is unclear or ambiguous:
1. Use the mentioned disease or symptoms to infer likely medications. For \
secondary amenorrhea, consider Progesterone, Medroxyprogesterone, Norethindrone, \
or Phenergan.
2. If a medication name is unclear, suggest the most likely medication based on \
common prescriptions.
3. If unsure, provide a confidence level (e.g., 'Likely Penicillin, 80% confidence').

Output the interpretation in this exact structured format WITHOUT indentation or \
bullet points:
- {disease_label} Secondary amenorrhea
- {medications_label} Diane-35 daily, Penicillin 1+1+1
- {notes_label} Patient is a 19-year-old female
- {provider_label} Dr. Smith, City Hospital"""

_SUMMARY_AUDIENCE = {
    "layman": (
        "Write a short summary for the patient in plain, non-technical language. "
        "Explain what the record says, what any medications are for and what the "
        "patient should keep in mind. Avoid jargon; define any medical term you "
        "cannot avoid."
    ),
    "doctor": (
        "Write a concise clinical summary for a physician using standard medical "
        "terminology. Cover diagnoses, medications with dosages, relevant findings "
        "and open issues. Do not add information that is not in the record."
    ),
}

SUMMARY_PROMPT = """\
You are a medical documentation assistant. {audience}

Medical record:
\"\"\"
{text}
\"\"\""""

ANALYSIS_PROMPT = """\
You are a medical documentation assistant reviewing {count} medical records \
belonging to the same patient. Identify:
1. Recurring conditions or symptoms.
2. Medication history, including changes and possible interactions.
3. Trends over time.
4. Questions the patient could ask their doctor at the next visit.

Base every statement on the records below and say so when the records are \
insufficient to draw a conclusion.

{records}"""


def build_interpretation_prompt(ocr_text: str) -> str:
    return INTERPRETATION_PROMPT.format(
        ocr_text=ocr_text,
        disease_label=DISEASE_LABEL,
        medications_label=MEDICATIONS_LABEL,
        notes_label=NOTES_LABEL,
        provider_label=PROVIDER_LABEL,
    )


def build_summary_prompt(text: str, summary_type: SummaryType) -> str:
    return SUMMARY_PROMPT.format(audience=_SUMMARY_AUDIENCE[summary_type], text=text)


def build_analysis_prompt(records: list[RecordText]) -> str:
    blocks = []
    for i, record in enumerate(records, start=1):
        heading = f"Record {i}" + (f": {record.title}" if record.title else "")
        blocks.append(f"{heading}\n{record.text.strip()}")
    return ANALYSIS_PROMPT.format(count=len(records), records="\n\n".join(blocks))
