from pydantic import BaseModel


class RecognitionRequest(BaseModel):
    """Image to transcribe, as a data URI or bare base64 string."""

    image: str


class RecognitionResult(BaseModel):
    text: str
    provider: str | None = None
    title: str | None = None


class RecognitionInput(BaseModel):
    content: bytes
    mime_type: str = "image/jpeg"


class EnhancedImage(BaseModel):
    content: bytes
    mime_type: str


class InterpretedFields(BaseModel):
    """Fields parsed from the language model's structured answer."""

    disease: str = "Unknown"
    medications: str = "None"
    notes: str = "None"
    provider: str = ""


class MedicationEntry(BaseModel):
    name: str
    dosage: str = ""


class CorrectedMedicationEntry(MedicationEntry):
    original_name: str
    source: str | None = None

    def render(self) -> str:
        return f"{self.name} {self.dosage}" if self.dosage else self.name
