import logging
import re
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol

from medscribe.exceptions import TerminologyLookupError
from medscribe.models.handwriting import CorrectedMedicationEntry, MedicationEntry
from medscribe.services.response_parser import NO_MEDICATIONS
from medscribe.services.rxnorm import RxNormClient

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 3

DISEASE_MEDICATIONS: dict[str, list[str]] = {
    "secondary amenorrhea": [
        "Progesterone",
        "Medroxyprogesterone",
        "Norethindrone",
        "Phenergan",
        "Diane-35",
    ],
    "fever": ["Paracetamol", "Ibuprofen"],
}

# Substring (lower case) -> canonical name; first hit wins
NAME_CORRECTIONS: dict[str, str] = {
    "diane": "Diane-35",
    "diane35": "Diane-35",
    "diane 35": "Diane-35",
    "wh. penicillin": "Penicillin V",
    "penichet": "Penicillin",
    "progesterone": "Progesterone",
    "medroxyprogesterone": "Medroxyprogesterone",
    "norethindrone": "Norethindrone",
    "phenergan": "Phenergan",
}

_ENTRY_RE = re.compile(r"^([^\d]+)(.*)$", re.DOTALL)
_PARENTHETICAL_RE = re.compile(r"\(.*?\)")
_HEDGE_RE = re.compile(r"\b(?:Likely|possibly)\b", re.IGNORECASE)


class NameResolver(Protocol):
    name: str

    def resolve(self, medication: str, disease: str) -> str | None: ...


class DiseaseDictionaryResolver:
    """Match against medications commonly prescribed for the parsed disease."""

    name = "disease_dictionary"

    def __init__(self, table: dict[str, list[str]] | None = None):
        self._table = DISEASE_MEDICATIONS if table is None else table

    def resolve(self, medication: str, disease: str) -> str | None:
        lowered = medication.lower()
        for candidate in self._table.get(disease.strip().lower(), []):
            if candidate[:4].lower() in lowered:
                return candidate
        return None


class TerminologyResolver:
    """Canonical RxNorm name; lookup failures mean no correction."""

    name = "rxnorm"

    def __init__(self, client: RxNormClient):
        self._client = client

    def resolve(self, medication: str, disease: str) -> str | None:
        try:
            return self._client.canonical_name(medication)
        except TerminologyLookupError as exc:
            logger.info("RxNorm lookup skipped for %r: %s", medication, exc.message)
            return None


class CorrectionDictionaryResolver:
    name = "correction_dictionary"

    def __init__(self, corrections: dict[str, str] | None = None):
        self._corrections = NAME_CORRECTIONS if corrections is None else corrections

    def resolve(self, medication: str, disease: str) -> str | None:
        lowered = medication.lower()
        for key, value in self._corrections.items():
            if key.lower() in lowered:
                return value
        return None


def default_resolvers(client: RxNormClient | None) -> list[NameResolver]:
    resolvers: list[NameResolver] = [DiseaseDictionaryResolver()]
    if client is not None:
        resolvers.append(TerminologyResolver(client))
    resolvers.append(CorrectionDictionaryResolver())
    return resolvers


def split_entry(entry: str) -> MedicationEntry | None:
    """Split ``"Diane 1 tab daily"`` into name ``Diane`` and dosage ``1 tab daily``.

    Returns None when the entry does not start with a non-digit name.
    """
    match = _ENTRY_RE.match(entry)
    if not match:
        return None
    dosage = _PARENTHETICAL_RE.sub("", match.group(2))
    dosage = _HEDGE_RE.sub("", dosage)
    dosage = " ".join(dosage.split())
    return MedicationEntry(name=match.group(1).strip(), dosage=dosage)


class MedicationCorrector:
    """Resolve medication names through an ordered chain of resolvers."""

    def __init__(self, resolvers: Sequence[NameResolver], max_workers: int = 8):
        self._resolvers = list(resolvers)
        self._max_workers = max(1, max_workers)

    def correct_name(self, medication: str, disease: str) -> tuple[str, str | None]:
        if not medication or len(medication) < MIN_NAME_LENGTH:
            return medication, None
        for resolver in self._resolvers:
            try:
                resolved = resolver.resolve(medication, disease)
            except Exception:
                logger.exception(
                    "%s resolver failed for %r", resolver.name, medication
                )
                continue
            if resolved:
                logger.info(
                    "Corrected %r to %r via %s", medication, resolved, resolver.name
                )
                return resolved, resolver.name
        return medication, None

    def correct_entry(self, entry: str, disease: str) -> str:
        parsed = split_entry(entry)
        if parsed is None:
            return entry
        name, source = self.correct_name(parsed.name, disease)
        corrected = CorrectedMedicationEntry(
            name=name,
            dosage=parsed.dosage,
            original_name=parsed.name,
            source=source,
        )
        return corrected.render()

    def correct(self, medications: str, disease: str) -> str:
        """Correct every entry of a ``, `` separated medication list."""
        if medications == NO_MEDICATIONS:
            return medications
        entries = [entry for entry in medications.split(", ") if entry.strip()]
        if len(entries) <= 1:
            return ", ".join(self.correct_entry(e, disease) for e in entries)

        workers = min(self._max_workers, len(entries))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            corrected = pool.map(lambda e: self.correct_entry(e, disease), entries)
            return ", ".join(corrected)
