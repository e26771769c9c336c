import logging

import requests

from medscribe.exceptions import TerminologyLookupError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://rxnav.nlm.nih.gov/REST"
CANONICAL_PROPERTY = "RxNorm Name"


class RxNormClient:
    """Minimal client for the NLM RxNav REST API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 3.0,
        session: requests.Session | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def find_rxcui(self, name: str) -> str | None:
        """Return the first RxCUI registered for a drug name, if any."""
        data = self._get("rxcui.json", params={"name": name})
        id_group = data.get("idGroup") or {}
        if not isinstance(id_group, dict):
            raise TerminologyLookupError("RxNorm returned a malformed idGroup")
        ids = id_group.get("rxnormId") or []
        if not isinstance(ids, list):
            raise TerminologyLookupError("RxNorm returned a malformed rxnormId list")
        return str(ids[0]) if ids else None

    def get_property(self, rxcui: str, prop_name: str = CANONICAL_PROPERTY) -> str | None:
        data = self._get(f"rxcui/{rxcui}/property.json", params={"propName": prop_name})
        group = data.get("propConceptGroup") or {}
        if not isinstance(group, dict):
            raise TerminologyLookupError("RxNorm returned a malformed propConceptGroup")
        properties = group.get("propConcept") or []
        if not isinstance(properties, list) or not all(
            isinstance(prop, dict) for prop in properties
        ):
            raise TerminologyLookupError("RxNorm returned a malformed propConcept list")
        for prop in properties:
            value = prop.get("propValue")
            if isinstance(value, str) and value:
                return value
        return None

    def canonical_name(self, name: str) -> str | None:
        """Resolve an informal drug name to its RxNorm name."""
        rxcui = self.find_rxcui(name)
        if rxcui is None:
            return None
        return self.get_property(rxcui)

    def _get(self, path: str, params: dict[str, str]) -> dict:
        url = f"{self._base_url}/{path}"
        try:
            resp = self._session.get(url, params=params, timeout=self._timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as exc:
            raise TerminologyLookupError(f"RxNorm request failed: {exc}") from exc
        except ValueError as exc:
            raise TerminologyLookupError(f"RxNorm returned invalid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise TerminologyLookupError("RxNorm returned an unexpected payload")
        return data
