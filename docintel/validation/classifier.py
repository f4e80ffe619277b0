"""Decides whether extracted text is a legal document and of which type."""

import asyncio
import json
from collections.abc import Sequence

from docintel.completion.client_base import BaseCompletionClient
from docintel.completion.exceptions import CompletionError
from docintel.completion.json_response import clamp_unit, parse_json_object
from docintel.completion.prompt_loader import load_json_schema, load_prompt_template
from docintel.errors import ExternalServiceError
from docintel.extraction.models import Entity
from docintel.logging.logger import Log
from docintel.validation.models import Classification

_MAX_PROMPT_CHARS = 8000

LEGAL_KEYWORDS: tuple[str, ...] = (
    "agreement", "contract", "lease", "terms and conditions", "privacy policy",
    "liability", "indemnification", "jurisdiction", "governing law",
    "whereas", "hereby", "herein", "therein", "party", "parties",
    "covenant", "warrant", "represent", "breach", "termination",
    "intellectual property", "confidentiality", "non-disclosure",
    "license", "copyright", "trademark", "patent",
    "arbitration", "mediation", "dispute resolution",
    "force majeure", "amendment", "modification", "assignment",
    "partnership", "partner", "partners", "profit sharing", "capital contribution",
    "services", "service provider", "client", "deliverables", "scope of work", "fees",
    "loan", "borrower", "lender", "interest rate", "repayment", "principal",
    "franchise", "franchisor", "franchisee", "territory", "royalty",
    "settlement", "release", "claims", "waiver",
    "shares", "shareholder", "stock", "equity", "voting rights", "dividends",
    "memorandum", "understanding", "intent", "collaboration",
)

DOCUMENT_TYPE_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("lease", ("lease", "rent", "tenant", "landlord", "premises")),
    ("employment_contract", ("employment", "employee", "employer", "work", "salary")),
    ("privacy_policy", ("privacy", "data", "personal information", "cookies")),
    ("terms_of_service", ("terms of service", "terms of use", "user agreement")),
    ("nda", ("non-disclosure", "confidential", "proprietary")),
    ("purchase_agreement", ("purchase", "sale", "buyer", "seller", "goods")),
    ("license_agreement", ("license", "software", "intellectual property")),
    (
        "partnership_agreement",
        ("partnership", "partner", "partners", "profit sharing", "capital contribution"),
    ),
    (
        "service_agreement",
        ("services", "service provider", "client", "deliverables", "scope of work", "fees"),
    ),
    (
        "loan_agreement",
        ("loan", "borrower", "lender", "interest rate", "repayment", "principal"),
    ),
    ("franchise_agreement", ("franchise", "franchisor", "franchisee", "territory", "royalty")),
    ("settlement_agreement", ("settlement", "release", "claims", "waiver")),
    (
        "shareholder_agreement",
        ("shares", "shareholder", "stock", "equity", "voting rights", "dividends"),
    ),
    ("mou", ("memorandum", "understanding", "intent", "collaboration")),
)

LEGAL_ENTITY_TYPES = frozenset({"PERSON", "ORGANIZATION", "DATE", "MONEY"})

GENERAL_LEGAL = "general_legal"
NON_LEGAL = "non_legal"


class LegalClassifier:
    """Classifies text through the completion service, with a keyword fallback."""

    def __init__(
        self,
        *,
        client: BaseCompletionClient | None,
        timeout_seconds: float = 30.0,
        system_prompt: str = "You classify documents for a legal assistant.",
    ) -> None:
        self._client = client
        self._timeout_seconds = timeout_seconds
        self._system_prompt = system_prompt
        self._prompt_template = load_prompt_template("classification")
        self._json_schema = load_json_schema("classification")

    async def classify(
        self,
        text: str,
        *,
        filename: str = "",
        entities: Sequence[Entity] = (),
    ) -> Classification:
        if not text.strip():
            Log.warning(f"No text to classify for '{filename}'")
            return Classification(
                is_legal=False, document_type=NON_LEGAL, confidence=0.0, source="heuristic"
            )
        if self._client is not None:
            try:
                return await self._classify_with_completion(self._client, text, filename)
            except (ExternalServiceError, TimeoutError) as exc:
                Log.warning(f"Completion classification unavailable, using keywords: {exc}")
        return classify_by_keywords(text, entities)

    async def _classify_with_completion(
        self, client: BaseCompletionClient, text: str, filename: str
    ) -> Classification:
        prompt = self._prompt_template.format(
            filename=filename or "unknown",
            document_text=text[:_MAX_PROMPT_CHARS],
            json_schema=json.dumps(self._json_schema, indent=2),
        )
        raw = await asyncio.wait_for(
            client.complete(
                prompt=prompt,
                system_prompt=self._system_prompt,
                temperature=0.0,
                json_schema=self._json_schema,
            ),
            timeout=self._timeout_seconds,
        )
        Log.debug(f"Classification raw response:\n{raw}")
        data = parse_json_object(raw)

        is_legal = data.get("isLegal")
        if not isinstance(is_legal, bool):
            raise CompletionError("Unusable classification response: 'isLegal' must be a boolean")
        confidence, out_of_range = clamp_unit(data.get("confidence"))
        if out_of_range:
            Log.warning(f"Classification confidence {data.get('confidence')!r} clamped to {confidence}")
        document_type = _normalize_type(data.get("documentType"), is_legal)
        return Classification(
            is_legal=is_legal,
            document_type=document_type,
            confidence=confidence,
            source="completion",
        )


def classify_by_keywords(text: str, entities: Sequence[Entity] = ()) -> Classification:
    """Keyword heuristic: legal keyword count and density plus legal entity types."""
    lowered = text.lower()
    keyword_matches = sum(1 for keyword in LEGAL_KEYWORDS if keyword in lowered)

    document_type = GENERAL_LEGAL
    best = 0
    for type_name, keywords in DOCUMENT_TYPE_KEYWORDS:
        matches = sum(1 for keyword in keywords if keyword in lowered)
        if matches > best:
            best = matches
            document_type = type_name

    density = keyword_matches / max(len(text.split(" ")) / 100, 1)
    has_legal_entities = any(entity.type in LEGAL_ENTITY_TYPES for entity in entities)
    is_legal = density >= 2 or keyword_matches >= 5 or has_legal_entities

    if is_legal:
        confidence = min(0.95, 0.5 + 0.05 * keyword_matches + (0.1 if has_legal_entities else 0.0))
    else:
        confidence = 0.2
    return Classification(
        is_legal=is_legal,
        document_type=document_type if is_legal else NON_LEGAL,
        confidence=round(confidence, 2),
        source="heuristic",
    )


def _normalize_type(raw: object, is_legal: bool) -> str:
    if not is_legal:
        return NON_LEGAL
    if not isinstance(raw, str) or not raw.strip():
        return GENERAL_LEGAL
    name = raw.strip().lower().replace(" ", "_").replace("-", "_")
    if name in ("lease_agreement", "rental_agreement"):
        return "lease"
    return name
