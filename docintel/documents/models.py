from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class DocumentState(StrEnum):
    UPLOADED = "uploaded"
    ANALYZED = "analyzed"
    FAILED = "failed"


@dataclass(frozen=True)
class Clause:
    """A contractual provision paired with its plain-language rewrite."""

    id: str
    title: str
    original_text: str = ""
    plain_language: str = ""


@dataclass(frozen=True)
class Risk:
    id: str
    title: str
    severity: str = "medium"  # low | medium | high | critical
    rationale: str = ""
    recommendation: str = ""


@dataclass(frozen=True)
class Obligation:
    party: str
    description: str
    deadline: str | None = None


@dataclass(frozen=True)
class Right:
    party: str
    description: str


@dataclass(frozen=True)
class Summary:
    text: str
    key_terms: tuple[str, ...] = ()


@dataclass(frozen=True)
class DocumentProcessing:
    """Structured analysis attached once to an analyzed document."""

    document_type: str
    summary: Summary
    clauses: tuple[Clause, ...] = ()
    risks: tuple[Risk, ...] = ()
    obligations: tuple[Obligation, ...] = ()
    rights: tuple[Right, ...] = ()
    recommendations: tuple[str, ...] = ()
    risk_score: int = 0
    confidence: float = 0.0


@dataclass(frozen=True)
class Document:
    """An admitted document. Replaced as a whole on every state change."""

    id: str
    filename: str
    mime_type: str
    size_bytes: int
    raw_content: bytes = field(repr=False)
    extracted_text: str
    uploaded_at: datetime
    file_hash_sha256: str
    state: DocumentState = DocumentState.UPLOADED
    processing: DocumentProcessing | None = None
    error_message: str | None = None
