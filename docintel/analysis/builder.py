"""Builds DocumentProcessing from a parsed analysis response.

Tolerant of the model's output: a missing or malformed section
becomes an empty list, malformed items are skipped, and out-of-range
scores are clamped. Every repair is logged as a warning.
"""

from typing import Any

from docintel.completion.json_response import clamp_unit
from docintel.documents.models import (
    Clause,
    DocumentProcessing,
    Obligation,
    Right,
    Risk,
    Summary,
)
from docintel.logging.logger import Log

VALID_SEVERITIES = frozenset({"low", "medium", "high", "critical"})


def build_processing(data: dict[str, Any], default_document_type: str) -> DocumentProcessing:
    return DocumentProcessing(
        document_type=_build_document_type(data.get("documentType"), default_document_type),
        summary=Summary(
            text=_string(data.get("summary")),
            key_terms=_string_list(data.get("keyTerms"), "keyTerms"),
        ),
        clauses=_build_clauses(data.get("clauses")),
        risks=_build_risks(data.get("risks")),
        obligations=_build_obligations(data.get("obligations")),
        rights=_build_rights(data.get("rights")),
        recommendations=_string_list(data.get("recommendations"), "recommendations"),
        risk_score=_build_risk_score(data.get("riskScore")),
        confidence=_build_confidence(data.get("confidence")),
    )


def fallback_processing(raw_text: str, document_type: str) -> DocumentProcessing:
    """Processing for a response that is not JSON: the raw text becomes the summary."""
    return DocumentProcessing(
        document_type=document_type,
        summary=Summary(text=raw_text.strip()),
    )


def _build_document_type(raw: Any, default: str) -> str:
    if isinstance(raw, str) and raw.strip():
        return raw.strip().lower().replace(" ", "_")
    return default


def _build_clauses(raw: Any) -> tuple[Clause, ...]:
    clauses: list[Clause] = []
    for index, item in enumerate(_section(raw, "clauses")):
        title = _string(item.get("title"))
        original = _string(item.get("originalText"))
        if not title and not original:
            Log.warning(f"Skipping clause at index {index}: no title or text")
            continue
        clauses.append(
            Clause(
                id=f"clause-{len(clauses) + 1}",
                title=title or f"Clause {len(clauses) + 1}",
                original_text=original,
                plain_language=_string(item.get("plainLanguage")),
            )
        )
    return tuple(clauses)


def _build_risks(raw: Any) -> tuple[Risk, ...]:
    risks: list[Risk] = []
    for index, item in enumerate(_section(raw, "risks")):
        title = _string(item.get("title"))
        if not title:
            Log.warning(f"Skipping risk at index {index}: no title")
            continue
        severity = _string(item.get("severity")).lower()
        if severity not in VALID_SEVERITIES:
            Log.warning(f"Risk '{title}' has invalid severity {severity!r}, using 'medium'")
            severity = "medium"
        risks.append(
            Risk(
                id=f"risk-{len(risks) + 1}",
                title=title,
                severity=severity,
                rationale=_string(item.get("rationale")),
                recommendation=_string(item.get("recommendation")),
            )
        )
    return tuple(risks)


def _build_obligations(raw: Any) -> tuple[Obligation, ...]:
    obligations: list[Obligation] = []
    for item in _section(raw, "obligations"):
        description = _string(item.get("description"))
        if not description:
            continue
        deadline = item.get("deadline")
        obligations.append(
            Obligation(
                party=_string(item.get("party")) or "Unspecified",
                description=description,
                deadline=deadline if isinstance(deadline, str) and deadline else None,
            )
        )
    return tuple(obligations)


def _build_rights(raw: Any) -> tuple[Right, ...]:
    rights: list[Right] = []
    for item in _section(raw, "rights"):
        description = _string(item.get("description"))
        if not description:
            continue
        rights.append(
            Right(party=_string(item.get("party")) or "Unspecified", description=description)
        )
    return tuple(rights)


def _build_risk_score(raw: Any) -> int:
    if raw is None:
        return 0
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        Log.warning(f"riskScore {raw!r} is not a number, using 0")
        return 0
    if not 0 <= raw <= 100:
        clamped = int(max(0, min(100, raw)))
        Log.warning(f"riskScore {raw} out of range, clamped to {clamped}")
        return clamped
    return int(round(raw))


def _build_confidence(raw: Any) -> float:
    confidence, out_of_range = clamp_unit(raw)
    if out_of_range:
        Log.warning(f"Analysis confidence {raw!r} out of range, clamped to {confidence}")
    return confidence


def _section(raw: Any, name: str) -> list[dict[str, Any]]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        Log.warning(f"'{name}' must be a list, got {type(raw).__name__}; using empty list")
        return []
    items = [item for item in raw if isinstance(item, dict)]
    if len(items) != len(raw):
        Log.warning(f"Dropped {len(raw) - len(items)} malformed item(s) from '{name}'")
    return items


def _string_list(raw: Any, name: str) -> tuple[str, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        Log.warning(f"'{name}' must be a list, got {type(raw).__name__}; using empty list")
        return ()
    return tuple(item.strip() for item in raw if isinstance(item, str) and item.strip())


def _string(raw: Any) -> str:
    return raw.strip() if isinstance(raw, str) else ""
