from dataclasses import dataclass


@dataclass(frozen=True)
class Classification:
    is_legal: bool
    document_type: str
    confidence: float
    source: str  # "completion" | "heuristic"


@dataclass(frozen=True)
class ValidationResult:
    """Verdict on an upload. Never mutated after construction."""

    is_valid: bool
    is_legal: bool
    document_type: str
    confidence: float
    message: str
    format: str = ""
    extracted_text: str = ""
    error_kind: str | None = None

    @classmethod
    def rejected(cls, error: Exception) -> "ValidationResult":
        """Invalid result for an input rejected before classification."""
        return cls(
            is_valid=False,
            is_legal=False,
            document_type="",
            confidence=0.0,
            message=str(error),
            error_kind=type(error).__name__,
        )
