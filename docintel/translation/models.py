from dataclasses import dataclass, field


@dataclass(frozen=True)
class TranslationResult:
    """One translated text. ``error`` is set instead of raising in batch calls."""

    original_text: str
    translated_text: str
    target_language: str
    source_language: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class SummaryContent:
    summary: str
    key_points: list[str] = field(default_factory=list)
    risk_level: str = ""
    recommendations: list[str] = field(default_factory=list)
    key_risks: list[str] | None = None
    obligations: list[str] | None = None
    rights: list[str] | None = None
    ui_labels: dict[str, str] | None = None


@dataclass(frozen=True)
class TranslatedSummary(SummaryContent):
    language: str = ""


@dataclass(frozen=True)
class LanguageDetection:
    language: str
    confidence: float
