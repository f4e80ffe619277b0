from dataclasses import dataclass, field
from datetime import datetime

from docintel.validation.models import ValidationResult


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of an upload: the verdict and, when admitted, the document id."""

    validation: ValidationResult
    document_id: str | None = None
    duplicate: bool = False


@dataclass(frozen=True)
class ServiceHealth:
    configured: bool
    reachable: bool | None = None  # None when not probed
    error_category: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class HealthReport:
    status: str  # healthy | degraded | unhealthy
    services: dict[str, ServiceHealth] = field(default_factory=dict)
    checked_at: datetime | None = None
