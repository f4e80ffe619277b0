from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class ContextSection:
    """A citable piece of an analyzed document."""

    id: str
    title: str
    text: str

    def render(self) -> str:
        return f"[{self.id}] {self.title}\n{self.text}"


@dataclass(frozen=True)
class ChatExchange:
    query: str
    response: str
    confidence: float
    sources: list[str] = field(default_factory=list)
    timestamp: datetime | None = None
