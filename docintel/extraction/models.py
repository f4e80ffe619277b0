from dataclasses import dataclass, field


@dataclass(frozen=True)
class Entity:
    type: str
    mention_text: str
    confidence: float = 0.0


@dataclass(frozen=True)
class ExtractedText:
    """Text recovered from a document together with extraction quality."""

    text: str
    confidence: float
    entities: list[Entity] = field(default_factory=list)
