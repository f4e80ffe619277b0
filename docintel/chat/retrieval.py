"""Lexical retrieval of document sections relevant to a question."""

import re

from docintel.chat.models import ContextSection
from docintel.documents.models import DocumentProcessing

_WORD = re.compile(r"[a-z0-9$%]+")

STOP_WORDS = frozenset(
    {
        "a", "about", "an", "and", "any", "are", "as", "at", "be", "by", "can", "do",
        "does", "for", "from", "how", "i", "if", "in", "is", "it", "me", "my", "of",
        "on", "or", "should", "that", "the", "there", "this", "to", "was", "what",
        "when", "where", "which", "who", "why", "will", "with", "you", "your",
    }
)

_SUFFIXES = ("ing", "ies", "ed", "es", "ly", "s")


def build_sections(processing: DocumentProcessing) -> list[ContextSection]:
    """Flatten an analysis into citable sections with stable identifiers."""
    summary_text = processing.summary.text
    if processing.summary.key_terms:
        summary_text += "\nKey terms: " + ", ".join(processing.summary.key_terms)
    sections = [ContextSection(id="summary", title="Summary", text=summary_text)]

    for clause in processing.clauses:
        text = clause.original_text
        if clause.plain_language:
            text += f"\nIn plain language: {clause.plain_language}"
        sections.append(ContextSection(id=clause.id, title=clause.title, text=text))

    for risk in processing.risks:
        text = f"Severity: {risk.severity}. {risk.rationale}"
        if risk.recommendation:
            text += f"\nRecommendation: {risk.recommendation}"
        sections.append(ContextSection(id=risk.id, title=risk.title, text=text))

    for index, obligation in enumerate(processing.obligations, start=1):
        text = obligation.description
        if obligation.deadline:
            text += f" (deadline: {obligation.deadline})"
        sections.append(
            ContextSection(
                id=f"obligation-{index}", title=f"Obligation of {obligation.party}", text=text
            )
        )

    for index, right in enumerate(processing.rights, start=1):
        sections.append(
            ContextSection(
                id=f"right-{index}", title=f"Right of {right.party}", text=right.description
            )
        )
    return sections


def tokenize(text: str) -> set[str]:
    """Lowercased, stop-word-free, lightly stemmed terms."""
    return {_stem(word) for word in _WORD.findall(text.lower()) if word not in STOP_WORDS}


def score_section(section: ContextSection, query_terms: set[str]) -> int:
    """Term overlap with the query; title hits weigh double."""
    if not query_terms:
        return 0
    title_hits = len(query_terms & tokenize(section.title))
    body_hits = len(query_terms & tokenize(section.text))
    return 2 * title_hits + body_hits


def select_sections(
    sections: list[ContextSection],
    query: str,
    *,
    max_sections: int,
    max_chars: int,
) -> list[ContextSection]:
    """Pick the best-matching sections within the section and character caps.

    Ties keep document order. When nothing matches, the leading sections
    (summary first) are used so the model still sees the document.
    """
    query_terms = tokenize(query)
    scored = [
        (score_section(section, query_terms), position, section)
        for position, section in enumerate(sections)
    ]
    ranked = [entry for entry in scored if entry[0] > 0]
    ranked.sort(key=lambda entry: (-entry[0], entry[1]))
    candidates = [section for _, _, section in ranked] or list(sections)

    selected: list[ContextSection] = []
    used_chars = 0
    for section in candidates:
        if len(selected) >= max_sections:
            break
        size = len(section.render())
        if used_chars + size > max_chars:
            if selected:
                continue
            section = ContextSection(
                id=section.id, title=section.title, text=section.text[: max(0, max_chars - 64)]
            )
            size = len(section.render())
        selected.append(section)
        used_chars += size
    return selected


def render_context(sections: list[ContextSection]) -> str:
    return "\n\n".join(section.render() for section in sections)


def _stem(word: str) -> str:
    if len(word) <= 3:
        return word
    for suffix in _SUFFIXES:
        if word.endswith(suffix) and len(word) - len(suffix) >= 3:
            if suffix == "ies":
                return word[: -len(suffix)] + "y"
            return word[: -len(suffix)]
    return word
