import json

from docintel.completion.exceptions import CompletionError


def parse_json_object(raw: str) -> dict[str, object]:
    """Parse a model response that should contain one JSON object.

    Strips markdown code fences; if the text around the object is chatty,
    retries with the outermost ``{...}`` span.

    Raises:
        CompletionError: if no JSON object can be recovered.
    """
    cleaned = _strip_code_fences(raw.strip())
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        start = cleaned.find("{")
        end = cleaned.rfind("}")
        if start == -1 or end <= start:
            raise CompletionError(f"Invalid JSON response: {exc}") from exc
        try:
            parsed = json.loads(cleaned[start : end + 1])
        except json.JSONDecodeError as inner:
            raise CompletionError(f"Invalid JSON response: {inner}") from inner

    if not isinstance(parsed, dict):
        raise CompletionError("JSON response must be an object")
    return parsed


def clamp_unit(value: object, default: float = 0.0) -> tuple[float, bool]:
    """Clamp a numeric confidence into [0, 1].

    Returns the clamped value and whether the input was out of range or
    not a number.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default, value is not None
    if 0.0 <= value <= 1.0:
        return float(value), False
    return max(0.0, min(1.0, float(value))), True


def _strip_code_fences(text: str) -> str:
    if not text.startswith("```"):
        return text
    lines = text.splitlines()
    if lines and lines[0].startswith("```"):
        lines = lines[1:]
    if lines and lines[-1].strip() == "```":
        lines = lines[:-1]
    return "\n".join(lines)
