import json
from pathlib import Path

from docintel.completion.exceptions import CompletionError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(name: str, prompt_dir: Path | None = None) -> str:
    """Load a prompt template bundled with the package.

    Args:
        name: Template file stem, e.g. "analysis" for analysis_prompt.txt.
        prompt_dir: Directory to read from. Defaults to the bundled prompts.

    Raises:
        CompletionError: if the file cannot be read.
    """
    path = (prompt_dir or _DEFAULT_PROMPT_DIR) / f"{name}_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CompletionError(f"Failed to load prompt template: {exc}") from exc


def load_json_schema(name: str, prompt_dir: Path | None = None) -> dict[str, object]:
    """Load and parse a bundled JSON schema, e.g. "analysis" for analysis_schema.json.

    Raises:
        CompletionError: if the file cannot be read or is not a JSON object.
    """
    path = (prompt_dir or _DEFAULT_PROMPT_DIR) / f"{name}_schema.json"
    try:
        schema = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise CompletionError(f"Failed to load JSON schema: {exc}") from exc
    if not isinstance(schema, dict):
        raise CompletionError(f"JSON schema {path.name} must be an object")
    return schema
