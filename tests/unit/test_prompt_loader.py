from pathlib import Path

import pytest

from docintel.completion.exceptions import CompletionError
from docintel.completion.prompt_loader import load_json_schema, load_prompt_template


class TestLoadPromptTemplate:
    @pytest.mark.parametrize(
        ("name", "placeholders"),
        [
            ("classification", ["{filename}", "{document_text}", "{json_schema}"]),
            ("analysis", ["{document_type}", "{document_text}", "{json_schema}"]),
            ("chat", ["{query}", "{json_schema}"]),
        ],
    )
    def test_bundled_templates_have_placeholders(
        self, name: str, placeholders: list[str]
    ) -> None:
        template = load_prompt_template(name)
        for placeholder in placeholders:
            assert placeholder in template

    def test_loads_custom_template(self, tmp_path: Path) -> None:
        (tmp_path / "custom_prompt.txt").write_text("Hello {query}")
        assert load_prompt_template("custom", tmp_path) == "Hello {query}"

    def test_missing_file_raises_error(self) -> None:
        with pytest.raises(CompletionError, match="Failed to load prompt"):
            load_prompt_template("missing", Path("/nonexistent"))


class TestLoadJsonSchema:
    @pytest.mark.parametrize(
        ("name", "title"),
        [
            ("classification", "classification_result"),
            ("analysis", "analysis_result"),
            ("chat", "chat_answer"),
        ],
    )
    def test_bundled_schemas_have_titles(self, name: str, title: str) -> None:
        assert load_json_schema(name)["title"] == title

    def test_rejects_non_object_schema(self, tmp_path: Path) -> None:
        (tmp_path / "bad_schema.json").write_text("[1]")
        with pytest.raises(CompletionError, match="must be an object"):
            load_json_schema("bad", tmp_path)

    def test_missing_file_raises_error(self) -> None:
        with pytest.raises(CompletionError, match="Failed to load JSON schema"):
            load_json_schema("missing", Path("/nonexistent"))
