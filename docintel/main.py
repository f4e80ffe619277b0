import asyncio
import dataclasses
import json
from pathlib import Path
from typing import Any

import typer

from docintel.config.settings import Settings
from docintel.documents.models import Document
from docintel.logging.logger import Log
from docintel.service.factory import build_service
from docintel.service.orchestrator import DocumentIntelligenceService

app = typer.Typer(
    name="docintel",
    help="Legal document validation, analysis, chat and translation",
    add_completion=False,
)


def _build() -> DocumentIntelligenceService:
    settings = Settings()
    Log.configure(settings.log_level)
    return build_service(settings)


def _echo(value: Any) -> None:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = dataclasses.asdict(value)
    elif isinstance(value, list):
        value = [dataclasses.asdict(item) if dataclasses.is_dataclass(item) else item for item in value]
    typer.echo(json.dumps(value, indent=2, default=str, ensure_ascii=False))


def _document_view(document: Document) -> dict[str, Any]:
    view = dataclasses.asdict(document)
    view.pop("raw_content", None)
    view.pop("extracted_text", None)
    return view


async def _submit_and_wait(
    service: DocumentIntelligenceService, path: Path, mime_type: str
) -> Document | None:
    result = await service.submit(path.read_bytes(), path.name, mime_type)
    _echo(dataclasses.replace(result.validation, extracted_text=""))
    if result.document_id is None:
        return None
    return await service.wait_for_analysis(result.document_id)


@app.command()
def analyze(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Document to analyze"),
    mime_type: str = typer.Option("", help="Declared MIME type"),
) -> None:
    """Validate a document and print its analysis."""
    service = _build()
    document = asyncio.run(_submit_and_wait(service, path, mime_type))
    if document is None:
        raise typer.Exit(code=1)
    _echo(_document_view(document))


@app.command()
def ask(
    question: str = typer.Argument(..., help="Question about the document"),
    path: Path | None = typer.Option(None, exists=True, dir_okay=False, help="Document to ask about"),
    mime_type: str = typer.Option("", help="Declared MIME type"),
) -> None:
    """Analyze a document (or the built-in sample lease) and answer a question."""
    service = _build()

    async def run() -> None:
        if path is None:
            document_id = service.create_test_document()
        else:
            document = await _submit_and_wait(service, path, mime_type)
            if document is None:
                raise typer.Exit(code=1)
            document_id = document.id
        _echo(await service.query(document_id, question))

    asyncio.run(run())


@app.command()
def translate(
    text: str = typer.Argument(..., help="Text to translate"),
    target: str = typer.Option(..., "--target", "-t", help="Target language code"),
    source: str | None = typer.Option(None, "--source", "-s", help="Source language code"),
) -> None:
    """Translate a text into one of the supported languages."""
    service = _build()
    payload = {"text": text, "targetLanguage": target, "sourceLanguage": source}
    _echo(asyncio.run(service.translate("translateText", payload)))


@app.command()
def languages() -> None:
    """List the supported translation languages."""
    service = _build()
    _echo(asyncio.run(service.translate("getSupportedLanguages", {})))


@app.command()
def health() -> None:
    """Report configuration and reachability of external services."""
    service = _build()
    report = asyncio.run(service.health())
    _echo(report)
    if report.status == "unhealthy":
        raise typer.Exit(code=1)


def main() -> None:
    """Entry point: configure from the environment and run the CLI."""
    app()


if __name__ == "__main__":
    main()
