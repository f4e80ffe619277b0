"""Example completion client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseCompletionClient and register the provider in CompletionClientFactory.
"""

import json
from typing import ClassVar

from docintel.completion.client_base import BaseCompletionClient


class ExampleClientAdapter(BaseCompletionClient):
    """Example adapter that returns fixed, schema-valid JSON.

    No network calls. The response is picked by the ``title`` of the
    requested JSON schema, which makes it usable for local development of
    classification, analysis and chat alike.
    """

    RESPONSES: ClassVar[dict[str, dict[str, object]]] = {
        "classification_result": {
            "isLegal": True,
            "documentType": "general_legal",
            "confidence": 0.75,
        },
        "analysis_result": {
            "documentType": "general_legal",
            "summary": "Example analysis generated without an AI provider.",
            "keyTerms": [],
            "clauses": [],
            "risks": [],
            "obligations": [],
            "rights": [],
            "recommendations": [],
            "riskScore": 0,
            "confidence": 0.5,
        },
        "chat_answer": {
            "answer": "Example answer generated without an AI provider.",
            "confidence": 0.5,
            "citations": [],
        },
    }

    async def complete(
        self,
        *,
        prompt: str,
        context: str = "",
        system_prompt: str = "",
        temperature: float = 0.0,
        json_schema: dict[str, object] | None = None,
    ) -> str:
        _ = prompt, context, system_prompt, temperature
        title = str((json_schema or {}).get("title", ""))
        return json.dumps(self.RESPONSES.get(title, {}))
