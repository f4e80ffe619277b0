from docintel.completion.client_base import BaseCompletionClient
from docintel.completion.factory import CompletionClientFactory

__all__ = ["BaseCompletionClient", "CompletionClientFactory"]
