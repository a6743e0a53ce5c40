"""AI infrastructure for scopekit.

Provides text generators for the local (Ollama) and hosted (Claude)
providers with Result-based error handling.
"""

from scopekit.application.ports import TextGenerator
from scopekit.config import AIProvider, Settings
from scopekit.infrastructure.ai.claude import ClaudeClient
from scopekit.infrastructure.ai.ollama import OllamaClient


def create_generator(settings: Settings) -> TextGenerator:
    """Build the text generator selected in ``settings``."""
    if settings.provider == AIProvider.CLAUDE:
        return ClaudeClient(model=settings.claude_model)
    return OllamaClient(model=settings.local_model, host=settings.ollama_host)


__all__ = [
    "OllamaClient",
    "ClaudeClient",
    "create_generator",
]
