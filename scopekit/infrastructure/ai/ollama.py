"""Ollama client wrapper with Result-based error handling.

Runs outline and alternative generation against a local Ollama server.
"""

import logging

import ollama

from scopekit.application.ports import DEFAULT_MAX_OUTPUT_TOKENS
from scopekit.domain.shared.result import Err, Ok, Result

logger = logging.getLogger(__name__)

DEFAULT_LOCAL_MODEL = "qwen2.5-coder:7b"


class OllamaClient:
    """Text generator backed by a local Ollama model.

    Example:
        client = OllamaClient()
        if client.is_available():
            result = client.generate("Break down: plan a garden")
            if isinstance(result, Ok):
                outline = result.value
    """

    def __init__(self, model: str = DEFAULT_LOCAL_MODEL, host: str | None = None) -> None:
        """Initialize the Ollama client.

        Args:
            model: Model to generate with.
            host: Ollama server URL. Uses the library default if not provided.
        """
        self._model = model
        self._client = ollama.Client(host=host)
        self._available: bool | None = None

    @property
    def model(self) -> str:
        return self._model

    def is_available(self) -> bool:
        """Check if the Ollama server is reachable."""
        if self._available is not None:
            return self._available

        try:
            self._client.list()
            self._available = True
        except Exception:
            self._available = False

        return self._available

    def _run(self, prompt: str, system: str | None, options: dict, json_format: bool) -> Result[str, str]:
        kwargs: dict = {"model": self._model, "prompt": prompt, "options": options}
        if system:
            kwargs["system"] = system
        if json_format:
            kwargs["format"] = "json"

        try:
            response = self._client.generate(**kwargs)
            return Ok(response["response"].strip())

        except Exception as e:
            logger.error(f"Ollama generation with {self._model} failed: {e}")
            return Err(f"Generation error: {e}")

    def generate(
        self,
        prompt: str,
        system_instructions: str | None = None,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
    ) -> Result[str, str]:
        """Generate text.

        Args:
            prompt: Prompt to send to the model.
            system_instructions: Optional system prompt.
            max_output_tokens: Maximum tokens to generate.

        Returns:
            Ok(str) with generated text if successful,
            Err(str) with error message if failed.
        """
        return self._run(
            prompt, system_instructions, {"num_predict": max_output_tokens}, json_format=False
        )

    def generate_structured(
        self,
        prompt: str,
        system_instructions: str | None = None,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
    ) -> Result[str, str]:
        """Generate a response constrained to JSON output."""
        return self._run(
            prompt,
            system_instructions,
            {"num_predict": max_output_tokens},
            json_format=True,
        )
