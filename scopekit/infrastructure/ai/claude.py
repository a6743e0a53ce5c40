"""Claude client wrapper using the Anthropic SDK.

Provider exceptions are converted to ``Err`` messages; nothing is retried.
"""

import logging
import os

import anthropic

from scopekit.application.ports import DEFAULT_MAX_OUTPUT_TOKENS
from scopekit.domain.shared.result import Err, Ok, Result

logger = logging.getLogger(__name__)

DEFAULT_CLAUDE_MODEL = "claude-sonnet-4-20250514"

# Instruction appended to the system prompt for structured calls
JSON_ONLY_INSTRUCTION = "Respond with a single JSON object and nothing else."


class ClaudeClient:
    """Text generator backed by the Anthropic Messages API."""

    def __init__(self, model: str = DEFAULT_CLAUDE_MODEL, api_key: str | None = None) -> None:
        self._model = model
        self._api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self._client: anthropic.Anthropic | None = None

    @property
    def model(self) -> str:
        return self._model

    def _get_client(self) -> anthropic.Anthropic:
        if self._client is None:
            self._client = anthropic.Anthropic(api_key=self._api_key)
        return self._client

    def _run(self, prompt: str, system: str | None, max_tokens: int) -> Result[str, str]:
        if not self._api_key:
            return Err("ANTHROPIC_API_KEY not set")

        kwargs: dict = {
            "model": self._model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system

        try:
            message = self._get_client().messages.create(**kwargs)
        except anthropic.APIConnectionError:
            return Err("Could not connect to Anthropic API")
        except anthropic.RateLimitError:
            return Err("Rate limit exceeded. Please wait and try again.")
        except anthropic.APIStatusError as e:
            return Err(f"API error {e.status_code}: {e.message}")
        except anthropic.AnthropicError as e:
            return Err(f"{type(e).__name__}: {e}")

        text = "".join(block.text for block in message.content if block.type == "text")
        if message.stop_reason == "max_tokens":
            logger.warning(f"Claude response hit the {max_tokens} token limit")
        return Ok(text.strip())

    def generate(
        self,
        prompt: str,
        system_instructions: str | None = None,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
    ) -> Result[str, str]:
        return self._run(prompt, system_instructions, max_output_tokens)

    def generate_structured(
        self,
        prompt: str,
        system_instructions: str | None = None,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
    ) -> Result[str, str]:
        system = JSON_ONLY_INSTRUCTION
        if system_instructions:
            system = f"{system_instructions}\n\n{JSON_ONLY_INSTRUCTION}"
        return self._run(prompt, system, max_output_tokens)
