"""User settings for scopekit.

Stored in ~/.scopekit/config.json (or $SCOPEKIT_HOME/config.json).
"""

import json
import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from scopekit.domain.outline import DEFAULT_HEADING_WORDS

CONFIG_FILE_NAME = "config.json"


class AIProvider(str, Enum):
    """AI provider options."""
    CLAUDE = "claude"
    LOCAL = "local"  # Ollama


class Settings(BaseModel):
    """User preferences."""

    provider: AIProvider = AIProvider.LOCAL
    claude_model: str = "claude-sonnet-4-20250514"
    local_model: str = "qwen2.5-coder:7b"
    ollama_host: str | None = None
    max_output_tokens: int = Field(default=4000, gt=0)
    history_limit: int = Field(default=50, ge=1)
    heading_words: list[str] = Field(default_factory=lambda: list(DEFAULT_HEADING_WORDS))
    data_dir: Path | None = None  # defaults to <config dir>/data
    user: str = "anonymous"

    def resolved_data_dir(self) -> Path:
        return self.data_dir if self.data_dir is not None else get_config_dir() / "data"


def get_config_dir() -> Path:
    """Get the scopekit config directory."""
    override = os.environ.get("SCOPEKIT_HOME")
    config_dir = Path(override) if override else Path.home() / ".scopekit"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def load_settings() -> Settings:
    """Load settings, falling back to defaults if the file is unreadable."""
    config_file = get_config_dir() / CONFIG_FILE_NAME
    if config_file.exists():
        try:
            data = json.loads(config_file.read_text(encoding="utf-8"))
            return Settings(**data)
        except (json.JSONDecodeError, ValueError, TypeError):
            pass
    return Settings()  # defaults


def save_settings(settings: Settings) -> None:
    """Save settings."""
    config_file = get_config_dir() / CONFIG_FILE_NAME
    config_file.write_text(
        json.dumps(settings.model_dump(mode="json"), indent=2),
        encoding="utf-8",
    )
