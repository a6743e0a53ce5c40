"""Tests for user settings."""

import pytest

from scopekit.config import (
    AIProvider,
    Settings,
    get_config_dir,
    load_settings,
    save_settings,
)
from scopekit.domain.outline import DEFAULT_HEADING_WORDS
from scopekit.infrastructure.ai import ClaudeClient, OllamaClient, create_generator


@pytest.fixture(autouse=True)
def scopekit_home(tmp_path, monkeypatch):
    monkeypatch.setenv("SCOPEKIT_HOME", str(tmp_path / "home"))
    return tmp_path / "home"


def test_config_dir_is_created(scopekit_home):
    assert get_config_dir() == scopekit_home
    assert scopekit_home.is_dir()


def test_defaults():
    settings = load_settings()
    assert settings.provider == AIProvider.LOCAL
    assert settings.history_limit == 50
    assert settings.heading_words == list(DEFAULT_HEADING_WORDS)


def test_data_dir_defaults_under_config_dir(scopekit_home):
    assert Settings().resolved_data_dir() == scopekit_home / "data"


def test_round_trip(tmp_path):
    save_settings(
        Settings(provider=AIProvider.CLAUDE, history_limit=5, data_dir=tmp_path / "elsewhere")
    )
    loaded = load_settings()
    assert loaded.provider == AIProvider.CLAUDE
    assert loaded.history_limit == 5
    assert loaded.resolved_data_dir() == tmp_path / "elsewhere"


def test_corrupt_file_gives_defaults(scopekit_home):
    get_config_dir()
    (scopekit_home / "config.json").write_text("{oops", encoding="utf-8")
    assert load_settings() == Settings()


def test_invalid_value_gives_defaults(scopekit_home):
    get_config_dir()
    (scopekit_home / "config.json").write_text('{"history_limit": 0}', encoding="utf-8")
    assert load_settings().history_limit == 50


def test_create_generator_follows_provider():
    assert isinstance(create_generator(Settings()), OllamaClient)
    claude = create_generator(Settings(provider=AIProvider.CLAUDE, claude_model="claude-x"))
    assert isinstance(claude, ClaudeClient)
    assert claude.model == "claude-x"
