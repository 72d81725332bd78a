"""Configuration loading tests."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from config.settings import DEFAULT_PROMPT, AppConfig, load_config
from modules.errors import MissingCredentialError
from modules.pipelines import openai_client

ENV_VARS = (
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
    "OPENAI_IMAGE_MODEL",
    "OPENAI_VARIATION_MODEL",
    "HOST",
    "PORT",
    "API_BASE_URL",
    "REQUEST_TIMEOUT",
    "MASK_BYTE_LIMIT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # registered keys are restored on teardown, including ones load_config writes
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    yield


def test_defaults_without_env(tmp_path):
    config = load_config(str(tmp_path / "missing.env"))

    assert config.openai_key is None
    assert config.api_base_url == "http://127.0.0.1:7860"
    assert config.request_timeout == 120.0
    assert config.mask_byte_limit == 1024 * 1024
    assert config.default_prompt == DEFAULT_PROMPT


def test_env_file_is_loaded(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# comment\n"
        "OPENAI_API_KEY=sk-test\n"
        "PORT=9000\n"
        "REQUEST_TIMEOUT=15\n"
        "OPENAI_VARIATION_MODEL=dall-e-2\n"
        "not a pair\n",
        encoding="utf-8",
    )

    config = load_config(str(env_file))

    assert config.openai_key == "sk-test"
    assert config.port == 9000
    assert config.api_base_url == "http://127.0.0.1:9000"
    assert config.request_timeout == 15.0
    assert config.metadata["variation_model"] == "dall-e-2"


def test_bad_numbers_fall_back(tmp_path, monkeypatch):
    monkeypatch.setenv("PORT", "eighty")
    monkeypatch.setenv("API_BASE_URL", "http://api.internal:8000/")

    config = load_config(str(tmp_path / "missing.env"))

    assert config.port == 7860
    assert config.api_base_url == "http://api.internal:8000"


def test_missing_key_fails_fast():
    with pytest.raises(MissingCredentialError):
        openai_client.build_openai_client(AppConfig())


def test_client_receives_key_and_base_url(monkeypatch):
    captured = {}

    def fake_openai(**kwargs):
        captured.update(kwargs)
        return SimpleNamespace(**kwargs)

    monkeypatch.setattr(openai_client, "OpenAI", fake_openai)

    openai_client.build_openai_client(AppConfig(openai_key="sk-x", openai_base_url="https://proxy.test/v1"))

    assert captured == {"api_key": "sk-x", "base_url": "https://proxy.test/v1"}


def test_first_image_url_is_defensive():
    assert openai_client.first_image_url(SimpleNamespace(data=None)) == ""
    assert openai_client.first_image_url(SimpleNamespace()) == ""
    assert openai_client.first_image_url(SimpleNamespace(data=[SimpleNamespace(url="u")])) == "u"
