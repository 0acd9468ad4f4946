# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""Tests for ClientConfig validation and environment loading."""

from pathlib import Path

import pytest

from spotiquiz.src.config.client_config import ClientConfig
from spotiquiz.src.monitoring.core.exceptions import ConfigurationError


ENV_VARS = [
    "SPOTIQUIZ_API_URL",
    "SPOTIQUIZ_WS_URL",
    "SPOTIQUIZ_STATE_FILE",
    "SPOTIQUIZ_REQUEST_TIMEOUT",
    "SPOTIQUIZ_CONNECT_TIMEOUT",
    "SPOTIFY_API_URL",
    "USE_MOCK_PLAYBACK",
    "LOG_LEVEL",
    "LOG_FILE",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestClientConfig:

    def test_defaults(self):
        config = ClientConfig()

        assert config.api_url == "http://localhost:8080"
        assert config.ws_url == "ws://localhost:8080"
        assert config.request_timeout == 10.0
        assert config.use_mock_playback is False

    def test_ws_url_derived_from_https(self):
        config = ClientConfig(api_url="https://quiz.example.com/")

        assert config.api_url == "https://quiz.example.com"
        assert config.ws_url == "wss://quiz.example.com"

    def test_explicit_ws_url_is_kept(self):
        config = ClientConfig(ws_url="wss://live.example.com/")
        assert config.ws_url == "wss://live.example.com"

    def test_state_file_expands_user(self):
        config = ClientConfig(state_file=Path("~/state.json"))
        assert "~" not in str(config.state_file)

    @pytest.mark.parametrize("kwargs", [
        {"api_url": "localhost:8080"},
        {"ws_url": "ftp://example.com"},
        {"request_timeout": 0},
        {"connect_timeout": -1},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ConfigurationError):
            ClientConfig(**kwargs)


class TestFromEnv:

    def test_from_env(self, clean_env, tmp_path):
        clean_env.setenv("SPOTIQUIZ_API_URL", "https://api.example.com")
        clean_env.setenv("SPOTIQUIZ_STATE_FILE", str(tmp_path / "state.json"))
        clean_env.setenv("SPOTIQUIZ_REQUEST_TIMEOUT", "2.5")
        clean_env.setenv("USE_MOCK_PLAYBACK", "TRUE")
        clean_env.setenv("LOG_LEVEL", "DEBUG")

        config = ClientConfig.from_env()

        assert config.api_url == "https://api.example.com"
        assert config.ws_url == "wss://api.example.com"
        assert config.state_file == tmp_path / "state.json"
        assert config.request_timeout == 2.5
        assert config.use_mock_playback is True
        assert config.log_level == "DEBUG"
        assert config.log_file is None

    def test_from_env_defaults(self, clean_env):
        config = ClientConfig.from_env()
        assert config == ClientConfig()

    def test_invalid_timeout(self, clean_env):
        clean_env.setenv("SPOTIQUIZ_CONNECT_TIMEOUT", "fast")

        with pytest.raises(ConfigurationError):
            ClientConfig.from_env()
