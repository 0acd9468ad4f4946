# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Client Configuration.

Endpoints, timeouts and local state location for the room client. Values come
from environment variables so the same build can target a local room service
or a deployed one.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from spotiquiz.src.monitoring.core.exceptions import ConfigurationError

DEFAULT_API_URL = "http://localhost:8080"
DEFAULT_SPOTIFY_API_URL = "https://api.spotify.com/v1"
DEFAULT_STATE_FILE = Path.home() / ".spotiquiz" / "state.json"


def _derive_ws_url(api_url: str) -> str:
    """Map an http(s) base URL onto the matching ws(s) scheme."""
    if api_url.startswith("https://"):
        return "wss://" + api_url[len("https://"):]
    if api_url.startswith("http://"):
        return "ws://" + api_url[len("http://"):]
    return api_url


@dataclass
class ClientConfig:
    """
    Configuration for one client process.

    Attributes:
        api_url: Base URL of the room service request/response API
        ws_url: Base URL of the room service live channel
        state_file: Path of the persisted client state (identity, token, ...)
        request_timeout: Seconds before an HTTP call is abandoned
        connect_timeout: Seconds allowed for the channel handshake
        spotify_api_url: Base URL of the playback control API
        use_mock_playback: Use the in-process mock playback device
        log_level: Root log level name
        log_file: Optional log file path
    """
    api_url: str = DEFAULT_API_URL
    ws_url: Optional[str] = None
    state_file: Path = DEFAULT_STATE_FILE
    request_timeout: float = 10.0
    connect_timeout: float = 10.0
    spotify_api_url: str = DEFAULT_SPOTIFY_API_URL
    use_mock_playback: bool = False
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def __post_init__(self):
        """Validate and normalize configuration."""
        if not self.api_url.startswith(("http://", "https://")):
            raise ConfigurationError(f"api_url must be an http(s) URL, got {self.api_url!r}")

        self.api_url = self.api_url.rstrip("/")
        self.ws_url = (self.ws_url or _derive_ws_url(self.api_url)).rstrip("/")
        if not self.ws_url.startswith(("ws://", "wss://", "http://", "https://")):
            raise ConfigurationError(f"ws_url must be a ws(s) URL, got {self.ws_url!r}")

        if self.request_timeout <= 0:
            raise ConfigurationError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.connect_timeout <= 0:
            raise ConfigurationError(f"connect_timeout must be positive, got {self.connect_timeout}")

        self.state_file = Path(self.state_file).expanduser()
        self.spotify_api_url = self.spotify_api_url.rstrip("/")

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """
        Build configuration from environment variables.

        Returns:
            ClientConfig with defaults for anything unset

        Raises:
            ConfigurationError: If a numeric variable cannot be parsed
        """
        try:
            request_timeout = float(os.getenv("SPOTIQUIZ_REQUEST_TIMEOUT", "10"))
            connect_timeout = float(os.getenv("SPOTIQUIZ_CONNECT_TIMEOUT", "10"))
        except ValueError as e:
            raise ConfigurationError(f"Invalid timeout value: {e}") from e

        return cls(
            api_url=os.getenv("SPOTIQUIZ_API_URL", DEFAULT_API_URL),
            ws_url=os.getenv("SPOTIQUIZ_WS_URL") or None,
            state_file=Path(os.getenv("SPOTIQUIZ_STATE_FILE", str(DEFAULT_STATE_FILE))),
            request_timeout=request_timeout,
            connect_timeout=connect_timeout,
            spotify_api_url=os.getenv("SPOTIFY_API_URL", DEFAULT_SPOTIFY_API_URL),
            use_mock_playback=os.getenv("USE_MOCK_PLAYBACK", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE") or None,
        )
