"""
Configuration management for httpdiag.

Loads logging settings from environment variables or a .env file and
defines the immutable values the request pipeline is driven by.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

ENV_LOCATIONS = [
    Path.home() / ".httpdiag" / ".env",
    Path.home() / ".config" / "httpdiag" / ".env",
    Path.cwd() / ".env",
]


def load_env_file(locations: list[Path] | None = None) -> Path | None:
    """Load the first .env file found; returns its path."""
    for env_path in locations if locations is not None else ENV_LOCATIONS:
        if env_path.exists():
            load_dotenv(env_path)
            return env_path
    return None


@dataclass(frozen=True)
class TransportConfig:
    """Fixed transport defaults, not tunable from the command line."""
    max_idle_connections: int = 100
    idle_timeout: float = 90.0           # seconds before an idle connection expires
    tls_handshake_timeout: float = 10.0
    expect_continue_timeout: float = 1.0  # httpx never sends Expect: 100-continue
    http2: bool = True
    trust_env: bool = True               # proxy selection from HTTP(S)_PROXY / NO_PROXY
    min_tls_version: str = "TLSv1.2"


@dataclass(frozen=True)
class VisitConfig:
    """Parsed request configuration, built once by the CLI."""
    url: str
    method: str = "GET"
    body: str = ""
    headers: tuple[tuple[str, str], ...] = field(default_factory=tuple)
    show_connect_info: bool = False
    show_full_body: bool = False


@dataclass(frozen=True)
class Settings:
    """Process settings read from the environment."""
    log_level: str = "WARNING"
    log_file: str | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        load_env_file()
        return cls(
            log_level=os.getenv("HTTPDIAG_LOG_LEVEL", "WARNING"),
            log_file=os.getenv("HTTPDIAG_LOG_FILE") or None,
        )
