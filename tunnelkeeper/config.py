"""
Configuration for the tunnel bootstrapper.

Loads settings from environment variables with sensible defaults. The tunnel
values (ET_*) are forwarded to the tunnel binary without validation.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

INSTALL_DIR = Path(__file__).resolve().parent.parent

DEFAULT_RELEASE_URL = (
    "https://github.com/EasyTier/EasyTier/releases/download/v2.4.5/"
    "easytier-linux-x86_64-v2.4.5.zip"
)


def _env(name: str) -> str | None:
    """Read an optional variable; empty strings count as unset."""
    value = os.environ.get(name)
    return value if value else None


def _env_float(name: str) -> float | None:
    value = _env(name)
    return float(value) if value is not None else None


@dataclass
class Config:
    """Tunnel bootstrapper configuration."""

    # Tunnel (forwarded verbatim, never validated)
    net_name: str | None = field(default_factory=lambda: _env("ET_NET_NAME"))
    net_secret: str | None = field(default_factory=lambda: _env("ET_NET_SECRET"))
    peer_url: str | None = field(default_factory=lambda: _env("ET_PEER_URL"))
    server_ip: str | None = field(default_factory=lambda: _env("ET_SERVER_IP"))
    socks_port: str | None = field(default_factory=lambda: _env("ET_SOCKS_PORT"))

    # Release
    release_url: str = field(default_factory=lambda: os.environ.get("RELEASE_URL", DEFAULT_RELEASE_URL))
    archive_name: str = field(default_factory=lambda: os.environ.get("ARCHIVE_NAME", "easytier.zip"))
    binary_name: str = field(default_factory=lambda: os.environ.get("BINARY_NAME", "easytier-core"))
    max_redirects: int = field(default_factory=lambda: int(os.environ.get("MAX_REDIRECTS", "5")))
    download_timeout: float | None = field(default_factory=lambda: _env_float("DOWNLOAD_TIMEOUT"))

    # Paths
    workspace_dir: Path = None
    assets_dir: Path = None

    # Web server
    host: str = field(default_factory=lambda: os.environ.get("WEB_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.environ.get("WEB_PORT", "7860")))

    # Identity announced at startup
    identity: str = field(default_factory=lambda: os.environ.get("PROCESS_IDENTITY", "Coral-Station"))

    # Logging
    log_level: str = field(default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper())
    log_file: str | None = field(default_factory=lambda: _env("LOG_FILE"))
    log_max_bytes: int = field(
        default_factory=lambda: int(os.environ.get("LOG_MAX_BYTES", str(10 * 1024 * 1024)))  # 10MB
    )
    log_backup_count: int = field(default_factory=lambda: int(os.environ.get("LOG_BACKUP_COUNT", "5")))

    def __post_init__(self):
        """Resolve derived paths. Nothing is created here; the workspace is reset per run."""
        if self.workspace_dir is None:
            self.workspace_dir = Path(os.environ.get("WORKSPACE_DIR", str(INSTALL_DIR / "temp_src")))
        if self.assets_dir is None:
            self.assets_dir = Path(os.environ.get("ASSETS_DIR", str(INSTALL_DIR)))
        self.workspace_dir = Path(self.workspace_dir)
        self.assets_dir = Path(self.assets_dir)

    @property
    def archive_path(self) -> Path:
        return self.workspace_dir / self.archive_name

    @classmethod
    def from_env(cls) -> "Config":
        """Build a fresh configuration from the current environment."""
        return cls()


config = Config()
