"""
Bootstrap pipeline.

Resets the scratch workspace, downloads and unpacks the release archive,
locates the tunnel binary, launches it and relays its output until it
exits. The first failing stage ends the run with a single log line; nothing
is retried.
"""

import asyncio
import logging
import shutil
import sys
from pathlib import Path
from typing import Awaitable, Callable

from .config import Config
from .errors import LocatorMiss, TunnelError
from .extractor import extract
from .fetcher import fetch
from .locator import find_file
from .process import TunnelProcess, launch
from .redactor import OutputRedactor

logger = logging.getLogger(__name__)


def build_argv(cfg: Config) -> list[str]:
    """
    Build the tunnel binary's argument vector.

    The order is fixed by the binary's flag parser. Unset values are passed
    as empty strings and left for the binary to reject.
    """
    return [
        "-i", cfg.server_ip or "",
        "--network-name", cfg.net_name or "",
        "--network-secret", cfg.net_secret or "",
        "-p", cfg.peer_url or "",
        "-n", "0.0.0.0/0",
        "--socks5", cfg.socks_port or "",
        "--no-tun",
    ]


def reset_workspace(path: Path):
    """Delete the workspace if present and recreate it empty."""
    path = Path(path)
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True)


def log_environment(cfg: Config):
    """Log the tunnel settings, masking the secret."""
    logger.info("=============== Environment check ===============")
    logger.info(f"1. Network name (ET_NET_NAME): {cfg.net_name}")
    logger.info(f"2. Secret (ET_NET_SECRET): {'****** (set)' if cfg.net_secret else '(not set)'}")
    logger.info(f"3. Peer URL (ET_PEER_URL): {cfg.peer_url}")
    logger.info(f"4. Bind IP (ET_SERVER_IP): {cfg.server_ip}")
    logger.info(f"5. SOCKS5 port (ET_SOCKS_PORT): {cfg.socks_port}")
    logger.info("=================================================")


def echo_line(line: str):
    """Forward a child stdout line verbatim to the host log stream."""
    sys.stdout.write(line + "\n")
    sys.stdout.flush()


class Orchestrator:
    """Runs the fetch, extract, locate, launch and supervise stages in order."""

    def __init__(
        self,
        cfg: Config,
        fetch: Callable[..., Awaitable[Path]] = fetch,
        extract: Callable[[Path, Path], list[Path]] = extract,
        locate: Callable[[Path, str], Path | None] = find_file,
        launch: Callable[[Path, list[str]], Awaitable[TunnelProcess]] = launch,
        emit: Callable[[str], None] = echo_line,
    ):
        self.config = cfg
        self._fetch = fetch
        self._extract = extract
        self._locate = locate
        self._launch = launch
        self._emit = emit
        self.stage: str | None = None
        self.error: TunnelError | None = None

    async def run(self) -> int | None:
        """Run the pipeline once. Returns the child's exit code, or None if a stage failed."""
        try:
            return await self._run_stages()
        except TunnelError as e:
            self.error = e
            logger.error(f"Startup failed during {self.stage}: {e}")
        except Exception as e:
            self.error = TunnelError(str(e))
            self.error.stage = self.stage
            logger.exception(f"Startup failed during {self.stage}: {e}")
        return None

    async def _run_stages(self) -> int:
        cfg = self.config

        self.stage = "workspace"
        await asyncio.to_thread(reset_workspace, cfg.workspace_dir)
        log_environment(cfg)

        self.stage = "download"
        await self._fetch(
            cfg.release_url,
            cfg.archive_path,
            max_redirects=cfg.max_redirects,
            timeout=cfg.download_timeout,
        )

        self.stage = "extract"
        await asyncio.to_thread(self._extract, cfg.archive_path, cfg.workspace_dir)

        self.stage = "locate"
        binary = await asyncio.to_thread(self._locate, cfg.workspace_dir, cfg.binary_name)
        if binary is None:
            raise LocatorMiss(f"{cfg.binary_name} not found in {cfg.workspace_dir}")
        logger.info(f"Found {cfg.binary_name} at {binary}")

        self.stage = "launch"
        child = await self._launch(binary, build_argv(cfg))

        self.stage = "supervise"
        return await child.supervise(OutputRedactor(self._emit))
