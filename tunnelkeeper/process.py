"""
Launcher for the tunnel binary.

Marks the extracted binary executable, spawns it with stdin inherited and
stdout/stderr piped, then relays both pipes until the process exits. Stdout
goes through the OutputRedactor; stderr is copied byte for byte. The process
is started once and its exit is only logged.
"""

import asyncio
import logging
import os
import sys
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Callable

from .errors import SpawnError
from .redactor import OutputRedactor

logger = logging.getLogger(__name__)

CHUNK_SIZE = 4096


@dataclass
class TunnelProcess:
    """A running tunnel binary."""

    executable: Path
    process: asyncio.subprocess.Process
    started_at: datetime = field(default_factory=datetime.now)

    @property
    def pid(self) -> int:
        return self.process.pid

    async def supervise(self, redactor: OutputRedactor, stderr_sink: BinaryIO = None) -> int:
        """Relay output until both pipes close, then wait for and log the exit code."""
        if stderr_sink is None:
            stderr_sink = sys.stderr.buffer

        def write_stderr(chunk: bytes):
            stderr_sink.write(chunk)
            stderr_sink.flush()

        try:
            await asyncio.gather(
                self._relay(self.process.stdout, redactor.feed, "stdout", on_eof=redactor.flush),
                self._relay(self.process.stderr, write_stderr, "stderr"),
            )
        finally:
            code = await self.process.wait()

        runtime = (datetime.now() - self.started_at).total_seconds()
        logger.info(
            f"Tunnel process exited with code {code} after {runtime:.1f}s "
            f"({redactor.forwarded} lines forwarded, {redactor.regions} sensitive block(s) hidden)"
        )
        return code

    async def _relay(self, stream, handle: Callable[[bytes], None], label: str, on_eof: Callable[[], None] = None):
        """Pass chunks to ``handle`` until EOF. After a handler error the pipe is still drained."""
        failed = False
        while True:
            chunk = await stream.read(CHUNK_SIZE)
            if not chunk:
                break
            if failed:
                continue
            try:
                handle(chunk)
            except Exception as e:
                failed = True
                logger.error(f"Relaying tunnel {label} failed, discarding further output: {e}")

        if on_eof is not None and not failed:
            try:
                on_eof()
            except Exception as e:
                logger.error(f"Relaying tunnel {label} failed at end of stream: {e}")


def make_executable(path: Path):
    """Set mode 0755; extraction does not keep the archived mode."""
    try:
        os.chmod(path, 0o755)
    except OSError as e:
        raise SpawnError(f"Cannot mark {path} executable: {e}") from e


async def launch(executable: Path, argv: list[str]) -> TunnelProcess:
    """Start ``executable`` with ``argv``. Raises SpawnError if it cannot be executed."""
    executable = Path(executable)
    make_executable(executable)
    logger.info("Starting tunnel (output redaction enabled)...")

    try:
        process = await asyncio.create_subprocess_exec(
            str(executable),
            *argv,
            stdin=None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise SpawnError(f"Cannot execute {executable.name}: {e}") from e

    logger.info(f"Started {executable.name} with PID {process.pid}")
    return TunnelProcess(executable=executable, process=process)
