"""
Output redaction for the tunnel binary's stdout.

At startup the tunnel binary prints its effective configuration as a TOML
block framed by a header line and a line of dashes. That block may contain
the network secret, so everything between the two markers is replaced by a
single placeholder line before it reaches the host log.

Chunks from the pipe are not line aligned; a carry-over buffer holds the
trailing partial line until its newline (or the end of the stream) arrives.
"""

import logging
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)

START_MARKER = "############### TOML ###############"
END_MARKER = "-----------------------------------"
PLACEHOLDER = "############### [sensitive configuration hidden] ###############"


class RedactionState(Enum):
    PASSTHROUGH = "passthrough"
    SUPPRESSED = "suppressed"


class OutputRedactor:
    """Line filter that hides the marked configuration block."""

    def __init__(self, emit: Callable[[str], None]):
        self._emit = emit
        self._buffer = bytearray()
        self.state = RedactionState.PASSTHROUGH
        self.forwarded = 0
        self.suppressed = 0
        self.regions = 0

    @property
    def suppressing(self) -> bool:
        return self.state is RedactionState.SUPPRESSED

    def feed(self, chunk: bytes):
        """Process every complete line in ``chunk``; keep the remainder for later."""
        self._buffer.extend(chunk)
        while True:
            newline = self._buffer.find(b"\n")
            if newline < 0:
                break
            raw = bytes(self._buffer[:newline])
            del self._buffer[: newline + 1]
            self._process(raw)

    def flush(self):
        """Process a trailing line that never got its newline."""
        if self._buffer:
            raw = bytes(self._buffer)
            self._buffer.clear()
            self._process(raw)

    def _process(self, raw: bytes):
        line = raw.decode("utf-8", errors="replace").rstrip("\r")

        if START_MARKER in line:
            if self.state is RedactionState.PASSTHROUGH:
                self.state = RedactionState.SUPPRESSED
                self.regions += 1
                self._emit(PLACEHOLDER)
            self.suppressed += 1
            return

        if END_MARKER in line:
            if self.state is RedactionState.SUPPRESSED:
                logger.debug("Sensitive block closed")
            self.state = RedactionState.PASSTHROUGH
            self.suppressed += 1
            return

        if self.state is RedactionState.SUPPRESSED:
            self.suppressed += 1
            return

        if line.strip():
            self.forwarded += 1
            self._emit(line)
