"""Pseudo-terminal transport for the auth session.

The session driver only needs three operations from a terminal: write
keystrokes, read the next chunk of output, and collect the exit status.
``PexpectTerminal`` provides them on top of ``pexpect.spawn`` (a real PTY
via ``pty.fork()``); tests provide scripted implementations.
"""

import asyncio
import logging
import os
from typing import Optional, Protocol, Tuple, runtime_checkable

import pexpect

logger = logging.getLogger(__name__)

# Terminal geometry (rows, cols)
DEFAULT_DIMENSIONS = (24, 80)

# Terminal type advertised to the child
TERM_OVERRIDE = 'xterm-256color'

# Read chunk size and poll interval (seconds)
READ_SIZE = 4096
READ_POLL_TIMEOUT = 0.5


@runtime_checkable
class Terminal(Protocol):
    """Protocol for an interactive child session behind a PTY."""

    def write(self, data: str) -> None:
        """Send raw keystrokes to the child."""
        ...

    async def read(self) -> Optional[str]:
        """Return the next chunk of output.

        Returns:
            Output text ('' when nothing arrived within the poll
            interval), or None once the child closed the terminal.
        """
        ...

    async def wait(self) -> Tuple[Optional[int], Optional[int]]:
        """Reap the child and return (exit_code, signal)."""
        ...


class PexpectTerminal:
    """Interactive shell spawned through pexpect.

    Inherits the working directory and environment of the current process
    with TERM overridden.
    """

    def __init__(
        self,
        shell: str = 'bash',
        dimensions: Tuple[int, int] = DEFAULT_DIMENSIONS,
        cwd: Optional[str] = None,
    ):
        env = dict(os.environ)
        env['TERM'] = TERM_OVERRIDE
        self.child = pexpect.spawn(
            shell,
            [],
            dimensions=dimensions,
            cwd=cwd or os.getcwd(),
            env=env,
            encoding='utf-8',
            codec_errors='replace',
        )
        logger.debug(f"Spawned {shell} (pid {self.child.pid}, {dimensions[1]}x{dimensions[0]})")

    def write(self, data: str) -> None:
        self.child.send(data)

    def _read_blocking(self) -> Optional[str]:
        try:
            return self.child.read_nonblocking(READ_SIZE, timeout=READ_POLL_TIMEOUT)
        except pexpect.TIMEOUT:
            return ''
        except pexpect.EOF:
            return None

    async def read(self) -> Optional[str]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._read_blocking)

    async def wait(self) -> Tuple[Optional[int], Optional[int]]:
        loop = asyncio.get_running_loop()
        # close() reaps the child and fills exitstatus/signalstatus
        await loop.run_in_executor(None, self.child.close)
        return self.child.exitstatus, self.child.signalstatus
