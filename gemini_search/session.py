"""Auth session driver for the Gemini CLI.

Spawns an interactive shell behind a PTY, launches the CLI in it and
walks it through the login screens by reacting to what it prints:

    STARTED --launch--> AWAITING_FIRST_PROMPT
    AWAITING_FIRST_PROMPT  + ready prompt -> /auth         -> AUTH_COMMAND_ISSUED
    (any pre-login state)  + onboarding   -> "1"           -> AWAITING_AUTH_COMPLETION
    AWAITING_AUTH_COMPLETION + ready prompt -> /exit, exit -> COMPLETING
    child exit -> EXITED

Screens are matched per chunk against TRANSITIONS in order; the first
matching row wins and every other chunk is noise. The CLI gives no
"screen ready" signal, so pauses between keystrokes come from a
SettlePolicy (fixed delays by default).
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, FrozenSet, List, Optional, Protocol

from .errors import SessionError
from .screens import ScreenDetector
from .terminal import PexpectTerminal, Terminal

logger = logging.getLogger(__name__)

# Keystrokes sent to the session
LINE_TERMINATOR = '\r\n'
AUTH_COMMAND = '/auth'
EXIT_COMMAND = '/exit'
SELECTION_KEYSTROKE = '1' + LINE_TERMINATOR
SHELL_EXIT_COMMAND = 'exit' + LINE_TERMINATOR

# Settle points
SETTLE_LAUNCH = 'launch'
SETTLE_KEYSTROKE = 'keystroke'


class SessionState(str, Enum):
    """States of one auth session."""

    STARTED = "started"
    AWAITING_FIRST_PROMPT = "awaiting_first_prompt"
    AUTH_COMMAND_ISSUED = "auth_command_issued"
    AWAITING_AUTH_COMPLETION = "awaiting_auth_completion"
    COMPLETING = "completing"
    EXITED = "exited"


class TranscriptBuffer:
    """Append-only record of everything the session printed."""

    def __init__(self):
        self._chunks: List[str] = []
        self._size = 0

    def append(self, chunk: str) -> None:
        self._chunks.append(chunk)
        self._size += len(chunk)

    @property
    def text(self) -> str:
        return ''.join(self._chunks)

    def tail(self, length: int = 2000) -> str:
        """Return the last `length` characters of the transcript."""
        return self.text[-length:]

    def __len__(self) -> int:
        return self._size


class SettlePolicy(Protocol):
    """Decides how long to wait before the next keystroke.

    Replace the fixed-delay policy here once the CLI offers a
    deterministic readiness signal.
    """

    async def settle(self, point: str) -> None:
        ...


@dataclass
class FixedDelayPolicy:
    """Wait a fixed time at each settle point.

    Attributes:
        launch_delay: Pause before typing the launch command (seconds)
        keystroke_delay: Pause between keystrokes inside a screen (seconds)
    """

    launch_delay: float = 0.1
    keystroke_delay: float = 1.0

    async def settle(self, point: str) -> None:
        delay = self.launch_delay if point == SETTLE_LAUNCH else self.keystroke_delay
        if delay > 0:
            await asyncio.sleep(delay)


@dataclass(frozen=True)
class Transition:
    """One row of the screen table: (state, predicate) -> (action, next state)."""

    states: FrozenSet[SessionState]
    predicate: Callable[[str], bool]
    action: str  # name of an AuthSessionDriver coroutine method
    next_state: SessionState


_PRE_LOGIN = frozenset({
    SessionState.STARTED,
    SessionState.AWAITING_FIRST_PROMPT,
    SessionState.AUTH_COMMAND_ISSUED,
})

TRANSITIONS = (
    Transition(
        frozenset({SessionState.AWAITING_AUTH_COMPLETION}),
        ScreenDetector.is_ready_prompt,
        'exit_cli',
        SessionState.COMPLETING,
    ),
    Transition(
        frozenset({SessionState.STARTED, SessionState.AWAITING_FIRST_PROMPT}),
        ScreenDetector.is_ready_prompt,
        'issue_auth',
        SessionState.AUTH_COMMAND_ISSUED,
    ),
    Transition(
        _PRE_LOGIN,
        ScreenDetector.is_onboarding,
        'select_login',
        SessionState.AWAITING_AUTH_COMPLETION,
    ),
)


class AuthSessionDriver:
    """Drives one interactive login through the Gemini CLI.

    Not reentrant: one session per driver at a time.
    """

    def __init__(
        self,
        launch_command: str,
        terminal_factory: Callable[[], Terminal] = PexpectTerminal,
        policy: Optional[SettlePolicy] = None,
    ):
        self.launch_command = launch_command
        self.terminal_factory = terminal_factory
        self.policy = policy or FixedDelayPolicy()
        self.state = SessionState.STARTED
        self.transcript = TranscriptBuffer()
        self.auth_issued = False
        self.terminal: Optional[Terminal] = None
        self._running = False

    async def run(self) -> bool:
        """Run the session until the child exits.

        Returns:
            True if an auth command or login selection was sent

        Raises:
            SessionError: If the session exited with a nonzero status
        """
        if self._running:
            raise RuntimeError("Auth session already running")
        self._running = True
        try:
            self.terminal = self.terminal_factory()
            await self.policy.settle(SETTLE_LAUNCH)
            self._send(self.launch_command + '\n')
            self.state = SessionState.AWAITING_FIRST_PROMPT

            while True:
                chunk = await self.terminal.read()
                if chunk is None:
                    break
                if chunk:
                    await self.feed(chunk)

            exit_code, signal = await self.terminal.wait()
            self.state = SessionState.EXITED
            logger.info(f"Auth session exited (code {exit_code}, signal {signal})")
            if exit_code != 0:
                raise SessionError(exit_code, signal)
            return self.auth_issued
        finally:
            self._running = False

    async def feed(self, chunk: str) -> Optional[Transition]:
        """Record a chunk and react to it.

        Returns:
            The transition taken, or None if the chunk was noise
        """
        self.transcript.append(chunk)
        logger.debug(f"[{self.state.value}] {ScreenDetector.printable(chunk)}")

        for transition in TRANSITIONS:
            if self.state in transition.states and transition.predicate(chunk):
                logger.info(f"Session {self.state.value} -> {transition.next_state.value}")
                self.state = transition.next_state
                await getattr(self, transition.action)()
                return transition
        return None

    def _send(self, keys: str) -> None:
        logger.info(f"Sending {keys!r}")
        self.terminal.write(keys)

    async def issue_auth(self) -> None:
        self.auth_issued = True
        self._send(AUTH_COMMAND)
        await self.policy.settle(SETTLE_KEYSTROKE)
        self._send(LINE_TERMINATOR)

    async def select_login(self) -> None:
        self.auth_issued = True
        await self.policy.settle(SETTLE_KEYSTROKE)
        self._send(SELECTION_KEYSTROKE)

    async def exit_cli(self) -> None:
        # A confirmation screen may follow /exit; the bare terminator drains it
        self._send(EXIT_COMMAND)
        await self.policy.settle(SETTLE_KEYSTROKE)
        self._send(LINE_TERMINATOR)
        await self.policy.settle(SETTLE_KEYSTROKE)
        self._send(SHELL_EXIT_COMMAND)


async def run_auth_session(
    launch_command: str,
    terminal_factory: Callable[[], Terminal] = PexpectTerminal,
    policy: Optional[SettlePolicy] = None,
) -> bool:
    """Run one auth session and report whether login was attempted.

    Args:
        launch_command: Shell command line that starts the Gemini CLI
        terminal_factory: Creates the PTY session
        policy: Settle policy between keystrokes

    Returns:
        True if the auth command or login selection was sent

    Raises:
        SessionError: If the session exited with a nonzero status
    """
    driver = AuthSessionDriver(launch_command, terminal_factory, policy)
    return await driver.run()
