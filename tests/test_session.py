"""
Tests for the auth session driver.

The driver is fed synthetic transcript chunks through a scripted terminal,
so the screen table is checked without spawning the Gemini CLI. The PTY
tests run a small Python stand-in for the CLI inside bash.
"""

import asyncio
import shlex
import shutil
import sys

import pytest

from gemini_search.errors import ErrorCode, SessionError
from gemini_search.screens import ScreenDetector
from gemini_search.session import (
    TRANSITIONS,
    AuthSessionDriver,
    FixedDelayPolicy,
    SessionState,
    TranscriptBuffer,
    run_auth_session,
)
from gemini_search.terminal import PexpectTerminal

LAUNCH = "npx @google/gemini-cli"
READY = "\x1b[2m gemini-2.5-pro \x1b[0m (99% context left)"
ONBOARDING = "Get started\n\x1b[32m● 1. Login with Google\x1b[0m\n  2. Use Gemini API Key"
EXIT_SEQUENCE = ["/exit", "\r\n", "exit\r\n"]


def _run(driver):
    return asyncio.run(driver.run())


def test_screen_detector_markers():
    """Ready prompt needs both markers in the same chunk."""
    assert ScreenDetector.is_ready_prompt(READY)
    assert not ScreenDetector.is_ready_prompt("gemini-2.5-pro")
    assert not ScreenDetector.is_ready_prompt("(99% context left)")
    assert ScreenDetector.is_onboarding(ONBOARDING)
    assert not ScreenDetector.is_onboarding("get started")


def test_printable_strips_escapes():
    assert ScreenDetector.printable("\x1b[32mok\x1b[0m") == "'ok'"


def test_onboarding_then_ready_prompt(make_terminal, policy):
    """Selection first, then the exit sequence once the prompt appears."""
    terminal = make_terminal(["bash-5.2$ ", ONBOARDING, "Waiting for auth...", READY])
    driver = AuthSessionDriver(LAUNCH, lambda: terminal, policy)

    assert _run(driver) is True
    assert terminal.writes == [LAUNCH + "\n", "1\r\n"] + EXIT_SEQUENCE
    assert driver.state == SessionState.EXITED


def test_ready_prompt_onboarding_ready_prompt(make_terminal, policy):
    """Auth command, selection in the auth dialog, then exit."""
    terminal = make_terminal([READY, ONBOARDING, READY])
    driver = AuthSessionDriver(LAUNCH, lambda: terminal, policy)

    assert _run(driver) is True
    assert terminal.writes == [LAUNCH + "\n", "/auth", "\r\n", "1\r\n"] + EXIT_SEQUENCE
    assert terminal.writes.count("/auth") == 1
    assert terminal.writes.count("1\r\n") == 1


def test_ready_prompt_after_auth_command_is_noise(make_terminal, policy):
    """The prompt redrawn after /auth does not trigger anything."""
    terminal = make_terminal([READY, READY, READY])
    driver = AuthSessionDriver(LAUNCH, lambda: terminal, policy)

    assert _run(driver) is True
    assert terminal.writes == [LAUNCH + "\n", "/auth", "\r\n"]


def test_repeated_onboarding_selects_once(make_terminal, policy):
    terminal = make_terminal([ONBOARDING, ONBOARDING, READY, READY])
    driver = AuthSessionDriver(LAUNCH, lambda: terminal, policy)

    _run(driver)
    assert terminal.writes == [LAUNCH + "\n", "1\r\n"] + EXIT_SEQUENCE


def test_no_markers_resolves_false(make_terminal, policy):
    """A clean exit without any auth step reports False."""
    terminal = make_terminal(["bash-5.2$ ", "command not found: npx\n"])
    driver = AuthSessionDriver(LAUNCH, lambda: terminal, policy)

    assert _run(driver) is False
    assert terminal.writes == [LAUNCH + "\n"]


def test_nonzero_exit_raises_session_error(make_terminal, policy):
    terminal = make_terminal([ONBOARDING], exit_code=1, signal=None)
    driver = AuthSessionDriver(LAUNCH, lambda: terminal, policy)

    with pytest.raises(SessionError) as excinfo:
        _run(driver)

    assert excinfo.value.exit_code == 1
    assert excinfo.value.signal is None
    assert excinfo.value.code == ErrorCode.SESSION_FAILED
    assert driver.state == SessionState.EXITED


def test_settle_points_follow_keystrokes(make_terminal, policy):
    terminal = make_terminal([ONBOARDING, READY])
    driver = AuthSessionDriver(LAUNCH, lambda: terminal, policy)

    _run(driver)
    # launch, selection, two pauses inside the exit sequence
    assert policy.points == ["launch", "keystroke", "keystroke", "keystroke"]


def test_transcript_keeps_every_chunk(make_terminal, policy):
    chunks = ["a", "", "b", READY]
    terminal = make_terminal(chunks)
    driver = AuthSessionDriver(LAUNCH, lambda: terminal, policy)

    _run(driver)
    assert driver.transcript.text == "ab" + READY
    assert len(driver.transcript) == len("ab" + READY)


def test_feed_returns_transition(make_terminal, policy):
    terminal = make_terminal([])
    driver = AuthSessionDriver(LAUNCH, lambda: terminal, policy)
    driver.terminal = terminal
    driver.state = SessionState.AWAITING_FIRST_PROMPT

    assert asyncio.run(driver.feed("loading...")) is None
    transition = asyncio.run(driver.feed(READY))
    assert transition is TRANSITIONS[1]
    assert driver.state == SessionState.AUTH_COMMAND_ISSUED


def test_transition_table_order():
    """Exit has priority over auth for the same ready-prompt chunk."""
    assert TRANSITIONS[0].next_state == SessionState.COMPLETING
    assert SessionState.AWAITING_AUTH_COMPLETION in TRANSITIONS[0].states
    assert SessionState.AWAITING_AUTH_COMPLETION not in TRANSITIONS[1].states


def test_transcript_buffer_tail():
    buffer = TranscriptBuffer()
    buffer.append("hello ")
    buffer.append("world")
    assert buffer.tail(5) == "world"
    assert buffer.text == "hello world"


def test_run_auth_session_helper(make_terminal, policy):
    terminal = make_terminal([ONBOARDING, READY])
    result = asyncio.run(run_auth_session(LAUNCH, lambda: terminal, policy))
    assert result is True


# Stand-in for the Gemini CLI. Markers are assembled at runtime so the
# shell's echo of this command line never matches a screen.
FAKE_CLI = "\n".join([
    "import os, sys",
    "cols, rows = os.get_terminal_size(0)",
    "print('TERM=' + os.environ['TERM'], 'SIZE=%dx%d' % (cols, rows))",
    "print('Get ' + 'started')",
    "print('  1. Login with Google', flush=True)",
    "input()",
    "print('gem' + 'ini-2.5-pro (100% ' + 'context left)', flush=True)",
    "while input().strip() != '/exit':",
    "    pass",
])


@pytest.mark.skipif(shutil.which("bash") is None, reason="bash not available")
def test_pty_session_against_fake_cli():
    """Full session in a real bash PTY, driven through the fake CLI."""
    terminals = []

    class RecordingPexpectTerminal(PexpectTerminal):
        def __init__(self):
            super().__init__()
            self.writes = []
            terminals.append(self)

        def write(self, data):
            self.writes.append(data)
            super().write(data)

    launch = f"{shlex.quote(sys.executable)} -c {shlex.quote(FAKE_CLI)}"
    driver = AuthSessionDriver(launch, RecordingPexpectTerminal, FixedDelayPolicy(0.1, 0.3))

    assert asyncio.run(asyncio.wait_for(driver.run(), timeout=30)) is True
    assert driver.state == SessionState.EXITED
    assert terminals[0].writes == [launch + "\n", "1\r\n"] + EXIT_SEQUENCE
    assert "TERM=xterm-256color SIZE=80x24" in driver.transcript.text


@pytest.mark.skipif(shutil.which("bash") is None, reason="bash not available")
def test_pty_terminal_reports_eof_and_exit_status():
    async def run():
        terminal = PexpectTerminal()
        terminal.write("exit 3\n")
        chunks = []
        while True:
            chunk = await terminal.read()
            if chunk is None:
                break
            chunks.append(chunk)
        return chunks, await terminal.wait()

    chunks, (exit_code, signal) = asyncio.run(asyncio.wait_for(run(), timeout=30))
    assert "exit 3" in "".join(chunks)
    assert exit_code == 3
    assert signal is None
