"""Shared fakes for gemini-search tests.

Collaborators are replaced with in-memory objects so the session driver,
orchestrator and service run without a PTY, a model or the network.
"""

import pytest

from gemini_search.config import SearchSettings
from gemini_search.errors import CatalogError


class ScriptedTerminal:
    """Terminal that replays fixed output chunks and records keystrokes."""

    def __init__(self, chunks, exit_code=0, signal=None):
        self.chunks = list(chunks)
        self.exit_code = exit_code
        self.signal = signal
        self.writes = []

    def write(self, data):
        self.writes.append(data)

    async def read(self):
        if self.chunks:
            return self.chunks.pop(0)
        return None

    async def wait(self):
        return self.exit_code, self.signal


class RecordingPolicy:
    """Settle policy that never sleeps."""

    def __init__(self):
        self.points = []

    async def settle(self, point):
        self.points.append(point)


class FakePrompter:
    def __init__(self, response="", on_ask=None, error=None):
        self.response = response
        self.on_ask = on_ask
        self.error = error
        self.prompts = []

    async def ask(self, prompt):
        self.prompts.append(prompt)
        if self.on_ask:
            self.on_ask(prompt)
        if self.error:
            raise self.error
        return self.response


class FakeCatalog:
    """Catalog keyed by lowercased name; names in `failing` raise CatalogError."""

    def __init__(self, entries=None, failing=()):
        self.entries = {k.lower(): v for k, v in (entries or {}).items()}
        self.failing = set(failing)
        self.calls = []

    async def search(self, name, source):
        self.calls.append((name, source))
        if name in self.failing:
            raise CatalogError(f"lookup of {name} failed")
        return list(self.entries.get(name.lower(), []))


class RecordingEvent:
    def __init__(self):
        self.deferred = False
        self.resolved = None
        self.failed = None
        self.inputs = []

    def defer(self):
        self.deferred = True

    def resolve(self, results):
        assert self.resolved is None and self.failed is None
        self.resolved = results

    def fail(self, message):
        assert self.resolved is None and self.failed is None
        self.failed = message

    async def ask_for_input(self, title, description):
        self.inputs.append(title)
        return {}

    @property
    def outcomes(self):
        return int(self.resolved is not None) + int(self.failed is not None)


class RecordingNotifier:
    def __init__(self):
        self.messages = []

    def notify(self, level, message):
        self.messages.append((level, message))


@pytest.fixture
def settings(tmp_path):
    return SearchSettings(data_dir=tmp_path, quiescence_seconds=0.05)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def event():
    return RecordingEvent()


@pytest.fixture
def make_terminal():
    return ScriptedTerminal


@pytest.fixture
def policy():
    return RecordingPolicy()


@pytest.fixture
def make_prompter():
    return FakePrompter


@pytest.fixture
def make_catalog():
    return FakeCatalog


@pytest.fixture
def make_event():
    return RecordingEvent
