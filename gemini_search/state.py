"""Query state shared by overlapping searches.

One QueryState lives as long as the service. Every search writes the
current query once on entry and checks its generation after each wait;
that check is the only coordination between in-flight searches.
"""

import threading
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Exchange:
    """A completed query and the raw model response it produced."""
    query: str
    response: str


class QueryState:
    """Current query and conversation history.

    Each begin() also bumps a generation counter. Searches hold on to the
    generation they started with, so a repeated identical query still
    supersedes the earlier one.

    Attributes:
        lock: Guards all fields so searches may run on any thread
    """

    def __init__(self):
        self.lock = threading.Lock()
        self._current_query = ""
        self._generation = 0
        self._history: List[Exchange] = []

    @property
    def current_query(self) -> str:
        with self.lock:
            return self._current_query

    @property
    def generation(self) -> int:
        with self.lock:
            return self._generation

    def begin(self, query: str) -> int:
        """Mark `query` as the most recent request.

        Returns:
            Generation token to pass to is_current()
        """
        with self.lock:
            self._current_query = query
            self._generation += 1
            return self._generation

    def is_current(self, generation: int) -> bool:
        with self.lock:
            return self._generation == generation

    def record(self, query: str, response: str) -> None:
        with self.lock:
            self._history.append(Exchange(query, response))

    def history(self) -> List[Exchange]:
        """Return a snapshot of the conversation history."""
        with self.lock:
            return list(self._history)

    def clear_history(self) -> None:
        with self.lock:
            self._history.clear()
