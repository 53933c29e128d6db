"""
Collaborator protocols for the search service.

The hosting runtime, the language model and the game catalog stay outside
this package. These protocols define what the service needs from them so
any host (plugin runtime, CLI, tests) can plug in.
"""

from typing import Any, List, Optional, Protocol, runtime_checkable

from .models import CatalogEntry


@runtime_checkable
class Prompter(Protocol):
    """Prompting service: text in, text out.

    Implementations:
        - GeminiCliPrompter: Gemini CLI subprocess
        - LlmPrompter: llm library model
    """

    async def ask(self, prompt: str) -> str:
        """Send a prompt and return the raw response text.

        Raises:
            PromptError: If the service failed
        """
        ...


@runtime_checkable
class Catalog(Protocol):
    """Game catalog lookup."""

    async def search(self, name: str, source: str) -> List[CatalogEntry]:
        """Return candidates for `name`. An empty list is a valid answer.

        Raises:
            CatalogError: If the lookup failed
        """
        ...


@runtime_checkable
class Notifier(Protocol):
    """User-facing notification sink."""

    def notify(self, level: str, message: str) -> None:
        """Show a notification.

        Args:
            level: One of "info", "success", "error"
            message: Notification text
        """
        ...


@runtime_checkable
class SearchEvent(Protocol):
    """Host handle for one query. Exactly one of resolve/fail is called."""

    def defer(self) -> None:
        """Tell the host the answer will arrive later."""
        ...

    def resolve(self, results: List[Any]) -> None:
        ...

    def fail(self, message: str) -> None:
        ...


@runtime_checkable
class ConnectEvent(Protocol):
    """Host handle for the connect lifecycle event."""

    async def ask_for_input(self, title: str, description: str) -> Optional[dict]:
        """Show a dialog and wait for the user to continue."""
        ...

    def fail(self, message: str) -> None:
        ...
