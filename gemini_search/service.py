"""Long-lived search service.

Owns the query state, the connected flag and the collaborators, and
exposes one handler per host lifecycle event:
- configure: declare host options
- connect: first-run authentication
- library-search: answer a query
- disconnect: terminate the process
"""

import logging
import sys
from typing import Any, Callable, Dict, Optional

from .auth import FirstRunMarker, connect
from .catalog import SteamCatalog
from .config import HOST_OPTIONS, SearchSettings, get_settings
from .notify import LoggingNotifier
from .orchestrator import SearchOrchestrator
from .prompter import create_prompter
from .protocols import Catalog, ConnectEvent, Notifier, Prompter, SearchEvent
from .session import SettlePolicy, run_auth_session
from .state import QueryState
from .terminal import PexpectTerminal, Terminal

logger = logging.getLogger(__name__)


class SearchService:
    """One instance per running host process."""

    def __init__(
        self,
        settings: Optional[SearchSettings] = None,
        prompter: Optional[Prompter] = None,
        catalog: Optional[Catalog] = None,
        notifier: Optional[Notifier] = None,
        terminal_factory: Callable[[], Terminal] = PexpectTerminal,
        session_policy: Optional[SettlePolicy] = None,
        exit: Callable[[int], Any] = sys.exit,
    ):
        self.settings = settings or get_settings()
        self.host_options: Dict[str, Any] = {}
        self.state = QueryState()
        self.connected = False
        self.notifier = notifier or LoggingNotifier()
        self.marker = FirstRunMarker(self.settings.get_marker_path())
        self.terminal_factory = terminal_factory
        self.session_policy = session_policy
        self.catalog = catalog or SteamCatalog()
        self._exit = exit
        self.orchestrator = SearchOrchestrator(
            self.state,
            prompter or create_prompter(self.settings),
            self.catalog,
            self.current_settings,
            lambda: self.connected,
            self.notifier,
        )

    @property
    def handlers(self) -> Dict[str, Callable]:
        """Event name -> handler, for hosts that register by name."""
        return {
            "configure": self.on_configure,
            "connect": self.on_connect,
            "library-search": self.on_query,
            "disconnect": self.on_disconnect,
        }

    def current_settings(self) -> SearchSettings:
        """Settings with the latest host option values applied."""
        return self.settings.with_host_options(self.host_options)

    def update_options(self, options: Dict[str, Any]) -> None:
        self.host_options = dict(options)

    def on_configure(self) -> Dict[str, dict]:
        return HOST_OPTIONS

    async def authenticate(self) -> bool:
        return await run_auth_session(
            self.settings.cli_command,
            self.terminal_factory,
            self.session_policy,
        )

    async def on_connect(self, event: Optional[ConnectEvent] = None) -> bool:
        self.connected = await connect(self.marker, self.authenticate, event, self.notifier)
        logger.info(f"Connected: {self.connected}")
        return self.connected

    async def on_query(self, query: str, event: SearchEvent) -> None:
        await self.orchestrator.handle_query(query, event)

    def clear_history(self) -> None:
        self.state.clear_history()

    def on_disconnect(self) -> None:
        logger.info("Host disconnected, exiting")
        self._exit(0)

    async def aclose(self) -> None:
        aclose = getattr(self.catalog, "aclose", None)
        if aclose is not None:
            await aclose()
