"""Query orchestration: debounce, supersession and result assembly.

Each query event runs handle_query(). Overlapping queries are not
cancelled; each one checks after every wait whether it is still the
current query and gives up with SupersededError if not. Only the most
recent query can resolve.
"""

import asyncio
import logging
from typing import Callable, List, Optional

from .config import SearchSettings
from .errors import NotConnectedError, SearchError, SupersededError
from .models import NO_GAMES_SENTINEL, ResultRecord
from .parser import CommentBlockClose, ParsedRecord, parse_response
from .prompts import build_search_prompt
from .protocols import Catalog, Notifier, Prompter, SearchEvent
from .state import QueryState

logger = logging.getLogger(__name__)


class SearchOrchestrator:
    """Turns a query into result records.

    Args:
        state: Shared query state (one per service)
        prompter: Prompting service
        catalog: Catalog lookup
        settings_provider: Called on every query for current settings
        is_connected: Returns whether authentication has completed
        notifier: Optional notification sink
    """

    def __init__(
        self,
        state: QueryState,
        prompter: Prompter,
        catalog: Catalog,
        settings_provider: Callable[[], SearchSettings],
        is_connected: Callable[[], bool],
        notifier: Optional[Notifier] = None,
    ):
        self.state = state
        self.prompter = prompter
        self.catalog = catalog
        self.settings_provider = settings_provider
        self.is_connected = is_connected
        self.notifier = notifier

    async def handle_query(self, query: str, event: SearchEvent) -> None:
        """Answer one query event. Calls exactly one of event.resolve/event.fail."""
        generation = self.state.begin(query)
        event.defer()
        try:
            results = await self._complete(query, generation)
        except SupersededError as e:
            logger.debug(f"Dropping superseded query {query!r}")
            event.fail(e.message)
            return
        except SearchError as e:
            logger.warning(f"Query {query!r} failed: {e}")
            event.fail(e.message)
            return
        except Exception as e:
            logger.exception(f"Query {query!r} failed unexpectedly")
            event.fail(str(e))
            return
        event.resolve(results)

    async def search(self, query: str) -> List[ResultRecord]:
        """Run one query and return its results.

        Raises:
            SupersededError: A newer query started meanwhile
            NotConnectedError: Authentication has not completed
            PromptError: The prompting service failed
            CatalogError: A catalog lookup failed
        """
        generation = self.state.begin(query)
        return await self._complete(query, generation)

    def _check_current(self, generation: int) -> None:
        if not self.state.is_current(generation):
            raise SupersededError()

    async def _complete(self, query: str, generation: int) -> List[ResultRecord]:
        settings = self.settings_provider()

        # Let rapid typing settle before spending a request
        await asyncio.sleep(settings.quiescence_seconds)
        self._check_current(generation)

        if not self.is_connected():
            raise NotConnectedError()

        history = self.state.history() if settings.conversational else []
        prompt = build_search_prompt(query, settings.max_results, history)
        response = await self.prompter.ask(prompt)
        self._check_current(generation)

        if self.notifier:
            self.notifier.notify("info", "Received response from Gemini. Loading results...")
        logger.debug(f"Response for {query!r}: {response!r}")

        results = await self._resolve(parse_response(response), settings.catalog_source)
        self._check_current(generation)

        if settings.conversational:
            self.state.record(query, response)
        return results

    async def _resolve(self, records: List[ParsedRecord], source: str) -> List[ResultRecord]:
        """Look up entries in the catalog, keeping annotations as they are.

        A failed lookup fails the whole query; misses are dropped.
        """
        results = []
        for record in records:
            if isinstance(record, CommentBlockClose):
                results.append(ResultRecord.annotation(record.text))
                continue
            if record.name == NO_GAMES_SENTINEL:
                continue

            candidates = await self.catalog.search(record.name, source)

            # exact name match only
            wanted = record.name.lower()
            match = next((c for c in candidates if c.name.lower() == wanted), None)
            if match is None:
                logger.debug(f"No catalog match for {record.name!r}")
                continue
            results.append(ResultRecord.from_catalog(match, getattr(record, "comment", "")))
        return results
