"""gemini-search - Natural-language game search backed by the Gemini CLI.

This package provides:
- AuthSessionDriver, run_auth_session: Automated first-run login over a PTY
- parse_response: Game list parsing with <COMMENT> annotations
- SearchOrchestrator: Debounced, superseding query handling
- SearchService: Lifecycle handlers for a hosting runtime
- SearchSettings, get_settings: Configuration (pydantic-settings)
- Error codes and exceptions (errors module)
"""

from .session import (
    AuthSessionDriver,
    FixedDelayPolicy,
    SessionState,
    TranscriptBuffer,
    run_auth_session,
)
from .parser import (
    AnnotatedEntry,
    Blank,
    CommentBlockClose,
    CommentBlockContinuation,
    CommentBlockOpen,
    PlainEntry,
    parse_response,
    scan_response,
)
from .models import AI_SEARCH_SOURCE, CatalogEntry, ResultRecord
from .state import Exchange, QueryState
from .orchestrator import SearchOrchestrator
from .service import SearchService
from .config import HOST_OPTIONS, SearchSettings, get_settings

# Error codes and exceptions
from .errors import (
    ErrorCode,
    SearchError,
    SessionError,
    SupersededError,
    NotConnectedError,
    PromptError,
    CatalogError,
    format_error_response,
)

__all__ = [
    # Auth session
    "AuthSessionDriver",
    "FixedDelayPolicy",
    "SessionState",
    "TranscriptBuffer",
    "run_auth_session",
    # Response parsing
    "AnnotatedEntry",
    "Blank",
    "CommentBlockClose",
    "CommentBlockContinuation",
    "CommentBlockOpen",
    "PlainEntry",
    "parse_response",
    "scan_response",
    # Results and state
    "AI_SEARCH_SOURCE",
    "CatalogEntry",
    "ResultRecord",
    "Exchange",
    "QueryState",
    # Orchestration
    "SearchOrchestrator",
    "SearchService",
    # Configuration
    "HOST_OPTIONS",
    "SearchSettings",
    "get_settings",
    # Error codes and exceptions
    "ErrorCode",
    "SearchError",
    "SessionError",
    "SupersededError",
    "NotConnectedError",
    "PromptError",
    "CatalogError",
    "format_error_response",
]

__version__ = "1.0.0"
