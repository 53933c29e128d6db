"""Error codes and exceptions for gemini-search.

Provides the codes used when a host event is failed:
- session driver (auth session exit status)
- orchestrator (superseded or disconnected queries)
- prompting and catalog collaborators
"""


class ErrorCode:
    """Standard error codes for failed events.

    These codes are used in failure payloads:
    {"type": "error", "code": "NOT_CONNECTED", "message": "..."}
    """

    # Session errors
    SESSION_FAILED = "SESSION_FAILED"    # Auth session exited nonzero

    # Query errors
    SUPERSEDED = "SUPERSEDED"            # A newer query replaced this one
    NOT_CONNECTED = "NOT_CONNECTED"      # Auth never completed

    # Collaborator errors
    PROMPT_FAILED = "PROMPT_FAILED"      # Prompting service failed
    CATALOG_FAILED = "CATALOG_FAILED"    # Catalog lookup failed
    INTERNAL = "INTERNAL"                # Unexpected error


class SearchError(Exception):
    """Base exception for gemini-search errors."""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class SessionError(SearchError):
    """Raised when the interactive auth session exits with a nonzero status."""

    def __init__(self, exit_code, signal=None):
        self.exit_code = exit_code
        self.signal = signal
        super().__init__(
            ErrorCode.SESSION_FAILED,
            f"Process exited with code {exit_code}, signal {signal}",
        )


class SupersededError(SearchError):
    """Raised when a newer query arrived before this one completed."""

    def __init__(self, message: str = "Query changed"):
        super().__init__(ErrorCode.SUPERSEDED, message)


class NotConnectedError(SearchError):
    """Raised when a query runs before authentication succeeded."""

    def __init__(self, message: str = "Not connected to Gemini"):
        super().__init__(ErrorCode.NOT_CONNECTED, message)


class PromptError(SearchError):
    """Raised when the prompting service fails."""

    def __init__(self, message: str):
        super().__init__(ErrorCode.PROMPT_FAILED, message)


class CatalogError(SearchError):
    """Raised when a catalog lookup fails."""

    def __init__(self, message: str):
        super().__init__(ErrorCode.CATALOG_FAILED, message)


def format_error_response(code: str, message: str) -> dict:
    """Format an error as a failure payload dict.

    Args:
        code: Error code from ErrorCode class
        message: Human-readable error message

    Returns:
        Dict suitable for JSON serialization

    Examples:
        >>> format_error_response(ErrorCode.SUPERSEDED, "Query changed")
        {'type': 'error', 'code': 'SUPERSEDED', 'message': 'Query changed'}
    """
    return {
        "type": "error",
        "code": code,
        "message": message,
    }
