"""First-run authentication.

A marker file records that the user has logged in to the Gemini CLI
once. Only its existence matters; the content ("true") is never read.
"""

import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional

from .errors import SessionError
from .protocols import ConnectEvent, Notifier

logger = logging.getLogger(__name__)

AUTH_DIALOG_TITLE = "Gemini AI Search"
AUTH_DIALOG_TEXT = (
    "Because this is your first time running the addon, you will need to "
    "authenticate with your Google account to the Gemini CLI. On this next step, "
    "you will be redirected to Google to authenticate. Afterwards, you will know "
    "if it was successful or not."
)
AUTH_FAILED_MESSAGE = "Authentication failed"


class FirstRunMarker:
    """Presence flag stored as a file."""

    def __init__(self, path: Path):
        self.path = path

    def exists(self) -> bool:
        return self.path.exists()

    def mark(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("true")

    def clear(self) -> bool:
        """Remove the marker. Returns True if it existed."""
        if self.path.exists():
            self.path.unlink()
            return True
        return False


async def connect(
    marker: FirstRunMarker,
    authenticate: Callable[[], Awaitable[bool]],
    event: Optional[ConnectEvent] = None,
    notifier: Optional[Notifier] = None,
) -> bool:
    """Establish the connected state, running the auth session on first run.

    Args:
        marker: First-run marker
        authenticate: Runs the auth session (see session.run_auth_session)
        event: Host connect event, used for the confirmation dialog and failure
        notifier: Receives success/error notifications

    Returns:
        True if connected
    """
    if marker.exists():
        logger.debug(f"Marker {marker.path} present, skipping auth")
        return True

    if event is not None:
        await event.ask_for_input(AUTH_DIALOG_TITLE, AUTH_DIALOG_TEXT)

    message = AUTH_FAILED_MESSAGE
    try:
        attempted = await authenticate()
    except SessionError as e:
        logger.error(f"Auth session failed: {e}")
        message = f"{AUTH_FAILED_MESSAGE}: {e.message}"
        attempted = False

    if not attempted:
        if notifier:
            notifier.notify("error", message)
        if event is not None:
            event.fail(message)
        return False

    marker.mark()
    if notifier:
        notifier.notify("success", "Authenticated with Gemini")
    return True
