"""Prompt assembly for game searches.

The system section is the output contract that parser.py relies on: one
game per line, optional <COMMENT> annotations, NO_GAMES when nothing fits.
"""

from typing import Sequence

from .models import NO_GAMES_SENTINEL
from .parser import COMMENT_CLOSE, COMMENT_OPEN
from .state import Exchange


def build_system_prompt(max_results: int) -> str:
    """Build the instruction prologue for a search.

    Args:
        max_results: Maximum number of games the model may list

    Returns:
        System prompt string

    Examples:
        >>> "Only provide 5 results" in build_system_prompt(5)
        True
    """
    return (
        "You are a helpful assistant that searches the Steam catalog to help users "
        "find video games. From the user's query, provide solely the names of the games "
        "that best fit the description/prompt provided.\n"
        "Put each game on its own line, written exactly as it is named on Steam.\n"
        "Do not add numbering, bullets, or comments in parentheses.\n"
        f"To explain a pick, append {COMMENT_OPEN}your note{COMMENT_CLOSE} on the same line as the game.\n"
        f"For a general remark, write it on its own lines wrapped in {COMMENT_OPEN} and {COMMENT_CLOSE}.\n"
        "If no video game fits the description/prompt provided, answer with the single line "
        f"\"{NO_GAMES_SENTINEL}\".\n"
        f"Only provide {max_results} results."
    )


def wrap_history(history: Sequence[Exchange]) -> str:
    """Wrap earlier queries and responses in XML-style tags for context injection."""
    blocks = [
        f"<QUERY>\n{exchange.query}\n</QUERY>\n<RESPONSE>\n{exchange.response}\n</RESPONSE>"
        for exchange in history
    ]
    return "<CONTEXT>\n" + "\n".join(blocks) + "\n</CONTEXT>"


def build_search_prompt(query: str, max_results: int, history: Sequence[Exchange] = ()) -> str:
    """Build the full prompt sent to the prompting service.

    Args:
        query: The user's query, embedded verbatim
        max_results: Result-count limit
        history: Earlier exchanges (empty when conversational mode is off)

    Returns:
        Prompt text with <SYSTEM>, <CONTEXT> and <USER> sections
    """
    return (
        f"<SYSTEM>\n{build_system_prompt(max_results)}\n</SYSTEM>\n"
        f"{wrap_history(history)}\n"
        f"<USER>\n{query}\n</USER>"
    )
