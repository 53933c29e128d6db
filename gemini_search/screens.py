"""Screen detection for the Gemini CLI running inside a pseudo-terminal.

The CLI does not speak a protocol on its terminal, so screens are
recognized by substrings that are known to appear in them:
- ready prompt: the input box footer shows the model name (``gemini-...``)
  next to the remaining context (``... context left)``)
- onboarding: the first-run auth dialog offers ``Get started``

These are heuristics over known screens, not a terminal emulator. Escape
sequences are left in place; the markers survive them because they are
written as contiguous text.
"""
import re


class ScreenDetector:
    """Classify transcript chunks received from the Gemini CLI"""

    # Ready prompt: both markers must appear in the same chunk
    MODEL_MARKER = 'gemini-'
    CAPACITY_MARKER = 'context left)'

    # First-run auth dialog
    ONBOARDING_MARKER = 'Get started'

    # CSI / OSC sequences, only stripped for log output
    ESCAPE_PATTERN = re.compile(r'\x1b(?:\[[0-?]*[ -/]*[@-~]|\][^\x07]*\x07|[@-Z\\-_])')

    @classmethod
    def is_ready_prompt(cls, chunk: str) -> bool:
        """Check if a chunk shows the idle input prompt"""
        return cls.MODEL_MARKER in chunk and cls.CAPACITY_MARKER in chunk

    @classmethod
    def is_onboarding(cls, chunk: str) -> bool:
        """Check if a chunk shows the first-run auth dialog"""
        return cls.ONBOARDING_MARKER in chunk

    @classmethod
    def printable(cls, chunk: str, limit: int = 200) -> str:
        """Return a short escape-free rendering of a chunk for logging."""
        text = cls.ESCAPE_PATTERN.sub('', chunk)
        if len(text) > limit:
            text = text[:limit] + '...'
        return repr(text)
