"""Prompting services.

GeminiCliPrompter runs the Gemini CLI once per prompt in non-interactive
mode (``-p``); it relies on the login performed by the auth session.
LlmPrompter sends the prompt to a model from the llm library instead.
Neither retries nor applies a timeout.
"""

import asyncio
import logging
import shlex
from typing import List

import llm

from .config import SearchSettings
from .errors import PromptError

logger = logging.getLogger(__name__)


class GeminiCliPrompter:
    """Ask the Gemini CLI through a subprocess."""

    def __init__(self, cli_command: str, model: str):
        self.cli_command = cli_command
        self.model = model

    def build_args(self, prompt: str) -> List[str]:
        # Argument list, no shell: the prompt needs no quoting
        return shlex.split(self.cli_command) + ["-m", self.model, "-p", prompt]

    async def ask(self, prompt: str) -> str:
        args = self.build_args(prompt)
        logger.debug(f"Running {args[0]} ({len(prompt)} chars of prompt)")
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise PromptError(f"Could not start Gemini CLI: {e}") from e

        stdout_bytes, stderr_bytes = await process.communicate()
        if process.returncode != 0:
            stderr = stderr_bytes.decode("utf-8", errors="replace").strip()
            raise PromptError(f"Gemini CLI exited with code {process.returncode}: {stderr}")
        return stdout_bytes.decode("utf-8", errors="replace")


class LlmPrompter:
    """Ask a model from the llm library (e.g. gemini-2.5-flash via llm-gemini)."""

    def __init__(self, model_id: str):
        self.model_id = model_id

    def _ask_blocking(self, prompt: str) -> str:
        model = llm.get_model(self.model_id)
        response = model.prompt(prompt)
        return response.text()

    async def ask(self, prompt: str) -> str:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self._ask_blocking, prompt)
        except llm.UnknownModelError as e:
            raise PromptError(f"Unknown model: {self.model_id}") from e
        except Exception as e:
            logger.exception("llm prompt failed")
            raise PromptError(str(e)) from e


def create_prompter(settings: SearchSettings):
    """Create the prompting service selected in settings."""
    if settings.prompter == "llm":
        return LlmPrompter(settings.model)
    return GeminiCliPrompter(settings.cli_command, settings.model)
