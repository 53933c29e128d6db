"""
Configuration settings using pydantic-settings.

Supports configuration via environment variables (GEMINI_SEARCH_*) and a
.env file. Hosts that manage their own options declare HOST_OPTIONS and
feed the values back through a settings provider on every query.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_NAME = "gemini-search"


def default_data_dir() -> Path:
    """Return XDG_CONFIG_HOME/gemini-search, falling back to ~/.config."""
    base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / APP_NAME


# Options declared to the host on "configure".
# Structure: name -> {kind, display_name, description, default}
HOST_OPTIONS = {
    "max-results": {
        "kind": "number",
        "display_name": "Max Results",
        "description": "The maximum number of results to return",
        "default": 10,
    },
    "conversational": {
        "kind": "boolean",
        "display_name": "Conversational",
        "description": (
            "Allow to store the previous queries and responses of this session "
            "to improve speed and personalization of the responses."
        ),
        "default": True,
    },
}


class SearchSettings(BaseSettings):
    """gemini-search configuration settings.

    Configuration is loaded from (in order of priority):
    1. Environment variables (GEMINI_SEARCH_*)
    2. .env file
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Host options
    max_results: int = Field(
        default=10,
        ge=0,
        description="Maximum number of games the model may list",
    )
    conversational: bool = Field(
        default=True,
        description="Keep earlier queries and responses as prompt context",
    )

    # Debounce
    quiescence_seconds: float = Field(
        default=2.0,
        ge=0,
        description="Wait before a query is sent, so rapid typing collapses into one request",
    )

    # Prompting service
    prompter: Literal["gemini-cli", "llm"] = Field(
        default="gemini-cli",
        description="Prompting backend: Gemini CLI subprocess or an llm model",
    )
    cli_command: str = Field(
        default="npx @google/gemini-cli",
        description="Command line that launches the Gemini CLI",
    )
    model: str = Field(
        default="gemini-2.5-flash",
        description="Model used to answer queries",
    )

    # Catalog
    catalog_source: str = Field(
        default="steam",
        description="Source tag passed to catalog lookups",
    )

    # First-run marker
    data_dir: Path = Field(
        default_factory=default_data_dir,
        description="Directory holding the first-run marker",
    )
    marker_name: str = Field(
        default="first-run.txt",
        description="File whose existence means authentication completed",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    def get_marker_path(self) -> Path:
        """Get the first-run marker path."""
        return self.data_dir / self.marker_name

    def with_host_options(self, options: dict) -> "SearchSettings":
        """Return a copy with host option values (keyed as in HOST_OPTIONS) applied."""
        updates = {}
        if "max-results" in options:
            updates["max_results"] = max(0, int(options["max-results"]))
        if "conversational" in options:
            updates["conversational"] = bool(options["conversational"])
        return self.model_copy(update=updates)


@lru_cache
def get_settings() -> SearchSettings:
    """Get cached settings instance.

    Returns:
        SearchSettings singleton
    """
    return SearchSettings()
