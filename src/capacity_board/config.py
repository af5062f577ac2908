"""Configuration loading from environment variables."""

import os
from dataclasses import dataclass, field
from pathlib import Path

DATA_SOURCES = ("sqlite", "rest", "mock")


@dataclass
class Config:
    db_path: Path = field(default_factory=lambda: Path.home() / ".capacity_board" / "board.db")
    data_source: str = "sqlite"
    rest_url: str | None = None
    rest_key: str | None = None
    ticket_limit: int = 200
    summarizer_api_key: str | None = None
    summarizer_model: str = "gpt-4o-mini"
    banner_rearm_on_change: bool = True

    @classmethod
    def from_env(cls) -> "Config":
        config = cls()

        if db := os.environ.get("CB_DB_PATH"):
            config.db_path = Path(db)

        if source := os.environ.get("CB_DATA_SOURCE"):
            source = source.strip().lower()
            if source not in DATA_SOURCES:
                raise ValueError(f"CB_DATA_SOURCE must be one of {', '.join(DATA_SOURCES)}, got {source!r}")
            config.data_source = source

        config.rest_url = os.environ.get("CB_REST_URL")
        config.rest_key = os.environ.get("CB_REST_KEY")

        if limit := os.environ.get("CB_TICKET_LIMIT"):
            config.ticket_limit = int(limit)

        config.summarizer_api_key = os.environ.get("CB_SUMMARIZER_API_KEY") or os.environ.get("OPENAI_API_KEY")

        if model := os.environ.get("CB_SUMMARIZER_MODEL"):
            config.summarizer_model = model

        if rearm := os.environ.get("CB_BANNER_REARM_ON_CHANGE"):
            config.banner_rearm_on_change = rearm.strip().lower() not in ("0", "false", "no", "off")

        return config


def get_config() -> Config:
    return Config.from_env()
