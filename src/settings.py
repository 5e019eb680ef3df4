# settings.py
# Runtime configuration read from the environment, plus logging setup.

import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from best_score import FileBestScoreStore

ENV_PREFIX = "GAME2048_"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

class Settings(BaseModel):
    """Settings shared by the CLI and the API."""
    best_score_file: str = Field(
        default="~/.2048_best_score",
        description="File holding the best score across games."
    )
    rate_limit: str = Field(
        default="100/minute",
        description="slowapi rate limit applied to each API endpoint."
    )
    log_level: str = Field(default="INFO", description="Root logging level.")
    max_sessions: int = Field(
        default=1000,
        gt=0,
        description="Games kept by the API before the least recently used ones are dropped."
    )
    seed: Optional[int] = Field(
        default=None,
        description="Seed for tile placement. Unset means a different game every time."
    )

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    def best_score_store(self) -> FileBestScoreStore:
        return FileBestScoreStore(self.best_score_file)

def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Builds Settings from GAME2048_* variables. Missing variables keep their defaults.
    Raises:
        pydantic.ValidationError: If a variable holds an invalid value.
    """
    environ = os.environ if environ is None else environ
    values = {}
    for name in Settings.model_fields:
        key = ENV_PREFIX + name.upper()
        if key in environ:
            values[name] = environ[key]
    return Settings(**values)

def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
