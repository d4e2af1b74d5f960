"""Service configuration defaults."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from .core.cache_parser import DEFAULT_CACHE_PATH

SYNC_DIR_ENV = "GRANOLA_SYNC_DIR"
CACHE_PATH_ENV = "GRANOLA_CACHE_PATH"
LOG_LEVEL_ENV = "MEETING_SEARCH_LOG_LEVEL"

DEFAULT_SYNC_DIR = Path("./output")


@dataclass
class ServiceConfig:
    sync_dir: Path = field(default_factory=lambda: DEFAULT_SYNC_DIR)
    cache_path: Optional[Path] = None
    max_workers: int = 4
    max_concurrency: int = 16
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.sync_dir = Path(self.sync_dir)
        if self.cache_path is None:
            self.cache_path = DEFAULT_CACHE_PATH
        self.cache_path = Path(self.cache_path)
        if self.max_workers <= 0:
            raise ValueError("max_workers must be positive")
        if self.max_concurrency <= 0:
            raise ValueError("max_concurrency must be positive")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "ServiceConfig":
        """Build a config from environment variables; keyword overrides win."""
        environ = os.environ if environ is None else environ
        values = {}
        if environ.get(SYNC_DIR_ENV):
            values["sync_dir"] = Path(environ[SYNC_DIR_ENV]).expanduser()
        if environ.get(CACHE_PATH_ENV):
            values["cache_path"] = Path(environ[CACHE_PATH_ENV]).expanduser()
        if environ.get(LOG_LEVEL_ENV):
            values["log_level"] = environ[LOG_LEVEL_ENV]
        values.update(overrides)
        return cls(**values)
