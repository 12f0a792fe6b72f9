"""
Configuration helpers for the todo backend.

The only value read from the environment is the HTTP port; everything else has
a fixed default that tests override by passing their own Settings to
``create_app``.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

DEFAULT_PORT = 3001
DEFAULT_DATA_FILE = Path(__file__).resolve().parents[1] / "todos.json"


@dataclass(frozen=True)
class Settings:
    """Typed view of the runtime configuration."""

    port: int
    host: str = "0.0.0.0"
    data_file: Path = DEFAULT_DATA_FILE


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str | None, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    return Settings(port=_int(os.getenv("PORT"), DEFAULT_PORT))
