"""Runtime settings.

Values come from ``CUTDECK_*`` environment variables or a local ``.env`` file.
Components accept explicit arguments; these settings only supply defaults.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CUTDECK_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Persistence
    store_dir: Path = Path.home() / ".cutdeck"
    collection_key: str = "projects"
    store_capacity: int = 50

    # Autosave debounce window; 0 defers to the next event loop turn
    autosave_delay_ms: int = 250

    # Notifications auto-dismiss after this interval
    notification_timeout_ms: int = 3000

    # Media capture
    capture_timeout_ms: int = 2500
    thumbnail_width: int = 320
    thumbnail_fallback_height: int = 180

    log_level: str = "INFO"

    @property
    def store_path(self) -> Path:
        return self.store_dir / f"{self.collection_key}.json"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


__all__ = ["Settings", "get_settings", "configure_logging"]
