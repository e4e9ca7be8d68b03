"""Application configuration loaded from environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All configuration is loaded from ``CONTRAST_GRID_*`` environment variables (or .env file)."""

    # --- App ---
    app_name: str = "Contrast Grid"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    # --- Palettes ---
    palette: str | None = None  # falls back to the YAML ``default`` entry
    palette_config_path: Path | None = None  # override for the bundled palettes.yaml

    # --- URL history ---
    history_interval_seconds: float = 1.0  # at most one pushed entry per window
    history_path: str = "/"

    model_config = {
        "env_prefix": "CONTRAST_GRID_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


@lru_cache
def get_settings() -> Settings:
    return Settings()
