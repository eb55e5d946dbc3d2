"""Application configuration loaded from environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All configuration is loaded from environment variables (or .env file)."""

    # --- App ---
    app_name: str = "Sakhi"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    environment: str = "development"  # development | staging | production

    # --- Storage ---
    data_dir: Path = Path.home() / ".sakhi"
    store_filename: str = "sakhi_store.json"

    # --- Assistant (Anthropic) ---
    anthropic_api_key: str = ""  # chat is disabled when empty
    assistant_model: str = "claude-haiku-4-5-20251001"
    assistant_max_tokens: int = 1024
    assistant_temperature: float = 0.7
    assistant_history_window: int = 15  # most recent messages replayed into a new session
    assistant_max_tool_rounds: int = 2

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def store_path(self) -> Path:
        return self.data_dir / self.store_filename

    @property
    def assistant_enabled(self) -> bool:
        return bool(self.anthropic_api_key)


@lru_cache
def get_settings() -> Settings:
    return Settings()
