"""Application settings read from the environment."""

import os


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    def __init__(self):
        self.app_name = "TrainerBox"
        self.api_version = "1.0.0"
        self.environment = os.getenv("TRAINERBOX_ENV", "development")
        self.database_url = os.getenv("DATABASE_URL", "sqlite:///./trainerbox.db")
        # auto | relational | fallback
        self.storage_backend = os.getenv("TRAINERBOX_STORAGE", "auto").strip().lower()
        self.fallback_store_path = os.getenv("TRAINERBOX_STORE_PATH", "./trainerbox_store.json")
        self.store_key = "trainerDB"
        self.seed_fallback = _env_flag("TRAINERBOX_SEED", True)
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def reset_settings() -> None:
    """Drop the cached Settings so the next call re-reads the environment."""
    global _settings_instance
    _settings_instance = None
