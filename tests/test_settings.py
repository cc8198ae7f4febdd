from backend.app.core.settings import Settings, get_settings, reset_settings


def test_settings_defaults(monkeypatch):
    for name in ("DATABASE_URL", "TRAINERBOX_STORAGE", "TRAINERBOX_STORE_PATH", "TRAINERBOX_SEED", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings()
    assert settings.app_name == "TrainerBox"
    assert settings.database_url == "sqlite:///./trainerbox.db"
    assert settings.storage_backend == "auto"
    assert settings.store_key == "trainerDB"
    assert settings.seed_fallback is True
    assert settings.log_level == "INFO"


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("TRAINERBOX_STORAGE", " Fallback ")
    monkeypatch.setenv("TRAINERBOX_SEED", "no")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = Settings()
    assert settings.storage_backend == "fallback"
    assert settings.seed_fallback is False
    assert settings.log_level == "DEBUG"


def test_get_settings_is_cached_until_reset():
    reset_settings()
    first = get_settings()
    assert get_settings() is first
    reset_settings()
    assert get_settings() is not first
    reset_settings()
