from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    log_level: str = "INFO"
    data_dir: str = "~/.ai-scheduler"
    store_filename: str = "tasks.json"

    # Minutes before start; "none" disables reminders for new tasks
    default_remind: str = "15"
    upcoming_window_days: int = 14
    chat_list_limit: int = 6

    # Sentry error tracking
    sentry_dsn: str = ""
    sentry_environment: str = "production"

    @property
    def store_path(self) -> Path:
        return Path(self.data_dir).expanduser() / self.store_filename

    @property
    def has_sentry(self) -> bool:
        return bool(self.sentry_dsn)


settings = Settings()
