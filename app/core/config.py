import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    db_provider: str
    db_path: str
    postgres_dsn: str
    log_level: str


def load_settings() -> Settings:
    return Settings(
        db_provider=os.getenv("DB_PROVIDER", "sqlite").strip().lower(),
        db_path=os.getenv("DB_PATH", "app.db"),
        postgres_dsn=os.getenv("POSTGRES_DSN", ""),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
    )
