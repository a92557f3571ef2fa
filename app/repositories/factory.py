from app.core.config import Settings
from app.repositories.postgres_repo import PostgresMetricsRepository
from app.repositories.sqlite_repo import SqliteMetricsRepository


def create_metrics_repository(settings: Settings):
    if settings.db_provider == "sqlite":
        return SqliteMetricsRepository(settings.db_path)

    if settings.db_provider == "postgres":
        return PostgresMetricsRepository(settings.postgres_dsn)

    raise ValueError(f"Unsupported DB provider '{settings.db_provider}'. Use 'sqlite' or 'postgres'.")
