from contextlib import contextmanager
from datetime import datetime, timezone

from app.repositories.base import ENDPOINT_STATS_SQL, TOTALS_SQL, build_snapshot


class PostgresMetricsRepository:
    def __init__(self, dsn: str) -> None:
        self.dsn = dsn

    @contextmanager
    def _cursor(self):
        try:
            import psycopg
        except ImportError as exc:
            raise RuntimeError(
                "psycopg is required for DB_PROVIDER=postgres. Install with 'pip install .[postgres]'."
            ) from exc

        if not self.dsn:
            raise RuntimeError("POSTGRES_DSN is required for DB_PROVIDER=postgres")

        with psycopg.connect(self.dsn) as conn:
            with conn.cursor() as cursor:
                yield cursor
            conn.commit()

    def initialize(self) -> None:
        with self._cursor() as cursor:
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS request_metrics (
                    id BIGSERIAL PRIMARY KEY,
                    endpoint TEXT NOT NULL,
                    duration_ms DOUBLE PRECISION NOT NULL,
                    status TEXT NOT NULL,
                    created_at TIMESTAMPTZ NOT NULL
                )
                """
            )

    def save(self, endpoint: str, duration_ms: float, status: str) -> None:
        with self._cursor() as cursor:
            cursor.execute(
                "INSERT INTO request_metrics (endpoint, duration_ms, status, created_at) VALUES (%s, %s, %s, %s)",
                (endpoint, duration_ms, status, datetime.now(timezone.utc)),
            )

    def get_performance_snapshot(self) -> dict:
        with self._cursor() as cursor:
            cursor.execute(TOTALS_SQL)
            totals = cursor.fetchone()
            cursor.execute(ENDPOINT_STATS_SQL)
            endpoint_rows = cursor.fetchall()
        return build_snapshot(totals, endpoint_rows)
