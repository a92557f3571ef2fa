import sqlite3
from datetime import datetime, timezone

from app.repositories.base import ENDPOINT_STATS_SQL, TOTALS_SQL, build_snapshot


class SqliteMetricsRepository:
    def __init__(self, db_path: str = "app.db") -> None:
        self.db_path = db_path

    def initialize(self) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS request_metrics (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    endpoint TEXT NOT NULL,
                    duration_ms REAL NOT NULL,
                    status TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
                """
            )
            conn.commit()

    def save(self, endpoint: str, duration_ms: float, status: str) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                "INSERT INTO request_metrics (endpoint, duration_ms, status, created_at) VALUES (?, ?, ?, ?)",
                (endpoint, duration_ms, status, datetime.now(timezone.utc).isoformat()),
            )
            conn.commit()

    def get_performance_snapshot(self) -> dict:
        with sqlite3.connect(self.db_path) as conn:
            totals = conn.execute(TOTALS_SQL).fetchone()
            endpoint_rows = conn.execute(ENDPOINT_STATS_SQL).fetchall()
        return build_snapshot(totals, endpoint_rows)
